"""Platform configuration sources."""
from __future__ import annotations

import os
import socket
import sys
from typing import Protocol

from .config import DEFAULT_RESOLV_FILE, HostnameProvider, read_config_from
from .records import DnsConfig
from .windows import AdapterProvider, get_adapters, read_adapter_config


class ConfigSource(Protocol):
    def read(self) -> DnsConfig:
        """Return a freshly read configuration record."""
        ...


class ResolvConfSource:
    """resolv.conf style text file.

    Args:
        path: Path to the resolver file.
        hostname: Callable returning the local host name.
    """

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_RESOLV_FILE,
                 hostname: HostnameProvider = socket.gethostname) -> None:
        self.path = path
        self.hostname = hostname

    def read(self) -> DnsConfig:
        return read_config_from(self.path, self.hostname)


class AdapterSource:
    """Windows adapter table."""

    def __init__(self, adapters: AdapterProvider = get_adapters) -> None:
        self.adapters = adapters

    def read(self) -> DnsConfig:
        return read_adapter_config(self.adapters)


def default_source() -> ConfigSource:
    """Return the configuration source native to this platform."""
    if sys.platform == "win32":
        return AdapterSource()
    return ResolvConfSource()


def read_config() -> DnsConfig:
    """Read the system resolver configuration."""
    return default_source().read()
