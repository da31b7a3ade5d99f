"""Cached resolver configuration with mtime based reloading."""
from __future__ import annotations

import logging
import os
import socket
import time
from collections.abc import Callable

from .config import DEFAULT_RESOLV_FILE, HostnameProvider, read_config_from
from .records import DnsConfig

logger = logging.getLogger(__name__)


class ConfigWatcher:
    """Hold a resolver configuration and refresh it when the file changes.

    Args:
        path: Path to the resolver file.
        interval: Minimum seconds between checks of the file.
        clock: Monotonic time source.
        hostname: Callable returning the local host name.

    Attributes:
        config: Most recent good configuration.
    """

    def __init__(
        self,
        path: str | os.PathLike[str] = DEFAULT_RESOLV_FILE,
        *,
        interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        hostname: HostnameProvider = socket.gethostname,
    ) -> None:
        self.path = path
        self.interval = interval
        self.clock = clock
        self.hostname = hostname
        self.config = read_config_from(path, hostname)
        self._last_checked = clock()

    def get(self) -> DnsConfig:
        """Return the current configuration, reloading it if stale."""
        self.maybe_reload()
        return self.config

    def maybe_reload(self) -> None:
        """Reload on mtime change, at most once per `interval`.

        Configurations with `no_reload` set are kept as they are.
        """
        if self.config.no_reload:
            return
        now = self.clock()
        if now - self._last_checked < self.interval:
            return
        self._last_checked = now

        try:
            mtime: float | None = os.stat(self.path).st_mtime
        except OSError:
            mtime = None
        if mtime is not None and mtime == self.config.mtime:
            return
        self.force_reload()

    def force_reload(self) -> None:
        """Re-read the file now; keep the last good config on errors."""
        conf = read_config_from(self.path, self.hostname)
        if conf.err is not None and self.config.err is None:
            logger.error("failed to reload resolver configuration: %s", conf.err)
            return
        self.config = conf
        logger.info("resolver configuration loaded: %d servers", len(conf.servers))
