"""Resolver configuration from the Windows network adapter table."""
from __future__ import annotations

import ctypes
import ipaddress
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field

from .config import join_host_port
from .records import DEFAULT_NS, MAX_NAMESERVERS, DnsConfig

logger = logging.getLogger(__name__)

IF_OPER_STATUS_UP = 1

_AF_UNSPEC = 0
_AF_INET = 2
_AF_INET6 = 23
_GAA_FLAG_INCLUDE_PREFIX = 0x10
_ERROR_BUFFER_OVERFLOW = 111

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(slots=True)
class Adapter:
    """Network adapter as reported by the operating system.

    Attributes:
        name (str): Adapter identifier.
        oper_status (int): IF_OPER_STATUS value, 1 when up.
        dns_servers (list): DNS server addresses configured on the adapter.
    """

    name: str
    oper_status: int
    dns_servers: list[IPAddress] = field(default_factory=list)

    @property
    def up(self) -> bool:
        return self.oper_status == IF_OPER_STATUS_UP


AdapterProvider = Callable[[], list[Adapter]]


class _SocketAddress(ctypes.Structure):
    _fields_ = [("lpSockaddr", ctypes.c_void_p), ("iSockaddrLength", ctypes.c_int)]


class _DnsServerAddress(ctypes.Structure):
    pass


_DnsServerAddress._fields_ = [
    ("Length", ctypes.c_ulong),
    ("Reserved", ctypes.c_ulong),
    ("Next", ctypes.POINTER(_DnsServerAddress)),
    ("Address", _SocketAddress),
]


class _AdapterAddresses(ctypes.Structure):
    pass


# Leading fields of IP_ADAPTER_ADDRESSES, up to OperStatus.
_AdapterAddresses._fields_ = [
    ("Length", ctypes.c_ulong),
    ("IfIndex", ctypes.c_ulong),
    ("Next", ctypes.POINTER(_AdapterAddresses)),
    ("AdapterName", ctypes.c_char_p),
    ("FirstUnicastAddress", ctypes.c_void_p),
    ("FirstAnycastAddress", ctypes.c_void_p),
    ("FirstMulticastAddress", ctypes.c_void_p),
    ("FirstDnsServerAddress", ctypes.POINTER(_DnsServerAddress)),
    ("DnsSuffix", ctypes.c_wchar_p),
    ("Description", ctypes.c_wchar_p),
    ("FriendlyName", ctypes.c_wchar_p),
    ("PhysicalAddress", ctypes.c_ubyte * 8),
    ("PhysicalAddressLength", ctypes.c_ulong),
    ("Flags", ctypes.c_ulong),
    ("Mtu", ctypes.c_ulong),
    ("IfType", ctypes.c_ulong),
    ("OperStatus", ctypes.c_int),
]


def _sockaddr_to_ip(sa: _SocketAddress) -> IPAddress | None:
    raw = ctypes.string_at(sa.lpSockaddr, sa.iSockaddrLength)
    family = int.from_bytes(raw[:2], "little")
    if family == _AF_INET and len(raw) >= 8:
        return ipaddress.IPv4Address(raw[4:8])
    if family == _AF_INET6 and len(raw) >= 24:
        return ipaddress.IPv6Address(raw[8:24])
    return None


def get_adapters() -> list[Adapter]:
    """Enumerate adapters with GetAdaptersAddresses.

    Returns:
        Adapters in the order Windows reports them.

    Raises:
        OSError: If not running on Windows or the call fails.
    """
    if sys.platform != "win32":
        raise OSError("adapter enumeration is only available on Windows")

    iphlpapi = ctypes.WinDLL("iphlpapi")
    size = ctypes.c_ulong(15000)
    while True:
        buf = ctypes.create_string_buffer(size.value)
        ret = iphlpapi.GetAdaptersAddresses(
            _AF_UNSPEC, _GAA_FLAG_INCLUDE_PREFIX, None, buf, ctypes.byref(size)
        )
        if ret == 0:
            break
        if ret != _ERROR_BUFFER_OVERFLOW or size.value <= len(buf):
            raise ctypes.WinError(ret)
    if size.value == 0:
        return []

    adapters: list[Adapter] = []
    ptr = ctypes.cast(buf, ctypes.POINTER(_AdapterAddresses))
    while ptr:
        aa = ptr.contents
        adapter = Adapter(name=(aa.AdapterName or b"").decode("ascii", "replace"), oper_status=aa.OperStatus)
        dns = aa.FirstDnsServerAddress
        while dns:
            ip = _sockaddr_to_ip(dns.contents.Address)
            if ip is not None:
                adapter.dns_servers.append(ip)
            dns = dns.contents.Next
        adapters.append(adapter)
        ptr = aa.Next
    return adapters


def _bogus(ip: IPAddress) -> bool:
    # Windows fills fec0:: site-local defaults on idle interfaces.
    return ip.version == 6 and ip.packed[:2] == b"\xfe\xc0"


def read_adapter_config(adapters: AdapterProvider = get_adapters) -> DnsConfig:
    """Build a resolver configuration from the adapter table.

    Servers are collected from adapters that are up, in enumeration
    order, keeping the first three. Every other field keeps its default.

    Args:
        adapters: Callable returning the adapter list.

    Returns:
        Configuration whose servers fall back to `DEFAULT_NS` when none
        are found; `err` is set if enumeration failed.
    """
    try:
        found = adapters()
    except OSError as exc:
        logger.debug("adapter enumeration failed: %s", exc)
        return DnsConfig(servers=DEFAULT_NS, err=exc)

    servers: list[str] = []
    for adapter in found:
        if not adapter.up:
            continue
        for ip in adapter.dns_servers:
            if _bogus(ip):
                logger.debug("skipping site-local server %s on %s", ip, adapter.name)
                continue
            servers.append(join_host_port(str(ip)))
    return DnsConfig(servers=tuple(servers[:MAX_NAMESERVERS]) or DEFAULT_NS)
