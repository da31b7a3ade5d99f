"""Data structures representing a resolver configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Used whenever a source names no usable server.
DEFAULT_NS: tuple[str, ...] = ("127.0.0.1:53", "[::1]:53")

DEFAULT_NDOTS = 1
DEFAULT_TIMEOUT = 5
DEFAULT_ATTEMPTS = 2
MAX_NDOTS = 15
MAX_NAMESERVERS = 3


@dataclass(frozen=True, slots=True)
class DnsConfig:
    """Resolver configuration parsed from the system source.

    Attributes:
        servers (tuple[str, ...]): Server addresses in host:port form.
        search (tuple[str, ...]): Rooted suffixes appended to relative names.
        ndots (int): Dots in a name needed to try it unsuffixed first.
        timeout (int): Seconds to wait on a query, including retries.
        attempts (int): Lost packets before giving up on a server.
        rotate (bool): Round robin among servers.
        unknown_opt (bool): Something unrecognised was encountered.
        single_request (bool): Issue A and AAAA queries sequentially.
        use_tcp (bool): Force TCP for DNS resolution.
        trust_ad (bool): Set the AD flag on queries.
        no_reload (bool): Do not check the source for updates.
        lookup (tuple[str, ...]): OpenBSD database lookup order.
        err (OSError | None): Error raised while opening the source.
        mtime (float | None): Modification time of the source.
    """

    servers: tuple[str, ...] = ()
    search: tuple[str, ...] = ()
    ndots: int = DEFAULT_NDOTS
    timeout: int = DEFAULT_TIMEOUT  # seconds
    attempts: int = DEFAULT_ATTEMPTS
    rotate: bool = False
    unknown_opt: bool = False
    single_request: bool = False
    use_tcp: bool = False
    trust_ad: bool = False
    no_reload: bool = False
    lookup: tuple[str, ...] = ()
    err: OSError | None = field(default=None, compare=False)
    mtime: float | None = field(default=None, compare=False)

    def as_dict(self) -> dict[str, Any]:
        """Render the record as plain, serialisable values.

        Returns:
            Mapping of field name to list, scalar or string value.
        """
        return {
            "servers": list(self.servers),
            "search": list(self.search),
            "ndots": self.ndots,
            "timeout": self.timeout,
            "attempts": self.attempts,
            "rotate": self.rotate,
            "unknown_opt": self.unknown_opt,
            "single_request": self.single_request,
            "use_tcp": self.use_tcp,
            "trust_ad": self.trust_ad,
            "no_reload": self.no_reload,
            "lookup": list(self.lookup),
            "err": str(self.err) if self.err is not None else None,
            "mtime": self.mtime,
        }
