"""Search list expansion of query names."""
from __future__ import annotations

from .records import DnsConfig

# Longest presentation form of a rooted domain name, in octets.
MAX_NAME_LEN = 254


def _octets(name: str) -> int:
    """Length of `name` in octets, undecodable bytes counted once."""
    return len(name.encode("utf-8", "surrogateescape"))


def avoid_dns(name: str) -> bool:
    """Report whether `name` must never be sent to DNS.

    Covers only the special-use `.onion` domain (RFC 7686), matched
    case-insensitively with or without the trailing dot.

    Args:
        name: Query name, rooted or not.

    Returns:
        True when the name is excluded from DNS.
    """
    if not name:
        return True
    if name.endswith("."):
        name = name[:-1]
    return name.lower().endswith(".onion")


def name_list(name: str, conf: DnsConfig) -> list[str] | None:
    """Return the ordered names to query for `name`.

    Names with at least `conf.ndots` dots are tried unsuffixed before
    the search suffixes, shorter names after them. Rooted names are
    never suffixed.

    Args:
        name: Name supplied by the caller.
        conf: Resolver configuration providing `ndots` and `search`.

    Returns:
        Candidate fully qualified names, possibly empty; None when the
        name is too long to be a domain name or is a rooted excluded name.
    """
    length = _octets(name)
    rooted = name.endswith(".")
    if length > MAX_NAME_LEN or (length == MAX_NAME_LEN and not rooted):
        return None

    if rooted:
        if avoid_dns(name):
            return None
        return [name]

    has_ndots = name.count(".") >= conf.ndots
    name += "."

    names: list[str] = []
    if has_ndots and not avoid_dns(name):
        names.append(name)
    for suffix in conf.search:
        fqdn = name + suffix
        if not avoid_dns(fqdn) and _octets(fqdn) <= MAX_NAME_LEN:
            names.append(fqdn)
    if not has_ndots and not avoid_dns(name):
        names.append(name)
    return names
