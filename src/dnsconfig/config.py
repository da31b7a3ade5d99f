"""Resolver configuration loading from resolv.conf(5) style text."""
from __future__ import annotations

import ipaddress
import logging
import os
import socket
from collections.abc import Callable, Iterable
from typing import Any

from .records import (
    DEFAULT_NS,
    DEFAULT_ATTEMPTS,
    DEFAULT_NDOTS,
    DEFAULT_TIMEOUT,
    MAX_NAMESERVERS,
    MAX_NDOTS,
    DnsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_RESOLV_FILE = "/etc/resolv.conf"

HostnameProvider = Callable[[], str]

# Saturation point for numeric option values.
_BIG = 0xFFFFFF


def is_comment(line: str) -> bool:
    """Report whether a line is a `;` or `#` comment."""
    return line.lstrip()[:1] in (";", "#")


def get_fields(line: str) -> list[str]:
    """Split a configuration line into whitespace separated fields.

    Args:
        line: One line of configuration text.

    Returns:
        The fields of the line; empty for blank and comment lines.
    """
    if is_comment(line):
        return []
    return line.split()


def ensure_rooted(name: str) -> str:
    """Return `name` with a trailing dot."""
    if name.endswith("."):
        return name
    return name + "."


def _dtoi(s: str) -> int:
    """Parse the leading decimal digits of `s`, 0 when there are none."""
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + int(ch)
        if n >= _BIG:
            return _BIG
    return n


def apply_option(token: str, conf: dict[str, Any]) -> None:
    """Apply a single `options` token to an in-progress configuration.

    Numeric values are clamped: ndots to [0, 15], timeout and attempts
    to at least 1. Unrecognised tokens set `unknown_opt`.

    Args:
        token: One whitespace separated word following `options`.
        conf: Mutable mapping of `DnsConfig` field names to values.
    """
    if token.startswith("ndots:"):
        conf["ndots"] = min(max(_dtoi(token[6:]), 0), MAX_NDOTS)
    elif token.startswith("timeout:"):
        conf["timeout"] = max(_dtoi(token[8:]), 1)
    elif token.startswith("attempts:"):
        conf["attempts"] = max(_dtoi(token[9:]), 1)
    elif token == "rotate":
        conf["rotate"] = True
    elif token in ("single-request", "single-request-reopen"):
        conf["single_request"] = True
    elif token in ("use-vc", "usevc", "tcp"):
        conf["use_tcp"] = True
    elif token == "trust-ad":
        conf["trust_ad"] = True
    elif token == "edns0":
        # EDNS is always on.
        pass
    elif token == "no-reload":
        conf["no_reload"] = True
    else:
        logger.debug("unknown resolver option: %s", token)
        conf["unknown_opt"] = True


def join_host_port(host: str, port: int = 53) -> str:
    """Join a host and port, bracketing IPv6 literals."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _is_ip_literal(host: str) -> bool:
    """Report whether `host` is an IPv4 or IPv6 address literal."""
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def apply_line(fields: list[str], conf: dict[str, Any]) -> None:
    """Dispatch one tokenized directive line into `conf`.

    Args:
        fields: Output of `get_fields` for a non-empty line.
        conf: Mutable mapping of `DnsConfig` field names to values.
    """
    keyword, args = fields[0], fields[1:]

    if keyword == "nameserver" and args:
        servers = conf.setdefault("servers", [])
        # Servers must be literals, a name would need DNS to look it up.
        if len(servers) < MAX_NAMESERVERS and _is_ip_literal(args[0]):
            servers.append(join_host_port(args[0]))
        else:
            logger.debug("nameserver dropped: %s", args[0])
    elif keyword == "domain" and args:
        conf["search"] = [ensure_rooted(args[0])]
    elif keyword == "search":
        conf["search"] = [s for s in map(ensure_rooted, args) if s != "."]
        if not args:
            conf["unknown_opt"] = True
    elif keyword == "options":
        for token in args:
            apply_option(token, conf)
    elif keyword == "lookup":
        # OpenBSD: bind, file, yp
        conf["lookup"] = list(args)
    else:
        logger.debug("unknown resolver directive: %s", " ".join(fields))
        conf["unknown_opt"] = True


def parse_lines(lines: Iterable[str], conf: dict[str, Any] | None = None) -> dict[str, Any]:
    """Parse configuration lines into a mapping of field values.

    Args:
        lines: Configuration text, one line per item.
        conf: Mapping to update in place; a fresh one when omitted.

    Returns:
        The updated mapping.
    """
    if conf is None:
        conf = {}
    for line in lines:
        fields = get_fields(line)
        if fields:
            apply_line(fields, conf)
    return conf


def default_search(hostname: HostnameProvider = socket.gethostname) -> list[str]:
    """Derive a search list from the local host's domain.

    Best effort: lookup failures and single label names give no suffix.

    Args:
        hostname: Callable returning the local host name.

    Returns:
        A single rooted suffix, or an empty list.
    """
    try:
        hn = hostname()
    except OSError as exc:
        logger.debug("hostname lookup failed: %s", exc)
        return []
    i = hn.find(".")
    if 0 <= i < len(hn) - 1:
        return [ensure_rooted(hn[i + 1:])]
    return []


def build_config(conf: dict[str, Any], hostname: HostnameProvider = socket.gethostname) -> DnsConfig:
    """Fill in defaults and freeze a parsed mapping into a `DnsConfig`.

    Args:
        conf: Field values collected by the parser.
        hostname: Callable used when no search list was configured.

    Returns:
        The completed configuration record.
    """
    servers = conf.get("servers") or DEFAULT_NS
    search = conf.get("search") or default_search(hostname)
    return DnsConfig(
        servers=tuple(servers),
        search=tuple(search),
        ndots=conf.get("ndots", DEFAULT_NDOTS),
        timeout=conf.get("timeout", DEFAULT_TIMEOUT),
        attempts=conf.get("attempts", DEFAULT_ATTEMPTS),
        rotate=conf.get("rotate", False),
        unknown_opt=conf.get("unknown_opt", False),
        single_request=conf.get("single_request", False),
        use_tcp=conf.get("use_tcp", False),
        trust_ad=conf.get("trust_ad", False),
        no_reload=conf.get("no_reload", False),
        lookup=tuple(conf.get("lookup", ())),
        err=conf.get("err"),
        mtime=conf.get("mtime"),
    )


def read_config_from(path: str | os.PathLike[str], hostname: HostnameProvider = socket.gethostname) -> DnsConfig:
    """Read resolver configuration from a resolv.conf style file.

    A missing or unreadable file is not fatal: the result then carries
    the default servers, the derived search list and the error in `err`.

    Args:
        path: Filesystem path to the resolver file.
        hostname: Callable returning the local host name.

    Returns:
        A fully populated configuration record.
    """
    conf: dict[str, Any] = {}
    try:
        with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
            conf["mtime"] = os.fstat(f.fileno()).st_mtime
            parse_lines(f, conf)
    except OSError as exc:
        logger.debug("resolver file %s unavailable: %s", path, exc)
        return build_config({"err": exc}, hostname)
    return build_config(conf, hostname)

