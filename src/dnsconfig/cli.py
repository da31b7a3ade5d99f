"""CLI printing the resolver configuration."""
from __future__ import annotations

import argparse
import logging
import sys

import yaml

from .config import read_config_from
from .names import name_list
from .sources import read_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed CLI options:
            - file (str | None): Resolver file, platform source when omitted.
            - log_level (str): Logging level.
            - strict (bool): Fail when the source could not be read.
            - names (list[str]): Names to expand through the search list.
    """
    parser = argparse.ArgumentParser(
        description="Show the system DNS resolver configuration",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--file", default=None, help="Path to resolv.conf style file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )
    parser.add_argument("--strict", action="store_true", help="Exit 1 if the source is unreadable")
    parser.add_argument("names", nargs="*", metavar="NAME", help="Names to expand")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI entry point.

    Prints the configuration as YAML, followed by the query candidates
    for each NAME.

    Returns:
        Process exit status.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    conf = read_config_from(args.file) if args.file else read_config()
    doc: dict = {"dnsconfig": conf.as_dict()}
    if args.names:
        doc["names"] = {name: name_list(name, conf) for name in args.names}
    yaml.safe_dump(doc, sys.stdout, sort_keys=False, default_flow_style=False)

    if args.strict and conf.err is not None:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
