"""Version command: the plugin's version and the protobuf runtime it decodes with."""

from __future__ import annotations

import argparse
from importlib import metadata

__all__ = ["DISTRIBUTIONS", "register_parser", "run", "versions"]

# Distributions reported, in output order.
DISTRIBUTIONS = ("protoc-gen-gogapic", "protobuf")


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "version",
        help="Show the generator and protobuf runtime versions.",
    )
    parser.set_defaults(handler=run)


def versions() -> dict[str, str]:
    found: dict[str, str] = {}
    for name in DISTRIBUTIONS:
        try:
            found[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            found[name] = "unknown"
    return found


def run(_: argparse.Namespace) -> int:
    for name, version in versions().items():
        print(f"{name} {version}")
    return 0
