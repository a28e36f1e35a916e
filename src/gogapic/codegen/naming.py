"""Identifier transforms and padding helpers used across code generation."""

from __future__ import annotations

import re

__all__ = [
    "GO_KEYWORDS",
    "camel_to_snake",
    "is_go_package_name",
    "lower_first",
    "reduce_serv_name",
    "spaces",
    "tabs",
]

_TABS = "\t" * 20
_SPACES = " " * 100
_SERVICE_SUFFIX = "Service"
_ASCII_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer",
        "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
        "interface", "map", "package", "range", "return", "select", "struct",
        "switch", "type", "var",
    }
)


def _pad(cache: str, unit: str, n: int) -> str:
    if n <= 0:
        return ""
    if n > len(cache):
        return unit * n
    return cache[:n]


def tabs(n: int) -> str:
    """Return ``n`` tab characters."""
    return _pad(_TABS, "\t", n)


def spaces(n: int) -> str:
    """Return ``n`` space characters."""
    return _pad(_SPACES, " ", n)


def reduce_serv_name(name: str) -> str:
    """Derive the client base name from a service name.

    A trailing version (``V`` plus digits, counted from the last ``V``) is
    removed first, then a trailing ``Service``: ``FooServiceV2`` becomes
    ``Foo``.
    """
    pos = name.rfind("V")
    if pos >= 0 and all(ch.isdecimal() for ch in name[pos + 1:]):
        name = name[:pos]
    if name.endswith(_SERVICE_SUFFIX):
        name = name[: -len(_SERVICE_SUFFIX)]
    return name


def lower_first(name: str) -> str:
    """Lower-case the first code point of ``name`` and nothing else."""
    if not name:
        return ""
    first = name[0].lower()
    # Some code points lower to several (U+0130 -> "i" + U+0307); keep the base letter.
    return first[0] + name[1:]


def camel_to_snake(name: str) -> str:
    """Convert ``CamelCase`` to ``camel_case``; used for output file names."""
    chars: list[str] = []
    for index, ch in enumerate(name):
        if ch.isupper() and index != 0:
            chars.append("_")
        chars.append(ch.lower())
    return "".join(chars)


def is_go_package_name(name: str) -> bool:
    """Whether ``name`` can appear in a Go ``package`` clause."""
    return bool(_ASCII_IDENTIFIER.fullmatch(name)) and name not in GO_KEYWORDS
