"""Symbol demangling with a raw-name fallback.

Demangling goes through ``cxxfilt`` (the C++ runtime's ``__cxa_demangle``),
which handles Itanium ABI names as emitted by C, C++ and Rust's legacy
mangling scheme. Any failure leaves the original name in place.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

import cxxfilt

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

_RUST_HASH_RE = re.compile(r"::h[0-9a-f]{16}$")

# Rust legacy mangling escapes punctuation that Itanium names cannot carry.
_RUST_ESCAPES = {
    "$SP$": "@",
    "$BP$": "*",
    "$RF$": "&",
    "$LT$": "<",
    "$GT$": ">",
    "$LP$": "(",
    "$RP$": ")",
    "$C$": ",",
    "$u20$": " ",
    "$u22$": '"',
    "$u27$": "'",
    "$u2b$": "+",
    "$u3b$": ";",
    "$u5b$": "[",
    "$u5d$": "]",
    "$u7b$": "{",
    "$u7d$": "}",
    "$u7e$": "~",
}
_RUST_ESCAPE_RE = re.compile("|".join(re.escape(key) for key in _RUST_ESCAPES))


@dataclass(frozen=True)
class DemangleOptions:
    """Controls how much of a demangled symbol is kept."""

    name_only: bool = True
    """Drop argument lists and Rust hash suffixes, keep the qualified name."""


def _strip_arguments(name: str) -> str:
    depth = 0
    for index, char in enumerate(name):
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        elif char == "(" and depth == 0 and index > 0:
            return name[:index]
    return name


def _unescape_rust(name: str) -> str:
    parts = []
    for segment in name.split("::"):
        if segment.startswith("_$"):
            segment = segment[1:]
        segment = segment.replace("..", "::")
        parts.append(_RUST_ESCAPE_RE.sub(lambda match: _RUST_ESCAPES[match.group(0)], segment))
    return "::".join(parts)


def simplify_name(name: str) -> str:
    """Reduce a demangled symbol to its qualified name."""
    rust_hash = _RUST_HASH_RE.search(name)
    if rust_hash:
        return _unescape_rust(name[: rust_hash.start()])
    return _strip_arguments(name)


def demangle_symbol(name: str, options: DemangleOptions | None = None) -> str | None:
    """Demangle *name*, returning None when it is not a mangled symbol."""
    options = options or DemangleOptions()
    try:
        demangled = cxxfilt.demangle(name)
    except (cxxfilt.InvalidName, cxxfilt.LibraryNotFound) as e:
        logger.debug("Could not demangle %s: %s", name, e)
        return None
    if not demangled or demangled == name:
        return None
    return simplify_name(demangled) if options.name_only else demangled


def resolve_name(
    name: str,
    *,
    demangle: bool,
    demangler: Callable[[str], str | None] | None = None,
) -> str:
    """Return the display name for symbol *name*.

    When *demangle* is false, or the demangler cannot handle the name,
    the raw name is returned unchanged.
    """
    if not demangle:
        return name
    demangle_fn = demangler or demangle_symbol
    demangled = demangle_fn(name)
    return demangled if demangled else name
