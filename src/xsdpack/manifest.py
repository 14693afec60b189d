# src/xsdpack/manifest.py
"""
Reader for the line-oriented key/value property format used by schema manifests.

Handles comments (# and !), '=' ':' or whitespace separators, backslash line
continuation and escapes. The result is a read-only mapping in file order.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

MANIFEST_NAME = "META-INF/spring.schemas"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _ends_with_continuation(line: str) -> bool:
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _logical_lines(text: str) -> Iterator[str]:
    pending: str | None = None
    for raw in _LINE_BREAK_RE.split(text):
        if pending is None:
            line = raw.lstrip(_WHITESPACE)
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + raw.lstrip(_WHITESPACE)

        if _ends_with_continuation(line):
            pending = line[:-1]
            continue

        pending = None
        yield line

    if pending is not None:
        yield pending


def _unescape(s: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(s):
        ch = s[i]
        if ch != "\\" or i + 1 >= len(s):
            out.append(ch)
            i += 1
            continue

        nxt = s[i + 1]
        if nxt == "u":
            digits = s[i + 2 : i + 6]
            if len(digits) != 4 or any(c not in "0123456789abcdefABCDEF" for c in digits):
                raise ValueError(f"Malformed \\uXXXX escape: {s[i : i + 6]!r}")
            out.append(chr(int(digits, 16)))
            i += 6
        else:
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _SEPARATORS or ch in _WHITESPACE:
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> Mapping[str, str]:
    """Parse property-file text into a read-only mapping.

    Later occurrences of a key replace earlier ones but keep the first position.
    """
    entries: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        entries[key] = value
    return MappingProxyType(entries)


def load_manifest(path: Path) -> Mapping[str, str]:
    data = path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = data.decode("iso-8859-1")
    return parse_properties(text)


def is_manifest_path(path: Path | str) -> bool:
    s = str(path)
    return s.endswith(MANIFEST_NAME) or s.endswith(MANIFEST_NAME.replace("/", "\\"))
