"""
services/parser_tools.py – Token splitting for attribute values.

Values may be bare words or quoted with ' or ". A backslash escapes the
character after it, both inside and outside quotes.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

# ── Configuration ────────────────────────────────────────────────────────────
QUOTE_CHARS: FrozenSet[str] = frozenset("'\"")
KEYVAL_SEPARATORS: FrozenSet[str] = frozenset(":=")
LIST_SEPARATOR: str = ","


@dataclass
class TokenizerResult:
    """Tokens found before the first error, and that error ('' if none)."""

    parts: List[str] = field(default_factory=list)
    error: str = ""


# ── Scanning helpers ─────────────────────────────────────────────────────────


def _skip_spaces(line: str, pos: int) -> int:
    while pos < len(line) and line[pos].isspace():
        pos += 1
    return pos


def _next_value(line: str, pos: int, stop_chars: FrozenSet[str] = frozenset()) -> Tuple[Optional[str], int]:
    """
    Read one value starting at *pos*.

    A bare value ends at whitespace or any of *stop_chars*; a quoted one at
    the matching unescaped quote. Returns (value, new position), with value
    None when the line has no more content.
    """
    pos = _skip_spaces(line, pos)
    if pos >= len(line):
        return None, pos

    quote = line[pos] if line[pos] in QUOTE_CHARS else ""
    if quote:
        pos += 1

    chars: List[str] = []
    while pos < len(line):
        kar = line[pos]
        if kar == "\\":
            if pos + 1 < len(line):
                chars.append(line[pos + 1])
            pos += 2
            continue
        if quote:
            if kar == quote:
                pos += 1
                break
        elif kar.isspace() or kar in stop_chars:
            break
        chars.append(kar)
        pos += 1

    return "".join(chars), pos


def _next_char(line: str, pos: int) -> Tuple[str, int]:
    pos = _skip_spaces(line, pos)
    if pos >= len(line):
        return "", pos
    return line[pos], pos + 1


# ── Public API ───────────────────────────────────────────────────────────────


def tokenize_file_entry(line: str) -> TokenizerResult:
    """
    Split a game file line: ``path [key=value | key:value] ...``.

    The first part is always the path; the rest come in key, value pairs.
    """
    result = TokenizerResult()

    path, pos = _next_value(line, 0)
    if not path:
        result.error = "no file path defined"
        return result
    result.parts.append(path)

    while True:
        key, pos = _next_value(line, pos, KEYVAL_SEPARATORS)
        if key is None:
            break
        result.parts.append(key)

        sep, pos = _next_char(line, pos)
        if sep not in KEYVAL_SEPARATORS:
            result.error = f"expected either ':' or '=' after `{key}`, but it was missing"
            break

        value, pos = _next_value(line, pos)
        if not value:
            result.error = f"value is missing after `{key}`"
            break
        result.parts.append(value)

    return result


def tokenize_comma_list(line: str) -> TokenizerResult:
    """Split ``a, b, 'c d'`` into its items. Empty items are skipped."""
    result = TokenizerResult()
    stop = frozenset(LIST_SEPARATOR)

    item, pos = _next_value(line, 0, stop)
    while item is not None:
        if item:
            result.parts.append(item)

        sep, pos = _next_char(line, pos)
        if not sep:
            break
        if sep != LIST_SEPARATOR:
            last = result.parts[-1] if result.parts else item
            result.error = f"expected ',' after `{last}`, but it was missing"
            break

        item, pos = _next_value(line, pos, stop)

    if not result.parts and not result.error:
        result.error = "no items defined"
    return result
