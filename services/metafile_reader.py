"""
services/metafile_reader.py – Line reader for the collection metadata format.

Format
------
  # comment              only when '#' is the very first character
  key: value             key is everything before the first ':'
    continued value      indented lines extend the previous value
                         a blank line inside a value starts a new value line

Every attribute is reported through the *on_entry* callback as an Entry with
one string per value line. Malformed lines are reported through *on_error*
and reading always continues until the end of the stream.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, List

from services.exceptions import MetafileReadError

# ── Configuration ────────────────────────────────────────────────────────────
# utf-8-sig drops a leading byte order mark; undecodable bytes become U+FFFD
ENCODING: str = "utf-8-sig"
ENCODING_ERRORS: str = "replace"

MSG_NO_ATTRIBUTE: str = "multiline value found, but no attribute has been defined yet"
MSG_VALUE_MISSING: str = "attribute value missing, entry ignored"
MSG_INVALID_LINE: str = "line invalid, skipped"


# ── Types ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Entry:
    """One attribute: the line of its key, the lower-case key, value lines."""

    line: int
    key: str
    values: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LineError:
    line: int
    message: str


EntryCallback = Callable[[Entry], None]
ErrorCallback = Callable[[LineError], None]


# ── Public API ───────────────────────────────────────────────────────────────


def read_stream(
    lines: Iterable[str],
    on_entry: EntryCallback,
    on_error: ErrorCallback,
) -> None:
    """
    Parse *lines* (with or without line terminators) and report entries.

    Parameters
    ----------
    lines    : Any iterable of text lines, e.g. an open text file.
    on_entry : Called once per complete attribute, in file order.
    on_error : Called once per malformed line or empty attribute.
    """
    last_key = ""
    last_val = ""
    last_key_linenum = 0

    def close_current_attrib() -> None:
        nonlocal last_key, last_val
        if last_key:
            value = last_val.strip()
            if not value:
                on_error(LineError(last_key_linenum, MSG_VALUE_MISSING))
            else:
                values = [part.strip() for part in value.split("\n")]
                on_entry(Entry(last_key_linenum, last_key, values))

        last_key = ""
        last_val = ""

    linenum = 0
    for raw_line in lines:
        linenum += 1
        line = raw_line.rstrip("\r\n")

        if line.startswith("#"):
            continue

        trimmed = line.strip()
        if not trimmed:
            if last_key and not last_val.endswith("\n"):
                last_val += "\n"
            continue

        # starts with whitespace, but has content
        if line[0].isspace():
            if not last_key:
                on_error(LineError(linenum, MSG_NO_ATTRIBUTE))
                continue

            if last_val and not last_val.endswith("\n"):
                last_val += " "
            last_val += trimmed
            continue

        # either a new entry or an error; the previous entry ends here
        close_current_attrib()

        key, sep, value = trimmed.partition(":")
        key = key.strip()
        if sep and key:
            last_key = key.lower()
            last_key_linenum = linenum
            # may be empty here, if the value is purely multiline
            last_val = value.strip()
            continue

        on_error(LineError(linenum, MSG_INVALID_LINE))

    close_current_attrib()


def read_file(path: str, on_entry: EntryCallback, on_error: ErrorCallback) -> None:
    """
    Open *path*, read it to the end with read_stream(), and close it.

    Raises
    ------
    MetafileReadError
        When the file cannot be opened or read.
    """
    try:
        with open(path, "r", encoding=ENCODING, errors=ENCODING_ERRORS) as stream:
            read_stream(stream, on_entry, on_error)
    except OSError as exc:
        raise MetafileReadError(path, str(exc)) from exc


def merge_lines(values: List[str]) -> str:
    """Join the value lines of an attribute into one text."""
    return "\n".join(values)
