"""
services/attributes.py – The attribute vocabulary of metadata files.

Keys are matched after lower-casing. A collection attribute key starting
with ``ignore-`` feeds the exclude side of the collection's file filter.
"""

import re
from enum import Enum, auto
from typing import Dict


class CollAttrib(Enum):
    SHORT_NAME = auto()
    DIRECTORIES = auto()
    EXTENSIONS = auto()
    FILES = auto()
    REGEX = auto()
    SHORT_DESC = auto()
    LONG_DESC = auto()
    LAUNCH_CMD = auto()
    LAUNCH_WORKDIR = auto()


class GameAttrib(Enum):
    FILES = auto()
    DEVELOPERS = auto()
    PUBLISHERS = auto()
    GENRES = auto()
    PLAYER_COUNT = auto()
    SHORT_DESC = auto()
    LONG_DESC = auto()
    RELEASE = auto()
    RATING = auto()
    LAUNCH_CMD = auto()
    LAUNCH_WORKDIR = auto()


# ── Reserved keys ────────────────────────────────────────────────────────────
KEY_COLLECTION: str = "collection"
KEY_GAME: str = "game"
EXTENSION_PREFIX: str = "x-"
EXCLUDE_PREFIX: str = "ignore-"

# ── Key tables ───────────────────────────────────────────────────────────────
COLLECTION_ATTRIBS: Dict[str, CollAttrib] = {
    "shortname": CollAttrib.SHORT_NAME,
    "short_name": CollAttrib.SHORT_NAME,
    "launch": CollAttrib.LAUNCH_CMD,
    "command": CollAttrib.LAUNCH_CMD,
    "workdir": CollAttrib.LAUNCH_WORKDIR,
    "working-directory": CollAttrib.LAUNCH_WORKDIR,
    "cwd": CollAttrib.LAUNCH_WORKDIR,
    "directory": CollAttrib.DIRECTORIES,
    "directories": CollAttrib.DIRECTORIES,
    "extension": CollAttrib.EXTENSIONS,
    "extensions": CollAttrib.EXTENSIONS,
    "file": CollAttrib.FILES,
    "files": CollAttrib.FILES,
    "regex": CollAttrib.REGEX,
    "ignore-extension": CollAttrib.EXTENSIONS,
    "ignore-extensions": CollAttrib.EXTENSIONS,
    "ignore-file": CollAttrib.FILES,
    "ignore-files": CollAttrib.FILES,
    "ignore-regex": CollAttrib.REGEX,
    "summary": CollAttrib.SHORT_DESC,
    "description": CollAttrib.LONG_DESC,
}

GAME_ATTRIBS: Dict[str, GameAttrib] = {
    "file": GameAttrib.FILES,
    "files": GameAttrib.FILES,
    "launch": GameAttrib.LAUNCH_CMD,
    "command": GameAttrib.LAUNCH_CMD,
    "workdir": GameAttrib.LAUNCH_WORKDIR,
    "working-directory": GameAttrib.LAUNCH_WORKDIR,
    "cwd": GameAttrib.LAUNCH_WORKDIR,
    "developer": GameAttrib.DEVELOPERS,
    "developers": GameAttrib.DEVELOPERS,
    "publisher": GameAttrib.PUBLISHERS,
    "publishers": GameAttrib.PUBLISHERS,
    "genre": GameAttrib.GENRES,
    "genres": GameAttrib.GENRES,
    "players": GameAttrib.PLAYER_COUNT,
    "summary": GameAttrib.SHORT_DESC,
    "description": GameAttrib.LONG_DESC,
    "release": GameAttrib.RELEASE,
    "rating": GameAttrib.RATING,
}

# ── Value patterns ───────────────────────────────────────────────────────────
RX_ASSET_KEY: re.Pattern = re.compile(r"^assets?\.(.+)$")
RX_COUNT_RANGE: re.Pattern = re.compile(r"^(\d+)(-(\d+))?$")
RX_PERCENT: re.Pattern = re.compile(r"^\d+%$")
RX_FLOAT: re.Pattern = re.compile(r"^\d(\.\d+)?$")
RX_DATE: re.Pattern = re.compile(r"^(\d{4})(-(\d{1,2}))?(-(\d{1,2}))?$")


def is_exclude_key(key: str) -> bool:
    return key.startswith(EXCLUDE_PREFIX)


def is_extension_key(key: str) -> bool:
    return key.startswith(EXTENSION_PREFIX)
