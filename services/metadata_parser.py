"""
services/metadata_parser.py – Turns metadata file entries into collections,
games and file filters.

Responsibilities
----------------
1. Track which collection / game the following attributes belong to.
2. Create collections (reused by name across files) and games (always new).
3. Build one FileFilter per collection per metadata file for the later
   directory scan.

Nothing here raises for bad input: every problem is logged with the metadata
file path and line number, and the entry is skipped.
"""

import datetime
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.assets import asset_line_to_url, asset_type_from_key
from models.collection import Collection
from models.file_filter import FileFilter, FileFilterGroup
from models.game_entry import Game, GameFile
from models.search_context import SearchContext
from services import metafile_reader
from services.attributes import (
    COLLECTION_ATTRIBS,
    GAME_ATTRIBS,
    KEY_COLLECTION,
    KEY_GAME,
    RX_ASSET_KEY,
    RX_COUNT_RANGE,
    RX_DATE,
    RX_FLOAT,
    RX_PERCENT,
    CollAttrib,
    GameAttrib,
    is_exclude_key,
    is_extension_key,
)
from services.metafile_reader import Entry, LineError, merge_lines
from services.parser_tools import tokenize_comma_list, tokenize_file_entry

logger = logging.getLogger(__name__)

MSG_PREFIX: str = "Collections:"


@dataclass
class ParserOutput:
    """Everything the metadata files produce, shared by all of them."""

    sctx: SearchContext
    filters: List[FileFilter] = field(default_factory=list)


class ParserContext:
    """
    State of parsing one metadata file.

    The current collection, game and filter are kept as handles (a name or
    an index) into ``output``, which keeps growing while the file is read.
    """

    def __init__(self, metafile_path: str, output: ParserOutput) -> None:
        self.metafile_path = metafile_path
        self.dir_path = os.path.dirname(os.path.abspath(metafile_path))
        self.output = output

        self.cur_collection: Optional[str] = None
        self.cur_game: Optional[int] = None
        self.cur_filter: Optional[int] = None
        self._filters_of_file: Dict[str, int] = {}

    @property
    def collection(self) -> Collection:
        return self.output.sctx.collections[self.cur_collection]

    @property
    def game(self) -> Game:
        return self.output.sctx.games[self.cur_game]

    @property
    def filter(self) -> FileFilter:
        return self.output.filters[self.cur_filter]

    def filter_index_for(self, collection_name: str) -> int:
        """Index of this file's filter for *collection_name*, created on demand."""
        if collection_name not in self._filters_of_file:
            self.output.filters.append(FileFilter(collection_name, [self.dir_path]))
            self._filters_of_file[collection_name] = len(self.output.filters) - 1
        return self._filters_of_file[collection_name]

    def resolve_path(self, value: str) -> str:
        """Absolute path of *value*, relative ones taken from the metafile dir."""
        if os.path.isabs(value):
            return os.path.abspath(value)
        return os.path.abspath(os.path.join(self.dir_path, value))

    def print_error(self, lineno: int, msg: str) -> None:
        logger.warning("%s `%s`, line %d: %s", MSG_PREFIX, self.metafile_path, lineno, msg)


# ── Helpers ──────────────────────────────────────────────────────────────────


def first_line_of(ctx: ParserContext, entry: Entry) -> str:
    if len(entry.values) > 1:
        ctx.print_error(
            entry.line,
            f"expected single line value for `{entry.key}` but got more, "
            "the rest of the lines will be ignored",
        )
    return entry.values[0]


def parse_release_date(value: str) -> Optional[datetime.date]:
    """
    ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD`` with out of range parts clamped.

    Returns None when *value* has none of these formats.

    Raises
    ------
    ValueError
        When the format is right but the day does not exist in that month.
    """
    match = RX_DATE.match(value)
    if not match:
        return None

    year = max(1, int(match.group(1)))
    month = min(max(1, int(match.group(3) or 0)), 12)
    day = min(max(1, int(match.group(5) or 0)), 31)
    return datetime.date(year, month, day)


def parse_rating(value: str) -> Optional[float]:
    """``NN%`` or a single digit decimal, both mapped to a 0..1 fraction."""
    if RX_PERCENT.match(value):
        number = float(value[:-1])
    elif RX_FLOAT.match(value):
        number = float(value)
    else:
        return None
    return min(max(0.0, number / 100.0), 1.0)


def parse_player_count(value: str) -> Optional[int]:
    match = RX_COUNT_RANGE.match(value)
    if not match:
        return None
    low = int(match.group(1))
    high = int(match.group(3) or 0)
    return max(1, low, high)


# ── Entry handlers ───────────────────────────────────────────────────────────


def parse_collection_entry(ctx: ParserContext, entry: Entry) -> None:
    kind = COLLECTION_ATTRIBS.get(entry.key)
    if kind is None:
        ctx.print_error(entry.line, f"unrecognized collection property `{entry.key}`, ignored")
        return

    coll = ctx.collection
    fltr = ctx.filter
    group: FileFilterGroup = fltr.exclude if is_exclude_key(entry.key) else fltr.include

    if kind is CollAttrib.SHORT_NAME:
        coll.set_short_name(first_line_of(ctx, entry))
    elif kind is CollAttrib.LAUNCH_CMD:
        coll.launch_cmd = merge_lines(entry.values)
    elif kind is CollAttrib.LAUNCH_WORKDIR:
        coll.launch_workdir = first_line_of(ctx, entry)
    elif kind is CollAttrib.DIRECTORIES:
        for value in entry.values:
            path = ctx.resolve_path(value)
            if not os.path.isdir(path):
                ctx.print_error(entry.line, f"directory `{value}` does not exist, ignored")
                continue
            fltr.directories.append(path)
    elif kind is CollAttrib.EXTENSIONS:
        tokens = tokenize_comma_list(first_line_of(ctx, entry).lower())
        if tokens.error:
            ctx.print_error(entry.line, tokens.error)
        group.extensions.extend(tokens.parts)
    elif kind is CollAttrib.FILES:
        group.files.extend(entry.values)
    elif kind is CollAttrib.REGEX:
        group.regex = first_line_of(ctx, entry)
    elif kind is CollAttrib.SHORT_DESC:
        coll.summary = merge_lines(entry.values)
    elif kind is CollAttrib.LONG_DESC:
        coll.description = merge_lines(entry.values)


def parse_game_files(ctx: ParserContext, entry: Entry) -> None:
    sctx = ctx.output.sctx
    game = ctx.game
    for line in entry.values:
        tokens = tokenize_file_entry(line)
        if tokens.error:
            ctx.print_error(entry.line, tokens.error)
        if not tokens.parts:
            continue

        # TODO: store the per-file key/value pairs once GameFile has fields for them
        gamefile = GameFile.from_path(ctx.resolve_path(tokens.parts[0]))
        owner = sctx.path_to_game_index.get(gamefile.canonical_path)
        if owner is not None and owner != ctx.cur_game:
            ctx.print_error(
                entry.line,
                f"file `{tokens.parts[0]}` was already added to game "
                f"`{sctx.games[owner].title}`, it now belongs to `{game.title}`",
            )
        game.add_file(gamefile)
        sctx.path_to_game_index[gamefile.canonical_path] = ctx.cur_game


def parse_game_entry(ctx: ParserContext, entry: Entry) -> None:
    # NOTE: there may be no current collection (game defined before any)
    kind = GAME_ATTRIBS.get(entry.key)
    if kind is None:
        ctx.print_error(entry.line, f"unrecognized game property `{entry.key}`, ignored")
        return

    game = ctx.game

    if kind is GameAttrib.FILES:
        parse_game_files(ctx, entry)
    elif kind is GameAttrib.DEVELOPERS:
        game.developers.extend(entry.values)
    elif kind is GameAttrib.PUBLISHERS:
        game.publishers.extend(entry.values)
    elif kind is GameAttrib.GENRES:
        game.genres.extend(entry.values)
    elif kind is GameAttrib.PLAYER_COUNT:
        count = parse_player_count(first_line_of(ctx, entry))
        if count is None:
            ctx.print_error(entry.line, "incorrect player count, should be N or N-M")
            return
        game.player_count = count
    elif kind is GameAttrib.SHORT_DESC:
        game.summary = merge_lines(entry.values)
    elif kind is GameAttrib.LONG_DESC:
        game.description = merge_lines(entry.values)
    elif kind is GameAttrib.RELEASE:
        value = first_line_of(ctx, entry)
        try:
            release = parse_release_date(value)
        except ValueError:
            ctx.print_error(entry.line, f"invalid date `{value}`, no such day")
            return
        if release is None:
            ctx.print_error(entry.line, "incorrect date format, should be YYYY, YYYY-MM or YYYY-MM-DD")
            return
        game.release_date = release
    elif kind is GameAttrib.RATING:
        rating = parse_rating(first_line_of(ctx, entry))
        if rating is None:
            ctx.print_error(entry.line, "failed to parse rating value")
            return
        game.rating = rating
    elif kind is GameAttrib.LAUNCH_CMD:
        game.launch_cmd = first_line_of(ctx, entry)
    elif kind is GameAttrib.LAUNCH_WORKDIR:
        game.launch_workdir = first_line_of(ctx, entry)


def parse_asset_entry_maybe(ctx: ParserContext, entry: Entry) -> bool:
    """
    Handle *entry* if its key looks like an asset key.

    Returns True when the key matched the asset pattern, even if the asset
    kind turned out to be unknown.
    """
    match = RX_ASSET_KEY.match(entry.key)
    if not match:
        return False

    asset_key = match.group(1)
    asset_type = asset_type_from_key(asset_key)
    if asset_type is None:
        ctx.print_error(entry.line, f"unknown asset type '{asset_key}', entry ignored")
        return True

    assets = ctx.game.assets if ctx.cur_game is not None else ctx.collection.default_assets
    for value in entry.values:
        assets.add_url_maybe(asset_type, asset_line_to_url(value, ctx.dir_path))
    return True


def parse_entry(ctx: ParserContext, entry: Entry) -> None:
    sctx = ctx.output.sctx

    if entry.key == KEY_COLLECTION:
        name = first_line_of(ctx, entry)
        sctx.get_or_create_collection(name)
        ctx.cur_collection = name
        ctx.cur_filter = ctx.filter_index_for(name)
        ctx.cur_game = None
        return

    if entry.key == KEY_GAME:
        ctx.cur_game = sctx.add_game(Game(title=first_line_of(ctx, entry)))
        return

    if ctx.cur_collection is None and ctx.cur_game is None:
        ctx.print_error(entry.line, "no `collection` or `game` defined yet, entry ignored")
        return

    if is_extension_key(entry.key):
        return

    if parse_asset_entry_maybe(ctx, entry):
        return

    if ctx.cur_game is not None:
        parse_game_entry(ctx, entry)
    else:
        parse_collection_entry(ctx, entry)


# ── Public API ───────────────────────────────────────────────────────────────


def read_metafile(metafile_path: str, output: ParserOutput) -> None:
    """
    Parse one metadata file into *output*.

    Raises
    ------
    MetafileReadError
        When the file cannot be read at all.
    """
    ctx = ParserContext(metafile_path, output)

    def on_error(error: LineError) -> None:
        ctx.print_error(error.line, error.message)

    def on_entry(entry: Entry) -> None:
        parse_entry(ctx, entry)

    metafile_reader.read_file(metafile_path, on_entry, on_error)
