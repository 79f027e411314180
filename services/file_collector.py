"""
services/file_collector.py – Matches the files on disk against collection
filters and adds them to the catalog.

For every filter directory, the directory itself and all of its
subdirectories are listed (symlinks followed, ``<dir>/media`` skipped). Each
entry, file or directory, is first checked against the exclude rules, then
the include rules. A match becomes a game (one per canonical path, reused if
a metadata file already declared it) and a child of the filter's collection.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional

from models.file_filter import FileFilter, FileFilterGroup
from models.game_entry import Game
from models.search_context import SearchContext

logger = logging.getLogger(__name__)

# ── Configuration ────────────────────────────────────────────────────────────
MEDIA_DIR_NAME: str = "media"
MSG_PREFIX: str = "Collections:"


# ── Directory listing ────────────────────────────────────────────────────────


def find_dirs(base_dir: str) -> List[str]:
    """
    Return *base_dir* and every directory below it, except ``base_dir/media``
    and its contents.

    Symbolic links are followed; a directory reachable more than once (e.g.
    through a link loop) is listed only the first time.
    """
    media_dir = os.path.join(base_dir, MEDIA_DIR_NAME)
    seen = set()
    result: List[str] = []

    for current, subdirs, _files in os.walk(base_dir, followlinks=True):
        real = os.path.realpath(current)
        if real in seen:
            subdirs[:] = []
            continue
        seen.add(real)

        if current == base_dir:
            subdirs[:] = [d for d in subdirs if os.path.join(current, d) != media_dir]
        subdirs.sort()
        result.append(current)

    return result


def _list_entries(directory: str) -> List[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as exc:
        logger.warning("%s cannot list `%s`: %s", MSG_PREFIX, directory, exc)
        return []


# ── Matching ─────────────────────────────────────────────────────────────────


def _compile(pattern: str, collection_name: str) -> Optional[re.Pattern]:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning(
            "%s invalid regex `%s` in collection `%s` (%s), ignored",
            MSG_PREFIX, pattern, collection_name, exc,
        )
        return None


def _suffix(name: str) -> str:
    """Last suffix of *name*, lower-cased and without the dot."""
    return Path(name).suffix[1:].lower()


def matches(group: FileFilterGroup, regex: Optional[re.Pattern],
            suffix: str, relative_path: str, full_path: str) -> bool:
    return (
        suffix in group.extensions
        or relative_path in group.files
        or (regex is not None and regex.search(full_path) is not None)
    )


# ── Public API ───────────────────────────────────────────────────────────────


def process_filter(fltr: FileFilter, sctx: SearchContext) -> int:
    """
    Apply *fltr* to the filesystem and extend *sctx* in place.

    Returns
    -------
    Number of matching entries, including ones already in the catalog.
    """
    include_regex = _compile(fltr.include.regex, fltr.collection_name)
    exclude_regex = _compile(fltr.exclude.regex, fltr.collection_name)
    parent = sctx.collections[fltr.collection_name]
    matched = 0

    for filter_dir in fltr.directories:
        logger.debug("%s running filter of `%s` in `%s`", MSG_PREFIX, fltr.collection_name, filter_dir)
        for subdir in find_dirs(filter_dir):
            for entry in _list_entries(subdir):
                full_path = entry.path
                relative_path = Path(os.path.relpath(full_path, filter_dir)).as_posix()
                suffix = _suffix(entry.name)

                if matches(fltr.exclude, exclude_regex, suffix, relative_path, full_path):
                    continue
                if not matches(fltr.include, include_regex, suffix, relative_path, full_path):
                    continue

                game_path = os.path.realpath(full_path)
                if game_path not in sctx.path_to_game_index:
                    # no metadata file declared this file, so the game is new
                    game = Game.from_path(Path(full_path))
                    game.launch_cmd = parent.launch_cmd
                    game.launch_workdir = parent.launch_workdir
                    sctx.path_to_game_index[game_path] = sctx.add_game(game)

                children = sctx.collection_children.setdefault(fltr.collection_name, [])
                children.append(sctx.path_to_game_index[game_path])
                matched += 1

    return matched
