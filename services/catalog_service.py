"""
services/catalog_service.py – Builds the game catalog from a list of
directories.

Pipeline
--------
1. Find the metadata file of every directory and parse it; this creates the
   collections, the games declared in metadata and the file filters.
2. Deduplicate the filter lists.
3. Run every filter against the filesystem, in the order they were declared.
4. Drop games that have neither files nor a launch command.
5. Let games without their own launch command or working directory use the
   ones of the first collection they belong to.
"""

import logging
import os
from typing import Callable, Iterable, List, Optional

from models.search_context import SearchContext
from services import file_collector, metadata_parser
from services.exceptions import MetafileReadError, ScanError
from services.metadata_parser import ParserOutput

logger = logging.getLogger(__name__)

# ── Configuration ────────────────────────────────────────────────────────────

# Checked in this order; the first existing one is used.
METAFILE_NAMES: List[str] = [
    "collections.pegasus.txt",
    "metadata.pegasus.txt",
    "collections.txt",
    "metadata.txt",
]

MSG_PREFIX: str = "Collections:"

# ── Types ────────────────────────────────────────────────────────────────────
ProgressCallback = Callable[[int, int], None]


# ── Public API ───────────────────────────────────────────────────────────────


def find_metafile_in(dir_path: str) -> Optional[str]:
    """Return the path of the metadata file of *dir_path*, or None."""
    for name in METAFILE_NAMES:
        path = os.path.join(dir_path, name)
        if os.path.isfile(path):
            logger.info("%s found `%s`", MSG_PREFIX, path)
            return path

    logger.warning("%s No metadata file found in `%s`, directory ignored", MSG_PREFIX, dir_path)
    return None


def find_in_dirs(
    dir_list: Iterable[str],
    sctx: Optional[SearchContext] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> SearchContext:
    """
    Build (or extend) a catalog from the metadata files in *dir_list*.

    Parameters
    ----------
    dir_list          : Directories to look for a metadata file in.
    sctx              : Catalog to extend; a new one is created when omitted.
    progress_callback : Optional callable receiving (steps_done, steps_total),
                        one step per directory and one per filter.

    Returns
    -------
    The completed SearchContext.

    Raises
    ------
    ScanError
        When the catalog cannot be built due to an unexpected failure.
        Problems with individual files or entries are only logged.
    """
    dirs = list(dir_list)
    output = ParserOutput(sctx if sctx is not None else SearchContext())

    try:
        _read_metafiles(dirs, output, progress_callback)

        for fltr in output.filters:
            fltr.tidy()

        total = len(dirs) + len(output.filters)
        for done, fltr in enumerate(output.filters, start=len(dirs) + 1):
            file_collector.process_filter(fltr, output.sctx)
            if progress_callback:
                progress_callback(done, total)
    except OSError as exc:
        raise ScanError(f"Scanning failed: {exc}") from exc

    removed = output.sctx.remove_games(lambda game: game.is_incomplete)
    if removed:
        logger.debug("%s dropped %d game(s) without files or launch command", MSG_PREFIX, removed)

    inherit_launch_params(output.sctx)

    logger.info(
        "%s %d collection(s), %d game(s) found",
        MSG_PREFIX, len(output.sctx.collections), len(output.sctx.games),
    )
    return output.sctx


def inherit_launch_params(sctx: SearchContext) -> None:
    """Fill empty launch command / workdir fields from the parent collection."""
    for name, indices in sctx.collection_children.items():
        coll = sctx.collections[name]
        for index in indices:
            game = sctx.games[index]
            if not game.launch_cmd and coll.launch_cmd:
                game.launch_cmd = coll.launch_cmd
            if not game.launch_workdir and coll.launch_workdir:
                game.launch_workdir = coll.launch_workdir


# ── Private helpers ──────────────────────────────────────────────────────────


def _read_metafiles(
    dirs: List[str],
    output: ParserOutput,
    progress_callback: Optional[ProgressCallback],
) -> None:
    for done, dir_path in enumerate(dirs, start=1):
        metafile = find_metafile_in(dir_path)
        if metafile is not None:
            try:
                metadata_parser.read_metafile(metafile, output)
            except MetafileReadError as exc:
                logger.warning(
                    "%s Failed to read metadata file `%s` (%s), entries after the failure are ignored",
                    MSG_PREFIX, exc.path, exc.__cause__,
                )
        if progress_callback:
            # the filter count is not known until every file is read
            progress_callback(done, len(dirs) + len(output.filters))
