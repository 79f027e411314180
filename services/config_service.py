"""
services/config_service.py – Where to look for games.

The directories to scan are listed in ``game_dirs.txt``, one per line. Blank
lines and lines starting with '#' are skipped; relative paths are taken from
the directory of the list file.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from services.exceptions import ConfigError

logger = logging.getLogger(__name__)

# ── Configuration ────────────────────────────────────────────────────────────
CONFIG_DIR_ENV: str = "GAMECATALOG_CONFIG_DIR"
DEFAULT_CONFIG_DIR: Path = Path.home() / ".config" / "gamecatalog"
GAME_DIRS_FILENAME: str = "game_dirs.txt"


def config_dir() -> Path:
    """The configuration directory, overridable through the environment."""
    override = os.environ.get(CONFIG_DIR_ENV)
    return Path(override) if override else DEFAULT_CONFIG_DIR


def default_game_dirs_path() -> Path:
    return config_dir() / GAME_DIRS_FILENAME


def load_game_dirs(path: Optional[Path] = None) -> List[str]:
    """
    Read the directory list from *path* (default: default_game_dirs_path()).

    Returns
    -------
    Absolute directory paths in file order, without duplicates. A missing
    list file yields an empty list.

    Raises
    ------
    ConfigError
        When the file exists but cannot be read.
    """
    path = path or default_game_dirs_path()
    if not path.exists():
        logger.info("No game directory list at '%s'", path)
        return []

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read game directory list '{path}': {exc}") from exc

    base = path.resolve().parent
    dirs: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        candidate = Path(line).expanduser()
        if not candidate.is_absolute():
            candidate = base / candidate
        resolved = os.path.abspath(candidate)
        if resolved not in dirs:
            dirs.append(resolved)

    logger.debug("Loaded %d game director(y/ies) from '%s'", len(dirs), path)
    return dirs
