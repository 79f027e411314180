"""
models/game_entry.py – Data model for a single game catalogue entry.
"""

import datetime
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from models.assets import GameAssets


def complete_base_name(path: str) -> str:
    """File name without its last suffix (``multi.a.ext`` → ``multi.a``)."""
    name = os.path.basename(path.rstrip("/\\"))
    stem, dot, _suffix = name.rpartition(".")
    return stem if dot and stem else name


@dataclass(frozen=True)
class GameFile:
    """
    One file belonging to a game.

    Attributes
    ----------
    name           : Display name, the file's base name without suffix.
    path           : Absolute path as it was declared or found.
    canonical_path : Symlink-free absolute path; the deduplication key.
    """

    name: str
    path: str
    canonical_path: str

    @classmethod
    def from_path(cls, path: str) -> "GameFile":
        absolute = os.path.abspath(path)
        return cls(
            name=complete_base_name(absolute),
            path=absolute,
            canonical_path=os.path.realpath(absolute),
        )


@dataclass
class Game:
    """
    Represents one game in the catalog.

    Attributes
    ----------
    title          : Human-readable title; not guaranteed to be unique.
    files          : Files of the game, keyed by absolute path.
    player_count   : Maximum number of players, at least 1.
    release_date   : Release date, None when unknown.
    rating         : Rating on a 0..1 scale.

    The favorite / play statistics fields are owned by the presentation
    layer and only carried along here.
    """

    title: str
    summary: str = ""
    description: str = ""
    launch_cmd: str = ""
    launch_workdir: str = ""
    files: Dict[str, GameFile] = field(default_factory=dict)

    developers: List[str] = field(default_factory=list)
    publishers: List[str] = field(default_factory=list)
    genres: List[str] = field(default_factory=list)

    player_count: int = 1
    release_date: Optional[datetime.date] = None
    rating: float = 0.0
    assets: GameAssets = field(default_factory=GameAssets)

    is_favorite: bool = False
    playcount: int = 0
    playtime: int = 0
    last_played: Optional[datetime.datetime] = None

    @classmethod
    def from_path(cls, path: Path) -> "Game":
        """Create a game for a file found on disk, titled after the file."""
        gamefile = GameFile.from_path(str(path))
        return cls(title=gamefile.name, files={gamefile.path: gamefile})

    def add_file(self, gamefile: GameFile) -> None:
        self.files[gamefile.path] = gamefile

    @property
    def is_incomplete(self) -> bool:
        """True for a game with neither files nor a launch command."""
        return not self.files and not self.launch_cmd

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "summary": self.summary,
            "description": self.description,
            "launch_cmd": self.launch_cmd,
            "launch_workdir": self.launch_workdir,
            "files": sorted(self.files),
            "developers": list(self.developers),
            "publishers": list(self.publishers),
            "genres": list(self.genres),
            "player_count": self.player_count,
            "release_date": self.release_date.isoformat() if self.release_date else None,
            "rating": self.rating,
            "assets": self.assets.to_dict(),
        }

    def __str__(self) -> str:
        parts = [self.title]
        if self.release_date:
            parts.append(f"({self.release_date.year})")
        if len(self.files) > 1:
            parts.append(f"[{len(self.files)} files]")
        return "  ".join(parts)
