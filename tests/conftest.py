import os
from pathlib import Path
from typing import Dict, Iterable

import pytest


def make_tree(root: Path, files: Iterable[str], texts: Dict[str, str] = None) -> Path:
    """Create empty *files* and text files *texts* (relative paths) under *root*."""
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
    for rel, text in (texts or {}).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def root(tmp_path) -> Path:
    """A symlink-free temporary directory, so plain and canonical paths agree."""
    return Path(os.path.realpath(tmp_path))


SIMPLE_METADATA = """\
# Three collections over the same directory

collection: My Games
extension: ext

collection: Favorite games
files:
  favgame1.ext

  favgame2.ext

  game with spaces.ext

collection: Multi-game ROMs
regex: \\d+-in-1
"""

SIMPLE_FILES = [
    "mygame1.ext",
    "mygame2.ext",
    "mygame3.ext",
    "favgame1.ext",
    "favgame2.ext",
    "game with spaces.ext",
    "9999-in-1.ext",
    "subdir/game_in_subdir.ext",
    "media/mygame1/box_front.ext",
    "notagame.txt",
]

WITH_META_METADATA = """\
game: Pre Game
file: pre.ext

game: Ghost
summary: declared, but never found anywhere

collection: mygames
extension: ext
summary: this is the summary
description: this is the description

game: A simple game
file: basic.ext
developers: Dev
developer: Dev with Spaces
genre: genre1
genres: genre2

  genre with spaces
players: 1-4
release: 1998-05
description: a very long

  description

game: Subdir Game
file: subdir/game_in_subdir.ext

game: Multifile Game
files:
  multi.a.ext

  multi.b.ext

game: Virtual Game
launch: runme.exe param1 param2
"""

WITH_META_FILES = [
    "pre.ext",
    "basic.ext",
    "subdir/game_in_subdir.ext",
    "multi.a.ext",
    "multi.b.ext",
]


@pytest.fixture
def empty_dir(root) -> Path:
    return make_tree(root / "empty", ["readme.md", "game.ext"])


@pytest.fixture
def simple_dir(root) -> Path:
    return make_tree(root / "simple", SIMPLE_FILES, {"metadata.pegasus.txt": SIMPLE_METADATA})


@pytest.fixture
def with_meta_dir(root) -> Path:
    return make_tree(root / "with_meta", WITH_META_FILES, {"metadata.pegasus.txt": WITH_META_METADATA})


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
