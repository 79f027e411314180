"""
models/collection.py – Data model for a named game collection.
"""

from dataclasses import dataclass, field

from models.assets import GameAssets


@dataclass
class Collection:
    """
    A user-configured group of games sharing discovery rules and launch
    defaults.

    Attributes
    ----------
    name           : Unique, case-sensitive name; the catalog key.
    short_name     : Optional lower-case name for filenames / URIs.
    summary        : Short description.
    description    : Long description.
    launch_cmd     : Launch command template inherited by discovered games.
    launch_workdir : Working directory for the launch command.
    default_assets : Assets used when a game has none of its own.
    """

    name: str
    short_name: str = ""
    summary: str = ""
    description: str = ""
    launch_cmd: str = ""
    launch_workdir: str = ""
    default_assets: GameAssets = field(default_factory=GameAssets)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Collection name must not be empty.")

    def set_short_name(self, value: str) -> None:
        self.short_name = value.lower()

    def __str__(self) -> str:
        if self.short_name:
            return f"{self.name}  [{self.short_name}]"
        return self.name
