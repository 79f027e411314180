"""
services/exceptions.py – Structured custom exception hierarchy for the game catalog.

All service-level errors derive from GameCatalogError so callers can catch
broadly or specifically depending on context. Problems inside a metadata file
(bad lines, unknown keys, malformed values) are never raised: they are logged
and the offending entry is skipped.
"""


class GameCatalogError(Exception):
    """Base class for all game catalog exceptions."""


class MetafileReadError(GameCatalogError):
    """
    Raised when a metadata file cannot be opened or read.

    Attributes
    ----------
    path : The metadata file that could not be read.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read metadata file '{path}': {reason}")


class ConfigError(GameCatalogError):
    """Raised when the game directory list cannot be read."""


class ScanError(GameCatalogError):
    """Raised when the catalog cannot be built at all."""
