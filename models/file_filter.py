"""
models/file_filter.py – Include / exclude rules used to pick a collection's
files during the directory scan.
"""

from dataclasses import dataclass, field
from typing import List


def _unique(values: List[str]) -> List[str]:
    """Drop duplicates, keeping the first occurrence of each value."""
    return list(dict.fromkeys(values))


@dataclass
class FileFilterGroup:
    """
    One side (include or exclude) of a filter.

    Attributes
    ----------
    extensions : Lower-case file extensions without the dot.
    files      : Paths relative to the filter directory, '/'-separated.
    regex      : Pattern searched in the full path; empty means unset.
    """

    extensions: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    regex: str = ""

    def tidy(self) -> None:
        self.extensions = _unique(self.extensions)
        self.files = _unique(self.files)


@dataclass
class FileFilter:
    """
    The rules of one collection as declared by one metadata file.

    The same collection may have several filters, one for every metadata
    file that mentions it.
    """

    collection_name: str
    directories: List[str] = field(default_factory=list)
    include: FileFilterGroup = field(default_factory=FileFilterGroup)
    exclude: FileFilterGroup = field(default_factory=FileFilterGroup)

    def tidy(self) -> None:
        self.directories = _unique(self.directories)
        self.include.tidy()
        self.exclude.tidy()
