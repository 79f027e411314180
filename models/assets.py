"""
models/assets.py – Asset kinds and the per-game / per-collection asset store.

An asset is referenced by URL. Metadata files name them with keys like
``assets.boxfront`` or ``asset.screenshot``; the part after the dot is looked
up in ASSET_KEYS.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlparse


class AssetType(Enum):
    BOX_FRONT = "box_front"
    BOX_BACK = "box_back"
    BOX_SPINE = "box_spine"
    BOX_FULL = "box_full"
    CARTRIDGE = "cartridge"
    LOGO = "logo"
    MARQUEE = "marquee"
    BEZEL = "bezel"
    PANEL = "panel"
    CABINET_LEFT = "cabinet_left"
    CABINET_RIGHT = "cabinet_right"
    TILE = "tile"
    BANNER = "banner"
    STEAMGRID = "steamgrid"
    POSTER = "poster"
    BACKGROUND = "background"
    MUSIC = "music"
    SCREENSHOTS = "screenshots"
    VIDEOS = "videos"
    TITLESCREEN = "titlescreen"


# Kinds that collect every URL given instead of keeping only the first one.
MULTI_ASSETS = frozenset({AssetType.SCREENSHOTS, AssetType.VIDEOS})

ASSET_KEYS: Dict[str, AssetType] = {
    "boxfront": AssetType.BOX_FRONT,
    "box_front": AssetType.BOX_FRONT,
    "boxart2d": AssetType.BOX_FRONT,
    "boxback": AssetType.BOX_BACK,
    "box_back": AssetType.BOX_BACK,
    "boxspine": AssetType.BOX_SPINE,
    "box_spine": AssetType.BOX_SPINE,
    "boxside": AssetType.BOX_SPINE,
    "box_side": AssetType.BOX_SPINE,
    "boxfull": AssetType.BOX_FULL,
    "box_full": AssetType.BOX_FULL,
    "box": AssetType.BOX_FULL,
    "cartridge": AssetType.CARTRIDGE,
    "cart": AssetType.CARTRIDGE,
    "disc": AssetType.CARTRIDGE,
    "logo": AssetType.LOGO,
    "wheel": AssetType.LOGO,
    "marquee": AssetType.MARQUEE,
    "bezel": AssetType.BEZEL,
    "screenmarquee": AssetType.BEZEL,
    "border": AssetType.BEZEL,
    "panel": AssetType.PANEL,
    "cabinetleft": AssetType.CABINET_LEFT,
    "cabinet_left": AssetType.CABINET_LEFT,
    "cabinetright": AssetType.CABINET_RIGHT,
    "cabinet_right": AssetType.CABINET_RIGHT,
    "tile": AssetType.TILE,
    "banner": AssetType.BANNER,
    "steam": AssetType.STEAMGRID,
    "steamgrid": AssetType.STEAMGRID,
    "grid": AssetType.STEAMGRID,
    "poster": AssetType.POSTER,
    "flyer": AssetType.POSTER,
    "background": AssetType.BACKGROUND,
    "music": AssetType.MUSIC,
    "screenshot": AssetType.SCREENSHOTS,
    "screenshots": AssetType.SCREENSHOTS,
    "video": AssetType.VIDEOS,
    "videos": AssetType.VIDEOS,
    "titlescreen": AssetType.TITLESCREEN,
}


def asset_type_from_key(key: str) -> Optional[AssetType]:
    """Return the AssetType for *key* (already lower-cased), or None."""
    return ASSET_KEYS.get(key)


def asset_line_to_url(value: str, base_dir: str) -> str:
    """
    Turn an asset value from a metadata file into a URL.

    Values that already carry a URL scheme are returned untouched; anything
    else is a filesystem path, relative ones resolved against *base_dir*.
    """
    scheme = urlparse(value).scheme
    # a single letter is a Windows drive, not a scheme
    if len(scheme) > 1:
        return value

    path = Path(value)
    if not path.is_absolute():
        path = Path(base_dir) / path
    return Path(os.path.abspath(path)).as_uri()


@dataclass
class GameAssets:
    """URLs of the assets of one game (or the defaults of a collection)."""

    urls: Dict[AssetType, List[str]] = field(default_factory=dict)

    def add_url_maybe(self, kind: AssetType, url: str) -> None:
        """Store *url*; single-valued kinds keep the first URL they receive."""
        if not url:
            return
        current = self.urls.setdefault(kind, [])
        if kind in MULTI_ASSETS:
            if url not in current:
                current.append(url)
        elif not current:
            current.append(url)

    def single(self, kind: AssetType) -> str:
        current = self.urls.get(kind)
        return current[0] if current else ""

    def multi(self, kind: AssetType) -> List[str]:
        return list(self.urls.get(kind, []))

    def to_dict(self) -> Dict[str, List[str]]:
        return {kind.value: list(urls) for kind, urls in self.urls.items()}
