"""
models/search_context.py – The catalog: every collection and game found.

Games are addressed by their index in ``games``. Both ``path_to_game_index``
and ``collection_children`` store such indices, so games are only ever
appended, and removal goes through remove_games() which rewrites them.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from models.collection import Collection
from models.game_entry import Game


@dataclass
class SearchContext:
    """
    Attributes
    ----------
    collections         : Collections by name, in order of first appearance.
    games               : All games.
    path_to_game_index  : Canonical file path → index into ``games``.
    collection_children : Collection name → game indices, in discovery order.
                          An index may appear more than once.
    """

    collections: Dict[str, Collection] = field(default_factory=dict)
    games: List[Game] = field(default_factory=list)
    path_to_game_index: Dict[str, int] = field(default_factory=dict)
    collection_children: Dict[str, List[int]] = field(default_factory=dict)

    def get_or_create_collection(self, name: str) -> Collection:
        if name not in self.collections:
            self.collections[name] = Collection(name)
        return self.collections[name]

    def add_game(self, game: Game) -> int:
        """Append *game* and return its index."""
        self.games.append(game)
        return len(self.games) - 1

    def game_at_path(self, path: str) -> Optional[Game]:
        index = self.path_to_game_index.get(path)
        return None if index is None else self.games[index]

    def children_of(self, collection_name: str) -> List[Game]:
        return [self.games[i] for i in self.collection_children.get(collection_name, [])]

    def remove_games(self, predicate: Callable[[Game], bool]) -> int:
        """
        Remove every game matching *predicate* and return how many went.

        References to removed games are dropped, the rest are renumbered.
        """
        remap: Dict[int, int] = {}
        kept: List[Game] = []
        for old_index, game in enumerate(self.games):
            if predicate(game):
                continue
            remap[old_index] = len(kept)
            kept.append(game)

        removed = len(self.games) - len(kept)
        if not removed:
            return 0

        self.games = kept
        self.path_to_game_index = {
            path: remap[index]
            for path, index in self.path_to_game_index.items()
            if index in remap
        }
        self.collection_children = {
            name: [remap[index] for index in indices if index in remap]
            for name, indices in self.collection_children.items()
        }
        return removed

    def to_dict(self) -> dict:
        return {
            "collections": {
                name: {
                    "short_name": coll.short_name,
                    "summary": coll.summary,
                    "description": coll.description,
                    "launch_cmd": coll.launch_cmd,
                    "launch_workdir": coll.launch_workdir,
                    "default_assets": coll.default_assets.to_dict(),
                    "games": list(self.collection_children.get(name, [])),
                }
                for name, coll in self.collections.items()
            },
            "games": [game.to_dict() for game in self.games],
        }
