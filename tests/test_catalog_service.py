import datetime
import logging
import os

from conftest import make_tree
from services.catalog_service import METAFILE_NAMES, find_in_dirs, find_metafile_in


def index_of(sctx, path):
    index = sctx.path_to_game_index[str(path)]
    assert index < len(sctx.games)
    assert str(path) in sctx.games[index].files
    return index


# ── Metadata file discovery ──────────────────────────────────────────────────


def test_metafile_priority(root, caplog):
    caplog.set_level(logging.INFO)
    make_tree(root, METAFILE_NAMES[1:])
    assert find_metafile_in(str(root)) == str(root / "metadata.pegasus.txt")
    assert f"Collections: found `{root / 'metadata.pegasus.txt'}`" in caplog.messages

    make_tree(root, METAFILE_NAMES[:1])
    assert find_metafile_in(str(root)) == str(root / "collections.pegasus.txt")


def test_metafile_fallback_names(root):
    make_tree(root, ["metadata.txt"])
    assert find_metafile_in(str(root)) == str(root / "metadata.txt")


# ── End to end ───────────────────────────────────────────────────────────────


def test_empty(empty_dir, caplog):
    sctx = find_in_dirs([str(empty_dir)])
    assert sctx.games == []
    assert sctx.collections == {}
    assert sctx.collection_children == {}
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert warnings == [f"Collections: No metadata file found in `{empty_dir}`, directory ignored"]


def test_simple(simple_dir):
    sctx = find_in_dirs([str(simple_dir)])

    assert list(sctx.collections) == ["My Games", "Favorite games", "Multi-game ROMs"]
    assert len(sctx.games) == 8
    assert len(sctx.collection_children["My Games"]) == 8
    assert len(sctx.collection_children["Favorite games"]) == 3
    assert len(sctx.collection_children["Multi-game ROMs"]) == 1

    expected = {
        "My Games": [
            "mygame1.ext", "mygame2.ext", "mygame3.ext", "favgame1.ext", "favgame2.ext",
            "game with spaces.ext", "9999-in-1.ext", "subdir/game_in_subdir.ext",
        ],
        "Favorite games": ["favgame1.ext", "favgame2.ext", "game with spaces.ext"],
        "Multi-game ROMs": ["9999-in-1.ext"],
    }
    for name, files in expected.items():
        expected_indices = sorted(index_of(sctx, simple_dir / f) for f in files)
        assert sorted(sctx.collection_children[name]) == expected_indices


def test_with_meta(with_meta_dir):
    sctx = find_in_dirs([str(with_meta_dir)])

    assert list(sctx.collections) == ["mygames"]
    coll = sctx.collections["mygames"]
    assert coll.summary == "this is the summary"
    assert coll.description == "this is the description"
    assert len(sctx.games) == 5

    # game before the first collection entry
    pre = sctx.games[index_of(sctx, with_meta_dir / "pre.ext")]
    assert pre.title == "Pre Game"

    basic = sctx.games[index_of(sctx, with_meta_dir / "basic.ext")]
    assert basic.title == "A simple game"
    assert basic.developers == ["Dev", "Dev with Spaces"]
    assert basic.genres == ["genre1", "genre2", "genre with spaces"]
    assert basic.player_count == 4
    assert basic.release_date == datetime.date(1998, 5, 1)
    assert basic.description == "a very long\ndescription"
    assert basic.summary == ""
    assert list(basic.files) == [str(with_meta_dir / "basic.ext")]

    subdir = sctx.games[index_of(sctx, with_meta_dir / "subdir" / "game_in_subdir.ext")]
    assert subdir.title == "Subdir Game"

    index_a = index_of(sctx, with_meta_dir / "multi.a.ext")
    index_b = index_of(sctx, with_meta_dir / "multi.b.ext")
    assert index_a == index_b
    multi = sctx.games[index_a]
    assert multi.title == "Multifile Game"
    assert len(multi.files) == 2

    virtual = [g for g in sctx.games if g.title == "Virtual Game"]
    assert len(virtual) == 1
    assert virtual[0].files == {}
    assert virtual[0].launch_cmd == "runme.exe param1 param2"

    assert all(g.title != "Ghost" for g in sctx.games)
    assert sorted(set(sctx.collection_children["mygames"])) == sorted({index_a, 0, 1, 2})


def test_multiple_directories_share_collections(root):
    make_tree(root, ["a/one.ext", "b/two.ext", "b/three.bin"], {
        "a/collections.txt": "collection: Games\nextension: ext\nlaunch: emu {file}\n",
        "b/metadata.txt": (
            "collection: Games\nextension: bin\n"
            "collection: Extra\nfiles: two.ext\n"
        ),
    })
    sctx = find_in_dirs([str(root / "a"), str(root / "b")])

    assert list(sctx.collections) == ["Games", "Extra"]
    games = sorted(g.title for g in sctx.children_of("Games"))
    assert games == ["one", "three"]
    assert [g.title for g in sctx.children_of("Extra")] == ["two"]
    # every game of "Games" inherits its launch command, even ones found by
    # a filter declared in another file
    assert {g.launch_cmd for g in sctx.children_of("Games")} == {"emu {file}"}
    assert sctx.children_of("Extra")[0].launch_cmd == ""


def test_declared_game_inherits_launch_command(root):
    make_tree(root, ["game.ext"], {
        "metadata.txt": (
            "collection: c\nextension: ext\nlaunch: emu {file}\nworkdir: /opt\n\n"
            "game: Named\nfile: game.ext\n"
        ),
    })
    game = find_in_dirs([str(root)]).games[0]
    assert game.title == "Named"
    assert game.launch_cmd == "emu {file}"
    assert game.launch_workdir == "/opt"


def test_unreadable_metafile_is_skipped(root, caplog, monkeypatch):
    def fail(*args, **kwargs):
        raise OSError("Input/output error")

    make_tree(root, ["game.ext"], {"metadata.txt": "collection: c\nextension: ext\n"})
    monkeypatch.setattr("services.metafile_reader.read_stream", fail)
    sctx = find_in_dirs([str(root)])
    assert sctx.collections == {}
    assert sctx.games == []
    assert any("Failed to read metadata file" in m for m in caplog.messages)


def test_undecodable_bytes_do_not_stop_reading(root, caplog):
    make_tree(root, ["game.ext"])
    (root / "metadata.txt").write_bytes(
        b"collection: First\nextension: ext\nsummary: caf\xe9\n\ncollection: Second\nfiles: game.ext\n"
    )
    sctx = find_in_dirs([str(root)])
    assert list(sctx.collections) == ["First", "Second"]
    assert sctx.collections["First"].summary == "caf\ufffd"
    assert len(sctx.games) == 1
    assert sctx.collection_children == {"First": [0], "Second": [0]}
    assert not any("Failed to read metadata file" in m for m in caplog.messages)


def test_metafile_with_byte_order_mark(root):
    make_tree(root, ["game.ext"])
    (root / "metadata.txt").write_bytes(b"\xef\xbb\xbfcollection: Mine\nextension: ext\n")
    sctx = find_in_dirs([str(root)])
    assert list(sctx.collections) == ["Mine"]
    assert [g.title for g in sctx.children_of("Mine")] == ["game"]


def test_symlinked_search_dir_keeps_declared_paths(root):
    make_tree(root, ["real/found.ext", "real/declared.ext"], {
        "real/metadata.txt": "collection: c\nextension: ext\ngame: Declared\nfile: declared.ext\n",
    })
    os.symlink(root / "real", root / "link")
    sctx = find_in_dirs([str(root / "link")])

    assert sorted(path for g in sctx.games for path in g.files) == [
        str(root / "link" / "declared.ext"),
        str(root / "link" / "found.ext"),
    ]
    assert sorted(sctx.path_to_game_index) == [
        str(root / "real" / "declared.ext"),
        str(root / "real" / "found.ext"),
    ]
    assert len(sctx.collection_children["c"]) == 2


def test_progress_callback(simple_dir, empty_dir):
    calls = []
    find_in_dirs([str(simple_dir), str(empty_dir)], progress_callback=lambda d, t: calls.append((d, t)))
    assert calls[-1] == (5, 5)
    assert [done for done, _ in calls] == [1, 2, 3, 4, 5]
