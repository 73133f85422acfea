import pytest

from ideamap.config import EngineSettings
from ideamap.errors import InvalidArgumentError, NotFoundError
from ideamap.model import iter_nodes
from ideamap.sample import sample_data


def test_create_map_with_default_root(store):
    stored = store.create_map("Empty")
    assert stored.id > 0
    assert stored.tree.label == "Central Idea"
    assert store.get_map(stored.id).tree == stored.tree


def test_create_map_assigns_ids(store):
    stored = store.create_map("Sample", sample_data())
    nodes = list(iter_nodes(store.get_map(stored.id).tree))
    assert len(nodes) == 13
    assert len({n.id for n in nodes}) == 13


def test_create_map_rejects_bad_tree(store):
    with pytest.raises(InvalidArgumentError):
        store.create_map("Broken", {"label": "x", "children": 5})
    assert store.get_all_maps() == []


def test_save_tree_from_engine(store):
    stored = store.create_map("Plan")
    engine = store.open_engine(stored.id)
    engine.add_child(engine.root_id, "Step 1")
    store.save_tree(stored.id, engine.tree)

    reopened = store.open_engine(stored.id)
    assert reopened.tree == engine.tree
    assert not reopened.can_undo


def test_rename_archive_delete(store):
    first = store.create_map("First")
    second = store.create_map("Second")

    store.rename_map(first.id, "Renamed")
    store.archive_map(second.id)
    assert [m.name for m in store.get_all_maps()] == ["Renamed"]
    assert {m.name for m in store.get_all_maps(include_archived=True)} == {"Renamed", "Second"}

    store.delete_map(first.id)
    assert store.get_map(first.id) is None
    with pytest.raises(NotFoundError):
        store.rename_map(first.id, "Ghost")
    with pytest.raises(NotFoundError):
        store.open_engine(first.id)


def test_duplicate_map(store):
    original = store.create_map("Sample", sample_data())
    copy = store.duplicate_map(original.id, "Sample (copy)")
    assert copy.id != original.id
    assert copy.tree == original.tree
    assert store.duplicate_map(9999, "nothing") is None


def test_settings(store):
    assert store.get_setting("missing", 3) == 3
    store.set_setting("recent", [1, 2])
    assert store.get_setting("recent") == [1, 2]

    store.save_settings(EngineSettings(history_capacity=4, default_root_label="Root"))
    assert store.load_settings().history_capacity == 4
    assert store.create_map("Uses settings").tree.label == "Root"
