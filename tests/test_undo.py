import pytest

from ideamap.model import Node
from ideamap.undo import HistoryLog


def tree(label):
    return Node(label, id="r")


def labels(log):
    return [entry.tree.label for entry in log._entries]


def test_empty_log_has_nothing_to_undo_or_redo():
    log = HistoryLog()
    assert len(log) == 0
    assert log.cursor == -1
    assert log.undo() is None
    assert log.redo() is None


def test_undo_and_redo_walk_the_log():
    log = HistoryLog()
    for label in "abc":
        log.checkpoint(tree(label), f"set {label}")

    assert log.undo_description == "set c"
    assert log.undo().label == "b"
    assert log.undo().label == "a"
    assert log.undo() is None
    assert log.redo_description == "set b"
    assert log.redo().label == "b"
    assert log.redo().label == "c"
    assert log.redo() is None


def test_checkpoint_discards_redo_branch():
    log = HistoryLog()
    for label in "abc":
        log.checkpoint(tree(label))
    log.undo()
    log.undo()
    log.checkpoint(tree("d"))

    assert labels(log) == ["a", "d"]
    assert not log.can_redo
    assert log.redo() is None


def test_capacity_evicts_oldest_and_keeps_cursor_in_range():
    log = HistoryLog(capacity=50)
    for i in range(100):
        log.checkpoint(tree(str(i)))

    assert len(log) == 50
    assert log.cursor == 49
    steps = 0
    while log.undo() is not None:
        steps += 1
    assert steps == 49
    assert log.cursor == 0
    assert log._entries[0].tree.label == "50"


def test_entries_are_isolated_from_callers():
    log = HistoryLog()
    live = tree("a")
    log.checkpoint(live)
    live.label = "mutated"
    log.checkpoint(tree("b"))

    restored = log.undo()
    assert restored.label == "a"
    restored.label = "mutated again"
    assert log.redo().label == "b"
    assert log.undo().label == "a"


def test_revision_counts_checkpoints_only():
    log = HistoryLog(capacity=2)
    log.checkpoint(tree("a"))
    log.checkpoint(tree("b"))
    log.checkpoint(tree("c"))
    assert len(log) == 2

    log.undo()
    log.redo()

    assert log.revision == 3


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        HistoryLog(capacity=0)
