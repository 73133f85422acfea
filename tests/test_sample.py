from ideamap.model import count_nodes
from ideamap.sample import load_sample, sample_data


def test_sample_structure():
    data = sample_data()
    assert data["label"] == "Web Development"
    assert [branch["label"] for branch in data["children"]] == ["Frontend", "Backend", "Tools"]


def test_load_sample_is_deterministic_and_undoable(engine):
    tree = load_sample(engine)
    assert count_nodes(tree) == 13
    assert tree.id == "node_0"
    assert tree.children[0].children[0].id == "node_2"

    engine.undo()
    assert engine.tree.label == "Central Idea"
