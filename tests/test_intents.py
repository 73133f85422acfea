from ideamap.intents import IntentDispatcher


def test_successful_intents_return_tree_and_selection(engine):
    intents = IntentDispatcher(engine)
    result = intents.request_add_child("r", "Topic A")
    assert result.ok and result.changed
    assert result.message == "Child node added"
    assert result.tree.children[0].label == "Topic A"
    assert result.selected_id == result.tree.children[0].id


def test_failures_become_values(engine):
    intents = IntentDispatcher(engine)
    result = intents.request_delete("r")
    assert not result.ok
    assert result.message == "Cannot delete the root node"
    assert result.tree == engine.tree

    result = intents.request_set_font_size("r", -2)
    assert not result.ok
    assert "positive integer" in result.message

    result = intents.select_node("ghost")
    assert not result.ok
    assert result.selected_id is None


def test_select_message(engine):
    intents = IntentDispatcher(engine)
    intents.request_add_child("r", "Topic A")
    result = intents.select_node("r")
    assert result.ok and not result.changed
    assert result.message == 'Selected: "Central Idea"'
    assert result.selected_id == "r"


def test_noop_edits_report_no_change(engine):
    intents = IntentDispatcher(engine)
    result = intents.request_rename("r", "   ")
    assert result.ok and not result.changed
    assert result.tree.label == "Central Idea"

    result = intents.request_undo()
    assert result.ok and not result.changed
    assert result.message == "Nothing to undo"


def test_undo_redo_messages(engine):
    intents = IntentDispatcher(engine)
    intents.request_add_child("r", "A")
    assert intents.request_undo().message == "Undo performed"
    assert intents.request_redo().message == "Redo performed"
    assert intents.request_redo().message == "Nothing to redo"


def test_load_and_new(engine):
    intents = IntentDispatcher(engine)
    result = intents.request_load({"label": "Loaded", "children": [{"label": "x"}]})
    assert result.ok
    assert result.message == "Mindmap loaded successfully"
    assert result.tree.label == "Loaded"

    result = intents.request_load(["not", "a", "tree"])
    assert not result.ok
    assert result.message.startswith("Error loading file: ")
    assert engine.tree.label == "Loaded"

    result = intents.request_new()
    assert result.ok and result.changed
    assert result.tree.label == "Central Idea"
    assert result.tree.children == []

    result = intents.dispatch("requestNew", "Roadmap")
    assert result.ok and result.tree.label == "Roadmap"


def test_load_deep_tree(engine):
    data = {"label": "0"}
    tip = data
    for level in range(1, 1500):
        tip["children"] = [{"label": str(level)}]
        tip = tip["children"][0]

    result = IntentDispatcher(engine).request_load(data)
    assert result.ok, result.message
    assert engine.node_count == 1500


def test_dispatch_by_intent_name(engine):
    intents = IntentDispatcher(engine)
    result = intents.dispatch("requestAddChild", "r", "Topic", "#abc", 14)
    assert result.ok
    child = result.tree.children[0]
    assert (child.color, child.font_size) == ("#abc", 14)

    assert intents.dispatch("requestRecolor", child.id, color="#def").ok
    assert intents.dispatch("requestUndo").message == "Undo performed"
    assert "requestLoad" in intents.intents


def test_dispatch_rejects_unknown_intents_and_bad_arguments(engine):
    intents = IntentDispatcher(engine)
    assert intents.dispatch("requestTeleport").message == "Unknown intent 'requestTeleport'"

    result = intents.dispatch("requestDelete")
    assert not result.ok
    assert result.message.startswith("Bad arguments for 'requestDelete'")
    assert len(engine.history) == 1
