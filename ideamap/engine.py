"""Edit engine: the single owner of the canonical tree, its history and selection."""

import logging
from typing import Any, Callable, Optional

from ideamap.codec import is_positive_int, node_to_dict, tree_from_data, tree_from_node
from ideamap.config import EngineSettings
from ideamap.errors import InvalidArgumentError, InvalidOperationError, NotFoundError
from ideamap.model import Node, NodeStore, clone_deep, count_nodes
from ideamap.selection import SelectionState
from ideamap.undo import HistoryLog

logger = logging.getLogger(__name__)


def _describe(text: str) -> str:
    return f"'{text[:20]}...'" if len(text) > 20 else f"'{text}'"


class EditEngine:
    """Applies user edits to the mindmap.

    Every edit validates its preconditions first, then mutates the tree,
    updates the selection and records the resulting tree in the history
    log. A failed precondition raises before anything changes.

    Collaborators only ever receive deep copies of the tree; the
    `on_tree_changed` callback gets the new tree and the selected id after
    each successful change.
    """

    def __init__(self, settings: Optional[EngineSettings] = None, data: Any = None):
        self.settings = settings or EngineSettings()
        self.store = NodeStore(id_prefix=self.settings.id_prefix)
        self.history = HistoryLog(capacity=self.settings.history_capacity)
        self.selection = SelectionState()

        # Callbacks
        self.on_tree_changed: Optional[Callable[[Node, Optional[str]], None]] = None

        if data is None:
            tree = self._default_tree()
        else:
            tree = self._accept(data)
        self.store.root = tree
        self.history.checkpoint(tree, "Open map")

    # ==================== Read side ====================

    @property
    def tree(self) -> Node:
        """A deep copy of the canonical tree."""
        return clone_deep(self.store.root)

    @property
    def root_id(self) -> str:
        return self.store.root.id

    @property
    def selected_id(self) -> Optional[str]:
        return self.selection.selected_id

    @property
    def selected_node(self) -> Optional[Node]:
        if self.selection.selected_id is None:
            return None
        return self.get_node(self.selection.selected_id)

    @property
    def node_count(self) -> int:
        return count_nodes(self.store.root)

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def get_node(self, node_id: str) -> Node:
        """Return a copy of the subtree rooted at `node_id`."""
        return clone_deep(self._require(node_id))

    def to_dict(self) -> dict:
        """The canonical tree in its persisted form."""
        return node_to_dict(self.store.root)

    # ==================== Selection ====================

    def select_node(self, node_id: str) -> Node:
        """Select a node by id, validated against the canonical tree."""
        previous = self.selection.selected_id
        if not self.selection.select(node_id, self.store.root):
            if previous is not None:
                self._notify()
            raise NotFoundError(f"Node '{node_id}' not found")
        self._notify()
        return self.get_node(node_id)

    def clear_selection(self):
        self.selection.clear()
        self._notify()

    # ==================== Edits ====================

    def add_child(self, parent_id: str, label: Optional[str] = None,
                  color: Optional[str] = None, font_size: Optional[int] = None) -> Node:
        """Append a new node under `parent_id` and select it."""
        parent = self._require(parent_id)
        self._check_font_size(font_size)

        node = self.store.create_node(
            self._clean_label(label, self.settings.default_child_label), color, font_size
        )
        self.store.append_child(parent, node)
        self.selection.select(node.id, self.store.root)
        return self._commit(f"Add child {_describe(node.label)}")

    def add_sibling(self, node_id: str, label: Optional[str] = None,
                    color: Optional[str] = None, font_size: Optional[int] = None) -> Node:
        """Append a new node to the parent of `node_id`."""
        self._require(node_id)
        parent = self.store.find_parent(node_id)
        if parent is None:
            raise InvalidOperationError("Cannot add a sibling to the root node")
        self._check_font_size(font_size)

        node = self.store.create_node(
            self._clean_label(label, self.settings.default_sibling_label), color, font_size
        )
        self.store.append_child(parent, node)
        return self._commit(f"Add sibling {_describe(node.label)}")

    def delete_node(self, node_id: str) -> Node:
        """Remove a node and its whole subtree."""
        self._require(node_id)
        parent = self.store.find_parent(node_id)
        if parent is None:
            raise InvalidOperationError("Cannot delete the root node")

        removed = self.store.remove_child(parent, node_id)
        self.selection.clear()
        return self._commit(f"Delete node {_describe(removed.label)}")

    def rename_node(self, node_id: str, label: str) -> Node:
        """Relabel a node. A blank label leaves the node unchanged."""
        node = self._require(node_id)
        if label is not None and not isinstance(label, str):
            raise InvalidArgumentError("Label must be a string")
        new_label = (label or "").strip()
        if not new_label or new_label == node.label:
            return self.tree

        node.label = new_label
        return self._commit("Edit node text")

    def recolor_node(self, node_id: str, color: Optional[str]) -> Node:
        """Set a node's color; None falls back to the presentation default."""
        node = self._require(node_id)
        if color is not None and not isinstance(color, str):
            raise InvalidArgumentError("Color must be a string")
        if color == node.color:
            return self.tree

        node.color = color
        return self._commit("Change node color")

    def set_font_size(self, node_id: str, size: int) -> Node:
        node = self._require(node_id)
        if not is_positive_int(size):
            raise InvalidArgumentError(f"Font size must be a positive integer, got {size!r}")
        if size == node.font_size:
            return self.tree

        node.font_size = size
        return self._commit("Change font size")

    def replace_tree(self, new_tree: Any, description: str = "Replace map") -> Node:
        """Replace the whole canonical tree with `new_tree`.

        Accepts a Node or parsed persisted data. Missing ids are assigned
        before the tree is accepted; malformed input is rejected without
        touching the current tree.
        """
        tree = self._accept(new_tree)
        self.store.root = tree
        self.selection.clear()
        return self._commit(description)

    def load(self, data: Any) -> Node:
        """Load parsed persisted data (requestLoad)."""
        tree = self.replace_tree(data, "Load map")
        logger.info("Loaded map with %d nodes", self.node_count)
        return tree

    def new_map(self, label: Optional[str] = None) -> Node:
        """Start over from a single root (requestNew).

        A blank or missing `label` uses the configured root label.
        """
        tree = self.replace_tree(self._default_tree(label), "New map")
        logger.info("Started a new map")
        return tree

    # ==================== History ====================

    def undo(self) -> Optional[Node]:
        """Restore the previous tree; None when there is nothing to undo."""
        tree = self.history.undo()
        if tree is None:
            return None
        self._restore(tree)
        logger.debug("Undo performed")
        return self.tree

    def redo(self) -> Optional[Node]:
        """Re-apply the next tree; None when there is nothing to redo."""
        tree = self.history.redo()
        if tree is None:
            return None
        self._restore(tree)
        logger.debug("Redo performed")
        return self.tree

    # ==================== Internals ====================

    def _default_tree(self, label: Optional[str] = None) -> Node:
        if label is not None and not isinstance(label, str):
            raise InvalidArgumentError("Label must be a string")
        return self.store.create_node((label or "").strip() or self.settings.default_root_label)

    def _accept(self, data: Any) -> Node:
        if isinstance(data, Node):
            tree = tree_from_node(data, self.settings.default_child_label)
        else:
            tree = tree_from_data(data, self.settings.default_child_label)
        return self.store.adopt(tree)

    def _restore(self, tree: Node):
        self.store.root = tree
        self.selection.clear()
        self._notify()

    def _require(self, node_id: str) -> Node:
        node = self.store.find_by_id(node_id)
        if node is None:
            raise NotFoundError(f"Node '{node_id}' not found")
        return node

    @staticmethod
    def _check_font_size(font_size: Optional[int]):
        if font_size is not None and not is_positive_int(font_size):
            raise InvalidArgumentError(f"Font size must be a positive integer, got {font_size!r}")

    @staticmethod
    def _clean_label(label: Optional[str], default: str) -> str:
        if label is not None and not isinstance(label, str):
            raise InvalidArgumentError("Label must be a string")
        return (label or "").strip() or default

    def _commit(self, description: str) -> Node:
        self.history.checkpoint(self.store.root, description)
        logger.debug("%s (history %d/%d)", description, self.history.cursor + 1, len(self.history))
        self._notify()
        return self.tree

    def _notify(self):
        if self.on_tree_changed:
            self.on_tree_changed(self.tree, self.selection.selected_id)
