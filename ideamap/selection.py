"""Selection tracking for ideamap."""

from typing import Optional

from ideamap.model import Node, find_by_id


class SelectionState:
    """Holds at most one selected node id."""

    def __init__(self):
        self.selected_id: Optional[str] = None

    def select(self, node_id: str, tree: Node) -> bool:
        """Select `node_id` if it resolves in `tree`; otherwise clear."""
        if find_by_id(tree, node_id) is None:
            self.selected_id = None
            return False
        self.selected_id = node_id
        return True

    def clear(self):
        self.selected_id = None

    def revalidate(self, tree: Node):
        """Drop the selection if the selected node is gone from `tree`."""
        if self.selected_id is not None and find_by_id(tree, self.selected_id) is None:
            self.selected_id = None
