"""Tree data model for ideamap: nodes, structure and identity."""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set

from ideamap.errors import InvalidArgumentError, InvalidOperationError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """Represents a node (idea/topic) in the mindmap.

    `id` is only None for nodes that have not yet been adopted by a
    NodeStore (freshly decoded data).
    """
    label: str
    id: Optional[str] = None
    color: Optional[str] = None
    font_size: Optional[int] = None
    children: List["Node"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


def iter_nodes(tree: Node) -> Iterator[Node]:
    """Yield every node of `tree` in pre-order (parent before children)."""
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def count_nodes(tree: Node) -> int:
    """Number of nodes in the tree, root included."""
    return sum(1 for _ in iter_nodes(tree))


def find_by_id(tree: Node, node_id: str) -> Optional[Node]:
    """Depth-first (pre-order) search for `node_id`; first match wins."""
    for node in iter_nodes(tree):
        if node.id == node_id:
            return node
    return None


def find_parent(tree: Node, node_id: str) -> Optional[Node]:
    """Return the parent of `node_id`, or None for the root or an unknown id."""
    for node in iter_nodes(tree):
        for child in node.children:
            if child.id == node_id:
                return node
    return None


def clone_deep(tree: Node) -> Node:
    """Structural deep copy sharing no mutable state with `tree`."""
    copy = Node(label=tree.label, id=tree.id, color=tree.color, font_size=tree.font_size)
    pending = [(tree, copy)]
    while pending:
        source, target = pending.pop()
        for child in source.children:
            child_copy = Node(
                label=child.label,
                id=child.id,
                color=child.color,
                font_size=child.font_size,
            )
            target.children.append(child_copy)
            pending.append((child, child_copy))
    return copy


def check_structure(tree: Node) -> None:
    """Reject trees where a node object is reachable twice (cycles, shared subtrees)."""
    seen: Set[int] = set()
    stack = [tree]
    while stack:
        node = stack.pop()
        if not isinstance(node, Node):
            raise InvalidArgumentError(f"Expected a Node, got {type(node).__name__}")
        if id(node) in seen:
            raise InvalidArgumentError(
                f"Node '{node.label}' appears more than once (cycle or shared subtree)"
            )
        seen.add(id(node))
        if not isinstance(node.children, list):
            raise InvalidArgumentError(f"Node '{node.label}' has no children list")
        stack.extend(node.children)


class NodeStore:
    """Owns the canonical tree and hands out node identities.

    Ids are "<prefix><n>" from a monotonic counter. Every id the store has
    issued or adopted is reserved, so an id is never handed out twice even
    after the node carrying it was deleted.
    """

    def __init__(self, id_prefix: str = "node_"):
        self.id_prefix = id_prefix
        self.root: Optional[Node] = None
        self._next_id = 0
        self._reserved: Set[str] = set()

    # ==================== Identity ====================

    def new_id(self) -> str:
        """Allocate a fresh id that was never issued or adopted before."""
        while True:
            candidate = f"{self.id_prefix}{self._next_id}"
            self._next_id += 1
            if candidate not in self._reserved:
                self._reserved.add(candidate)
                return candidate

    def adopt(self, tree: Node) -> Node:
        """Give every node of `tree` a unique id.

        Explicit ids are kept verbatim; nodes lacking one get a new id in
        pre-order. Duplicate explicit ids are rejected before anything is
        reserved or assigned.
        """
        explicit: Set[str] = set()
        for node in iter_nodes(tree):
            if not node.id:
                continue
            if node.id in explicit:
                raise InvalidArgumentError(f"Duplicate node id '{node.id}'")
            explicit.add(node.id)

        self._reserved.update(explicit)
        assigned = 0
        for node in iter_nodes(tree):
            if not node.id:
                node.id = self.new_id()
                assigned += 1
        if assigned:
            logger.debug("Assigned %d missing node ids", assigned)
        return tree

    # ==================== Structure ====================

    def create_node(self, label: str, color: Optional[str] = None,
                    font_size: Optional[int] = None) -> Node:
        """Create a detached node with a fresh id."""
        return Node(label=label, id=self.new_id(), color=color, font_size=font_size)

    def find_by_id(self, node_id: str, tree: Optional[Node] = None) -> Optional[Node]:
        """Look up `node_id` in `tree` (defaults to the canonical tree)."""
        tree = tree if tree is not None else self.root
        if tree is None:
            return None
        return find_by_id(tree, node_id)

    def find_parent(self, node_id: str, tree: Optional[Node] = None) -> Optional[Node]:
        tree = tree if tree is not None else self.root
        if tree is None:
            return None
        return find_parent(tree, node_id)

    def append_child(self, parent: Node, child: Node):
        """Append `child` to `parent.children`.

        The child must be independent of the parent: neither the parent
        itself nor anything reachable from it, and not an ancestor of it.
        """
        if child is parent:
            raise InvalidOperationError("A node cannot be its own child")
        if any(node is child for node in iter_nodes(parent)):
            raise InvalidOperationError(f"Node '{child.label}' is already under '{parent.label}'")
        if any(node is parent for node in iter_nodes(child)):
            raise InvalidOperationError(f"Node '{child.label}' is an ancestor of '{parent.label}'")
        parent.children.append(child)

    def remove_child(self, parent: Node, child_id: str) -> Node:
        """Remove the first child of `parent` with `child_id`, subtree included."""
        for index, child in enumerate(parent.children):
            if child.id == child_id:
                return parent.children.pop(index)
        raise NotFoundError(f"Node '{child_id}' is not a child of '{parent.id}'")

    @staticmethod
    def clone_deep(tree: Node) -> Node:
        return clone_deep(tree)
