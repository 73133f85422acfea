"""Persisted mindmap format.

A tree is stored as nested objects::

    {"id": "node_0", "label": "Central Idea", "color": "#3498db",
     "fontSize": 14, "children": [...]}

`color` and `fontSize` are omitted when unset. On load, `id` is optional
(missing ids are assigned by the engine), `name` is accepted in place of
`label`, and unknown keys are ignored.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from ideamap.errors import InvalidArgumentError
from ideamap.model import Node, check_structure

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "New Child"


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _encode_fields(node: Node) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": node.id, "label": node.label}
    if node.color is not None:
        data["color"] = node.color
    if node.font_size is not None:
        data["fontSize"] = node.font_size
    data["children"] = []
    return data


def node_to_dict(tree: Node) -> Dict[str, Any]:
    """Encode a tree into plain dicts and lists."""
    root = _encode_fields(tree)
    pending = [(tree, root)]
    while pending:
        source, target = pending.pop()
        for child in source.children:
            child_data = _encode_fields(child)
            target["children"].append(child_data)
            pending.append((child, child_data))
    return root


def _check_fields(path: str, node_id: Any, label: Any, color: Any, font_size: Any,
                  default_label: str) -> str:
    """Validate one node's fields and return its cleaned label."""
    if node_id is not None and (not isinstance(node_id, str) or not node_id):
        raise InvalidArgumentError(f"{path}: id must be a non-empty string")
    if label is not None and not isinstance(label, str):
        raise InvalidArgumentError(f"{path}: label must be a string")
    if color is not None and not isinstance(color, str):
        raise InvalidArgumentError(f"{path}: color must be a string")
    if font_size is not None and not is_positive_int(font_size):
        raise InvalidArgumentError(f"{path}: fontSize must be a positive integer")
    return (label or "").strip() or default_label


def tree_from_data(data: Any, default_label: str = DEFAULT_LABEL) -> Node:
    """Decode and validate a nested tree.

    Returns fresh Node objects; nothing outside the returned tree is
    touched, so a rejected payload has no side effects.
    """
    holder = Node(label="")
    seen: Set[int] = set()
    # (data, path, parent node, ancestor chain as (id, parent chain) links)
    pending: List[Tuple[Any, str, Node, Optional[tuple]]] = [(data, "root", holder, None)]
    while pending:
        item, path, parent, ancestors = pending.pop()
        if not isinstance(item, Mapping):
            raise InvalidArgumentError(f"{path}: expected an object, got {type(item).__name__}")
        if id(item) in seen:
            link = ancestors
            while link is not None:
                if link[0] == id(item):
                    raise InvalidArgumentError(f"{path}: cycle detected")
                link = link[1]
            raise InvalidArgumentError(f"{path}: node appears more than once")
        seen.add(id(item))

        node_id = item.get("id")
        color = item.get("color")
        font_size = item.get("fontSize")
        label = _check_fields(path, node_id, item.get("label", item.get("name")),
                              color, font_size, default_label)

        children = item.get("children")
        if children is None:
            children = []
        if not isinstance(children, list):
            raise InvalidArgumentError(f"{path}: children must be a list")

        node = Node(label=label, id=node_id, color=color, font_size=font_size)
        parent.children.append(node)
        chain = (id(item), ancestors)
        for index in reversed(range(len(children))):
            pending.append((children[index], f"{path}.children[{index}]", node, chain))
    return holder.children[0]


def tree_from_node(tree: Node, default_label: str = DEFAULT_LABEL) -> Node:
    """Validate a Node tree built in code and return a normalized copy."""
    check_structure(tree)
    holder = Node(label="")
    pending: List[Tuple[Node, str, Node]] = [(tree, "root", holder)]
    while pending:
        source, path, parent = pending.pop()
        label = _check_fields(path, source.id, source.label, source.color,
                              source.font_size, default_label)
        node = Node(label=label, id=source.id, color=source.color, font_size=source.font_size)
        parent.children.append(node)
        for index in reversed(range(len(source.children))):
            pending.append((source.children[index], f"{path}.children[{index}]", node))
    return holder.children[0]


def dumps(tree: Node) -> str:
    data = node_to_dict(tree)
    try:
        return json.dumps(data, indent=2)
    except RecursionError as exc:
        raise InvalidArgumentError("Tree is nested too deeply to write as JSON") from exc


def loads(text: Union[str, bytes], default_label: str = DEFAULT_LABEL) -> Node:
    """Parse JSON text into a validated tree."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidArgumentError(f"Not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise InvalidArgumentError("JSON is nested too deeply to read") from exc
    return tree_from_data(data, default_label)


def save_file(path: Union[str, Path], tree: Node) -> Path:
    """Write `tree` as JSON and return the resolved path."""
    path = Path(path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(tree), encoding="utf-8")
    logger.info("Saved mindmap to %s", path)
    return path


def load_file(path: Union[str, Path], default_label: str = DEFAULT_LABEL) -> Node:
    """Read a JSON mindmap file. OSError propagates to the caller."""
    path = Path(path).expanduser()
    tree = loads(path.read_text(encoding="utf-8"), default_label)
    logger.info("Loaded mindmap from %s", path)
    return tree


def default_filename(day: Optional[date] = None) -> str:
    """Suggested file name for saving, e.g. mindmap_2024-05-01.json."""
    day = day or date.today()
    return f"mindmap_{day.isoformat()}.json"
