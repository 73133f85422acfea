"""Renderer-facing intent handling.

A renderer reports discrete user intents ("node clicked", "add child
requested") and redraws from the returned EditResult. Engine errors are
turned into failure results here and never reach the renderer as
exceptions.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ideamap.engine import EditEngine
from ideamap.errors import IdeamapError, InvalidArgumentError
from ideamap.model import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditResult:
    """Outcome of one intent, ready for display."""
    ok: bool
    message: str
    changed: bool = False
    tree: Optional[Node] = None
    selected_id: Optional[str] = None


class IntentDispatcher:
    """Maps renderer intents onto EditEngine operations."""

    def __init__(self, engine: EditEngine):
        self.engine = engine
        self._actions: Dict[str, Callable[..., EditResult]] = {
            name: getattr(self, method)
            for name, method in (
                ("selectNode", "select_node"),
                ("requestAddChild", "request_add_child"),
                ("requestAddSibling", "request_add_sibling"),
                ("requestDelete", "request_delete"),
                ("requestRename", "request_rename"),
                ("requestRecolor", "request_recolor"),
                ("requestSetFontSize", "request_set_font_size"),
                ("requestUndo", "request_undo"),
                ("requestRedo", "request_redo"),
                ("requestNew", "request_new"),
                ("requestLoad", "request_load"),
            )
        }

    @property
    def intents(self) -> list:
        return sorted(self._actions)

    def dispatch(self, intent: str, *args: Any, **kwargs: Any) -> EditResult:
        """Route an intent by name, e.g. dispatch("requestAddChild", "node_0", "Idea")."""
        action = self._actions.get(intent)
        if action is None:
            return self._fail(InvalidArgumentError(f"Unknown intent '{intent}'"))
        try:
            inspect.signature(action).bind(*args, **kwargs)
        except TypeError as exc:
            return self._fail(InvalidArgumentError(f"Bad arguments for '{intent}': {exc}"))
        return action(*args, **kwargs)

    # ==================== Intents ====================

    def select_node(self, node_id: str) -> EditResult:
        try:
            node = self.engine.select_node(node_id)
        except IdeamapError as exc:
            return self._fail(exc)
        return self._ok(f'Selected: "{node.label}"', changed=False)

    def request_add_child(self, parent_id: str, label: Optional[str] = None,
                          color: Optional[str] = None, font_size: Optional[int] = None) -> EditResult:
        return self._edit(self.engine.add_child, (parent_id, label, color, font_size), "Child node added")

    def request_add_sibling(self, node_id: str, label: Optional[str] = None,
                            color: Optional[str] = None, font_size: Optional[int] = None) -> EditResult:
        return self._edit(self.engine.add_sibling, (node_id, label, color, font_size), "Sibling node added")

    def request_delete(self, node_id: str) -> EditResult:
        return self._edit(self.engine.delete_node, (node_id,), "Node deleted")

    def request_rename(self, node_id: str, text: str) -> EditResult:
        return self._edit(self.engine.rename_node, (node_id, text), "Node text updated")

    def request_recolor(self, node_id: str, color: Optional[str]) -> EditResult:
        return self._edit(self.engine.recolor_node, (node_id, color), "Node color updated")

    def request_set_font_size(self, node_id: str, size: int) -> EditResult:
        return self._edit(self.engine.set_font_size, (node_id, size), f"Font size set to {size}px")

    def request_undo(self) -> EditResult:
        if self.engine.undo() is None:
            return self._ok("Nothing to undo", changed=False)
        return self._ok("Undo performed")

    def request_redo(self) -> EditResult:
        if self.engine.redo() is None:
            return self._ok("Nothing to redo", changed=False)
        return self._ok("Redo performed")

    def request_new(self, label: Optional[str] = None) -> EditResult:
        return self._edit(self.engine.new_map, (label,), "New mindmap created")

    def request_load(self, data: Any) -> EditResult:
        try:
            self.engine.load(data)
        except IdeamapError as exc:
            return self._fail(exc, prefix="Error loading file")
        return self._ok("Mindmap loaded successfully")

    # ==================== Results ====================

    def _edit(self, operation: Callable[..., Node], args: tuple, message: str) -> EditResult:
        """Run a checkpointing edit; edits that record nothing report no change."""
        before = self.engine.history.revision
        try:
            operation(*args)
        except IdeamapError as exc:
            return self._fail(exc)
        if before == self.engine.history.revision:
            return self._ok("Nothing changed", changed=False)
        return self._ok(message)

    def _ok(self, message: str, changed: bool = True) -> EditResult:
        return EditResult(
            ok=True,
            message=message,
            changed=changed,
            tree=self.engine.tree,
            selected_id=self.engine.selected_id,
        )

    def _fail(self, exc: IdeamapError, prefix: str = "") -> EditResult:
        message = f"{prefix}: {exc}" if prefix else str(exc)
        logger.info("Rejected intent (%s): %s", exc.kind, message)
        return EditResult(
            ok=False,
            message=message,
            tree=self.engine.tree,
            selected_id=self.engine.selected_id,
        )
