"""ideamap: mindmap tree editing engine with undo/redo."""

from ideamap.config import EngineSettings
from ideamap.engine import EditEngine
from ideamap.errors import IdeamapError, InvalidArgumentError, InvalidOperationError, NotFoundError
from ideamap.intents import EditResult, IntentDispatcher
from ideamap.model import Node, NodeStore
from ideamap.selection import SelectionState
from ideamap.undo import HistoryEntry, HistoryLog

__version__ = "1.0.0"

__all__ = [
    "EditEngine",
    "EditResult",
    "EngineSettings",
    "HistoryEntry",
    "HistoryLog",
    "IdeamapError",
    "IntentDispatcher",
    "InvalidArgumentError",
    "InvalidOperationError",
    "Node",
    "NodeStore",
    "NotFoundError",
    "SelectionState",
]
