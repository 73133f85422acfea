"""Demonstration mindmap shown on first start."""

from ideamap.engine import EditEngine
from ideamap.model import Node


def sample_data() -> dict:
    """The sample map in persisted form, without ids."""
    return {
        "label": "Web Development",
        "color": "#3498db",
        "children": [
            {
                "label": "Frontend",
                "color": "#e74c3c",
                "children": [
                    {"label": "HTML", "color": "#f39c12"},
                    {"label": "CSS", "color": "#9b59b6"},
                    {"label": "JavaScript", "color": "#1abc9c"},
                ],
            },
            {
                "label": "Backend",
                "color": "#2ecc71",
                "children": [
                    {"label": "Node.js", "color": "#27ae60"},
                    {"label": "Python", "color": "#16a085"},
                    {"label": "Databases", "color": "#8e44ad"},
                ],
            },
            {
                "label": "Tools",
                "color": "#d35400",
                "children": [
                    {"label": "Git", "color": "#c0392b"},
                    {"label": "VS Code", "color": "#2980b9"},
                    {"label": "Docker", "color": "#7f8c8d"},
                ],
            },
        ],
    }


def load_sample(engine: EditEngine) -> Node:
    """Replace the engine's tree with the sample map (undoable)."""
    return engine.replace_tree(sample_data(), "Load sample map")
