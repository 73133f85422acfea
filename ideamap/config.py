"""Engine configuration for ideamap."""

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Optional

ENV_HISTORY_CAPACITY = "IDEAMAP_HISTORY_CAPACITY"
ENV_ID_PREFIX = "IDEAMAP_ID_PREFIX"
ENV_DATA_DIR = "IDEAMAP_DATA_DIR"


def get_data_dir() -> Path:
    """Get the application data directory."""
    override = os.environ.get(ENV_DATA_DIR)
    data_dir = Path(override) if override else Path.home() / ".local" / "share" / "ideamap"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """Get the database file path."""
    return get_data_dir() / "ideamap.db"


@dataclass(frozen=True)
class EngineSettings:
    """Settings shared by every engine instance."""
    history_capacity: int = 50
    default_root_label: str = "Central Idea"
    default_child_label: str = "New Child"
    default_sibling_label: str = "New Sibling"
    id_prefix: str = "node_"

    def __post_init__(self):
        capacity = self.history_capacity
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"history_capacity must be a positive integer, got {self.history_capacity!r}")

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data: Optional[str]) -> "EngineSettings":
        if not data:
            return cls()
        try:
            d = json.loads(data)
            # Filter to only known fields to handle schema evolution
            known = {f.name for f in fields(cls)}
            return cls(**{k: v for k, v in d.items() if k in known})
        except (json.JSONDecodeError, TypeError, ValueError, AttributeError):
            return cls()

    @classmethod
    def from_env(cls, base: Optional["EngineSettings"] = None) -> "EngineSettings":
        """Apply IDEAMAP_* environment overrides on top of `base`."""
        settings = base or cls()
        capacity = os.environ.get(ENV_HISTORY_CAPACITY)
        if capacity:
            try:
                settings = replace(settings, history_capacity=int(capacity))
            except ValueError as exc:
                raise ValueError(f"{ENV_HISTORY_CAPACITY}={capacity!r} is not a positive integer") from exc
        prefix = os.environ.get(ENV_ID_PREFIX)
        if prefix:
            settings = replace(settings, id_prefix=prefix)
        return settings
