"""SQLite document store for ideamap maps and settings."""

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from ideamap import codec
from ideamap.config import EngineSettings, get_db_path
from ideamap.engine import EditEngine
from ideamap.errors import NotFoundError
from ideamap.model import Node

logger = logging.getLogger(__name__)

SETTINGS_KEY = "engine_settings"


@dataclass
class StoredMap:
    """A named mindmap document."""
    id: int = 0
    name: str = "Untitled Map"
    created_at: str = ""
    modified_at: str = ""
    tree: Optional[Node] = None
    is_archived: bool = False


class MapStore:
    """Database manager for ideamap documents."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or get_db_path()
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def _init_db(self):
        """Initialize the database schema."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS maps (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                modified_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                tree JSON NOT NULL,
                is_archived BOOLEAN DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value JSON
            );
        """)
        self.conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    # ==================== Map Operations ====================

    def create_map(self, name: str = "Untitled Map", tree: Any = None) -> StoredMap:
        """Create a new map document.

        `tree` may be a Node or persisted data; without one the map starts
        from a default root. The tree is validated and given ids first.
        """
        engine = EditEngine(self.load_settings(), tree)
        now = datetime.now().isoformat()
        cursor = self.conn.cursor()
        cursor.execute(
            "INSERT INTO maps (name, created_at, modified_at, tree) VALUES (?, ?, ?, ?)",
            (name, now, now, codec.dumps(engine.tree))
        )
        self.conn.commit()
        logger.info("Created map %d (%s)", cursor.lastrowid, name)

        return StoredMap(
            id=cursor.lastrowid,
            name=name,
            created_at=now,
            modified_at=now,
            tree=engine.tree,
        )

    def get_map(self, map_id: int) -> Optional[StoredMap]:
        """Get a map by ID."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM maps WHERE id = ?", (map_id,))
        row = cursor.fetchone()

        if not row:
            return None
        return self._row_to_map(row)

    def get_all_maps(self, include_archived: bool = False) -> List[StoredMap]:
        """Get all maps, most recently modified first."""
        cursor = self.conn.cursor()

        if include_archived:
            cursor.execute("SELECT * FROM maps ORDER BY modified_at DESC, id DESC")
        else:
            cursor.execute(
                "SELECT * FROM maps WHERE is_archived = 0 ORDER BY modified_at DESC, id DESC"
            )

        return [self._row_to_map(row) for row in cursor.fetchall()]

    def save_tree(self, map_id: int, tree: Node):
        """Store `tree` as the current content of a map."""
        self._update(map_id, "tree = ?", codec.dumps(tree))

    def rename_map(self, map_id: int, name: str):
        self._update(map_id, "name = ?", name)

    def archive_map(self, map_id: int, archived: bool = True):
        self._update(map_id, "is_archived = ?", archived)

    def delete_map(self, map_id: int):
        """Delete a map."""
        self.conn.execute("DELETE FROM maps WHERE id = ?", (map_id,))
        self.conn.commit()

    def duplicate_map(self, map_id: int, new_name: str) -> Optional[StoredMap]:
        """Duplicate a map. Node ids are kept, they only need to be unique per tree."""
        original = self.get_map(map_id)
        if not original:
            return None
        return self.create_map(new_name, original.tree)

    def open_engine(self, map_id: int) -> EditEngine:
        """An engine seeded with the stored tree of `map_id`."""
        stored = self.get_map(map_id)
        if not stored:
            raise NotFoundError(f"Map {map_id} not found")
        return EditEngine(self.load_settings(), stored.tree)

    def _update(self, map_id: int, assignment: str, value: Any):
        now = datetime.now().isoformat()
        cursor = self.conn.cursor()
        cursor.execute(
            f"UPDATE maps SET {assignment}, modified_at = ? WHERE id = ?",
            (value, now, map_id)
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Map {map_id} not found")
        self.conn.commit()

    @staticmethod
    def _row_to_map(row: sqlite3.Row) -> StoredMap:
        return StoredMap(
            id=row["id"],
            name=row["name"],
            created_at=row["created_at"],
            modified_at=row["modified_at"],
            tree=codec.loads(row["tree"]),
            is_archived=bool(row["is_archived"])
        )

    # ==================== Settings Operations ====================

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get an application setting."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
        row = cursor.fetchone()

        if not row:
            return default

        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            return default

    def set_setting(self, key: str, value: Any):
        """Set an application setting."""
        self.conn.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, json.dumps(value))
        )
        self.conn.commit()

    def load_settings(self) -> EngineSettings:
        """Stored engine settings with IDEAMAP_* environment overrides applied."""
        stored = self.get_setting(SETTINGS_KEY)
        base = EngineSettings.from_json(json.dumps(stored)) if stored else EngineSettings()
        return EngineSettings.from_env(base)

    def save_settings(self, settings: EngineSettings):
        self.set_setting(SETTINGS_KEY, json.loads(settings.to_json()))
