"""SQLite key-value storage for MindCanvas."""

import sqlite3
import json
import logging
import os
from pathlib import Path
from datetime import datetime
from typing import Optional, List, Any

from mindcanvas.store import Node, NodeStore

logger = logging.getLogger(__name__)

NODES_SLOT = "nodes"


def get_data_dir() -> Path:
    """Get the application data directory."""
    override = os.environ.get("MINDCANVAS_DATA_DIR")
    if override:
        data_dir = Path(override)
    else:
        data_dir = Path.home() / ".local" / "share" / "mindcanvas"
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "exports").mkdir(exist_ok=True)
    (data_dir / "backups").mkdir(exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """Get the database file path."""
    return get_data_dir() / "mindcanvas.db"


class Database:
    """Durable key-value slots backed by SQLite."""

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
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value JSON
            )
        """)
        self.conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    # ==================== Raw slots ====================

    def get_raw(self, key: str) -> Optional[str]:
        """Return the stored text for a slot without decoding it."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row["value"] if row else None

    def set_raw(self, key: str, value: str):
        self.conn.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, value)
        )
        self.conn.commit()

    # ==================== Settings Operations ====================

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get an application setting."""
        raw = self.get_raw(key)
        if raw is None:
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return default

    def set_setting(self, key: str, value: Any):
        """Set an application setting."""
        self.set_raw(key, json.dumps(value))

    def delete_setting(self, key: str):
        self.conn.execute("DELETE FROM settings WHERE key = ?", (key,))
        self.conn.commit()


class NodeRepository:
    """Reads and overwrites the persisted node sequence.

    The whole sequence lives in one slot and is always written wholesale.
    """

    def __init__(self, db: Database, slot: str = NODES_SLOT):
        self.db = db
        self.slot = slot

    def load(self) -> List[Node]:
        """Load persisted nodes. Missing or unreadable data yields []."""
        raw = self.db.get_raw(self.slot)
        if raw is None:
            return []

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Stored nodes are not valid JSON, starting empty: %s", exc)
            return []

        if not isinstance(records, list):
            logger.warning("Stored nodes are not a list, starting empty")
            return []

        nodes = []
        seen = set()
        for record in records:
            try:
                node = Node.from_record(record)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed node record %r: %s", record, exc)
                continue
            if node.id in seen:
                logger.warning("Skipping duplicate node id %s", node.id)
                continue
            seen.add(node.id)
            nodes.append(node)
        return nodes

    def load_store(self) -> NodeStore:
        """Build a fresh store from persisted data. Selection is never restored."""
        return NodeStore(self.load())

    def save(self, nodes):
        """Overwrite the slot with the full node sequence."""
        records = [node.to_record() for node in nodes]
        self.db.set_raw(self.slot, json.dumps(records))
        logger.debug("Saved %d nodes", len(records))

    # ==================== Backup Operations ====================

    def create_backup(self, backup_count: int = 10) -> Optional[Path]:
        """Copy the current slot to a timestamped backup file."""
        raw = self.db.get_raw(self.slot)
        if raw is None:
            return None

        backup_dir = Path(self.db.db_path).parent / "backups"
        backup_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_file = backup_dir / f"{self.slot}_{timestamp}.json"
        suffix = 1
        while backup_file.exists():
            backup_file = backup_dir / f"{self.slot}_{timestamp}_{suffix}.json"
            suffix += 1
        backup_file.write_text(raw, encoding="utf-8")

        # Clean old backups (keep last N)
        backups = sorted(backup_dir.glob(f"{self.slot}_*.json"), reverse=True)
        for old_backup in backups[backup_count:]:
            old_backup.unlink()

        return backup_file
