from __future__ import annotations
from typing import Optional
import sqlite3, os
from koder_core.constants import DEFAULT_DB_PATH
from koder_core.logger import get_logger
from koder_core.storage.provider import StorageProvider

log = get_logger("koder.Storage.SQLite")


class SQLiteStorage(StorageProvider):
    def __init__(self, path=DEFAULT_DB_PATH):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(str(path)) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.path = str(path)
        self.db = sqlite3.connect(self.path, check_same_thread=False)

        self._init()

    def _init(self) -> None:
        self.db.execute("""CREATE TABLE IF NOT EXISTS kv_store(
            field TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )""")
        self.db.commit()
        log.debug(f"[SQLITE] opened {self.path}")

    def get(self, field: str) -> Optional[str]:
        cur = self.db.execute("SELECT value FROM kv_store WHERE field=?", (field,))
        row = cur.fetchone()
        if not row: return None
        return row[0]

    def set(self, field: str, value: str) -> None:
        self.db.execute(
            "INSERT INTO kv_store(field,value) VALUES(?,?) "
            "ON CONFLICT(field) DO UPDATE SET value=excluded.value",
            (field, value)
        )
        self.db.commit()

    def flush(self):
        self.db.commit()

    def close(self):
        self.db.close()
