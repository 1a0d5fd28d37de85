"""
Session persistence

Named snapshots of roast parameters and logged readings. SQLite is the
primary store; a plain JSON file takes over whenever the database cannot be
opened or written. Nothing here is used by the synthesizer.
"""

import json
import os
import sqlite3
import uuid
import warnings
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .params import DEFAULT_PARAMETERS, RoastParameters


DEFAULT_STORE_DIR = Path(os.environ.get("ROASTPRED_HOME", Path.home() / ".roastpred"))
DB_NAME = "sessions.db"
JSON_NAME = "sessions.json"


class SessionStoreError(Exception):
    """Raised when neither the primary nor the fallback store is usable."""


@dataclass
class RoastSession:
    name: str = ""
    params: RoastParameters = DEFAULT_PARAMETERS
    actuals: List[Tuple[float, float]] = field(default_factory=list)
    interval_seconds: int = 30
    ror_unit: str = "min"
    id: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "params": self.params.to_dict(),
            "actuals": [[t, temp] for t, temp in self.actuals],
            "interval_seconds": self.interval_seconds,
            "ror_unit": self.ror_unit,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoastSession":
        return cls(
            name=data.get("name", ""),
            params=RoastParameters.from_dict(data.get("params", {})),
            actuals=[(float(t), float(temp)) for t, temp in data.get("actuals", [])],
            interval_seconds=int(data.get("interval_seconds", 30)),
            ror_unit=data.get("ror_unit", "min"),
            id=data.get("id"),
            updated_at=data.get("updated_at"),
        )


class SessionStore:
    """
    Save, list and delete RoastSession records under one directory.

    Args:
        directory: Folder holding sessions.db and sessions.json
    """

    def __init__(self, directory: Union[str, Path] = DEFAULT_STORE_DIR):
        self.directory = Path(directory)
        self.db_path = self.directory / DB_NAME
        self.json_path = self.directory / JSON_NAME

    # -------------------------------------------------------------------------
    # SQLite (primary)
    # -------------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        self.directory.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute('''
            CREATE TABLE IF NOT EXISTS sessions (
                id TEXT PRIMARY KEY,
                name TEXT,
                updated_at TEXT,
                payload TEXT
            )
        ''')
        return conn

    def _db_put(self, record: Dict[str, Any]) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO sessions (id, name, updated_at, payload) VALUES (?, ?, ?, ?)",
                    (record["id"], record["name"], record["updated_at"], json.dumps(record)),
                )
        finally:
            conn.close()

    def _db_all(self) -> List[Dict[str, Any]]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT payload FROM sessions").fetchall()
            return [json.loads(row["payload"]) for row in rows]
        finally:
            conn.close()

    def _db_delete(self, session_id: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # JSON file (fallback)
    # -------------------------------------------------------------------------

    def _json_all(self) -> List[Dict[str, Any]]:
        if not self.json_path.exists():
            return []
        try:
            with open(self.json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            return []
        return data if isinstance(data, list) else []

    def _json_write(self, records: List[Dict[str, Any]]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = self.json_path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.json_path)

    def _json_put(self, record: Dict[str, Any]) -> None:
        records = [r for r in self._json_all() if r.get("id") != record["id"]]
        records.append(record)
        self._json_write(records)

    # -------------------------------------------------------------------------
    # Public interface
    # -------------------------------------------------------------------------

    def save(self, session: RoastSession) -> str:
        """
        Upsert a session, assigning an id if it has none.

        Returns:
            The session id

        Raises:
            SessionStoreError: If both stores fail
        """
        stamped = replace(
            session,
            id=session.id or uuid.uuid4().hex,
            updated_at=datetime.now(timezone.utc).isoformat(),
        )
        record = stamped.to_dict()

        try:
            self._db_put(record)
            return stamped.id
        except (sqlite3.Error, OSError) as e:
            warnings.warn(f"Session database unavailable ({e}); writing {self.json_path.name}")

        try:
            self._json_put(record)
        except (OSError, TypeError, ValueError) as e:
            raise SessionStoreError(f"Could not save session {stamped.name!r}: {e}") from e
        return stamped.id

    def list(self) -> List[RoastSession]:
        """
        All sessions, most recently updated first.

        Records from both stores are merged by id, keeping the newer copy.

        Raises:
            SessionStoreError: If neither store can be read
        """
        merged: Dict[str, Dict[str, Any]] = {}
        errors = []

        for reader in (self._db_all, self._json_all):
            try:
                records = reader()
            except (sqlite3.Error, OSError) as e:
                errors.append(e)
                continue
            for record in records:
                current = merged.get(record.get("id"))
                if current is None or (record.get("updated_at") or "") > (current.get("updated_at") or ""):
                    merged[record.get("id")] = record

        if len(errors) == 2:
            raise SessionStoreError(f"Could not read sessions: {errors[-1]}") from errors[-1]

        ordered = sorted(merged.values(), key=lambda r: r.get("updated_at") or "", reverse=True)
        return [RoastSession.from_dict(r) for r in ordered]

    def load(self, session_id: str) -> Optional[RoastSession]:
        return next((s for s in self.list() if s.id == session_id), None)

    def delete(self, session_id: str) -> None:
        """
        Remove a session from both stores. Unknown ids are ignored.

        Raises:
            SessionStoreError: If neither store can be updated
        """
        errors = []
        try:
            self._db_delete(session_id)
        except (sqlite3.Error, OSError) as e:
            errors.append(e)

        try:
            records = self._json_all()
            if any(r.get("id") == session_id for r in records):
                self._json_write([r for r in records if r.get("id") != session_id])
        except OSError as e:
            errors.append(e)

        if len(errors) == 2:
            raise SessionStoreError(f"Could not delete session {session_id}: {errors[-1]}") from errors[-1]
