"""SQLite record store adapter — implements RecordStore.

One table per RecordKind, every row owned by a user_id. The sqlite3
driver is synchronous, so each call runs in asyncio.to_thread with its
own short-lived connection.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jeni.data.models import RecordKind
from jeni.ports.store_port import StoreError

logger = logging.getLogger(__name__)

# Column DDL per table; id, user_id and created_at are added to every table.
_SCHEMAS: dict[RecordKind, dict[str, str]] = {
    RecordKind.PROFILE: {
        "name": "TEXT NOT NULL DEFAULT ''",
        "email": "TEXT",
        "phone": "TEXT",
        "location": "TEXT",
        "timezone": "TEXT NOT NULL DEFAULT 'Asia/Kolkata'",
        "wake_time": "TEXT NOT NULL DEFAULT '06:00'",
        "sleep_time": "TEXT NOT NULL DEFAULT '23:00'",
        "work_start": "TEXT NOT NULL DEFAULT '09:00'",
        "work_end": "TEXT NOT NULL DEFAULT '18:00'",
    },
    RecordKind.INCOME: {
        "month": "TEXT NOT NULL",
        "year": "INTEGER NOT NULL",
        "base_salary": "REAL NOT NULL DEFAULT 0",
        "overtime": "REAL NOT NULL DEFAULT 0",
        "bonus": "REAL NOT NULL DEFAULT 0",
        "freelance": "REAL NOT NULL DEFAULT 0",
        "passive_income": "REAL NOT NULL DEFAULT 0",
        "deductions_pf": "REAL NOT NULL DEFAULT 0",
        "deductions_tax": "REAL NOT NULL DEFAULT 0",
        "deductions_other": "REAL NOT NULL DEFAULT 0",
        "notes": "TEXT",
    },
    RecordKind.EMI: {
        "name": "TEXT NOT NULL",
        "lender": "TEXT",
        "emi_amount": "REAL NOT NULL",
        "due_day": "INTEGER NOT NULL DEFAULT 1",
        "remaining_months": "INTEGER",
        "total_months": "INTEGER",
        "auto_debit": "INTEGER NOT NULL DEFAULT 0",
        "status": "TEXT NOT NULL DEFAULT 'active'",
    },
    RecordKind.SUBSCRIPTION: {
        "name": "TEXT NOT NULL",
        "amount": "REAL NOT NULL",
        "billing_cycle": "TEXT NOT NULL DEFAULT 'monthly'",
        "category": "TEXT NOT NULL DEFAULT 'other'",
        "is_essential": "INTEGER NOT NULL DEFAULT 0",
        "auto_renew": "INTEGER NOT NULL DEFAULT 1",
        "status": "TEXT NOT NULL DEFAULT 'active'",
    },
    RecordKind.EXPENSE: {
        "amount": "REAL NOT NULL",
        "category": "TEXT NOT NULL DEFAULT 'other'",
        "description": "TEXT",
        "payment_method": "TEXT",
        "date": "TEXT NOT NULL",
    },
    RecordKind.PROJECT: {
        "name": "TEXT NOT NULL",
        "status": "TEXT NOT NULL DEFAULT 'active'",
        "progress": "INTEGER NOT NULL DEFAULT 0",
        "priority": "TEXT NOT NULL DEFAULT 'medium'",
        "tech_stack": "TEXT",
        "target_launch": "TEXT",
    },
    RecordKind.TASK: {
        "title": "TEXT NOT NULL",
        "due_date": "TEXT",
        "priority": "TEXT NOT NULL DEFAULT 'medium'",
        "is_done": "INTEGER NOT NULL DEFAULT 0",
        "project_id": "TEXT",
    },
    RecordKind.GOAL: {
        "title": "TEXT NOT NULL",
        "category": "TEXT NOT NULL DEFAULT 'personal'",
        "status": "TEXT NOT NULL DEFAULT 'in_progress'",
        "current_value": "REAL NOT NULL DEFAULT 0",
        "target_value": "REAL",
        "deadline": "TEXT",
    },
    RecordKind.HEALTH: {
        "date": "TEXT NOT NULL",
        "sleep_hours": "REAL",
        "steps": "INTEGER NOT NULL DEFAULT 0",
        "water_glasses": "INTEGER NOT NULL DEFAULT 0",
        "exercise_minutes": "INTEGER NOT NULL DEFAULT 0",
        "mood": "INTEGER",
    },
    RecordKind.SCHEDULE: {
        "date": "TEXT NOT NULL",
        "time": "TEXT NOT NULL",
        "event": "TEXT NOT NULL",
        "type": "TEXT NOT NULL DEFAULT 'personal'",
        "status": "TEXT NOT NULL DEFAULT 'pending'",
    },
    RecordKind.CHAT: {
        "session_id": "TEXT NOT NULL",
        "role": "TEXT NOT NULL",
        "message": "TEXT NOT NULL",
        "model_used": "TEXT",
    },
}

_SYSTEM_COLUMNS = ("id", "user_id", "created_at")


class SQLiteStore:
    """SQLite implementation of RecordStore."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create every table if it doesn't exist."""
        with self._connect() as conn:
            for kind, columns in _SCHEMAS.items():
                ddl = ",\n".join(f"{name} {spec}" for name, spec in columns.items())
                conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {kind.value} (
                        id         TEXT PRIMARY KEY,
                        user_id    TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        {ddl}
                    )
                """)
        logger.debug("Record tables initialized at %s", self._db_path)

    @staticmethod
    def _check_columns(kind: RecordKind, names) -> None:
        allowed = _SCHEMAS[kind].keys() | set(_SYSTEM_COLUMNS)
        unknown = [n for n in names if n not in allowed]
        if unknown:
            raise StoreError(
                f"Unknown column(s) for {kind.value}: {', '.join(sorted(unknown))}"
            )

    # ------------------------------------------------------------------
    # Synchronous bodies (run in a worker thread)
    # ------------------------------------------------------------------

    def _create_sync(
        self, kind: RecordKind, owner: str, values: dict[str, Any]
    ) -> dict[str, Any]:
        self._check_columns(kind, values)
        row = {
            **values,
            "id": str(uuid.uuid4()),
            "user_id": owner,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        names = list(row)
        placeholders = ", ".join("?" for _ in names)
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO {kind.value} ({', '.join(names)}) VALUES ({placeholders})",
                [row[n] for n in names],
            )
            stored = conn.execute(
                f"SELECT * FROM {kind.value} WHERE id = ?", (row["id"],)
            ).fetchone()
        logger.info("Row created in %s for user %s", kind.value, owner)
        return dict(stored)

    def _update_sync(
        self,
        kind: RecordKind,
        owner: str,
        where: dict[str, Any],
        values: dict[str, Any],
    ) -> int:
        self._check_columns(kind, values)
        self._check_columns(kind, where)
        if not values:
            return 0
        assignments = ", ".join(f"{n} = ?" for n in values)
        conditions = ["user_id = ?"] + [f"{n} = ?" for n in where]
        params = list(values.values()) + [owner] + list(where.values())
        with self._connect() as conn:
            cursor = conn.execute(
                f"UPDATE {kind.value} SET {assignments} WHERE {' AND '.join(conditions)}",
                params,
            )
        logger.info(
            "Updated %d row(s) in %s for user %s", cursor.rowcount, kind.value, owner,
        )
        return cursor.rowcount

    def _query_sync(
        self,
        kind: RecordKind,
        owner: str,
        where: dict[str, Any] | None,
        since: dict[str, Any] | None,
        order_by: str | None,
        descending: bool,
        limit: int | None,
    ) -> list[dict[str, Any]]:
        where = where or {}
        since = since or {}
        self._check_columns(kind, where)
        self._check_columns(kind, since)
        if order_by is not None:
            self._check_columns(kind, [order_by])

        conditions = ["user_id = ?"]
        params: list = [owner]
        for name, value in where.items():
            conditions.append(f"{name} = ?")
            params.append(value)
        for name, value in since.items():
            conditions.append(f"{name} >= ?")
            params.append(value)

        direction = "DESC" if descending else "ASC"
        # NULLs sort last; rowid breaks ties so equal keys keep insertion order
        if order_by:
            order = f"{order_by} IS NULL, {order_by} {direction}, rowid {direction}"
        else:
            order = f"rowid {direction}"
        query = f"SELECT * FROM {kind.value} WHERE {' AND '.join(conditions)} ORDER BY {order}"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [dict(r) for r in rows]

    # ------------------------------------------------------------------
    # RecordStore
    # ------------------------------------------------------------------

    async def create(
        self, kind: RecordKind, owner: str, values: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            return await asyncio.to_thread(self._create_sync, kind, owner, values)
        except StoreError:
            raise
        except sqlite3.Error as exc:
            logger.error("SQLite error (create %s): %s", kind.value, exc)
            raise StoreError(str(exc)) from exc

    async def update(
        self,
        kind: RecordKind,
        owner: str,
        where: dict[str, Any],
        values: dict[str, Any],
    ) -> int:
        try:
            return await asyncio.to_thread(self._update_sync, kind, owner, where, values)
        except StoreError:
            raise
        except sqlite3.Error as exc:
            logger.error("SQLite error (update %s): %s", kind.value, exc)
            raise StoreError(str(exc)) from exc

    async def query(
        self,
        kind: RecordKind,
        owner: str,
        where: dict[str, Any] | None = None,
        since: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        try:
            return await asyncio.to_thread(
                self._query_sync, kind, owner, where, since, order_by, descending, limit,
            )
        except StoreError:
            raise
        except sqlite3.Error as exc:
            logger.error("SQLite error (query %s): %s", kind.value, exc)
            raise StoreError(str(exc)) from exc
