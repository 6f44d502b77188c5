"""SQLite implementation of the workflow library."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import WorkflowDescriptor, WorkflowSummary
from .repository import WorkflowLibrary


class SQLiteWorkflowLibrary(WorkflowLibrary):
    """Persist workflow descriptors using SQLite."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS workflows (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                steps TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> int:
        cur = self._conn.cursor()
        cur.execute(query, params)
        self._conn.commit()
        return cur.rowcount

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()

    # ------------------------------------------------------------------
    # Library API
    async def save_workflow(self, workflow: WorkflowDescriptor) -> None:
        exported = workflow.export()
        await asyncio.to_thread(
            self._execute,
            """
            INSERT INTO workflows (id, name, description, steps, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                description = excluded.description,
                steps = excluded.steps,
                updated_at = excluded.updated_at
            """,
            workflow.id,
            workflow.name,
            workflow.description,
            json.dumps(exported["steps"]),
            datetime.now(timezone.utc).isoformat(),
        )

    async def get_workflow(self, workflow_id: str) -> WorkflowDescriptor | None:
        row = await asyncio.to_thread(
            self._fetchone,
            "SELECT id, name, description, steps, updated_at FROM workflows WHERE id = ?",
            workflow_id,
        )
        if not row:
            return None
        return WorkflowDescriptor(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            steps=json.loads(row["steps"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    async def list_workflows(self) -> list[WorkflowSummary]:
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT id, name, description, steps FROM workflows ORDER BY name",
        )
        return [
            WorkflowSummary(
                id=row["id"],
                name=row["name"],
                description=row["description"],
                step_count=len(json.loads(row["steps"])),
            )
            for row in rows
        ]

    async def delete_workflow(self, workflow_id: str) -> bool:
        deleted = await asyncio.to_thread(
            self._execute, "DELETE FROM workflows WHERE id = ?", workflow_id
        )
        return deleted > 0
