"""Library abstraction for stored workflow descriptors."""

from __future__ import annotations

from typing import Protocol

from .models import WorkflowDescriptor, WorkflowSummary


class WorkflowLibrary(Protocol):
    """Protocol for workflow descriptor storage backends."""

    async def save_workflow(self, workflow: WorkflowDescriptor) -> None:
        """Insert or replace a workflow."""

    async def get_workflow(self, workflow_id: str) -> WorkflowDescriptor | None:
        """Retrieve a workflow by id."""

    async def list_workflows(self) -> list[WorkflowSummary]:
        """Return summaries of all stored workflows."""

    async def delete_workflow(self, workflow_id: str) -> bool:
        """Remove a workflow; return ``False`` when it did not exist."""
