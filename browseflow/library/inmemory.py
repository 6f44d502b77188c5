"""In-memory implementation of the workflow library."""

from __future__ import annotations

from typing import Dict

from .models import WorkflowDescriptor, WorkflowSummary
from .repository import WorkflowLibrary


class InMemoryWorkflowLibrary(WorkflowLibrary):
    """Store workflows in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._workflows: Dict[str, WorkflowDescriptor] = {}

    async def save_workflow(self, workflow: WorkflowDescriptor) -> None:
        self._workflows[workflow.id] = workflow.model_copy(deep=True)

    async def get_workflow(self, workflow_id: str) -> WorkflowDescriptor | None:
        workflow = self._workflows.get(workflow_id)
        return workflow.model_copy(deep=True) if workflow else None

    async def list_workflows(self) -> list[WorkflowSummary]:
        return [wf.summary() for wf in self._workflows.values()]

    async def delete_workflow(self, workflow_id: str) -> bool:
        return self._workflows.pop(workflow_id, None) is not None
