"""Data models for stored workflows."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..contracts import BaseStep, Step, dump_steps


class WorkflowSummary(BaseModel):
    """Listing entry for a stored workflow."""

    id: str
    name: str
    description: str = ""
    step_count: int = 0


class WorkflowDescriptor(BaseModel):
    """A named, exportable pipeline."""

    id: str
    name: str
    description: str = ""
    steps: List[Step] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def summary(self) -> WorkflowSummary:
        return WorkflowSummary(
            id=self.id,
            name=self.name,
            description=self.description,
            step_count=len(self.steps),
        )

    def export(self) -> Dict[str, Any]:
        """Return the descriptor in its persisted form."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "steps": dump_steps(self.steps),
        }

    def fresh_steps(self) -> List[BaseStep]:
        """Return copies of the steps, safe to hand to a runner."""
        return [step.model_copy(deep=True) for step in self.steps]


def step_by_id(steps: List[BaseStep], step_id: str) -> Optional[BaseStep]:
    return next((step for step in steps if step.id == step_id), None)
