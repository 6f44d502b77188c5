"""Exceptions raised while executing workflow steps."""

from __future__ import annotations

from typing import Optional


class WorkflowError(Exception):
    """Base class for failures that abort a workflow run."""


class StepConfigurationError(WorkflowError):
    """A step is missing a required setting or carries an invalid one."""


class NoExecutorError(WorkflowError):
    """No handler is registered for a step kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"No executor found for step kind: {kind}")
        self.kind = kind


class CapabilityError(WorkflowError):
    """A host capability failed or is unavailable."""


class PermissionDeniedError(CapabilityError):
    """The host refused access to a page origin."""

    def __init__(self, origin: str) -> None:
        super().__init__(f"Permission denied for {origin}")
        self.origin = origin


class UnsupportedCapabilityError(CapabilityError):
    """The host does not provide the requested capability."""

    def __init__(self, capability: str, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"{capability} is not supported in this host. "
            "Use a host that provides it instead."
        )
        self.capability = capability


class WebhookError(CapabilityError):
    """A webhook call answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"HTTP error {status_code}: {reason}")
        self.status_code = status_code
        self.reason = reason


__all__ = [
    "WorkflowError",
    "StepConfigurationError",
    "NoExecutorError",
    "CapabilityError",
    "PermissionDeniedError",
    "UnsupportedCapabilityError",
    "WebhookError",
]
