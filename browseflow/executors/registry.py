"""Executor registry mapping step kinds to handlers."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from ..contracts import BaseStep, StepResult
from ..errors import NoExecutorError
from .context import ExecutionContext

Executor = Callable[[BaseStep, Any, ExecutionContext], Awaitable[StepResult]]


class ExecutorRegistry:
    """Registry that maps step kinds to executors."""

    def __init__(self, handlers: Optional[Dict[str, Executor]] = None) -> None:
        self._handlers: Dict[str, Executor] = {}
        if handlers:
            for kind, executor in handlers.items():
                self.register(kind, executor)

    def register(self, kind: str, executor: Executor) -> None:
        if not callable(executor):
            raise TypeError(f"Executor for '{kind}' must be callable.")
        self._handlers[kind] = executor

    def resolve(self, kind: str) -> Executor:
        """Return the executor for ``kind``.

        Raises:
            NoExecutorError: If nothing is registered for ``kind``.
        """
        executor = self._handlers.get(kind)
        if executor is None:
            raise NoExecutorError(kind)
        return executor

    def supported_kinds(self) -> Tuple[str, ...]:
        return tuple(self._handlers)

    def __contains__(self, kind: object) -> bool:
        return kind in self._handlers
