"""Runtime context handed to every executor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from ..budget import TokenBudget
from ..config import GenerationConfig
from ..contracts import BaseStep
from ..host.base import BaseHost, ProgressCallback

StepNotifier = Callable[[BaseStep, Any], Awaitable[None]]


async def _ignore(step: BaseStep, value: Any) -> None:
    return None


@dataclass
class ExecutionContext:
    """Host capabilities plus the runner callbacks an executor may use.

    Executors never touch step records directly: ``stream`` publishes a live
    value and ``log`` appends a log line, both through the runner.
    """

    host: BaseHost
    budget: TokenBudget = field(default_factory=TokenBudget)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    stream: StepNotifier = _ignore
    log: StepNotifier = _ignore
    on_model_progress: Optional[ProgressCallback] = None
