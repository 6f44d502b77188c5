"""Workflow execution engine for browseflow."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
)

from .budget import TokenBudget
from .config import BrowseflowConfig, GenerationConfig, load_config
from .constants import INPUT_KEY, OUTPUT_KEY
from .contracts import BaseStep, StepStatus, WorkflowResult, parse_steps
from .executors import ExecutionContext, ExecutorRegistry, create_default_registry
from .host import BaseHost, get_host
from .host.base import ProgressCallback
from .propagation import GENERATION_AGENT, propagate_schemas

logger = logging.getLogger(__name__)

Observer = Callable[[List[BaseStep]], Union[None, Awaitable[None]]]
ProgressReporter = Callable[[str], Union[None, Awaitable[None]]]

TEXT_OUTPUT = "text-output"

_TRANSITIONS: Dict[str, set] = {
    "pending": {"running"},
    "running": {"completed", "error"},
    "completed": set(),
    "error": set(),
}


async def _call(callback: Optional[Callable[..., Any]], *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


def missing_inputs(steps: Sequence[BaseStep]) -> List[BaseStep]:
    """Return the input steps that have no value to feed the run."""
    return [step for step in steps if step.is_input and not step.materialized_value]


class WorkflowRunner:
    """Runs a step list sequentially and reports every state change.

    The runner is the only writer of step records and of the data bag.
    Executors receive the upstream value and return a result; streaming
    updates and extra log lines reach the steps through callbacks on the
    :class:`ExecutionContext`.
    """

    def __init__(
        self,
        host: BaseHost,
        registry: Optional[ExecutorRegistry] = None,
        observer: Optional[Observer] = None,
        on_progress: Optional[ProgressReporter] = None,
        on_model_progress: Optional[ProgressCallback] = None,
        budget: Optional[TokenBudget] = None,
        generation: Optional[GenerationConfig] = None,
        propagate: bool = True,
    ) -> None:
        self._host = host
        self._registry = registry or create_default_registry()
        self._observer = observer
        self._on_progress = on_progress
        self._on_model_progress = on_model_progress
        self._budget = budget or TokenBudget()
        self._generation = generation or GenerationConfig()
        self._propagate = propagate
        self._steps: List[BaseStep] = []
        self._executable: List[BaseStep] = []

    async def run(self, steps: Sequence[BaseStep]) -> WorkflowResult:
        """Execute ``steps`` and return the data bag and final output.

        Output-format steps are folded into later generation steps first,
        unless propagation is disabled, in which case they run inline as
        validators. The first failing step ends the run.
        """
        self._steps = list(steps)
        self._executable = (
            propagate_schemas(self._steps) if self._propagate else list(self._steps)
        )
        try:
            await self._reset()
        except Exception as e:
            logger.error(f"Workflow reset failed: {e}")
            return WorkflowResult(success=False, error=str(e))

        data: Dict[str, Any] = {INPUT_KEY: None, OUTPUT_KEY: None}
        first = self._executable[0] if self._executable else None
        if first is not None and first.is_input:
            data[INPUT_KEY] = first.materialized_value
            for key in first.config.publish_keys():
                data[key] = first.materialized_value

        context = ExecutionContext(
            host=self._host,
            budget=self._budget,
            generation=self._generation,
            stream=self._stream_update,
            log=self._append_log,
            on_model_progress=self._on_model_progress,
        )

        logger.info(f"Starting workflow with {len(self._executable)} executable steps")
        for index, step in enumerate(self._executable):
            upstream = step.materialized_value if index == 0 else data[OUTPUT_KEY]

            try:
                await self._transition(
                    step, "running", f"Starting {step.display_name}..."
                )
                await _call(self._on_progress, f"Executing {step.display_name}...")
                executor = self._registry.resolve(step.kind)
                result = await executor(step, upstream, context)

                data[OUTPUT_KEY] = result.output
                for key in step.config.publish_keys():
                    data[key] = result.output
                logger.debug(f"Updated workflow data keys: {sorted(data)}")

                step.live_value = result.output
                step.branch = result.branch
                if not result.success:
                    step.flagged = True
                    logger.warning(f"Step {step.id} reported a failure: {result.log}")
                await self._transition(step, "completed", result.log)
            except Exception as e:
                return await self._fail(step, e)
            logger.info(f"Step {step.id} ({step.kind}) completed")

        logger.info("Workflow completed")
        return WorkflowResult(success=True, data=data, final_output=data[OUTPUT_KEY])

    async def _fail(self, step: BaseStep, error: Exception) -> WorkflowResult:
        """Record ``error`` on ``step`` and build the failed result.

        An observer error while reporting the failure is logged, not raised.
        """
        logger.error(f"Step {step.id} ({step.kind}) failed: {error}")
        if step.status == "running":
            step.status = "error"
            step.logs.append(f"Error: {error}")
            try:
                await self._notify()
            except Exception as e:
                logger.error(f"Observer failed while reporting step {step.id}: {e}")
        return WorkflowResult(success=False, error=str(error), failed_step_id=step.id)

    async def _reset(self) -> None:
        for step in self._steps:
            step.status = "pending"
            step.logs = []
            step.live_value = None
            step.branch = None
            step.flagged = False
        await self._notify()

    async def _transition(self, step: BaseStep, status: StepStatus, log: str) -> None:
        if status not in _TRANSITIONS[step.status]:
            raise RuntimeError(
                f"Step {step.id} cannot move from {step.status} to {status}"
            )
        step.status = status
        if log:
            step.logs.append(log)
        await self._notify()

    async def _append_log(self, step: BaseStep, message: Any) -> None:
        step.logs.append(str(message))
        await self._notify()

    async def _stream_update(self, step: BaseStep, value: Any) -> None:
        """Publish a partial value on ``step`` and a directly following text output."""
        step.live_value = value
        index = next(i for i, s in enumerate(self._executable) if s is step)
        if index + 1 < len(self._executable):
            follower = self._executable[index + 1]
            if follower.kind == TEXT_OUTPUT and step.kind == GENERATION_AGENT:
                if follower.live_value is None:
                    follower.logs.append("Receiving streaming content...")
                follower.live_value = value
        await self._notify()
        # Hand control back to the host between chunks.
        await asyncio.sleep(0)

    async def _notify(self) -> None:
        if self._observer is None:
            return
        snapshot = [step.model_copy(deep=True) for step in self._steps]
        await _call(self._observer, snapshot)


def _coerce_steps(steps: Sequence[Union[BaseStep, Mapping[str, Any]]]) -> List[BaseStep]:
    if all(isinstance(step, BaseStep) for step in steps):
        return list(steps)
    return [
        step if isinstance(step, BaseStep) else parse_steps([step])[0] for step in steps
    ]


async def execute_workflow(
    steps: Sequence[Union[BaseStep, Mapping[str, Any]]],
    observer: Optional[Observer] = None,
    on_progress: Optional[ProgressReporter] = None,
    *,
    host: Optional[BaseHost] = None,
    registry: Optional[ExecutorRegistry] = None,
    config: Optional[BrowseflowConfig] = None,
    on_model_progress: Optional[ProgressCallback] = None,
    propagate: bool = True,
) -> WorkflowResult:
    """Run a workflow from steps or step descriptors.

    Args:
        steps: Typed steps or descriptor mappings.
        observer: Receives a snapshot of every step after each state change.
        on_progress: Receives a short status line when each step starts.
        host: Host capabilities; built from configuration when omitted and
            closed again after the run.
        registry: Executor registry; defaults to every built-in kind.
        config: Loaded configuration; read from disk when omitted.
        on_model_progress: Receives (percent, eta) while models load.
        propagate: Fold output-format schemas into generation steps first.

    Returns:
        ``WorkflowResult`` with the data bag and final output, or the error.
    """
    config = config or load_config()
    owns_host = host is None
    host = host or get_host(config=config)
    runner = WorkflowRunner(
        host,
        registry=registry,
        observer=observer,
        on_progress=on_progress,
        on_model_progress=on_model_progress,
        budget=TokenBudget(config.budget),
        generation=config.generation,
        propagate=propagate,
    )
    try:
        return await runner.run(_coerce_steps(steps))
    finally:
        if owns_host:
            await host.close()
