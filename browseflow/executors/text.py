"""Executors that shape text moving between steps."""

from __future__ import annotations

from typing import Any

from ..contracts import BaseStep, StepResult
from .context import ExecutionContext


def _text(value: Any) -> str:
    return "" if value is None else str(value)


async def system_prompt(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    return StepResult(
        output=f"Guidelines: {step.config.value}\n\n{_text(upstream)}",
        log="System prompt processed",
    )


async def text_input(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    """Prefix the typed text, followed by any upstream context, with ``Input text:``.

    A leading input step receives its own value as upstream; that value is not
    repeated.
    """
    value = _text(step.materialized_value)
    context = _text(upstream) if upstream else ""
    if value and context and context != value:
        combined = f"{value}\n{context}"
    else:
        combined = value or context
    return StepResult(
        output=f"Input text: {combined}", log="Input text processed successfully"
    )


async def text_output(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    if step.live_value:
        return StepResult(
            output=step.live_value, log="Output processed successfully (streaming)"
        )
    return StepResult(output=upstream, log="Output processed successfully")


async def pass_through_store(
    step: BaseStep, upstream: Any, ctx: ExecutionContext
) -> StepResult:
    # Storage itself lives outside the engine; the step only relays its input.
    return StepResult(
        output=upstream,
        log=f"Store operation ({step.config.action}) completed on {step.config.store_type}",
    )


async def iterator(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    """Return the first of ``[upstream, *items]``.

    Full iteration is not available in this host, so only one item flows on.
    """
    items = ([upstream] if upstream else []) + list(step.config.items)
    if not items:
        return StepResult(output=None, log="No items to iterate")
    return StepResult(
        output=items[0],
        log="Iterator processed first item (full iteration is not supported in this host)",
    )
