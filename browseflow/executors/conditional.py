"""Conditional executor producing a branch tag."""

from __future__ import annotations

import math
from typing import Any, Callable, Dict

from ..contracts import BaseStep, StepResult
from .context import ExecutionContext


def _number(text: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


COMPARISONS: Dict[str, Callable[[str, str], bool]] = {
    "equals": lambda value, other: value == other,
    "notEquals": lambda value, other: value != other,
    "greaterThan": lambda value, other: _number(value) > _number(other),
    "lessThan": lambda value, other: _number(value) < _number(other),
    "contains": lambda value, other: other in value,
    "notContains": lambda value, other: other not in value,
}


async def conditional(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    """Compare the upstream text with ``comparison_value``.

    The upstream value passes through unchanged; the outcome travels only as
    the ``"true"``/``"false"`` branch tag.
    """
    value = str(upstream) if upstream else ""
    compare = COMPARISONS.get(step.config.operator)
    result = compare(value, step.config.comparison_value) if compare else False
    tag = "true" if result else "false"
    return StepResult(output=upstream, branch=tag, log=f"Condition evaluated to {tag}")
