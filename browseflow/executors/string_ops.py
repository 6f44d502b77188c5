"""String manipulation executor."""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional

from ..contracts import BaseStep, StepResult
from ..errors import StepConfigurationError, WorkflowError
from .context import ExecutionContext


def _numbers(parameter: str, operation: str) -> List[Optional[int]]:
    """Parse ``"a,b"`` into two integers; a missing or blank part becomes ``None``."""
    parts = (parameter or "").split(",")
    parts += [""] * (2 - len(parts))
    values: List[Optional[int]] = []
    for part in parts[:2]:
        part = part.strip()
        if not part:
            values.append(None)
            continue
        try:
            values.append(int(float(part)))
        except (ValueError, OverflowError):
            raise StepConfigurationError(
                f"Invalid parameter '{parameter}' for {operation}"
            ) from None
    return values


def _split(text: str, parameter: str) -> str:
    if parameter == "":
        return "\n".join(text)
    return "\n".join(text.split(parameter))


def _slice(text: str, parameter: str) -> str:
    start, end = _numbers(parameter, "slice")
    return text[start:end]


def _replace(text: str, parameter: str) -> str:
    find, _, replacement = (parameter or "").partition(",")
    if not find:
        raise StepConfigurationError("replace needs a pattern to find")
    try:
        return re.sub(find, lambda _match: replacement, text)
    except re.error as e:
        raise StepConfigurationError(f"Invalid replace pattern '{find}': {e}") from e


def _substring(text: str, parameter: str) -> str:
    start, length = _numbers(parameter, "substring")
    start = start or 0
    if start < 0:
        start = max(len(text) + start, 0)
    if length is None:
        return text[start:]
    return text[start : start + max(length, 0)]


OPERATIONS: Dict[str, Callable[[str, str], str]] = {
    "split": _split,
    "slice": _slice,
    "replace": _replace,
    "trim": lambda text, _: text.strip(),
    "uppercase": lambda text, _: text.upper(),
    "lowercase": lambda text, _: text.lower(),
    "substring": _substring,
}


async def string_op(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    if not upstream:
        raise WorkflowError("No input provided")

    operation = step.config.operation
    handler = OPERATIONS.get(operation)
    if handler is None:
        raise StepConfigurationError(f"Invalid operation: {operation}")

    return StepResult(
        output=handler(str(upstream), step.config.parameter),
        log=f"String manipulation ({operation}) completed successfully",
    )
