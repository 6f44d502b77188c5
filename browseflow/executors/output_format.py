"""Output-format executor validating a declared JSON shape."""

from __future__ import annotations

import logging
from typing import Any

from ..contracts import BaseStep, StepResult
from ..propagation import declared_schema_value, parse_schema
from .context import ExecutionContext

logger = logging.getLogger(__name__)


async def output_format(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    """Check that the declared value is JSON.

    An invalid value is reported with ``success=False`` but still passed on, so
    the run continues with the step flagged.
    """
    value = declared_schema_value(step) or upstream or ""
    try:
        parsed = parse_schema(value)
    except ValueError as e:
        logger.warning(f"Output-format step {step.id} declares invalid JSON: {e}")
        return StepResult(output=value, success=False, log="Invalid JSON format")
    return StepResult(
        output=value, parsed_schema=parsed, log="JSON schema validated successfully"
    )
