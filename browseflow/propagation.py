"""Schema propagation from output-format steps into generation steps."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Sequence

from .contracts import BaseStep

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "output-format"
GENERATION_AGENT = "generation-agent"


def declared_schema_value(step: BaseStep) -> Any:
    """Return the shape an output-format step declares, if any."""
    if step.materialized_value:
        return step.materialized_value
    return getattr(step.config, "value", None)


def parse_schema(value: Any) -> Any:
    """Parse a declared shape given as structured data or a JSON string.

    Raises:
        ValueError: If ``value`` is a string that is not valid JSON.
    """
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    if isinstance(value, str):
        return json.loads(value)
    return value


def propagate_schemas(steps: Sequence[BaseStep]) -> List[BaseStep]:
    """Merge output-format schemas forward and return the executable sequence.

    Each output-format step hands its parsed schema to the first generation
    step that follows it. Processing in source order means a generation step
    ends up with the schema of its nearest preceding output-format step. The
    merge writes ``config.json_schema`` on the shared step objects; the
    returned list holds every step except the output-format ones.
    """
    for index, step in enumerate(steps):
        if step.kind != OUTPUT_FORMAT:
            continue

        raw = declared_schema_value(step)
        if not raw:
            continue
        try:
            schema = parse_schema(raw)
        except ValueError as e:
            logger.warning(f"Dropping schema of output-format step {step.id}: {e}")
            continue

        target = next(
            (later for later in steps[index + 1 :] if later.kind == GENERATION_AGENT),
            None,
        )
        if target is None:
            logger.debug(f"No generation step follows output-format step {step.id}")
            continue
        target.config.json_schema = schema
        logger.debug(f"Merged schema from {step.id} into generation step {target.id}")

    executable = [step for step in steps if step.kind != OUTPUT_FORMAT]
    removed = len(steps) - len(executable)
    if removed:
        logger.debug(f"Removed {removed} output-format steps from execution")
    return executable
