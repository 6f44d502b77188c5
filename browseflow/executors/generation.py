"""Generation agent executor with token budgeting and streaming."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..constants import SCHEMA_INSTRUCTION
from ..contracts import BaseStep, GenerationRequest, StepResult
from .context import ExecutionContext

logger = logging.getLogger(__name__)


def prompt_text(value: Any) -> str:
    """Render an upstream value as prompt text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def schema_text(schema: Any) -> str:
    if schema is None or schema == "":
        return ""
    if isinstance(schema, str):
        return schema
    return json.dumps(schema, indent=2)


async def generation_agent(
    step: BaseStep, upstream: Any, ctx: ExecutionContext
) -> StepResult:
    """Prompt the host model and stream the answer back through the runner.

    The prompt is ``config.prompt`` when set, otherwise the upstream value. A
    schema merged from an output-format step is appended to the system prompt
    and that full system prompt, plus the schema on its own, is reserved in the
    token budget before the prompt is truncated.
    """
    config = step.config
    model = config.model or ctx.generation.default_model
    await ctx.host.load_model(model, on_progress=ctx.on_model_progress)

    schema = schema_text(config.json_schema)
    system_prompt = config.system_prompt
    if schema:
        logger.debug(f"Using merged JSON schema in generation step {step.id}")
        system_prompt = f"{system_prompt}\n\n{SCHEMA_INSTRUCTION}\n{schema}"

    # The schema is reserved twice: once inside the system prompt, once on its own.
    budgeted = ctx.budget.fit(
        config.prompt or prompt_text(upstream), system_prompt, schema
    )
    request = GenerationRequest(
        prompt=budgeted.prompt,
        system_prompt=system_prompt,
        json_schema=schema or None,
        model=model,
        temperature=(
            config.temperature
            if config.temperature is not None
            else ctx.generation.temperature
        ),
        max_tokens=config.max_tokens or ctx.generation.max_tokens,
        stream=True,
    )

    await ctx.log(step, "Streaming response...")
    generated = await ctx.host.generate(request)

    if isinstance(generated, str):
        result = generated
        await ctx.stream(step, result)
    else:
        result = ""
        async for delta in generated:
            if not delta:
                continue
            result += delta
            await ctx.stream(step, result)

    log = "Generation agent completed successfully (streaming)"
    if budgeted.truncated:
        log += f"; prompt truncated to {budgeted.char_limit} characters"
    return StepResult(output=result, log=log)
