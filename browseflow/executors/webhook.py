"""Webhook executor."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from ..contracts import BaseStep, StepResult
from ..errors import StepConfigurationError, WebhookError
from .context import ExecutionContext

logger = logging.getLogger(__name__)


async def webhook(step: BaseStep, upstream: Any, ctx: ExecutionContext) -> StepResult:
    """Call ``endpoint`` with the upstream value.

    GET sends the value as the ``input`` query parameter, every other method
    sends it JSON-encoded as the body.
    """
    endpoint = step.config.endpoint
    method = step.config.method
    if not endpoint:
        raise StepConfigurationError("Webhook endpoint is required")
    if not method:
        raise StepConfigurationError("HTTP method is required")

    headers: Dict[str, str] = {"Content-Type": "application/json"}
    if step.config.auth_key:
        headers["Authorization"] = step.config.auth_key

    if method.lower() == "get":
        params = {"input": str(upstream)} if upstream else None
        response = await ctx.host.fetch("GET", endpoint, params=params, headers=headers)
    else:
        body = json.dumps(upstream) if upstream else None
        response = await ctx.host.fetch(method, endpoint, content=body, headers=headers)

    if not response.is_success:
        raise WebhookError(response.status_code, response.reason_phrase)

    try:
        output = json.dumps(response.json())
    except ValueError:
        logger.debug(f"Webhook {endpoint} answered with a non-JSON body")
        output = response.text
    return StepResult(
        output=output, log=f"Webhook ({method} to {endpoint}) completed successfully"
    )
