"""Webhook executor tests."""

import json

import httpx
import pytest

from browseflow.contracts import WebhookConfig, WebhookStep
from browseflow.errors import StepConfigurationError, WebhookError
from browseflow.executors import ExecutionContext
from browseflow.executors.webhook import webhook
from browseflow.host import InMemoryHost


def _hook(**config):
    return WebhookStep(id="hook", config=WebhookConfig(**config))


@pytest.mark.asyncio
async def test_get_sends_input_as_query_parameter():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    host = InMemoryHost(http_handler=handler)
    step = _hook(endpoint="https://hooks.test/run", method="GET", auth_key="Bearer k")

    result = await webhook(step, "hello", ExecutionContext(host=host))

    assert json.loads(result.output) == {"ok": True}
    assert result.log == "Webhook (GET to https://hooks.test/run) completed successfully"
    assert seen[0].method == "GET"
    assert seen[0].url.params["input"] == "hello"
    assert seen[0].headers["Authorization"] == "Bearer k"
    assert seen[0].headers["Content-Type"] == "application/json"
    await host.close()


@pytest.mark.asyncio
async def test_post_sends_json_body_and_accepts_text_reply():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="done")

    host = InMemoryHost(http_handler=handler)
    step = _hook(endpoint="https://hooks.test/run", method="post")

    result = await webhook(step, {"a": 1}, ExecutionContext(host=host))

    assert result.output == "done"
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"a": 1}
    assert "Authorization" not in seen[0].headers
    await host.close()


@pytest.mark.asyncio
async def test_non_success_status_raises():
    host = InMemoryHost(http_handler=lambda request: httpx.Response(404))
    step = _hook(endpoint="https://hooks.test/missing", method="GET")

    with pytest.raises(WebhookError, match="HTTP error 404: Not Found") as excinfo:
        await webhook(step, "x", ExecutionContext(host=host))

    assert excinfo.value.status_code == 404
    await host.close()


@pytest.mark.asyncio
async def test_missing_configuration():
    ctx = ExecutionContext(host=InMemoryHost())

    with pytest.raises(StepConfigurationError, match="Webhook endpoint is required"):
        await webhook(_hook(method="GET"), "x", ctx)
    with pytest.raises(StepConfigurationError, match="HTTP method is required"):
        await webhook(_hook(endpoint="https://hooks.test"), "x", ctx)
