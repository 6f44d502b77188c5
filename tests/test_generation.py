"""Generation agent executor tests."""

import json
import math

import pytest

from browseflow.budget import TokenBudget
from browseflow.config import GenerationConfig
from browseflow.constants import SCHEMA_INSTRUCTION, TRUNCATION_NOTE
from browseflow.contracts import GenerationAgentConfig, GenerationAgentStep
from browseflow.executors import ExecutionContext
from browseflow.executors.generation import generation_agent, prompt_text
from browseflow.host import InMemoryHost


def _context(host, streamed=None, logged=None):
    async def stream(step, value):
        if streamed is not None:
            streamed.append(value)

    async def log(step, message):
        if logged is not None:
            logged.append(message)

    return ExecutionContext(
        host=host,
        budget=TokenBudget(),
        generation=GenerationConfig(default_model="tiny-model", temperature=0.2),
        stream=stream,
        log=log,
    )


@pytest.mark.asyncio
async def test_streams_accumulated_text():
    streamed, logged = [], []
    host = InMemoryHost(chunks=["Hel", "", "lo"])
    step = GenerationAgentStep(id="gen")

    result = await generation_agent(step, "Say hello", _context(host, streamed, logged))

    assert result.output == "Hello"
    assert result.log == "Generation agent completed successfully (streaming)"
    assert streamed == ["Hel", "Hello"]
    assert logged == ["Streaming response..."]
    request = host.generation_requests[0]
    assert request.prompt == "Say hello"
    assert request.model == "tiny-model"
    assert request.temperature == 0.2
    assert host.loaded_models == ["tiny-model"]


@pytest.mark.asyncio
async def test_schema_is_appended_to_system_prompt():
    host = InMemoryHost(chunks=["{}"])
    schema = {"type": "object", "properties": {"title": {"type": "string"}}}
    step = GenerationAgentStep(
        id="gen",
        config=GenerationAgentConfig(system_prompt="Be terse", json_schema=schema),
    )

    await generation_agent(step, "text", _context(host))

    request = host.generation_requests[0]
    assert request.system_prompt.startswith("Be terse")
    assert SCHEMA_INSTRUCTION in request.system_prompt
    assert request.json_schema == json.dumps(schema, indent=2)


@pytest.mark.asyncio
async def test_long_prompt_is_truncated():
    host = InMemoryHost(chunks=["ok"])
    step = GenerationAgentStep(id="gen")

    result = await generation_agent(step, "x" * 20000, _context(host))

    request = host.generation_requests[0]
    assert len(request.prompt) == TokenBudget().prompt_char_limit("")
    assert request.prompt.endswith(TRUNCATION_NOTE)
    assert "prompt truncated" in result.log


@pytest.mark.asyncio
async def test_budget_reserves_full_system_prompt_with_schema():
    host = InMemoryHost(chunks=["{}"])
    schema = {"type": "object", "description": "d" * 4000}
    step = GenerationAgentStep(
        id="gen",
        config=GenerationAgentConfig(system_prompt="Be terse", json_schema=schema),
    )

    result = await generation_agent(step, "x" * 20000, _context(host))

    schema_str = json.dumps(schema, indent=2)
    sent_system_prompt = f"Be terse\n\n{SCHEMA_INSTRUCTION}\n{schema_str}"
    reserved = (
        math.ceil(len(sent_system_prompt) / 4) + math.ceil(len(schema_str) / 4) + 100
    )
    expected_limit = max(1000, (4096 - reserved) * 3)
    request = host.generation_requests[0]
    assert request.system_prompt == sent_system_prompt
    assert len(request.prompt) == expected_limit
    assert f"prompt truncated to {expected_limit} characters" in result.log


@pytest.mark.asyncio
async def test_configured_prompt_and_model_override_defaults():
    host = InMemoryHost(chunks=["ok"])
    step = GenerationAgentStep(
        id="gen",
        config=GenerationAgentConfig(prompt="Fixed", model="other", max_tokens=64),
    )

    await generation_agent(step, "ignored", _context(host))

    request = host.generation_requests[0]
    assert request.prompt == "Fixed"
    assert request.model == "other"
    assert request.max_tokens == 64


def test_prompt_text():
    assert prompt_text(None) == ""
    assert prompt_text({"a": 1}) == '{"a": 1}'
    assert prompt_text("plain") == "plain"
