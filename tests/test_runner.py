"""Workflow runner tests."""

import httpx
import pytest

from browseflow import execute_workflow, parse_steps
from browseflow.config import BrowseflowConfig
from browseflow.constants import SCHEMA_INSTRUCTION
from browseflow.executors import ExecutorRegistry
from browseflow.executors.text import text_input
from browseflow.host import InMemoryHost
from browseflow.runner import WorkflowRunner, missing_inputs


def _steps(*descriptors):
    return parse_steps(list(descriptors))


@pytest.mark.asyncio
async def test_text_input_then_uppercase():
    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "hello"},
        {"id": "up", "kind": "string-op", "config": {"operation": "uppercase"}},
    )
    host = InMemoryHost()

    result = await execute_workflow(steps, host=host, config=BrowseflowConfig())

    assert result.success
    assert result.final_output == "INPUT TEXT: HELLO"
    assert result.data["input"] == "hello"
    assert [step.status for step in steps] == ["completed", "completed"]
    assert steps[1].logs == [
        "Starting up...",
        "String manipulation (uppercase) completed successfully",
    ]
    await host.close()


@pytest.mark.asyncio
async def test_failing_step_aborts_run():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "x"},
        {
            "id": "hook",
            "kind": "webhook",
            "config": {"endpoint": "https://hooks.test/run", "method": "POST"},
        },
        {"id": "out", "kind": "text-output"},
    )
    host = InMemoryHost(http_handler=handler)

    result = await execute_workflow(steps, host=host, config=BrowseflowConfig())

    assert not result.success
    assert result.failed_step_id == "hook"
    assert result.error == "HTTP error 500: Internal Server Error"
    assert [step.status for step in steps] == ["completed", "error", "pending"]
    assert steps[1].logs[-1] == "Error: HTTP error 500: Internal Server Error"
    assert steps[2].logs == []
    await host.close()


@pytest.mark.asyncio
async def test_observer_sees_at_most_one_running_step():
    snapshots = []
    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "hi"},
        {"id": "gen", "kind": "generation-agent"},
        {"id": "out", "kind": "text-output"},
    )
    host = InMemoryHost(chunks=["Hel", "lo"])

    result = await execute_workflow(
        steps, observer=snapshots.append, host=host, config=BrowseflowConfig()
    )

    assert result.success
    assert result.final_output == "Hello"
    assert snapshots
    for snapshot in snapshots:
        assert sum(step.status == "running" for step in snapshot) <= 1
    # Snapshots are copies, later changes do not leak into earlier ones.
    assert [step.status for step in snapshots[0]] == ["pending"] * 3
    assert [step.status for step in snapshots[-1]] == ["completed"] * 3

    partial = [
        snapshot[1].live_value
        for snapshot in snapshots
        if snapshot[1].status == "running" and snapshot[1].live_value
    ]
    assert partial == ["Hel", "Hello"]
    mirrored = [
        snapshot[2].live_value
        for snapshot in snapshots
        if snapshot[1].status == "running" and snapshot[2].live_value
    ]
    assert mirrored == ["Hel", "Hello"]
    assert steps[2].logs[0] == "Receiving streaming content..."
    assert steps[2].logs[-1] == "Output processed successfully (streaming)"
    await host.close()


@pytest.mark.asyncio
async def test_unregistered_kind_fails_with_no_executor():
    registry = ExecutorRegistry({"text-input": text_input})
    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "x"},
        {"id": "up", "kind": "string-op"},
    )
    runner = WorkflowRunner(InMemoryHost(), registry=registry)

    result = await runner.run(steps)

    assert not result.success
    assert result.error == "No executor found for step kind: string-op"
    assert steps[1].status == "error"


@pytest.mark.asyncio
async def test_identifier_and_output_type_publish_extra_keys():
    steps = _steps(
        {
            "id": "in",
            "kind": "text-input",
            "materializedValue": "hi",
            "config": {"identifier": "question"},
        },
        {
            "id": "up",
            "kind": "string-op",
            "config": {"operation": "uppercase", "outputType": "shout"},
        },
    )

    result = await WorkflowRunner(InMemoryHost()).run(steps)

    assert result.data["question"] == "Input text: hi"
    assert result.data["shout"] == "INPUT TEXT: HI"
    assert result.data["output"] == "INPUT TEXT: HI"


@pytest.mark.asyncio
async def test_output_format_merged_into_generation_step():
    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "hi"},
        {
            "id": "fmt",
            "kind": "output-format",
            "config": {"value": '{"type": "object", "properties": {"answer": {}}}'},
        },
        {"id": "gen", "kind": "generation-agent"},
    )
    host = InMemoryHost(chunks=['{"answer": 1}'])

    result = await WorkflowRunner(host).run(steps)

    assert result.success
    assert steps[1].status == "pending"
    request = host.generation_requests[0]
    assert SCHEMA_INSTRUCTION in request.system_prompt
    assert '"answer"' in request.json_schema


@pytest.mark.asyncio
async def test_inline_output_format_is_flagged_without_aborting():
    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "x"},
        {"id": "fmt", "kind": "output-format", "config": {"value": "{not json"}},
        {"id": "out", "kind": "text-output"},
    )

    result = await WorkflowRunner(InMemoryHost(), propagate=False).run(steps)

    assert result.success
    assert steps[1].status == "completed"
    assert steps[1].flagged
    assert steps[1].logs[-1] == "Invalid JSON format"
    assert result.final_output == "{not json"


@pytest.mark.asyncio
async def test_rerun_resets_step_records():
    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "x"},
        {"id": "cond", "kind": "conditional", "config": {"comparisonValue": "nope"}},
    )
    runner = WorkflowRunner(InMemoryHost())

    await runner.run(steps)
    first_logs = [list(step.logs) for step in steps]
    await runner.run(steps)

    assert [step.logs for step in steps] == first_logs
    assert steps[1].branch == "false"


@pytest.mark.asyncio
async def test_progress_lines_and_dict_descriptors():
    lines = []
    result = await execute_workflow(
        [
            {"id": "in", "kind": "text-input", "name": "Question", "materializedValue": "x"},
            {"id": "out", "kind": "text-output"},
        ],
        on_progress=lines.append,
        host=InMemoryHost(),
        config=BrowseflowConfig(),
    )

    assert result.final_output == "Input text: x"
    assert lines == ["Executing Question...", "Executing out..."]


@pytest.mark.asyncio
async def test_empty_workflow_succeeds():
    result = await WorkflowRunner(InMemoryHost()).run([])
    assert result.success
    assert result.final_output is None


def test_missing_inputs_lists_empty_input_steps():
    steps = _steps(
        {"id": "a", "kind": "text-input"},
        {"id": "b", "kind": "text-input", "materializedValue": "set"},
        {"id": "c", "kind": "audio-input"},
        {"id": "d", "kind": "text-output"},
    )
    assert [step.id for step in missing_inputs(steps)] == ["a", "c"]


@pytest.mark.asyncio
async def test_unreachable_webhook_fails_single_step_run():
    steps = _steps(
        {
            "id": "hook",
            "kind": "webhook",
            "config": {"endpoint": "bad-host", "method": "GET"},
        }
    )

    result = await WorkflowRunner(InMemoryHost()).run(steps)

    assert not result.success
    assert result.failed_step_id == "hook"
    assert "No route to" in result.error
    assert steps[0].status == "error"
    assert steps[0].logs[-1] == f"Error: {result.error}"


@pytest.mark.asyncio
async def test_observer_error_becomes_failed_result():
    def observer(snapshot):
        if any(step.status == "running" for step in snapshot):
            raise RuntimeError("observer broke")

    steps = _steps(
        {"id": "in", "kind": "text-input", "materializedValue": "x"},
        {"id": "out", "kind": "text-output"},
    )

    result = await execute_workflow(
        steps, observer=observer, host=InMemoryHost(), config=BrowseflowConfig()
    )

    assert not result.success
    assert result.error == "observer broke"
    assert result.failed_step_id == "in"
    assert steps[0].status == "error"
    assert steps[1].status == "pending"


@pytest.mark.asyncio
async def test_observer_error_on_reset_becomes_failed_result():
    def observer(snapshot):
        raise RuntimeError("observer down")

    steps = _steps({"id": "in", "kind": "text-input", "materializedValue": "x"})

    result = await WorkflowRunner(InMemoryHost(), observer=observer).run(steps)

    assert not result.success
    assert result.error == "observer down"
    assert result.failed_step_id is None
