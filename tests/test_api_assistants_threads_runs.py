import json

import httpx
import pytest

from oaisdk.api.assistants import ASSISTANTS_BETA, AssistantsApi
from oaisdk.api.runs import RunsApi
from oaisdk.api.threads import ThreadsApi
from oaisdk.errors import ConstraintViolationError
from oaisdk.models.assistants import AssistantRequest, CodeInterpreterTool, ListAssistantsParams
from oaisdk.models.runs import (
    CreateThreadAndRunRequest,
    ListRunStepsParams,
    ModifyRunRequest,
    RunRequest,
    RunStatus,
    ThreadCreateRequest,
    ToolOutput,
)
from oaisdk.models.threads import ListMessagesParams, MessageRequest, MessageRole, ModifyThreadRequest

ASSISTANT = {"id": "asst_1", "object": "assistant", "created_at": 1, "model": "gpt-4", "name": "Helper", "tools": []}
THREAD = {"id": "thread_1", "object": "thread", "created_at": 1, "metadata": {}}
MESSAGE = {
    "id": "msg_1",
    "object": "thread.message",
    "created_at": 1,
    "thread_id": "thread_1",
    "role": "user",
    "content": [{"type": "text", "text": {"value": "hi", "annotations": []}}],
}
RUN = {
    "id": "run_1",
    "object": "thread.run",
    "created_at": 1,
    "thread_id": "thread_1",
    "assistant_id": "asst_1",
    "status": "queued",
    "model": "gpt-4",
}


def _listing(item: dict) -> dict:
    return {"object": "list", "data": [item], "first_id": item["id"], "last_id": item["id"], "has_more": False}


@pytest.mark.asyncio
async def test_assistants_crud(api_http, route_handler) -> None:
    record: list[httpx.Request] = []
    deleted = {"id": "asst_1", "object": "assistant.deleted", "deleted": True}
    http = api_http(
        route_handler(
            {
                ("POST", "/v1/assistants"): httpx.Response(200, json=ASSISTANT),
                ("GET", "/v1/assistants/asst_1"): httpx.Response(200, json=ASSISTANT),
                ("POST", "/v1/assistants/asst_1"): httpx.Response(200, json=ASSISTANT),
                ("DELETE", "/v1/assistants/asst_1"): httpx.Response(200, json=deleted),
                ("GET", "/v1/assistants"): httpx.Response(200, json=_listing(ASSISTANT)),
            },
            record,
        )
    )
    api = AssistantsApi(http)
    request = AssistantRequest.builder().model("gpt-4").name("Helper").tool(CodeInterpreterTool()).build()

    created = await api.create(request)
    fetched = await api.retrieve("asst_1")
    await api.modify("asst_1", request)
    removed = await api.delete("asst_1")
    listing = await api.list(ListAssistantsParams(limit=500))

    assert created.id == fetched.id == "asst_1"
    assert removed.deleted is True
    assert listing.data[0].name == "Helper"
    assert json.loads(record[0].content) == {"model": "gpt-4", "name": "Helper", "tools": [{"type": "code_interpreter"}]}
    assert all(req.headers["openai-beta"] == ASSISTANTS_BETA for req in record)
    assert record[-1].url.params["limit"] == "100"


@pytest.mark.asyncio
async def test_invalid_request_never_reaches_the_wire(api_http, route_handler) -> None:
    record: list[httpx.Request] = []
    api = AssistantsApi(api_http(route_handler({}, record)))

    with pytest.raises(ConstraintViolationError):
        await api.create(AssistantRequest(model="gpt-4", name="x" * 300))

    assert record == []


@pytest.mark.asyncio
async def test_threads_and_messages(api_http, route_handler) -> None:
    record: list[httpx.Request] = []
    http = api_http(
        route_handler(
            {
                ("POST", "/v1/threads"): httpx.Response(200, json=THREAD),
                ("GET", "/v1/threads/thread_1"): httpx.Response(200, json=THREAD),
                ("POST", "/v1/threads/thread_1"): httpx.Response(200, json={**THREAD, "metadata": {"k": "v"}}),
                ("DELETE", "/v1/threads/thread_1"): httpx.Response(
                    200, json={"id": "thread_1", "object": "thread.deleted", "deleted": True}
                ),
                ("POST", "/v1/threads/thread_1/messages"): httpx.Response(200, json=MESSAGE),
                ("GET", "/v1/threads/thread_1/messages/msg_1"): httpx.Response(200, json=MESSAGE),
                ("GET", "/v1/threads/thread_1/messages"): httpx.Response(200, json=_listing(MESSAGE)),
            },
            record,
        )
    )
    api = ThreadsApi(http)

    thread = await api.create()
    assert thread.id == "thread_1"
    assert json.loads(record[0].content) == {}

    await api.retrieve("thread_1")
    modified = await api.modify("thread_1", ModifyThreadRequest(metadata={"k": "v"}))
    assert modified.metadata == {"k": "v"}
    assert (await api.delete("thread_1")).deleted

    message = await api.create_message(
        "thread_1", MessageRequest.builder().role(MessageRole.USER).content("hi").build()
    )
    assert message.text() == "hi"
    assert json.loads(record[4].content) == {"role": "user", "content": "hi"}

    assert (await api.retrieve_message("thread_1", "msg_1")).id == "msg_1"
    listing = await api.list_messages("thread_1", ListMessagesParams().with_order("asc"))
    assert listing.data[0].role.is_user
    assert record[-1].url.params["order"] == "asc"


@pytest.mark.asyncio
async def test_runs_endpoints(api_http, route_handler) -> None:
    record: list[httpx.Request] = []
    step = {
        "id": "step_1",
        "created_at": 1,
        "assistant_id": "asst_1",
        "thread_id": "thread_1",
        "run_id": "run_1",
        "type": "tool_calls",
        "status": "in_progress",
        "step_details": {"type": "tool_calls", "tool_calls": [{"id": "call_1", "type": "code_interpreter"}]},
    }
    http = api_http(
        route_handler(
            {
                ("POST", "/v1/threads/thread_1/runs"): httpx.Response(200, json=RUN),
                ("GET", "/v1/threads/thread_1/runs/run_1"): httpx.Response(200, json=RUN),
                ("POST", "/v1/threads/thread_1/runs/run_1"): httpx.Response(200, json=RUN),
                ("GET", "/v1/threads/thread_1/runs"): httpx.Response(200, json=_listing(RUN)),
                ("POST", "/v1/threads/thread_1/runs/run_1/cancel"): httpx.Response(
                    200, json={**RUN, "status": "cancelling"}
                ),
                ("POST", "/v1/threads/thread_1/runs/run_1/submit_tool_outputs"): httpx.Response(
                    200, json={**RUN, "status": "in_progress"}
                ),
                ("POST", "/v1/threads/runs"): httpx.Response(200, json=RUN),
                ("GET", "/v1/threads/thread_1/runs/run_1/steps"): httpx.Response(200, json=_listing(step)),
            },
            record,
        )
    )
    api = RunsApi(http)

    run = await api.create_run("thread_1", RunRequest.builder().assistant_id("asst_1").build())
    assert run.status is RunStatus.QUEUED
    assert json.loads(record[0].content) == {"assistant_id": "asst_1"}

    await api.retrieve_run("thread_1", "run_1")
    await api.modify_run("thread_1", "run_1", ModifyRunRequest(metadata={"k": "v"}))
    assert (await api.list_runs("thread_1")).data[0].id == "run_1"

    cancelled = await api.cancel_run("thread_1", "run_1")
    assert cancelled.status is RunStatus.CANCELLING
    assert record[4].content == b""

    resumed = await api.submit_tool_outputs("thread_1", "run_1", [ToolOutput(tool_call_id="call_1", output="42")])
    assert resumed.status is RunStatus.IN_PROGRESS
    assert json.loads(record[5].content) == {"tool_outputs": [{"tool_call_id": "call_1", "output": "42"}]}

    combined = (
        CreateThreadAndRunRequest.builder()
        .assistant_id("asst_1")
        .thread(ThreadCreateRequest(messages=[{"role": "user", "content": "hi"}]))
        .build()
    )
    await api.create_thread_and_run(combined)
    assert json.loads(record[6].content)["thread"]["messages"][0]["content"] == "hi"

    steps = await api.list_run_steps("thread_1", "run_1", ListRunStepsParams(limit=10))
    assert steps.data[0].step_details.type == "tool_calls"
    assert record[7].url.params["limit"] == "10"
