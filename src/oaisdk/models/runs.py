"""Runs and run steps models.

A run executes an assistant against a thread. Runs move through
``queued -> in_progress -> (requires_action ->) completed`` or end in one of
the failure states; :attr:`RunStatus.is_terminal` tells pollers when to stop.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Self, TypeAlias

from pydantic import Field

from oaisdk.models.assistants import AssistantTool
from oaisdk.models.builder import MetadataBuilderMixin, RequestBuilder
from oaisdk.models.common import ApiObject, ListParams, ListResponse, WireModel, validate_metadata


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_RUN_STATUSES


_TERMINAL_RUN_STATUSES = frozenset({RunStatus.CANCELLED, RunStatus.FAILED, RunStatus.COMPLETED, RunStatus.EXPIRED})


class ThreadMessage(WireModel):
    """Message seeded into a thread created alongside a run."""

    role: str
    content: str
    file_ids: list[str] | None = None
    metadata: dict[str, str] | None = None


class ThreadCreateRequest(WireModel):
    messages: list[ThreadMessage] | None = None
    metadata: dict[str, str] | None = None

    def validate(self) -> None:
        validate_metadata(self.metadata, prefix="Thread")
        for message in self.messages or ():
            validate_metadata(message.metadata, prefix="Message")


class RunRequest(WireModel):
    """Body of ``POST /threads/{thread_id}/runs``."""

    assistant_id: str
    model: str | None = None
    instructions: str | None = None
    tools: list[AssistantTool] | None = None
    file_ids: list[str] | None = None
    metadata: dict[str, str] | None = None

    @classmethod
    def builder(cls) -> RunRequestBuilder:
        return RunRequestBuilder()

    def validate(self) -> None:
        validate_metadata(self.metadata, prefix="Run")


class CreateThreadAndRunRequest(WireModel):
    """Body of ``POST /threads/runs``."""

    assistant_id: str
    thread: ThreadCreateRequest | None = None
    model: str | None = None
    instructions: str | None = None
    tools: list[AssistantTool] | None = None
    file_ids: list[str] | None = None
    metadata: dict[str, str] | None = None

    @classmethod
    def builder(cls) -> CreateThreadAndRunRequestBuilder:
        return CreateThreadAndRunRequestBuilder()

    def validate(self) -> None:
        if self.thread is not None:
            self.thread.validate()
        validate_metadata(self.metadata, prefix="Run")


class _RunConfigurationSetters(MetadataBuilderMixin):
    """Setters shared by the two run builders.

    Unlike the assistant builder, the plural ``tools``/``file_ids`` setters
    replace the staged list instead of extending it.
    """

    __slots__ = ()

    def assistant_id(self, assistant_id: object) -> Self:
        return self._set(assistant_id=str(assistant_id))  # type: ignore[attr-defined]

    def model(self, model: object) -> Self:
        return self._set(model=str(model))  # type: ignore[attr-defined]

    def instructions(self, instructions: object) -> Self:
        return self._set(instructions=str(instructions))  # type: ignore[attr-defined]

    def tool(self, tool: Any) -> Self:
        return self._append("tools", [tool])  # type: ignore[attr-defined]

    def tools(self, tools: Iterable[Any]) -> Self:
        return self._set(tools=tuple(tools))  # type: ignore[attr-defined]

    def file_id(self, file_id: object) -> Self:
        return self._append("file_ids", [str(file_id)])  # type: ignore[attr-defined]

    def file_ids(self, file_ids: Iterable[object]) -> Self:
        return self._set(file_ids=tuple(str(file_id) for file_id in file_ids))  # type: ignore[attr-defined]


@dataclass(frozen=True, slots=True)
class RunRequestBuilder(_RunConfigurationSetters, RequestBuilder[RunRequest]):
    """Fluent builder for :class:`RunRequest`; ``assistant_id`` is required, then metadata is checked."""

    _assistant_id: str | None = None
    _model: str | None = None
    _instructions: str | None = None
    _tools: tuple[Any, ...] | None = None
    _file_ids: tuple[str, ...] | None = None
    _metadata: Mapping[str, str] | None = None

    target = RunRequest
    required_fields = ("assistant_id",)


@dataclass(frozen=True, slots=True)
class CreateThreadAndRunRequestBuilder(_RunConfigurationSetters, RequestBuilder[CreateThreadAndRunRequest]):
    """Fluent builder for :class:`CreateThreadAndRunRequest`.

    ``assistant_id`` is required; the embedded thread is validated before the
    run metadata.
    """

    _assistant_id: str | None = None
    _thread: ThreadCreateRequest | None = None
    _model: str | None = None
    _instructions: str | None = None
    _tools: tuple[Any, ...] | None = None
    _file_ids: tuple[str, ...] | None = None
    _metadata: Mapping[str, str] | None = None

    target = CreateThreadAndRunRequest
    required_fields = ("assistant_id",)

    def thread(self, thread: ThreadCreateRequest) -> CreateThreadAndRunRequestBuilder:
        return self._set(thread=thread)


class ModifyRunRequest(WireModel):
    metadata: dict[str, str] | None = None

    def validate(self) -> None:
        validate_metadata(self.metadata, prefix="Run")


class ToolOutput(WireModel):
    tool_call_id: str
    output: str


class SubmitToolOutputsRequest(WireModel):
    tool_outputs: list[ToolOutput]


class FunctionCall(ApiObject):
    name: str
    arguments: str


class ToolCall(ApiObject):
    id: str
    type: str = "function"
    function: FunctionCall | None = None


class SubmitToolOutputs(ApiObject):
    tool_calls: list[ToolCall] = Field(default_factory=list)


class RequiredAction(ApiObject):
    type: str = "submit_tool_outputs"
    submit_tool_outputs: SubmitToolOutputs


class RunError(ApiObject):
    code: str
    message: str


class Usage(ApiObject):
    completion_tokens: int = 0
    prompt_tokens: int = 0
    total_tokens: int = 0


class Run(ApiObject):
    id: str
    object: str = "thread.run"
    created_at: int
    thread_id: str
    assistant_id: str
    status: RunStatus
    required_action: RequiredAction | None = None
    last_error: RunError | None = None
    expires_at: int | None = None
    started_at: int | None = None
    cancelled_at: int | None = None
    failed_at: int | None = None
    completed_at: int | None = None
    model: str
    instructions: str = ""
    tools: list[AssistantTool] = Field(default_factory=list)
    file_ids: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    usage: Usage | None = None

    def pending_tool_calls(self) -> list[ToolCall]:
        if self.required_action is None:
            return []
        return list(self.required_action.submit_tool_outputs.tool_calls)


class RunStepStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"


class MessageCreation(ApiObject):
    message_id: str


class MessageCreationDetails(ApiObject):
    type: Literal["message_creation"] = "message_creation"
    message_creation: MessageCreation


class ToolCallsDetails(ApiObject):
    type: Literal["tool_calls"] = "tool_calls"
    tool_calls: list[dict[str, Any]] = Field(default_factory=list)


StepDetails: TypeAlias = Annotated[MessageCreationDetails | ToolCallsDetails, Field(discriminator="type")]


class RunStep(ApiObject):
    id: str
    object: str = "thread.run.step"
    created_at: int
    assistant_id: str
    thread_id: str
    run_id: str
    type: str
    status: RunStepStatus
    step_details: StepDetails
    last_error: RunError | None = None
    expired_at: int | None = None
    cancelled_at: int | None = None
    failed_at: int | None = None
    completed_at: int | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
    usage: Usage | None = None


class ListRunsParams(ListParams):
    """Pagination for ``GET /threads/{thread_id}/runs``."""


class ListRunStepsParams(ListParams):
    """Pagination for ``GET /threads/{thread_id}/runs/{run_id}/steps``."""


ListRunsResponse = ListResponse[Run]
ListRunStepsResponse = ListResponse[RunStep]


__all__ = [
    "CreateThreadAndRunRequest",
    "CreateThreadAndRunRequestBuilder",
    "FunctionCall",
    "ListRunStepsParams",
    "ListRunStepsResponse",
    "ListRunsParams",
    "ListRunsResponse",
    "MessageCreation",
    "MessageCreationDetails",
    "ModifyRunRequest",
    "RequiredAction",
    "Run",
    "RunError",
    "RunRequest",
    "RunRequestBuilder",
    "RunStatus",
    "RunStep",
    "RunStepStatus",
    "StepDetails",
    "SubmitToolOutputs",
    "SubmitToolOutputsRequest",
    "ThreadCreateRequest",
    "ThreadMessage",
    "ToolCall",
    "ToolCallsDetails",
    "ToolOutput",
    "Usage",
]
