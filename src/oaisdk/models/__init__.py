"""Request/response models and fluent request builders."""

from __future__ import annotations

from .assistants import (  # noqa: F401
    Assistant,
    AssistantRequest,
    AssistantRequestBuilder,
    AssistantTool,
    CodeInterpreterTool,
    FileSearchTool,
    FunctionDefinition,
    FunctionTool,
    ListAssistantsParams,
    RetrievalTool,
)
from .batch import Batch, BatchList, BatchStatus, CreateBatchRequest, FileUploadResponse, YaraRuleInfo  # noqa: F401
from .builder import MetadataBuilderMixin, RequestBuilder  # noqa: F401
from .common import DeletionStatus, ListParams, ListResponse, SortOrder  # noqa: F401
from .runs import (  # noqa: F401
    CreateThreadAndRunRequest,
    CreateThreadAndRunRequestBuilder,
    ModifyRunRequest,
    Run,
    RunRequest,
    RunRequestBuilder,
    RunStatus,
    RunStep,
    SubmitToolOutputsRequest,
    ThreadCreateRequest,
    ThreadMessage,
    ToolOutput,
)
from .threads import (  # noqa: F401
    Message,
    MessageRequest,
    MessageRequestBuilder,
    MessageRole,
    ModifyThreadRequest,
    Thread,
    ThreadRequest,
    ThreadRequestBuilder,
)
