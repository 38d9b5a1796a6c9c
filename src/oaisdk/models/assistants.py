"""Assistants API models.

An assistant bundles a model, system instructions, tools (code interpreter,
retrieval/file search, functions), attached files and metadata. Requests are
built with :class:`AssistantRequestBuilder`::

    request = (
        AssistantRequest.builder()
        .model("gpt-4")
        .name("Data Analyst")
        .instructions("You analyse CSV files.")
        .tool(CodeInterpreterTool())
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Literal, TypeAlias

from pydantic import Field

from oaisdk.models.builder import MetadataBuilderMixin, RequestBuilder
from oaisdk.models.common import (
    ApiObject,
    ListParams,
    ListResponse,
    WireModel,
    check_max_items,
    check_max_length,
    validate_metadata,
)

MAX_NAME_CHARS = 256
MAX_DESCRIPTION_CHARS = 512
MAX_INSTRUCTIONS_CHARS = 32768
MAX_TOOLS = 128
MAX_FILE_IDS = 20


class FunctionDefinition(WireModel):
    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = None
    strict: bool | None = None


class CodeInterpreterTool(WireModel):
    type: Literal["code_interpreter"] = "code_interpreter"


class RetrievalTool(WireModel):
    type: Literal["retrieval"] = "retrieval"


class FileSearchTool(WireModel):
    type: Literal["file_search"] = "file_search"
    file_search: dict[str, Any] | None = None


class FunctionTool(WireModel):
    type: Literal["function"] = "function"
    function: FunctionDefinition


AssistantTool: TypeAlias = Annotated[
    CodeInterpreterTool | RetrievalTool | FileSearchTool | FunctionTool,
    Field(discriminator="type"),
]


class AssistantRequest(WireModel):
    """Body of ``POST /assistants`` and ``POST /assistants/{id}``."""

    model: str
    name: str | None = None
    description: str | None = None
    instructions: str | None = None
    tools: list[AssistantTool] | None = None
    file_ids: list[str] | None = None
    metadata: dict[str, str] | None = None

    @classmethod
    def builder(cls) -> AssistantRequestBuilder:
        return AssistantRequestBuilder()

    def validate(self) -> None:
        check_max_length("name", self.name, MAX_NAME_CHARS, "Assistant name")
        check_max_length("description", self.description, MAX_DESCRIPTION_CHARS, "Assistant description")
        check_max_length("instructions", self.instructions, MAX_INSTRUCTIONS_CHARS, "Assistant instructions")
        check_max_items("tools", self.tools, MAX_TOOLS, "Assistant", "tools")
        check_max_items("file_ids", self.file_ids, MAX_FILE_IDS, "Assistant", "file IDs")
        validate_metadata(self.metadata, prefix="Assistant")


@dataclass(frozen=True, slots=True)
class AssistantRequestBuilder(MetadataBuilderMixin, RequestBuilder[AssistantRequest]):
    """Fluent builder for :class:`AssistantRequest`.

    ``model`` is required. Bounds are checked in field order: name,
    description, instructions, tools, file IDs, then metadata.
    """

    _model: str | None = None
    _name: str | None = None
    _description: str | None = None
    _instructions: str | None = None
    _tools: tuple[Any, ...] | None = None
    _file_ids: tuple[str, ...] | None = None
    _metadata: Mapping[str, str] | None = None

    target = AssistantRequest
    required_fields = ("model",)

    def model(self, model: object) -> AssistantRequestBuilder:
        return self._set(model=str(model))

    def name(self, name: object) -> AssistantRequestBuilder:
        return self._set(name=str(name))

    def description(self, description: object) -> AssistantRequestBuilder:
        return self._set(description=str(description))

    def instructions(self, instructions: object) -> AssistantRequestBuilder:
        return self._set(instructions=str(instructions))

    def tool(self, tool: CodeInterpreterTool | RetrievalTool | FileSearchTool | FunctionTool) -> AssistantRequestBuilder:
        return self._append("tools", [tool])

    def tools(
        self, tools: Iterable[CodeInterpreterTool | RetrievalTool | FileSearchTool | FunctionTool]
    ) -> AssistantRequestBuilder:
        return self._append("tools", tools)

    def file_id(self, file_id: object) -> AssistantRequestBuilder:
        return self._append("file_ids", [str(file_id)])

    def file_ids(self, file_ids: Iterable[object]) -> AssistantRequestBuilder:
        return self._append("file_ids", [str(file_id) for file_id in file_ids])


class Assistant(ApiObject):
    id: str
    object: str = "assistant"
    created_at: int
    name: str | None = None
    description: str | None = None
    model: str
    instructions: str | None = None
    tools: list[AssistantTool] = Field(default_factory=list)
    file_ids: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)


class ListAssistantsParams(ListParams):
    """Pagination for ``GET /assistants``."""


ListAssistantsResponse = ListResponse[Assistant]


__all__ = [
    "Assistant",
    "AssistantRequest",
    "AssistantRequestBuilder",
    "AssistantTool",
    "CodeInterpreterTool",
    "FileSearchTool",
    "FunctionDefinition",
    "FunctionTool",
    "ListAssistantsParams",
    "ListAssistantsResponse",
    "RetrievalTool",
]
