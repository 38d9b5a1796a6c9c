"""Threads and messages models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal, TypeAlias

from pydantic import Field

from oaisdk.models.builder import MetadataBuilderMixin, RequestBuilder
from oaisdk.models.common import (
    ApiObject,
    DeletionStatus,
    ListParams,
    ListResponse,
    WireModel,
    check_max_items,
    check_max_length,
    validate_metadata,
)

MAX_CONTENT_CHARS = 32768
MAX_MESSAGE_FILE_IDS = 10


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"

    @property
    def is_user(self) -> bool:
        return self is MessageRole.USER

    @property
    def is_assistant(self) -> bool:
        return self is MessageRole.ASSISTANT


class MessageRequest(WireModel):
    """Body of ``POST /threads/{thread_id}/messages``."""

    role: MessageRole
    content: str
    file_ids: list[str] | None = None
    metadata: dict[str, str] | None = None

    @classmethod
    def builder(cls) -> MessageRequestBuilder:
        return MessageRequestBuilder()

    @classmethod
    def new(cls, role: MessageRole, content: object) -> MessageRequest:
        return cls(role=role, content=str(content))

    def validate(self) -> None:
        check_max_length("content", self.content, MAX_CONTENT_CHARS, "Message content")
        check_max_items("file_ids", self.file_ids, MAX_MESSAGE_FILE_IDS, "Message", "file IDs")
        validate_metadata(self.metadata, prefix="Message")


@dataclass(frozen=True, slots=True)
class MessageRequestBuilder(MetadataBuilderMixin, RequestBuilder[MessageRequest]):
    """Fluent builder for :class:`MessageRequest`.

    ``role`` then ``content`` are required; bounds are checked as content
    length, file IDs, then metadata.
    """

    _role: MessageRole | str | None = None
    _content: str | None = None
    _file_ids: tuple[str, ...] | None = None
    _metadata: Mapping[str, str] | None = None

    target = MessageRequest
    required_fields = ("role", "content")

    def role(self, role: MessageRole | str) -> MessageRequestBuilder:
        return self._set(role=role)

    def content(self, content: object) -> MessageRequestBuilder:
        return self._set(content=str(content))

    def file_id(self, file_id: object) -> MessageRequestBuilder:
        return self._append("file_ids", [str(file_id)])

    def file_ids(self, file_ids: Iterable[object]) -> MessageRequestBuilder:
        return self._append("file_ids", [str(file_id) for file_id in file_ids])


class ThreadRequest(WireModel):
    """Body of ``POST /threads``."""

    messages: list[MessageRequest] | None = None
    metadata: dict[str, str] | None = None

    @classmethod
    def builder(cls) -> ThreadRequestBuilder:
        return ThreadRequestBuilder()

    def validate(self) -> None:
        validate_metadata(self.metadata, prefix="Thread")
        for message in self.messages or ():
            message.validate()


@dataclass(frozen=True, slots=True)
class ThreadRequestBuilder(MetadataBuilderMixin, RequestBuilder[ThreadRequest]):
    """Fluent builder for :class:`ThreadRequest`; nothing is required."""

    _messages: tuple[MessageRequest, ...] | None = None
    _metadata: Mapping[str, str] | None = None

    target = ThreadRequest

    def message(self, message: MessageRequest) -> ThreadRequestBuilder:
        return self._append("messages", [message])

    def messages(self, messages: Iterable[MessageRequest]) -> ThreadRequestBuilder:
        return self._append("messages", messages)


class ModifyThreadRequest(WireModel):
    metadata: dict[str, str] | None = None

    def validate(self) -> None:
        validate_metadata(self.metadata, prefix="Thread")


class Thread(ApiObject):
    id: str
    object: str = "thread"
    created_at: int
    metadata: dict[str, str] = Field(default_factory=dict)


class FileCitation(ApiObject):
    file_id: str
    quote: str | None = None


class FilePathInfo(ApiObject):
    file_id: str


class FileCitationAnnotation(ApiObject):
    type: Literal["file_citation"] = "file_citation"
    text: str
    start_index: int
    end_index: int
    file_citation: FileCitation


class FilePathAnnotation(ApiObject):
    type: Literal["file_path"] = "file_path"
    text: str
    start_index: int
    end_index: int
    file_path: FilePathInfo


Annotation: TypeAlias = Annotated[FileCitationAnnotation | FilePathAnnotation, Field(discriminator="type")]


class TextContent(ApiObject):
    value: str
    annotations: list[Annotation] = Field(default_factory=list)


class ImageFile(ApiObject):
    file_id: str


class TextMessageContent(ApiObject):
    type: Literal["text"] = "text"
    text: TextContent


class ImageFileMessageContent(ApiObject):
    type: Literal["image_file"] = "image_file"
    image_file: ImageFile


MessageContent: TypeAlias = Annotated[TextMessageContent | ImageFileMessageContent, Field(discriminator="type")]


class Message(ApiObject):
    id: str
    object: str = "thread.message"
    created_at: int
    thread_id: str
    role: MessageRole
    content: list[MessageContent] = Field(default_factory=list)
    assistant_id: str | None = None
    run_id: str | None = None
    file_ids: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)

    def text(self) -> str:
        """Concatenate the text parts of the message, ignoring images."""

        return "".join(part.text.value for part in self.content if isinstance(part, TextMessageContent))


class ListMessagesParams(ListParams):
    """Pagination for ``GET /threads/{thread_id}/messages``."""


ListMessagesResponse = ListResponse[Message]
ListThreadsResponse = ListResponse[Thread]


__all__ = [
    "Annotation",
    "DeletionStatus",
    "FileCitation",
    "FileCitationAnnotation",
    "FilePathAnnotation",
    "FilePathInfo",
    "ImageFile",
    "ImageFileMessageContent",
    "ListMessagesParams",
    "ListMessagesResponse",
    "ListThreadsResponse",
    "Message",
    "MessageContent",
    "MessageRequest",
    "MessageRequestBuilder",
    "MessageRole",
    "ModifyThreadRequest",
    "TextContent",
    "TextMessageContent",
    "Thread",
    "ThreadRequest",
    "ThreadRequestBuilder",
]
