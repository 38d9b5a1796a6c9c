"""Batch API and file upload models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from oaisdk.models.common import ApiObject, ListResponse, WireModel

DEFAULT_COMPLETION_WINDOW = "24h"


class BatchStatus(str, Enum):
    VALIDATING = "validating"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    EXPIRED = "expired"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_BATCH_STATUSES

    def __str__(self) -> str:
        return self.value


_TERMINAL_BATCH_STATUSES = frozenset(
    {BatchStatus.COMPLETED, BatchStatus.FAILED, BatchStatus.EXPIRED, BatchStatus.CANCELLED}
)


class BatchRequestCounts(ApiObject):
    total: int = 0
    completed: int = 0
    failed: int = 0


class Batch(ApiObject):
    id: str
    object: str = "batch"
    endpoint: str
    errors: Any | None = None
    input_file_id: str
    completion_window: str = DEFAULT_COMPLETION_WINDOW
    status: BatchStatus
    output_file_id: str | None = None
    error_file_id: str | None = None
    created_at: int
    in_progress_at: int | None = None
    expires_at: int | None = None
    completed_at: int | None = None
    failed_at: int | None = None
    expired_at: int | None = None
    request_counts: BatchRequestCounts | None = None
    metadata: dict[str, Any] | None = None


class CreateBatchRequest(WireModel):
    """Body of ``POST /batches``."""

    input_file_id: str
    endpoint: str
    completion_window: str = DEFAULT_COMPLETION_WINDOW
    metadata: dict[str, Any] | None = None

    def with_metadata(self, metadata: dict[str, Any]) -> CreateBatchRequest:
        return self.model_copy(update={"metadata": dict(metadata)})


class FileUploadResponse(ApiObject):
    id: str
    object: str = "file"
    bytes: int
    created_at: int
    filename: str
    purpose: str


BatchList = ListResponse[Batch]


@dataclass(frozen=True, slots=True)
class YaraRuleInfo:
    """YARA rule extracted from one batch result line."""

    custom_id: str
    rule_content: str


__all__ = [
    "Batch",
    "BatchList",
    "BatchRequestCounts",
    "BatchStatus",
    "CreateBatchRequest",
    "DEFAULT_COMPLETION_WINDOW",
    "FileUploadResponse",
    "YaraRuleInfo",
]
