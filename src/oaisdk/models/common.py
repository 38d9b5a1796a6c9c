"""Shared wire-model plumbing: base classes, bounds and list pagination."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

from oaisdk.errors import ConstraintViolationError

MAX_METADATA_PAIRS = 16
MAX_METADATA_KEY_CHARS = 64
MAX_METADATA_VALUE_CHARS = 512
MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 100


class WireModel(BaseModel):
    """Request body sent to the API.

    Unset optional fields are ``None`` and are dropped from the payload rather
    than emitted as ``null``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", use_enum_values=False)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def validate(self) -> None:  # type: ignore[override]
        """Check documented bounds; raises ``ConstraintViolationError``."""


class ApiObject(BaseModel):
    """Object returned by the API; unknown fields are kept."""

    model_config = ConfigDict(frozen=True, extra="allow")


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def validate_metadata(metadata: Mapping[str, str] | None, *, prefix: str = "") -> None:
    """Enforce the pair count and key/value lengths shared by every metadata map."""

    if not metadata:
        return
    if len(metadata) > MAX_METADATA_PAIRS:
        owner = prefix or "Object"
        raise ConstraintViolationError("metadata", f"{owner} cannot have more than {MAX_METADATA_PAIRS} metadata pairs")
    for key, value in metadata.items():
        if len(key) > MAX_METADATA_KEY_CHARS:
            raise ConstraintViolationError(
                "metadata", f"Metadata key cannot exceed {MAX_METADATA_KEY_CHARS} characters"
            )
        if len(value) > MAX_METADATA_VALUE_CHARS:
            raise ConstraintViolationError(
                "metadata", f"Metadata value cannot exceed {MAX_METADATA_VALUE_CHARS} characters"
            )


def check_max_length(field: str, value: str | None, limit: int, label: str) -> None:
    """Reject ``value`` when it is longer than ``limit`` characters."""

    if value is not None and len(value) > limit:
        raise ConstraintViolationError(field, f"{label} cannot exceed {limit:,} characters")


def check_max_items(field: str, items: Sequence[Any] | None, limit: int, owner: str, noun: str) -> None:
    """Reject ``items`` when the collection holds more than ``limit`` entries."""

    if items is not None and len(items) > limit:
        raise ConstraintViolationError(field, f"{owner} cannot have more than {limit} {noun}")


def clamp_limit(limit: int) -> int:
    return max(MIN_LIST_LIMIT, min(MAX_LIST_LIMIT, limit))


class ListParams(BaseModel):
    """Cursor pagination parameters shared by every list endpoint."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: int | None = None
    order: SortOrder | None = None
    after: str | None = None
    before: str | None = None

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int | None) -> int | None:
        return None if value is None else clamp_limit(value)

    def with_limit(self, limit: int) -> ListParams:
        return self.model_copy(update={"limit": clamp_limit(limit)})

    def with_order(self, order: SortOrder | str) -> ListParams:
        return self.model_copy(update={"order": SortOrder(order)})

    def with_after(self, after: str) -> ListParams:
        return self.model_copy(update={"after": after})

    def with_before(self, before: str) -> ListParams:
        return self.model_copy(update={"before": before})

    def to_query_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.limit is not None:
            params.append(("limit", str(self.limit)))
        if self.order is not None:
            params.append(("order", self.order.value))
        if self.after is not None:
            params.append(("after", self.after))
        if self.before is not None:
            params.append(("before", self.before))
        return params


ItemT = TypeVar("ItemT")


class ListResponse(ApiObject, Generic[ItemT]):
    object: str = "list"
    data: list[ItemT]
    first_id: str | None = None
    last_id: str | None = None
    has_more: bool = False


class DeletionStatus(ApiObject):
    id: str
    object: str
    deleted: bool


__all__ = [
    "ApiObject",
    "DeletionStatus",
    "ListParams",
    "ListResponse",
    "MAX_LIST_LIMIT",
    "MAX_METADATA_KEY_CHARS",
    "MAX_METADATA_PAIRS",
    "MAX_METADATA_VALUE_CHARS",
    "MIN_LIST_LIMIT",
    "SortOrder",
    "WireModel",
    "check_max_items",
    "check_max_length",
    "clamp_limit",
    "validate_metadata",
]
