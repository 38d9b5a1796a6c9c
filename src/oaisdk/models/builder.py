"""Declarative fluent builders for request payloads.

A concrete builder is a frozen dataclass whose fields mirror the target
request with a leading underscore (``_model`` stages ``model``), every field
defaulting to ``None``. Setters never mutate the receiver: each one returns a
copy with the change applied, so a partially configured builder can be shared
and extended without aliasing. ``build()`` checks the declared required fields
in order, constructs the request and runs its ``validate()`` hook.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import fields, replace
from typing import Any, ClassVar, Generic, Protocol, Self, TypeVar

from pydantic import ValidationError

from oaisdk.errors import ConstraintViolationError, MissingFieldError


class Validatable(Protocol):
    def validate(self) -> None: ...


T = TypeVar("T", bound=Validatable)


class RequestBuilder(Generic[T]):
    """Base for staged request construction.

    Subclasses declare:

    * ``target``: the request class to instantiate;
    * ``required_fields``: public field names checked, in order, before construction;
    * ``validate_on_build``: whether ``target.validate()`` runs after construction.
    """

    __slots__ = ()

    target: ClassVar[type[Any]]
    required_fields: ClassVar[tuple[str, ...]] = ()
    validate_on_build: ClassVar[bool] = True

    def build(self) -> T:
        """Return the finished request or raise a ``BuildError`` subclass."""

        for name in self.required_fields:
            if getattr(self, f"_{name}") is None:
                raise MissingFieldError(name)

        values: dict[str, Any] = {}
        for staged in fields(self):  # type: ignore[arg-type]
            value = getattr(self, staged.name)
            if value is None:
                continue
            values[staged.name.removeprefix("_")] = _thaw(value)

        try:
            request: T = self.target(**values)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else self.target.__name__
            raise ConstraintViolationError(field, f"{field}: {first['msg']}") from exc
        if self.validate_on_build:
            request.validate()
        return request

    def _set(self, **changes: Any) -> Self:
        return replace(self, **{f"_{name}": value for name, value in changes.items()})  # type: ignore[type-var]

    def _append(self, name: str, items: Iterable[Any]) -> Self:
        current = getattr(self, f"_{name}") or ()
        return self._set(**{name: (*current, *items)})

    def _put(self, name: str, key: str, value: str) -> Self:
        current = dict(getattr(self, f"_{name}") or {})
        current[key] = value
        return self._set(**{name: current})


class MetadataBuilderMixin:
    """Setters shared by builders that stage a ``_metadata`` field."""

    __slots__ = ()

    def metadata_pair(self, key: object, value: object) -> Self:
        """Insert one metadata entry, creating the map if needed."""

        return self._put("metadata", str(key), str(value))  # type: ignore[attr-defined,no-any-return]

    def metadata(self, metadata: Mapping[str, str]) -> Self:
        """Replace the whole metadata map."""

        return self._set(metadata={str(k): str(v) for k, v in metadata.items()})  # type: ignore[attr-defined,no-any-return]


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    return value


__all__ = ["MetadataBuilderMixin", "RequestBuilder", "Validatable"]
