"""Endpoint wrappers grouped by API surface."""

from __future__ import annotations

from .assistants import AssistantsApi  # noqa: F401
from .batch import BatchApi  # noqa: F401
from .runs import RunsApi  # noqa: F401
from .threads import ThreadsApi  # noqa: F401
