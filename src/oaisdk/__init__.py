"""Typed async client for the OpenAI assistants, threads, runs and batch APIs."""

from __future__ import annotations

__version__ = "0.1.0"

from .batch import BatchReport, ReportThresholds  # noqa: E402, F401
from .client import OpenAIClient  # noqa: E402, F401
from .errors import (  # noqa: E402, F401
    ApiError,
    BuildError,
    ConstraintViolationError,
    FileOperationError,
    MissingFieldError,
)
from .models import (  # noqa: E402, F401
    AssistantRequest,
    CreateThreadAndRunRequest,
    MessageRequest,
    MessageRole,
    RunRequest,
    ThreadRequest,
)
