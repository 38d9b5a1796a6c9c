"""Facade bundling one HTTP client with the per-surface API wrappers."""

from __future__ import annotations

import httpx

from oaisdk.api.assistants import AssistantsApi
from oaisdk.api.batch import DEFAULT_MAX_WAIT_SECS, DEFAULT_POLL_INTERVAL_SECS, BatchApi
from oaisdk.api.runs import RunsApi
from oaisdk.api.threads import ThreadsApi
from oaisdk.config import Settings
from oaisdk.http import DEFAULT_BASE_URL, EventLogger, HttpClient


class OpenAIClient:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        organization: str | None = None,
        project: str | None = None,
        timeout: httpx.Timeout | float | None = None,
        client: httpx.AsyncClient | None = None,
        poll_interval_secs: float = DEFAULT_POLL_INTERVAL_SECS,
        max_wait_secs: float = DEFAULT_MAX_WAIT_SECS,
        logger: EventLogger | None = None,
    ) -> None:
        self.http = HttpClient(
            api_key,
            base_url=base_url,
            organization=organization,
            project=project,
            timeout=timeout,
            client=client,
            logger=logger,
        )
        self.assistants = AssistantsApi(self.http)
        self.threads = ThreadsApi(self.http)
        self.runs = RunsApi(self.http)
        self.batch = BatchApi(self.http, poll_interval_secs=poll_interval_secs, max_wait_secs=max_wait_secs)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        client: httpx.AsyncClient | None = None,
        logger: EventLogger | None = None,
    ) -> OpenAIClient:
        if not settings.api_key:
            raise ValueError("OPENAI_API_KEY is not set")
        return cls(
            settings.api_key,
            base_url=settings.base_url,
            organization=settings.organization,
            project=settings.project,
            timeout=settings.timeout,
            client=client,
            poll_interval_secs=settings.poll_interval_secs,
            max_wait_secs=settings.max_wait_secs,
            logger=logger,
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> OpenAIClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["OpenAIClient"]
