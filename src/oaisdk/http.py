"""httpx-based JSON client for the OpenAI REST API."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from oaisdk import __version__
from oaisdk.errors import (
    ApiAuthError,
    ApiClientError,
    ApiError,
    ApiRateLimitError,
    ApiResponseParseError,
    ApiServerError,
    ApiTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=5.0)

ModelT = TypeVar("ModelT", bound=BaseModel)
EventLogger = Callable[[str, dict[str, object]], None]


class HttpClient:
    """Thin async wrapper that injects auth headers and maps failures to ``ApiError``."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        organization: str | None = None,
        project: str | None = None,
        timeout: httpx.Timeout | float | None = None,
        client: httpx.AsyncClient | None = None,
        user_agent: str | None = f"oaisdk/{__version__}",
        logger: EventLogger | None = None,
    ) -> None:
        if not api_key.strip():
            raise ValueError("api_key cannot be empty")

        self.api_key = api_key.strip()
        self.base_url = base_url.rstrip("/")
        self.organization = organization
        self.project = project
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)
        self._user_agent = user_agent
        self._logger = logger

    def headers(self, beta: str | None = None) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        if self.project:
            headers["OpenAI-Project"] = self.project
        if beta:
            headers["OpenAI-Beta"] = beta
        return headers

    async def get(self, path: str, model: type[ModelT], *, beta: str | None = None) -> ModelT:
        response = await self._request("GET", path, beta=beta)
        return _decode(response, model)

    async def get_with_query(
        self,
        path: str,
        params: Sequence[tuple[str, str]],
        model: type[ModelT],
        *,
        beta: str | None = None,
    ) -> ModelT:
        response = await self._request("GET", path, params=list(params), beta=beta)
        return _decode(response, model)

    async def post(
        self,
        path: str,
        body: BaseModel | Mapping[str, Any] | None,
        model: type[ModelT],
        *,
        beta: str | None = None,
    ) -> ModelT:
        payload = _to_json(body)
        response = await self._request("POST", path, json_body=payload, beta=beta)
        return _decode(response, model)

    async def post_multipart(
        self,
        path: str,
        *,
        files: Mapping[str, tuple[str, bytes, str]],
        data: Mapping[str, str],
        model: type[ModelT],
    ) -> ModelT:
        response = await self._request("POST", path, files=dict(files), data=dict(data))
        return _decode(response, model)

    async def get_text(self, path: str) -> str:
        response = await self._request("GET", path)
        return response.text

    async def delete(self, path: str, model: type[ModelT], *, beta: str | None = None) -> ModelT:
        response = await self._request("DELETE", path, beta=beta)
        return _decode(response, model)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json_body: Any = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        data: dict[str, str] | None = None,
        beta: str | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        start = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json_body,
                files=files,
                data=data,
                headers=self.headers(beta),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ApiTimeoutError(f"{method} {path} timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise map_status_error(exc) from exc
        except httpx.RequestError as exc:
            raise ApiClientError(f"{method} {path} failed: {exc}") from exc

        duration = time.perf_counter() - start
        logger.debug("%s %s -> %s in %.3fs", method, path, response.status_code, duration)
        if self._logger:
            self._logger(
                "request_complete",
                {
                    "method": method,
                    "path": path,
                    "status": response.status_code,
                    "request_id": response.headers.get("x-request-id"),
                    "duration_sec": duration,
                },
            )
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def map_status_error(exc: httpx.HTTPStatusError) -> ApiError:
    status = exc.response.status_code
    message = _error_message(exc.response)
    suffix = f": {message}" if message else ""
    retry_after = exc.response.headers.get("retry-after")
    retry_suffix = f" (retry after {retry_after}s)" if retry_after else ""
    if status in (401, 403):
        return ApiAuthError(f"auth failed with status {status}{suffix}", status_code=status)
    if status == 429:
        return ApiRateLimitError(f"rate limited{retry_suffix}{suffix}", status_code=status)
    if status >= 500:
        return ApiServerError(f"server error {status}{suffix}", status_code=status)
    return ApiClientError(f"request failed with status {status}{suffix}", status_code=status)


def _error_message(response: httpx.Response) -> str:
    """Prefer the API's ``error.message``; fall back to the raw body."""

    text = response.text
    try:
        body = json.loads(text) if text else None
    except json.JSONDecodeError:
        return text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return str(error["message"])
    return text


def _to_json(body: BaseModel | Mapping[str, Any] | None) -> Any:
    if body is None:
        return None
    if isinstance(body, BaseModel):
        to_payload = getattr(body, "to_payload", None)
        if callable(to_payload):
            return to_payload()
        return body.model_dump(mode="json", exclude_none=True)
    return dict(body)


def _decode(response: httpx.Response, model: type[ModelT]) -> ModelT:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as exc:
        raise ApiResponseParseError(
            f"could not decode {model.__name__} from response", status_code=response.status_code
        ) from exc


__all__ = ["DEFAULT_BASE_URL", "DEFAULT_TIMEOUT", "HttpClient", "map_status_error"]
