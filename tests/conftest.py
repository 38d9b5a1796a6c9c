import json
import pathlib
import shutil
import sys
from collections.abc import Callable, Mapping
from typing import Any

import httpx
import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

# Ensure src/ is importable when running tests without installing the package.
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from oaisdk.http import HttpClient  # noqa: E402

API_ENV_VARS = ("OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_ORGANIZATION", "OPENAI_PROJECT")


@pytest.fixture(autouse=True)
def _isolate_oaisdk_home(monkeypatch: pytest.MonkeyPatch):
    """Point OAISDK_HOME at a repo-local sandbox and drop real API credentials."""

    home = PROJECT_ROOT / ".work"
    if home.exists():
        shutil.rmtree(home, ignore_errors=True)
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("OAISDK_HOME", str(home))
    for name in API_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


# ============================================================================
# HTTP Transport Fixtures
# ============================================================================


@pytest.fixture
def mock_http_handler():
    """Factory fixture for httpx request handlers returning one canned response."""

    def _handler(
        status_code: int = 200,
        json_body: Any = None,
        text: str = "",
        headers: dict[str, str] | None = None,
        record: list[httpx.Request] | None = None,
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            if record is not None:
                record.append(request)
            if json_body is not None:
                return httpx.Response(status_code, json=json_body, headers=headers or {}, request=request)
            return httpx.Response(status_code, text=text, headers=headers or {}, request=request)

        return handler

    return _handler


@pytest.fixture
def route_handler():
    """Factory fixture dispatching on ``(method, path)``.

    Route values are either an ``httpx.Response`` or a callable taking the
    request and returning one. Unknown routes answer 404.
    """

    def _handler(
        routes: Mapping[tuple[str, str], httpx.Response | Callable[[httpx.Request], httpx.Response]],
        record: list[httpx.Request] | None = None,
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            if record is not None:
                record.append(request)
            key = (request.method, request.url.path)
            if key not in routes:
                return httpx.Response(404, json={"error": {"message": f"no route for {key}"}})
            route = routes[key]
            return route(request) if callable(route) else route

        return handler

    return _handler


@pytest.fixture
def mock_http_client(mock_http_handler):
    """Fixture factory that provides an httpx.AsyncClient with MockTransport."""

    def _client(handler=None):
        if handler is None:
            handler = mock_http_handler()
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _client


@pytest.fixture
def api_http(mock_http_client):
    """Fixture factory for an ``HttpClient`` wired to a mock transport."""

    def _http(handler, **kwargs: Any) -> HttpClient:
        return HttpClient("sk-test", client=mock_http_client(handler), **kwargs)

    return _http


# ============================================================================
# API payload fixtures
# ============================================================================


@pytest.fixture
def batch_json():
    """Factory for a ``Batch`` object as the API returns it."""

    def _batch(batch_id: str = "batch_1", status: str = "in_progress", **overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": batch_id,
            "object": "batch",
            "endpoint": "/v1/chat/completions",
            "errors": None,
            "input_file_id": "file-in",
            "completion_window": "24h",
            "status": status,
            "output_file_id": None,
            "error_file_id": None,
            "created_at": 1_700_000_000,
            "request_counts": {"total": 3, "completed": 2, "failed": 1},
            "metadata": None,
        }
        payload.update(overrides)
        return payload

    return _batch


@pytest.fixture
def result_line():
    """Factory for one batch results JSONL line."""

    def _line(custom_id: str, content: str | None = None, error: dict[str, Any] | None = None) -> str:
        response = None
        if content is not None:
            response = {
                "status_code": 200,
                "request_id": f"req_{custom_id}",
                "body": {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]},
            }
        return json.dumps({"id": f"batch_req_{custom_id}", "custom_id": custom_id, "response": response, "error": error})

    return _line
