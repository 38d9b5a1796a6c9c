import json

import httpx
import pytest

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
from oaisdk.http import HttpClient, map_status_error
from oaisdk.models.common import DeletionStatus, ListParams

DELETED = {"id": "asst_1", "object": "assistant.deleted", "deleted": True}


def test_rejects_blank_api_key() -> None:
    with pytest.raises(ValueError):
        HttpClient("   ")


def test_headers_include_optional_values() -> None:
    client = HttpClient("sk-test", organization="org-1", project="proj-1")

    headers = client.headers(beta="assistants=v2")

    assert headers["Authorization"] == "Bearer sk-test"
    assert headers["User-Agent"] == f"oaisdk/{__version__}"
    assert headers["OpenAI-Organization"] == "org-1"
    assert headers["OpenAI-Project"] == "proj-1"
    assert headers["OpenAI-Beta"] == "assistants=v2"
    assert "OpenAI-Beta" not in client.headers()


@pytest.mark.asyncio
async def test_get_decodes_model_and_sends_headers(api_http, mock_http_handler) -> None:
    record: list[httpx.Request] = []
    http = api_http(mock_http_handler(json_body=DELETED, record=record), base_url="https://example.test/v1/")

    result = await http.get("/assistants/asst_1", DeletionStatus, beta="assistants=v2")

    assert result == DeletionStatus(**DELETED)
    request = record[0]
    assert str(request.url) == "https://example.test/v1/assistants/asst_1"
    assert request.headers["authorization"] == "Bearer sk-test"
    assert request.headers["openai-beta"] == "assistants=v2"


@pytest.mark.asyncio
async def test_get_with_query_sends_params(api_http, mock_http_handler) -> None:
    record: list[httpx.Request] = []
    http = api_http(mock_http_handler(json_body=DELETED, record=record))

    await http.get_with_query("/assistants", ListParams(limit=5, after="a").to_query_params(), DeletionStatus)

    params = record[0].url.params
    assert params["limit"] == "5"
    assert params["after"] == "a"


@pytest.mark.asyncio
async def test_post_serializes_payload_without_nulls(api_http, mock_http_handler) -> None:
    from oaisdk.models.assistants import AssistantRequest

    record: list[httpx.Request] = []
    http = api_http(mock_http_handler(json_body=DELETED, record=record))

    await http.post("/assistants", AssistantRequest(model="gpt-4", name="n"), DeletionStatus)
    await http.post("/raw", {"x": 1}, DeletionStatus)
    await http.post("/empty", None, DeletionStatus)

    assert json.loads(record[0].content) == {"model": "gpt-4", "name": "n"}
    assert json.loads(record[1].content) == {"x": 1}
    assert record[2].content == b""


@pytest.mark.asyncio
async def test_get_text_returns_raw_body(api_http, mock_http_handler) -> None:
    http = api_http(mock_http_handler(text="line1\nline2\n"))

    assert await http.get_text("/files/f/content") == "line1\nline2\n"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error_cls"),
    [
        (401, ApiAuthError),
        (403, ApiAuthError),
        (429, ApiRateLimitError),
        (500, ApiServerError),
        (503, ApiServerError),
        (404, ApiClientError),
        (400, ApiClientError),
    ],
)
async def test_status_errors_are_mapped(api_http, mock_http_handler, status: int, error_cls: type[ApiError]) -> None:
    http = api_http(mock_http_handler(status_code=status, json_body={"error": {"message": "nope"}}))

    with pytest.raises(error_cls) as excinfo:
        await http.get("/assistants/x", DeletionStatus)

    assert excinfo.value.status_code == status
    assert "nope" in str(excinfo.value)


def test_rate_limit_mentions_retry_after() -> None:
    request = httpx.Request("GET", "https://example.test")
    response = httpx.Response(429, text="slow", headers={"retry-after": "3"}, request=request)
    exc = httpx.HTTPStatusError("rate", request=request, response=response)

    error = map_status_error(exc)

    assert isinstance(error, ApiRateLimitError)
    assert "retry after 3s" in str(error)
    assert "slow" in str(error)


@pytest.mark.asyncio
async def test_timeout_maps_to_api_timeout(api_http) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    http = api_http(handler)

    with pytest.raises(ApiTimeoutError):
        await http.get("/assistants", DeletionStatus)


@pytest.mark.asyncio
async def test_transport_failure_maps_to_client_error(api_http) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    http = api_http(handler)

    with pytest.raises(ApiClientError) as excinfo:
        await http.get("/assistants", DeletionStatus)

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_undecodable_body_raises_parse_error(api_http, mock_http_handler) -> None:
    http = api_http(mock_http_handler(json_body={"unexpected": True}))

    with pytest.raises(ApiResponseParseError) as excinfo:
        await http.get("/assistants/x", DeletionStatus)

    assert excinfo.value.status_code == 200


@pytest.mark.asyncio
async def test_event_logger_receives_request_complete(api_http, mock_http_handler) -> None:
    events: list[tuple[str, dict[str, object]]] = []
    http = api_http(
        mock_http_handler(json_body=DELETED, headers={"x-request-id": "req_123"}),
        logger=lambda event, fields: events.append((event, fields)),
    )

    await http.delete("/assistants/asst_1", DeletionStatus)

    assert len(events) == 1
    event, fields = events[0]
    assert event == "request_complete"
    assert fields["method"] == "DELETE"
    assert fields["status"] == 200
    assert fields["request_id"] == "req_123"


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(mock_http_client) -> None:
    inner = mock_http_client()

    async with HttpClient("sk-test", client=inner):
        pass

    assert not inner.is_closed
    await inner.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed() -> None:
    http = HttpClient("sk-test")

    await http.aclose()

    assert http._client.is_closed
