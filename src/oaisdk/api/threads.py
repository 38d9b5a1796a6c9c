"""Threads and messages endpoints."""

from __future__ import annotations

from oaisdk.api.assistants import ASSISTANTS_BETA
from oaisdk.http import HttpClient
from oaisdk.models.common import DeletionStatus
from oaisdk.models.threads import (
    ListMessagesParams,
    ListMessagesResponse,
    Message,
    MessageRequest,
    ModifyThreadRequest,
    Thread,
    ThreadRequest,
)


class ThreadsApi:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def create(self, request: ThreadRequest | None = None) -> Thread:
        body = request or ThreadRequest()
        body.validate()
        return await self._http.post("/threads", body, Thread, beta=ASSISTANTS_BETA)

    async def retrieve(self, thread_id: str) -> Thread:
        return await self._http.get(f"/threads/{thread_id}", Thread, beta=ASSISTANTS_BETA)

    async def modify(self, thread_id: str, request: ModifyThreadRequest) -> Thread:
        request.validate()
        return await self._http.post(f"/threads/{thread_id}", request, Thread, beta=ASSISTANTS_BETA)

    async def delete(self, thread_id: str) -> DeletionStatus:
        return await self._http.delete(f"/threads/{thread_id}", DeletionStatus, beta=ASSISTANTS_BETA)

    async def create_message(self, thread_id: str, request: MessageRequest) -> Message:
        request.validate()
        return await self._http.post(f"/threads/{thread_id}/messages", request, Message, beta=ASSISTANTS_BETA)

    async def retrieve_message(self, thread_id: str, message_id: str) -> Message:
        return await self._http.get(f"/threads/{thread_id}/messages/{message_id}", Message, beta=ASSISTANTS_BETA)

    async def list_messages(self, thread_id: str, params: ListMessagesParams | None = None) -> ListMessagesResponse:
        query = params.to_query_params() if params else []
        return await self._http.get_with_query(
            f"/threads/{thread_id}/messages", query, ListMessagesResponse, beta=ASSISTANTS_BETA
        )


__all__ = ["ThreadsApi"]
