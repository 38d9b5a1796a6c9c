"""Assistants endpoints."""

from __future__ import annotations

from oaisdk.http import HttpClient
from oaisdk.models.assistants import Assistant, AssistantRequest, ListAssistantsParams, ListAssistantsResponse
from oaisdk.models.common import DeletionStatus

ASSISTANTS_BETA = "assistants=v2"


class AssistantsApi:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def create(self, request: AssistantRequest) -> Assistant:
        request.validate()
        return await self._http.post("/assistants", request, Assistant, beta=ASSISTANTS_BETA)

    async def retrieve(self, assistant_id: str) -> Assistant:
        return await self._http.get(f"/assistants/{assistant_id}", Assistant, beta=ASSISTANTS_BETA)

    async def modify(self, assistant_id: str, request: AssistantRequest) -> Assistant:
        request.validate()
        return await self._http.post(f"/assistants/{assistant_id}", request, Assistant, beta=ASSISTANTS_BETA)

    async def delete(self, assistant_id: str) -> DeletionStatus:
        return await self._http.delete(f"/assistants/{assistant_id}", DeletionStatus, beta=ASSISTANTS_BETA)

    async def list(self, params: ListAssistantsParams | None = None) -> ListAssistantsResponse:
        query = params.to_query_params() if params else []
        return await self._http.get_with_query("/assistants", query, ListAssistantsResponse, beta=ASSISTANTS_BETA)


__all__ = ["ASSISTANTS_BETA", "AssistantsApi"]
