"""Runs and run steps endpoints."""

from __future__ import annotations

from collections.abc import Sequence

from oaisdk.api.assistants import ASSISTANTS_BETA
from oaisdk.http import HttpClient
from oaisdk.models.runs import (
    CreateThreadAndRunRequest,
    ListRunsParams,
    ListRunsResponse,
    ListRunStepsParams,
    ListRunStepsResponse,
    ModifyRunRequest,
    Run,
    RunRequest,
    SubmitToolOutputsRequest,
    ToolOutput,
)


class RunsApi:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def create_run(self, thread_id: str, request: RunRequest) -> Run:
        request.validate()
        return await self._http.post(f"/threads/{thread_id}/runs", request, Run, beta=ASSISTANTS_BETA)

    async def retrieve_run(self, thread_id: str, run_id: str) -> Run:
        return await self._http.get(f"/threads/{thread_id}/runs/{run_id}", Run, beta=ASSISTANTS_BETA)

    async def modify_run(self, thread_id: str, run_id: str, request: ModifyRunRequest) -> Run:
        request.validate()
        return await self._http.post(f"/threads/{thread_id}/runs/{run_id}", request, Run, beta=ASSISTANTS_BETA)

    async def list_runs(self, thread_id: str, params: ListRunsParams | None = None) -> ListRunsResponse:
        query = params.to_query_params() if params else []
        return await self._http.get_with_query(
            f"/threads/{thread_id}/runs", query, ListRunsResponse, beta=ASSISTANTS_BETA
        )

    async def cancel_run(self, thread_id: str, run_id: str) -> Run:
        return await self._http.post(f"/threads/{thread_id}/runs/{run_id}/cancel", None, Run, beta=ASSISTANTS_BETA)

    async def submit_tool_outputs(self, thread_id: str, run_id: str, outputs: Sequence[ToolOutput]) -> Run:
        body = SubmitToolOutputsRequest(tool_outputs=list(outputs))
        return await self._http.post(
            f"/threads/{thread_id}/runs/{run_id}/submit_tool_outputs", body, Run, beta=ASSISTANTS_BETA
        )

    async def create_thread_and_run(self, request: CreateThreadAndRunRequest) -> Run:
        request.validate()
        return await self._http.post("/threads/runs", request, Run, beta=ASSISTANTS_BETA)

    async def list_run_steps(
        self, thread_id: str, run_id: str, params: ListRunStepsParams | None = None
    ) -> ListRunStepsResponse:
        query = params.to_query_params() if params else []
        return await self._http.get_with_query(
            f"/threads/{thread_id}/runs/{run_id}/steps", query, ListRunStepsResponse, beta=ASSISTANTS_BETA
        )


__all__ = ["RunsApi"]
