"""Batch endpoints plus the local helpers that post-process batch output."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from oaisdk.batch.report import DEFAULT_THRESHOLDS, BatchReport, ReportThresholds
from oaisdk.batch.results import build_report, save_yara_rules, write_report
from oaisdk.errors import ApiClientError, BatchTimeoutError, FileOperationError
from oaisdk.http import HttpClient
from oaisdk.models.batch import Batch, BatchList, CreateBatchRequest, FileUploadResponse

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECS = 30.0
DEFAULT_MAX_WAIT_SECS = 24 * 60 * 60.0


class BatchApi:
    def __init__(
        self,
        http: HttpClient,
        *,
        poll_interval_secs: float = DEFAULT_POLL_INTERVAL_SECS,
        max_wait_secs: float = DEFAULT_MAX_WAIT_SECS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._http = http
        self._poll_interval_secs = poll_interval_secs
        self._max_wait_secs = max_wait_secs
        self._sleep = sleep
        self._clock = clock

    async def create_batch(self, input_file_id: str, endpoint: str) -> Batch:
        return await self.create_batch_with_metadata(input_file_id, endpoint, None)

    async def create_batch_with_metadata(
        self, input_file_id: str, endpoint: str, metadata: dict[str, Any] | None
    ) -> Batch:
        request = CreateBatchRequest(input_file_id=input_file_id, endpoint=endpoint, metadata=metadata)
        return await self._http.post("/batches", request, Batch)

    async def get_batch_status(self, batch_id: str) -> Batch:
        return await self._http.get(f"/batches/{batch_id}", Batch)

    async def cancel_batch(self, batch_id: str) -> Batch:
        return await self._http.post(f"/batches/{batch_id}/cancel", None, Batch)

    async def list_batches(self, limit: int | None = None, after: str | None = None) -> BatchList:
        params: list[tuple[str, str]] = []
        if limit is not None:
            params.append(("limit", str(limit)))
        if after is not None:
            params.append(("after", after))
        return await self._http.get_with_query("/batches", params, BatchList)

    async def wait_for_completion(
        self,
        batch_id: str,
        poll_interval_secs: float | None = None,
        max_wait_secs: float | None = None,
    ) -> Batch:
        """Poll until the batch reaches a terminal status.

        Raises ``BatchTimeoutError`` once ``max_wait_secs`` has elapsed.
        """

        interval = self._poll_interval_secs if poll_interval_secs is None else poll_interval_secs
        max_wait = self._max_wait_secs if max_wait_secs is None else max_wait_secs
        started = self._clock()

        while True:
            batch = await self.get_batch_status(batch_id)
            if batch.status.is_terminal:
                logger.info("batch %s finished with status %s", batch_id, batch.status)
                return batch

            if self._clock() - started > max_wait:
                raise BatchTimeoutError(
                    f"timeout waiting for batch {batch_id} to complete after {max_wait:g} seconds"
                )

            logger.debug("batch %s is %s; polling again in %gs", batch_id, batch.status, interval)
            await self._sleep(interval)

    async def upload_batch_file(self, file_path: Path | str) -> FileUploadResponse:
        path = Path(file_path)
        try:
            contents = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise FileOperationError(f"failed to read batch input {path}: {exc}") from exc
        filename = path.name or "batch_input.jsonl"
        return await self._http.post_multipart(
            "/files",
            files={"file": (filename, contents, "application/jsonl")},
            data={"purpose": "batch"},
            model=FileUploadResponse,
        )

    async def download_file(self, file_id: str) -> str:
        return await self._http.get_text(f"/files/{file_id}/content")

    async def get_batch_results(self, batch_id: str) -> str:
        batch = await self.get_batch_status(batch_id)
        if batch.output_file_id is None:
            raise ApiClientError(f"batch {batch_id} has no output file; status: {batch.status}", status_code=400)
        return await self.download_file(batch.output_file_id)

    async def get_batch_errors(self, batch_id: str) -> str | None:
        batch = await self.get_batch_status(batch_id)
        if batch.error_file_id is None:
            return None
        return await self.download_file(batch.error_file_id)

    async def download_batch_results(self, batch_id: str, output_path: Path | str) -> int:
        """Save the results file locally and return its line count."""

        results = await self.get_batch_results(batch_id)
        await asyncio.to_thread(_write, Path(output_path), results)
        return len(results.splitlines())

    async def download_batch_errors(self, batch_id: str, error_path: Path | str) -> int:
        errors = await self.get_batch_errors(batch_id)
        if errors is None:
            return 0
        await asyncio.to_thread(_write, Path(error_path), errors)
        return len(errors.splitlines())

    async def download_all_batch_files(self, batch_id: str, output_dir: Path | str) -> tuple[int, int]:
        directory = Path(output_dir)
        try:
            await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise FileOperationError(f"failed to create output directory {directory}: {exc}") from exc

        result_count = await self.download_batch_results(batch_id, directory / f"{batch_id}_results.jsonl")
        error_count = await self.download_batch_errors(batch_id, directory / f"{batch_id}_errors.jsonl")
        return result_count, error_count

    async def process_yara_results(self, results_file: Path | str, output_dir: Path | str) -> int:
        return await asyncio.to_thread(save_yara_rules, results_file, output_dir)

    async def generate_batch_report(
        self,
        results_file: Path | str,
        errors_file: Path | str | None,
        report_path: Path | str,
        *,
        thresholds: ReportThresholds = DEFAULT_THRESHOLDS,
    ) -> BatchReport:
        report = await asyncio.to_thread(build_report, results_file, errors_file, thresholds=thresholds)
        await asyncio.to_thread(write_report, report, report_path)
        return report


def _write(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FileOperationError(f"failed to write {path}: {exc}") from exc


__all__ = ["BatchApi", "DEFAULT_MAX_WAIT_SECS", "DEFAULT_POLL_INTERVAL_SECS"]
