"""
Extraction worker pool for keyharvest.

Runs the resolved extractor against each file in an isolated execution
context. By default every file is handled in a worker process so that an
extractor which raises, hangs on one file, or kills its interpreter only
fails the future of that file and can never touch orchestrator state.

Architecture:
- ExtractionWorkerPool: async context manager owning the executor
- A semaphore bounds the number of in-flight submissions
- run_extraction_task(): module-level worker entry point, returns plain data
- Failures cross the isolation boundary as payloads and are converted back
  into ExtractionError by the pool
- A dead worker process breaks the shared executor; it is replaced and the
  affected files are re-run alone to find the one that crashed
"""

from __future__ import annotations

import asyncio
import logging
import os
import traceback
from collections.abc import Mapping, Sequence
from concurrent.futures import BrokenExecutor, Executor, ProcessPoolExecutor, ThreadPoolExecutor
from pathlib import Path
from typing import Literal, TypeAlias

from pydantic import ValidationError

from ..utils.core.exceptions import ExtractionError
from .extractors.loader import load_extractor
from .models import ExtractedKey, ExtractionResult, ExtractorRef

logger = logging.getLogger(__name__)

IsolationMode: TypeAlias = Literal["process", "thread"]

# Upper bound for the default pool size, regardless of CPU count
MAX_WORKERS_CEILING = 32

TaskPayload: TypeAlias = dict[str, object]


def default_max_workers() -> int:
    """Number of concurrent extractions used when none is configured."""
    return max(1, min(os.cpu_count() or 1, MAX_WORKERS_CEILING))


def _to_plain_keys(file: str, raw_keys: object) -> list[object]:
    """Convert extractor output into picklable plain data."""
    if isinstance(raw_keys, (str, bytes)) or not isinstance(raw_keys, Sequence):
        raise TypeError(
            f"extractor returned {type(raw_keys).__name__} for {file}, expected a list of keys"
        )

    plain: list[object] = []
    for item in raw_keys:  # pyright: ignore[reportUnknownVariableType]
        if isinstance(item, ExtractedKey):
            plain.append(item.model_dump(by_alias=True))
        elif isinstance(item, Mapping):
            plain.append(dict(item))  # pyright: ignore[reportUnknownArgumentType]
        else:
            raise TypeError(
                f"extractor returned a {type(item).__name__} entry for {file}, expected a mapping"  # pyright: ignore[reportUnknownArgumentType]
            )
    return plain


def run_extraction_task(file: str, ref: ExtractorRef) -> TaskPayload:
    """
    Worker entry point: extract the keys of one file.

    Never raises; any failure is reported as an error payload so that only
    plain data crosses the isolation boundary.

    Args:
        file: Path of the file to process
        ref: Extractor reference resolved by the orchestrator

    Returns:
        ``{"ok": True, "file", "keys"}`` or
        ``{"ok": False, "file", "error_type", "message", "traceback"}``
    """
    try:
        extract_function = load_extractor(ref)
        content = Path(file).read_text(encoding="utf-8", errors="replace")
        keys = _to_plain_keys(file, extract_function(file, content))
        return {"ok": True, "file": file, "keys": keys}
    except Exception as e:
        return {
            "ok": False,
            "file": file,
            "error_type": type(e).__name__,
            "message": str(e),
            "traceback": traceback.format_exc(),
        }


class ExtractionWorkerPool:
    """
    Bounded pool of isolated extraction workers.

    Use as an async context manager; ``submit`` may be awaited concurrently
    from many tasks. Leaving the context waits for in-flight work, there is
    no cancellation of submitted files.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        isolation: IsolationMode = "process",
    ) -> None:
        """
        Initialize the worker pool.

        Args:
            max_workers: Maximum concurrent extractions (defaults to the CPU
                count, capped at MAX_WORKERS_CEILING)
            isolation: "process" for one worker process per slot, "thread"
                to run extractors in threads of this interpreter

        Raises:
            ValueError: If max_workers is below 1 or isolation is unknown
        """
        if max_workers is None:
            max_workers = default_max_workers()
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        if isolation not in ("process", "thread"):
            raise ValueError(f"Unknown isolation mode: {isolation}")

        self.max_workers: int = max_workers
        self.isolation: IsolationMode = isolation
        self._executor: Executor | None = None
        self._slots: asyncio.Semaphore | None = None

    def _create_executor(self) -> Executor:
        if self.isolation == "process":
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="keyharvest-worker"
        )

    async def __aenter__(self) -> ExtractionWorkerPool:
        """Async context manager entry."""
        self._executor = self._create_executor()
        self._slots = asyncio.Semaphore(self.max_workers)
        logger.debug(
            f"Started extraction pool with {self.max_workers} {self.isolation} workers"
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit, waiting for in-flight extractions."""
        executor, self._executor = self._executor, None
        self._slots = None
        if executor is not None:
            await asyncio.to_thread(executor.shutdown, wait=True)
            logger.debug("Extraction pool shut down")

    def _replace_broken_executor(self, broken: Executor) -> None:
        """Swap in a fresh executor unless another submission already did."""
        if self._executor is not broken:
            return
        logger.warning("A worker process died; starting a new extraction pool")
        broken.shutdown(wait=False)
        self._executor = self._create_executor()

    async def _run_in_dedicated_worker(
        self, file: str, ref: ExtractorRef
    ) -> TaskPayload:
        """
        Re-run one file alone in a single-use worker process.

        A crash here can only have been caused by this file, so it is
        reported against it.
        """
        loop = asyncio.get_running_loop()
        executor = ProcessPoolExecutor(max_workers=1)
        try:
            return await loop.run_in_executor(executor, run_extraction_task, file, ref)
        except BrokenExecutor as e:
            raise ExtractionError(
                file,
                f"worker terminated abruptly: {e}",
                error_type=type(e).__name__,
            ) from e
        except Exception as e:
            raise ExtractionError(file, str(e), error_type=type(e).__name__) from e
        finally:
            await asyncio.to_thread(executor.shutdown, wait=True)

    async def submit(self, file: str, ref: ExtractorRef) -> ExtractionResult:
        """
        Extract the keys of one file in an isolated worker.

        When a worker process dies, every submission running in the shared
        pool sees it. Those files are retried one at a time in a dedicated
        worker so that only the file that actually crashes fails.

        Args:
            file: Path of the file to process
            ref: Extractor reference resolved once for the run

        Returns:
            The validated extraction result for the file

        Raises:
            RuntimeError: If the pool is not started
            ExtractionError: If the extractor failed, crashed its worker or
                returned malformed data
        """
        if self._executor is None or self._slots is None:
            raise RuntimeError(
                "ExtractionWorkerPool not started. Use as async context manager."
            )

        loop = asyncio.get_running_loop()

        async with self._slots:
            executor = self._executor
            if executor is None:
                raise RuntimeError("ExtractionWorkerPool was shut down")
            logger.debug(f"Extracting keys from {file}")
            try:
                payload = await loop.run_in_executor(
                    executor, run_extraction_task, file, ref
                )
            except BrokenExecutor as e:
                if self.isolation != "process":
                    raise ExtractionError(
                        file,
                        f"worker terminated abruptly: {e}",
                        error_type=type(e).__name__,
                    ) from e
                self._replace_broken_executor(executor)
                logger.debug(f"Retrying {file} in a dedicated worker process")
                payload = await self._run_in_dedicated_worker(file, ref)
            except Exception as e:
                # The task or its result could not cross the process boundary
                raise ExtractionError(
                    file, str(e), error_type=type(e).__name__
                ) from e

        return self._build_result(file, payload)

    @staticmethod
    def _build_result(file: str, payload: TaskPayload) -> ExtractionResult:
        """Turn a worker payload into an ExtractionResult or raise its error."""
        if not payload.get("ok"):
            error_type = payload.get("error_type")
            details = payload.get("traceback")
            raise ExtractionError(
                file,
                str(payload.get("message") or "extractor failed"),
                error_type=str(error_type) if error_type is not None else None,
                details=str(details) if details is not None else None,
            )

        try:
            result = ExtractionResult.model_validate(
                {"file": file, "keys": payload.get("keys", [])}
            )
        except ValidationError as e:
            raise ExtractionError(
                file,
                f"extractor returned malformed keys: {e}",
                error_type=type(e).__name__,
            ) from e

        logger.debug(f"Extracted {len(result.keys)} keys from {file}")
        return result
