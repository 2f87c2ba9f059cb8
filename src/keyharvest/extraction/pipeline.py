"""
Key-extraction pipeline.

This module acts as the orchestrator for a run: it discovers the files,
resolves the extractor once, fans the files out through an
ExtractionWorkerPool and folds the per-file results into FilteredKeys.

Usage Examples:
    From async code:
        >>> results = await extract_keys_of_files(["src/**/*.tsx"], None, "app")
        >>> keys = filter_extraction_result(results)

    From sync code (the CLI):
        >>> keys = run_extraction(ExtractionConfig(patterns=["src/**/*.py"]))
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from pathlib import Path

from ..config.schema import ExtractionConfig
from .aggregator import filter_extraction_result
from .discovery import discover_files
from .extractors.loader import resolve_extractor
from .models import ExtractionResult, ExtractionResults, ExtractorRef, FilteredKeys
from .worker_pool import ExtractionWorkerPool, IsolationMode

logger = logging.getLogger(__name__)


async def extract_keys_from_file(
    file: str,
    extractor: str | Path | ExtractorRef | None = None,
    *,
    pool: ExtractionWorkerPool | None = None,
) -> ExtractionResult:
    """
    Extract the keys of a single file.

    Args:
        file: Path of the file to process
        extractor: Resolved reference, custom module path, or None for the
            built-in extractor
        pool: Running pool to submit to; a single-worker pool is started
            when omitted

    Raises:
        ExtractorLoadError: If a custom extractor cannot be loaded
        ExtractionError: If extraction of the file fails
    """
    ref = extractor if isinstance(extractor, ExtractorRef) else resolve_extractor(extractor)

    if pool is not None:
        return await pool.submit(file, ref)

    async with ExtractionWorkerPool(max_workers=1) as own_pool:
        return await own_pool.submit(file, ref)


async def extract_keys_of_files(
    patterns: Iterable[str],
    extractor: str | Path | None = None,
    default_namespace: str | None = None,
    *,
    exclude: Iterable[str] | None = None,
    max_workers: int | None = None,
    isolation: IsolationMode = "process",
) -> ExtractionResults:
    """
    Extract keys from every file matched by the patterns.

    All files are processed concurrently; results are recorded in completion
    order with the default namespace applied to keys that lack one. If any
    file fails, the first error is raised once every submitted file has
    settled and all other results are discarded.

    Args:
        patterns: Glob patterns of the files to scan
        extractor: Custom extractor module path, or None for the built-in one
        default_namespace: Namespace for keys that do not declare one
        exclude: Directory names to skip during discovery
        max_workers: Maximum concurrent extractions
        isolation: "process" or "thread" worker isolation

    Returns:
        Extraction results keyed by file path, in completion order

    Raises:
        DiscoveryError: If the patterns cannot be resolved
        ExtractorLoadError: If the custom extractor cannot be loaded
        ExtractionError: If any file fails
    """
    files = discover_files(patterns, exclude)
    ref = resolve_extractor(extractor)
    results: ExtractionResults = {}

    if not files:
        logger.info("No files matched the given patterns")
        return results

    start_time = time.perf_counter()
    logger.info(f"Extracting keys from {len(files)} files using the {ref.describe()}")

    async with ExtractionWorkerPool(max_workers=max_workers, isolation=isolation) as pool:

        async def extract_one(file: str) -> None:
            result = await pool.submit(file, ref)
            keys = tuple(key.with_default_namespace(default_namespace) for key in result.keys)
            results[file] = result.model_copy(update={"keys": keys})

        tasks = [asyncio.create_task(extract_one(file)) for file in files]
        try:
            _ = await asyncio.gather(*tasks)
        except Exception as e:
            logger.error(f"Extraction aborted: {e}")
            # Submitted files cannot be cancelled; let them settle before leaving
            _ = await asyncio.gather(*tasks, return_exceptions=True)
            raise

    elapsed = time.perf_counter() - start_time
    total_keys = sum(len(result.keys) for result in results.values())
    logger.info(
        f"Extracted {total_keys} keys from {len(results)} files in {elapsed:.2f}s"
    )
    return results


async def extract_filtered_keys(
    patterns: Iterable[str],
    extractor: str | Path | None = None,
    default_namespace: str | None = None,
    *,
    exclude: Iterable[str] | None = None,
    max_workers: int | None = None,
    isolation: IsolationMode = "process",
) -> FilteredKeys:
    """Run extraction and aggregation, returning the namespace-partitioned keys."""
    results = await extract_keys_of_files(
        patterns,
        extractor,
        default_namespace,
        exclude=exclude,
        max_workers=max_workers,
        isolation=isolation,
    )
    return filter_extraction_result(results, default_namespace)


def run_extraction(settings: ExtractionConfig) -> FilteredKeys:
    """
    Synchronous entry point used by the CLI.

    Args:
        settings: Validated extraction settings

    Returns:
        The aggregated keys
    """
    return asyncio.run(
        extract_filtered_keys(
            settings.patterns,
            settings.extractor,
            settings.default_namespace,
            exclude=settings.exclude,
            max_workers=settings.max_workers,
            isolation=settings.isolation,
        )
    )
