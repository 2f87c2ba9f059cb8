"""
Key-extraction pipeline.

Discovers source files, runs the resolved extractor against each of them in
isolated workers and aggregates the keys into a namespace-partitioned map.
"""

from .aggregator import filter_extraction_result
from .discovery import discover_files
from .extractors.loader import resolve_extractor
from .models import (
    BUILTIN_EXTRACTOR,
    NULL_NAMESPACE,
    ExtractedKey,
    ExtractionResult,
    ExtractionResults,
    ExtractorRef,
    FilteredKeys,
)
from .pipeline import (
    extract_filtered_keys,
    extract_keys_from_file,
    extract_keys_of_files,
    run_extraction,
)
from .worker_pool import ExtractionWorkerPool

__all__ = [
    "BUILTIN_EXTRACTOR",
    "NULL_NAMESPACE",
    "ExtractedKey",
    "ExtractionResult",
    "ExtractionResults",
    "ExtractionWorkerPool",
    "ExtractorRef",
    "FilteredKeys",
    "discover_files",
    "extract_filtered_keys",
    "extract_keys_from_file",
    "extract_keys_of_files",
    "filter_extraction_result",
    "resolve_extractor",
    "run_extraction",
]
