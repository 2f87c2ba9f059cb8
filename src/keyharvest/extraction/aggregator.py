"""Fold per-file extraction results into a namespace-partitioned key map."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from ..utils.core.exceptions import AggregationError
from .models import ExtractedKey, ExtractionResult, FilteredKeys, Namespace

logger = logging.getLogger(__name__)


def filter_extraction_result(
    data: Mapping[str, ExtractionResult],
    default_namespace: str | None = None,
) -> FilteredKeys:
    """
    Aggregate extraction results into namespace buckets.

    Files are folded in the iteration order of ``data`` (completion order for
    results produced by the pipeline) and each bucket maps a key name to its
    default value. When the same key appears more than once in a bucket the
    last occurrence wins.

    Args:
        data: Extraction results keyed by file path
        default_namespace: Namespace for keys that do not name one; without
            it such keys go to the null namespace (``None``)

    Returns:
        Read-only mapping of namespace to ``{key_name: default_value}``

    Raises:
        AggregationError: If an entry is not an ExtractionResult of
            ExtractedKey objects
    """
    buckets: dict[Namespace, dict[str, str | None]] = {}

    for file, result in data.items():
        if not isinstance(result, ExtractionResult):  # pyright: ignore[reportUnnecessaryIsInstance]
            raise AggregationError(
                f"Unexpected extraction result for {file}: {type(result).__name__}",
                context={"file": file},
            )

        for key in result.keys:
            if not isinstance(key, ExtractedKey) or not key.key_name:  # pyright: ignore[reportUnnecessaryIsInstance]
                raise AggregationError(
                    f"Malformed key in extraction result for {file}: {key!r}",
                    context={"file": file},
                )

            namespace = key.namespace if key.namespace is not None else default_namespace
            bucket = buckets.setdefault(namespace, {})
            if key.key_name in bucket and bucket[key.key_name] != key.default_value:
                logger.debug(
                    f"Key '{key.key_name}' in namespace {namespace!r} overridden by {file}"
                )
            bucket[key.key_name] = key.default_value

    total = sum(len(bucket) for bucket in buckets.values())
    logger.info(f"Aggregated {total} unique keys across {len(buckets)} namespaces")

    return MappingProxyType(
        {namespace: MappingProxyType(bucket) for namespace, bucket in buckets.items()}
    )


def to_plain_dict(keys: FilteredKeys) -> dict[Namespace, dict[str, str | None]]:
    """Return a mutable deep copy of a FilteredKeys mapping."""
    return {namespace: dict(bucket) for namespace, bucket in keys.items()}
