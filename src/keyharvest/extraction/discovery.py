"""
File discovery for the extraction pipeline.

Expands glob patterns into a deduplicated list of regular files. ``**``
matches recursively and hidden files are included.
"""

from __future__ import annotations

import glob
import logging
import os
from collections.abc import Iterable

from ..utils.core.exceptions import DiscoveryError

logger = logging.getLogger(__name__)


def _expand_pattern(pattern: str) -> list[str]:
    """Expand a single glob pattern, raising on filesystem access failures."""
    if not isinstance(pattern, str) or not pattern:  # pyright: ignore[reportUnnecessaryIsInstance]
        raise DiscoveryError(
            f"Invalid file pattern: {pattern!r}",
            user_message="File patterns must be non-empty strings.",
        )

    expanded = os.path.expanduser(pattern)
    try:
        return glob.glob(expanded, recursive=True, include_hidden=True)
    except OSError as e:
        raise DiscoveryError(
            f"Cannot resolve pattern {pattern!r}: {e}", context={"pattern": pattern}
        ) from e


def discover_files(
    patterns: Iterable[str], exclude: Iterable[str] | None = None
) -> list[str]:
    """
    Resolve glob patterns into the regular files they match.

    Args:
        patterns: Glob patterns, relative to the working directory or absolute
        exclude: Directory names; files below any of them are skipped

    Returns:
        Deduplicated list of file paths. Directories are never returned and
        callers must not depend on the order.

    Raises:
        DiscoveryError: If a pattern is invalid or the filesystem cannot be read
    """
    pattern_list = [patterns] if isinstance(patterns, str) else list(patterns)
    excluded_dirs = set(exclude or ())
    files: dict[str, str] = {}

    for pattern in pattern_list:
        matches = _expand_pattern(pattern)
        logger.debug(f"Pattern {pattern!r} matched {len(matches)} paths")

        for match in matches:
            if not os.path.isfile(match):
                continue

            normalized = os.path.normpath(match)
            parts = normalized.split(os.sep)
            if excluded_dirs and any(part in excluded_dirs for part in parts[:-1]):
                continue

            _ = files.setdefault(normalized, match)

    logger.info(f"Discovered {len(files)} files from {len(pattern_list)} patterns")
    return list(files.keys())
