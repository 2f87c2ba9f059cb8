"""
Extractor plugin resolution.

An extractor is any module exposing a callable ``extract(path, content)``
that returns the ordered keys found in one file. ``resolve_extractor`` runs
once per extraction run in the orchestrator and validates the module;
``load_extractor`` is called inside each worker to obtain the callable.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from types import ModuleType

from ...utils.core.exceptions import ExtractorLoadError
from ..models import BUILTIN_EXTRACTOR, ExtractedKey, ExtractorRef
from . import default

logger = logging.getLogger(__name__)

ExtractFunction = Callable[[str, str], Sequence[Mapping[str, object] | ExtractedKey]]

BUILTIN_EXTRACTOR_NAMES = {"builtin", "default"}

EXTRACT_FUNCTION_NAME = "extract"

# Custom modules already imported in this process, keyed by absolute path
_module_cache: dict[str, ExtractFunction] = {}


def _import_module_from_path(path: Path) -> ModuleType:
    """
    Import a Python module from an arbitrary file path.

    Raises:
        ExtractorLoadError: If the module cannot be imported
    """
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    module_name = f"keyharvest_custom_extractor_{digest}"

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ExtractorLoadError(
            f"Cannot load extractor module from {path}",
            user_message=f"The extractor {path} is not a loadable Python module.",
        )

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ExtractorLoadError(
            f"Error while importing extractor {path}: {e}",
            context={"path": str(path)},
        ) from e

    return module


def _get_extract_function(module: ModuleType, path: Path) -> ExtractFunction:
    extract_function: object = getattr(module, EXTRACT_FUNCTION_NAME, None)
    if not callable(extract_function):
        raise ExtractorLoadError(
            f"Extractor {path} does not define a callable '{EXTRACT_FUNCTION_NAME}(path, content)'",
            context={"path": str(path)},
        )
    return extract_function  # pyright: ignore[reportReturnType]


def resolve_extractor(extractor: str | Path | None) -> ExtractorRef:
    """
    Resolve the extractor to use for a run.

    Args:
        extractor: Path to a custom extractor module, or None / "builtin"
            for the built-in extractor

    Returns:
        Reference handed to every worker submission of the run

    Raises:
        ExtractorLoadError: If the custom module is missing or invalid
    """
    if extractor is None or str(extractor) in BUILTIN_EXTRACTOR_NAMES:
        logger.debug("Using built-in extractor")
        return BUILTIN_EXTRACTOR

    path = Path(extractor).expanduser().resolve()
    if not path.is_file():
        raise ExtractorLoadError(
            f"Extractor module not found: {path}",
            user_message=f"Could not find the extractor at {extractor}.",
            context={"path": str(path)},
        )

    # Imported here so contract violations abort before scheduling
    _module_cache[str(path)] = _get_extract_function(
        _import_module_from_path(path), path
    )

    logger.info(f"Using custom extractor: {path}")
    return ExtractorRef(kind="custom", path=str(path))


def load_extractor(ref: ExtractorRef) -> ExtractFunction:
    """
    Return the extract callable for a resolved reference.

    Custom modules are imported at most once per process.
    """
    if ref.is_builtin:
        return default.extract

    if ref.path is None:
        raise ExtractorLoadError("Custom extractor reference has no path")

    cached = _module_cache.get(ref.path)
    if cached is not None:
        return cached

    path = Path(ref.path)
    extract_function = _get_extract_function(_import_module_from_path(path), path)
    _module_cache[ref.path] = extract_function
    return extract_function


def clear_extractor_cache() -> None:
    """Forget custom extractor modules imported in this process."""
    _module_cache.clear()
