"""
Version utilities for keyharvest.

Reads the version from the installed package metadata, falling back to
pyproject.toml when running from a source checkout.
"""

import logging
import tomllib
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "keyharvest"

FALLBACK_VERSION = "0.0.0"


def _read_version_from_pyproject() -> str:
    """Read the project version from pyproject.toml."""
    pyproject_path = Path("pyproject.toml")

    if not pyproject_path.exists():
        # Try relative to this file's location (for different working directories)
        pyproject_path = Path(__file__).parents[4] / "pyproject.toml"

    if not pyproject_path.exists():
        raise RuntimeError("pyproject.toml not found")

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)

        project_data: object = data.get("project")
        if not isinstance(project_data, dict):
            raise KeyError("project section not found or invalid")

        version: object = project_data.get("version")  # pyright: ignore[reportUnknownMemberType]
        if not isinstance(version, str):
            raise KeyError("version field not found or not a string")

        return version
    except (KeyError, OSError, tomllib.TOMLDecodeError) as e:
        raise RuntimeError(f"Failed to read version from pyproject.toml: {e}") from e


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """
    Get the project version.

    Returns:
        Version string (e.g., "0.3.0")

    Raises:
        RuntimeError: If version cannot be determined from any source
    """
    try:
        from importlib.metadata import version

        return version(DISTRIBUTION_NAME)
    except Exception:
        logger.debug("importlib.metadata failed, falling back to pyproject.toml")

    return _read_version_from_pyproject()


def get_version() -> str:
    """Get the project version with error handling."""
    try:
        return get_project_version()
    except RuntimeError:
        logger.warning("Could not determine project version, using fallback")
        return FALLBACK_VERSION
