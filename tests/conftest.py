"""
Global test configuration fixtures for keyharvest tests.

This module provides fixtures for building throwaway source trees and custom
extractor modules on disk, plus configuration objects for the config and CLI
tests.
"""

from __future__ import annotations

import json
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from keyharvest.config.schema import ExtractionConfig, KeyHarvestConfig, LoggingConfig
from keyharvest.extraction.extractors.loader import clear_extractor_cache


# Extractor that treats every file as a JSON document:
# either a list of key mappings or {"sleep": seconds, "keys": [...]}.
JSON_EXTRACTOR_SOURCE = """
import json
import time


def extract(path, content):
    data = json.loads(content)
    if isinstance(data, dict):
        time.sleep(data.get("sleep", 0))
        if data.get("fail"):
            raise RuntimeError(data["fail"])
        return data["keys"]
    return data
"""


@pytest.fixture(autouse=True)
def _reset_extractor_cache() -> Generator[None, None, None]:
    """Make sure custom extractors imported by one test do not leak into another."""
    clear_extractor_cache()
    yield
    clear_extractor_cache()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """
    Return a helper that writes a text file below tmp_path.

    Returns:
        Callable taking (relative path, content) and returning the file path
    """

    def _write(relative_path: str, content: str) -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_extractor(tmp_path: Path) -> Callable[[str], str]:
    """
    Return a helper that writes a custom extractor module.

    Returns:
        Callable taking the module source and returning its path
    """
    counter = {"n": 0}

    def _write(source: str) -> str:
        counter["n"] += 1
        path = tmp_path / "extractors" / f"extractor_{counter['n']}.py"
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(textwrap.dedent(source), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def json_extractor(write_extractor: Callable[[str], str]) -> str:
    """Path to an extractor that reads keys from JSON file contents."""
    return write_extractor(JSON_EXTRACTOR_SOURCE)


@pytest.fixture
def write_keys(write_file: Callable[[str, str], Path]) -> Callable[..., Path]:
    """
    Return a helper that writes a JSON key file for the json_extractor.

    Returns:
        Callable taking (relative path, keys, sleep=0, fail=None)
    """

    def _write(
        relative_path: str,
        keys: list[dict[str, object]],
        sleep: float = 0,
        fail: str | None = None,
    ) -> Path:
        payload: dict[str, object] = {"keys": keys, "sleep": sleep}
        if fail is not None:
            payload["fail"] = fail
        return write_file(relative_path, json.dumps(payload))

    return _write


@pytest.fixture
def in_tmp_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with tmp_path as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def base_config() -> KeyHarvestConfig:
    """
    Create a minimal valid configuration.

    Returns:
        KeyHarvestConfig: Configuration scanning TypeScript sources
    """
    return KeyHarvestConfig(
        extraction=ExtractionConfig(patterns=["src/**/*.ts"]),
        logging=LoggingConfig(),
    )


@pytest.fixture
def full_config_dict() -> dict[str, object]:
    """
    Create a configuration dictionary with every setting populated.

    Returns:
        dict[str, object]: Raw configuration data as it would appear in YAML
    """
    return {
        "extraction": {
            "patterns": ["src/**/*.tsx", "lib/**/*.py"],
            "extractor": "./tools/extractor.py",
            "default_namespace": "app",
            "exclude": ["node_modules", "dist"],
            "max_workers": 4,
            "isolation": "thread",
        },
        "logging": {
            "level": "debug",
            "format": "%(levelname)s %(message)s",
        },
    }


@pytest.fixture
def invalid_config_dict() -> dict[str, object]:
    """
    Create an invalid configuration dictionary for testing error scenarios.

    Returns:
        dict[str, object]: Configuration dictionary with validation issues
    """
    return {
        "extraction": {
            "patterns": ["src/**/*.ts", "  "],  # Blank pattern
            "max_workers": 0,  # Below minimum
            "isolation": "fiber",  # Unknown mode
        },
        "logging": {
            "level": "LOUD",  # Unknown level
        },
    }
