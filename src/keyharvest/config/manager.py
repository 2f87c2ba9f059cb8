"""Configuration manager for keyharvest.

This module provides functionality for loading and validating
YAML configuration files with Pydantic model validation, and for layering
command-line overrides on top of a loaded configuration.
"""

import logging
from pathlib import Path

import yaml

from .schema import KeyHarvestConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager for handling YAML config files with Pydantic validation.

    All methods are static; the manager holds no state between runs.
    """

    @staticmethod
    def load_config(config_path: Path) -> KeyHarvestConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            KeyHarvestConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the file does not contain a YAML mapping
            ValidationError: If the configuration fails Pydantic validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        config = KeyHarvestConfig.model_validate(config_data)
        logger.debug(f"Loaded configuration from {config_path}")
        return config

    @staticmethod
    def apply_overrides(
        config: KeyHarvestConfig, **overrides: object
    ) -> KeyHarvestConfig:
        """
        Return a copy of the configuration with extraction overrides applied.

        Overrides whose value is None (or an empty list) are ignored, so
        unset command-line flags keep the configured value.

        Args:
            config: Base configuration
            **overrides: ExtractionConfig field names and values

        Returns:
            KeyHarvestConfig: Validated configuration with overrides applied

        Raises:
            ValueError: If an override names an unknown field
            ValidationError: If an override value is invalid
        """
        known_fields = set(type(config.extraction).model_fields)
        extraction_data = config.extraction.model_dump()

        for key, value in overrides.items():
            if key not in known_fields:
                raise ValueError(f"Unknown extraction setting: {key}")
            match value:
                case None:
                    continue
                case list() if not value:
                    continue
                case _:
                    extraction_data[key] = value

        data = config.model_dump()
        data["extraction"] = extraction_data
        return KeyHarvestConfig.model_validate(data)
