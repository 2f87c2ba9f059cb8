"""Configuration loading and validation for keyharvest."""

from .manager import ConfigManager
from .schema import ExtractionConfig, KeyHarvestConfig, LoggingConfig

__all__ = ["ConfigManager", "ExtractionConfig", "KeyHarvestConfig", "LoggingConfig"]
