"""Configuration schema for keyharvest using nested Pydantic models."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator


class ExtractionConfig(BaseModel):
    """Key extraction settings."""

    patterns: list[str] = Field(
        default_factory=list,
        description="Glob patterns of the source files to scan (e.g. 'src/**/*.tsx')",
    )
    extractor: str | None = Field(
        default=None,
        description="Path to a custom extractor module, or null for the built-in extractor",
    )
    default_namespace: str | None = Field(
        default=None,
        description="Namespace assigned to keys that do not declare one",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Directory names to skip while discovering files",
    )
    max_workers: Annotated[int, Field(ge=1, le=256)] | None = Field(
        default=None,
        description="Maximum concurrent extractions (defaults to the CPU count, capped at 32)",
    )
    isolation: Literal["process", "thread"] = Field(
        default="process",
        description="Run extractors in worker processes or in threads",
    )

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Reject empty glob patterns."""
        if any(not pattern.strip() for pattern in v):
            raise ValueError("File patterns must not be empty")
        return v

    @field_validator("extractor", "default_namespace")
    @classmethod
    def empty_as_none(cls, v: str | None) -> str | None:
        """Treat blank strings as unset."""
        if v is not None and not v.strip():
            return None
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level used when --verbose is not given",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format",
        min_length=1,
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class KeyHarvestConfig(BaseModel):
    """Root configuration for keyharvest."""

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
