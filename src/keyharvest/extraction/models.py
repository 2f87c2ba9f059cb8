"""
Data model for the key-extraction pipeline.

Keys found in source files are represented by ``ExtractedKey`` and grouped per
file in ``ExtractionResult``. The aggregated output, ``FilteredKeys``, maps a
namespace to the keys it contains. Namespaces are ``str | None``; ``None`` is
the null namespace and never collides with ``""`` or ``"null"``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

Namespace: TypeAlias = str | None

NULL_NAMESPACE: Final[Namespace] = None

FilteredKeys: TypeAlias = Mapping[Namespace, Mapping[str, str | None]]


class ExtractedKey(BaseModel):
    """One occurrence of a localization key found in one file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)  # pyright: ignore[reportUnannotatedClassAttribute]

    key_name: str = Field(..., alias="keyName", min_length=1)
    namespace: str | None = None
    default_value: str | None = Field(default=None, alias="defaultValue")
    source_location: Any = Field(default=None, alias="sourceLocation")  # pyright: ignore[reportExplicitAny]

    def with_default_namespace(self, default_namespace: str | None) -> ExtractedKey:
        """
        Return this key with the run-wide default namespace applied.

        Keys carrying an explicit namespace (including ``""``) are returned
        unchanged.
        """
        if self.namespace is not None or default_namespace is None:
            return self
        return self.model_copy(update={"namespace": default_namespace})


class ExtractionResult(BaseModel):
    """The ordered keys extracted from a single file."""

    model_config = ConfigDict(frozen=True)  # pyright: ignore[reportUnannotatedClassAttribute]

    file: str
    keys: tuple[ExtractedKey, ...] = ()


# Insertion order is completion order.
ExtractionResults: TypeAlias = dict[str, ExtractionResult]


@dataclass(frozen=True)
class ExtractorRef:
    """
    Resolved reference to the extractor used for a run.

    Holds plain data only so it can be pickled into worker processes.
    """

    kind: Literal["builtin", "custom"]
    path: str | None = None

    @property
    def is_builtin(self) -> bool:
        return self.kind == "builtin"

    def describe(self) -> str:
        return "built-in extractor" if self.is_builtin else f"custom extractor {self.path}"


BUILTIN_EXTRACTOR: Final[ExtractorRef] = ExtractorRef(kind="builtin")
