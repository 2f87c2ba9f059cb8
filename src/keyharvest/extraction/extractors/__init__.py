"""Built-in extractor and custom extractor loading."""

from .loader import ExtractFunction, load_extractor, resolve_extractor

__all__ = ["ExtractFunction", "load_extractor", "resolve_extractor"]
