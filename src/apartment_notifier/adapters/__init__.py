from typing import Dict, Type

from .base import BaseSource, GeoPoint, SearchFilter

SOURCE_REGISTRY: Dict[str, Type[BaseSource]] = {}


def register_source(name: str):
    """Decorator to register a listing source class."""

    def decorator(cls: Type[BaseSource]):
        SOURCE_REGISTRY[name] = cls
        return cls

    return decorator


def get_source(source_name: str, search_filter: SearchFilter, **kwargs) -> BaseSource:
    """Factory function to create source instances."""
    source_class = SOURCE_REGISTRY.get(source_name)
    if not source_class:
        raise ValueError(f"Unknown source: {source_name}. Available: {list(SOURCE_REGISTRY.keys())}")
    return source_class(search_filter, **kwargs)


# Import sources to register them
from . import streeteasy  # noqa: E402,F401

__all__ = [
    "BaseSource",
    "GeoPoint",
    "SearchFilter",
    "SOURCE_REGISTRY",
    "get_source",
    "register_source",
]
