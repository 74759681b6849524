"""Request / query validation schemas (pydantic)."""

from .common import parse, changes, IncludeArchivedQuery

__all__ = ["parse", "changes", "IncludeArchivedQuery"]
