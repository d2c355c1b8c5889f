"""High-level API facades."""

from .query_api import QueryAPI

__all__ = ["QueryAPI"]
