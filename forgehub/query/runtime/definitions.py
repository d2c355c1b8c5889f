"""Paging configuration and call signatures.

This module defines the structures shared by the paging coordinator and
its callers: the runtime configuration and the shapes of the per-unit and
bulk call functions supplied at the transport boundary.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..models import CursorEntry, Page, RepoDescriptor

# Per-unit call: receives the unit with its stored cursor
QueryUnit = Callable[[CursorEntry], Awaitable[Page[Any]]]

# Bulk call: receives all repositories (or ids) and the caller's cursor verbatim
QueryBulk = Callable[[Sequence[RepoDescriptor] | Sequence[str], str | None], Awaitable[Page[Any]]]


@dataclass(frozen=True)
class PagingConfig:
    """Runtime configuration for fan-out paging.

    Attributes:
        max_concurrency: Maximum unit calls in flight at once (None = unbounded)
    """

    max_concurrency: int | None = None

    def __post_init__(self) -> None:
        """Validate paging configuration."""
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
