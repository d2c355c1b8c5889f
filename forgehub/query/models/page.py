"""Paged result model."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of results.

    ``cursor`` is opaque to callers. For fanned-out queries it is a
    serialized CompositeCursor and is always present, even when ``more`` is
    False.
    """

    values: list[T] = Field(default_factory=list)
    more: bool = False
    cursor: str | None = None

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.values)
