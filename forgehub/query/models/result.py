"""Tagged result returned by the query facade."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from ..core.exceptions import QueryError
from .page import Page

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a facade call: a page or a categorized error.

    A failed result is falsy, so callers that only care whether anything
    came back can write ``if result:`` or use ``unwrap_or_none()``.

    Attributes:
        page: Merged page on success, None on failure
        error: Categorized failure, None on success
    """

    page: Page[T] | None = None
    error: QueryError | None = None

    def __post_init__(self) -> None:
        if (self.page is None) == (self.error is None):
            raise ValueError("QueryResult needs exactly one of page or error")

    @classmethod
    def success(cls, page: Page[T]) -> QueryResult[T]:
        return cls(page=page)

    @classmethod
    def failure(cls, error: QueryError) -> QueryResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def category(self) -> str | None:
        """Failure category name, or None on success."""
        return self.error.category if self.error is not None else None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> Page[T]:
        """Return the page or raise the stored error."""
        if self.error is not None:
            raise self.error
        assert self.page is not None
        return self.page

    def unwrap_or_none(self) -> Page[T] | None:
        return self.page
