"""Composite cursor schema.

Wire format::

    {"cursors":[{"repo":{...},"cursor":"..."}, ...]}
    {"cursors":[{"namespace":"...","project":"...","cursor":"..."}, ...]}

Entries only exist for units that still have more pages.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .repo import RepoDescriptor


class RepoCursorEntry(BaseModel):
    """Paging state for one repository unit."""

    repo: RepoDescriptor
    cursor: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def label(self) -> str:
        return str(self.repo)

    def with_cursor(self, cursor: str | None) -> RepoCursorEntry:
        return self.model_copy(update={"cursor": cursor})


class ProjectCursorEntry(BaseModel):
    """Paging state for one project unit of an organization-scoped provider."""

    namespace: str = Field(..., min_length=1)
    project: str = Field(..., min_length=1)
    cursor: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def label(self) -> str:
        return f"{self.namespace}/{self.project}"

    def with_cursor(self, cursor: str | None) -> ProjectCursorEntry:
        return self.model_copy(update={"cursor": cursor})


CursorEntry = RepoCursorEntry | ProjectCursorEntry


class CompositeCursor(BaseModel):
    """Set of still-paginating units and each unit's own cursor."""

    cursors: list[RepoCursorEntry | ProjectCursorEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.cursors
