"""Data models for paged provider queries.

Architecture:
    This module exports the Pydantic v2 models used throughout the library.
    Models are immutable (frozen=True) so a page or cursor cannot be changed
    while a fan-out is still merging results.

Model Categories:
    - Inputs: RepoDescriptor, RepoOrIdInput
    - Items: PullRequest, Issue, Repository
    - Identity: Identity, IdentityFilterOptions
    - Paging: Page, RepoCursorEntry, ProjectCursorEntry, CompositeCursor
    - Results: QueryResult
"""

from .cursor import CompositeCursor, CursorEntry, ProjectCursorEntry, RepoCursorEntry
from .identity import Identity, IdentityFilterOptions
from .page import Page
from .repo import (
    Issue,
    PullRequest,
    RepoDescriptor,
    RepoOrIdInput,
    Repository,
    is_repo_ids_input,
    normalize_repos_input,
)
from .result import QueryResult

__all__ = [
    "CompositeCursor",
    "CursorEntry",
    "Identity",
    "IdentityFilterOptions",
    "Issue",
    "Page",
    "ProjectCursorEntry",
    "PullRequest",
    "QueryResult",
    "RepoCursorEntry",
    "RepoDescriptor",
    "RepoOrIdInput",
    "Repository",
    "is_repo_ids_input",
    "normalize_repos_input",
]
