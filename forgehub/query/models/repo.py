"""Repository, project and item models."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import UnsupportedInputError


class RepoDescriptor(BaseModel):
    """Identifies one repository on a hosting provider.

    ``project`` is only meaningful for organization-scoped providers, where
    ``namespace`` is the organization.
    """

    namespace: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    project: str | None = None
    id: str | None = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    def __str__(self) -> str:
        parts = [self.namespace, self.project, self.name]
        return "/".join(p for p in parts if p)


class Repository(BaseModel):
    """Repository record returned by a provider listing."""

    id: str
    name: str
    namespace: str | None = None
    project: str | None = None
    url: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class PullRequest(BaseModel):
    """Pull request as returned by a provider transport.

    Provider-specific fields beyond the common ones are kept as extras.
    """

    id: str
    title: str
    url: str | None = None
    state: str | None = None
    repository: RepoDescriptor | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class Issue(BaseModel):
    """Issue or work item as returned by a provider transport."""

    id: str
    title: str
    url: str | None = None
    state: str | None = None
    repository: RepoDescriptor | None = None
    project: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


RepoOrIdInput = Sequence[RepoDescriptor] | Sequence[str]


def is_repo_ids_input(repos_or_ids: Sequence[Any]) -> bool:
    """Return True when the input is a non-empty sequence of opaque repo ids."""
    return len(repos_or_ids) > 0 and all(isinstance(item, str) for item in repos_or_ids)


def normalize_repos_input(repos_or_ids: Sequence[Any]) -> list[RepoDescriptor] | list[str]:
    """Normalize caller input into descriptors or ids.

    Mappings are validated into RepoDescriptor. Mixing ids and descriptors
    is rejected.

    Raises:
        UnsupportedInputError: If the input mixes forms or a descriptor is invalid
    """
    if isinstance(repos_or_ids, str):
        raise UnsupportedInputError("Expected a sequence of repositories, got a single string")
    if is_repo_ids_input(repos_or_ids):
        return list(repos_or_ids)

    repos: list[RepoDescriptor] = []
    for item in repos_or_ids:
        if isinstance(item, RepoDescriptor):
            repos.append(item)
        elif isinstance(item, dict):
            try:
                repos.append(RepoDescriptor.model_validate(item))
            except ValueError as exc:
                raise UnsupportedInputError(f"Invalid repository descriptor: {item!r}") from exc
        else:
            raise UnsupportedInputError(
                f"Repository input must be all ids or all descriptors, got {type(item).__name__}"
            )
    return repos
