"""Collaborator base classes.

Architecture:
    The paging core never talks to a hosting provider directly. It calls
    two collaborators through the abstract classes in this module:
    - ProviderTransport: REST/GraphQL clients for every provider
    - AuthSessionProvider: session and token acquisition

    Rate limiting, retries, caching and timeouts belong to the concrete
    implementations. Any exception they raise is wrapped into
    ProviderCallFailedError by the core.

See Also:
    - PagingCoordinator: Calls the per-repository, per-project and bulk methods
    - IdentityResolver: Calls the current-user methods
    - QueryAPI: Gates every call on AuthSessionProvider.ensure_session
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import (
        Identity,
        IdentityFilterOptions,
        Issue,
        Page,
        PullRequest,
        RepoDescriptor,
        Repository,
    )
    from .enums import ProviderId


class ProviderTransport(ABC):
    """Abstract transport to the hosting providers.

    Per-unit methods page within one repository or project. Bulk methods
    accept many repositories (or opaque repo ids) and return one cursor for
    all of them.
    """

    @abstractmethod
    async def get_pull_requests_for_repo(
        self,
        provider_id: ProviderId,
        repo: RepoDescriptor,
        *,
        cursor: str | None = None,
        options: IdentityFilterOptions | None = None,
    ) -> Page[PullRequest]:
        """Fetch one page of pull requests for a single repository."""

    @abstractmethod
    async def get_pull_requests_for_repos(
        self,
        provider_id: ProviderId,
        repos_or_ids: Sequence[RepoDescriptor] | Sequence[str],
        *,
        cursor: str | None = None,
        options: IdentityFilterOptions | None = None,
    ) -> Page[PullRequest]:
        """Fetch one page of pull requests across many repositories."""

    @abstractmethod
    async def get_issues_for_repo(
        self,
        provider_id: ProviderId,
        repo: RepoDescriptor,
        *,
        cursor: str | None = None,
        options: IdentityFilterOptions | None = None,
    ) -> Page[Issue]:
        """Fetch one page of issues for a single repository."""

    @abstractmethod
    async def get_issues_for_repos(
        self,
        provider_id: ProviderId,
        repos_or_ids: Sequence[RepoDescriptor] | Sequence[str],
        *,
        cursor: str | None = None,
        options: IdentityFilterOptions | None = None,
    ) -> Page[Issue]:
        """Fetch one page of issues across many repositories."""

    @abstractmethod
    async def get_issues_for_project(
        self,
        namespace: str,
        project: str,
        *,
        cursor: str | None = None,
        options: IdentityFilterOptions | None = None,
    ) -> Page[Issue]:
        """Fetch one page of work items for an organization-scoped project."""

    @abstractmethod
    async def get_current_user(self, provider_id: ProviderId) -> Identity | None:
        """Return the authenticated user, or None if unknown."""

    @abstractmethod
    async def get_current_user_for_organization(
        self, provider_id: ProviderId, organization: str
    ) -> Identity | None:
        """Return the authenticated user as seen by one organization."""

    @abstractmethod
    async def get_repositories_for_project(
        self,
        namespace: str,
        project: str,
        *,
        cursor: str | None = None,
    ) -> Page[Repository]:
        """List repositories of an organization-scoped project."""

    async def close(self) -> None:
        """Release transport resources. Override if needed."""

    async def __aenter__(self) -> ProviderTransport:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


class AuthSessionProvider(ABC):
    """Abstract session gate.

    Implementations must be idempotent: the facade calls ensure_session
    before every operation.
    """

    @abstractmethod
    async def ensure_session(
        self, provider_id: ProviderId, domain: str, scopes: Sequence[str]
    ) -> bool:
        """Return True when an authenticated session exists or was created."""
