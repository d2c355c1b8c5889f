"""QueryAPI facade for paged pull request and issue queries.

The QueryAPI is the public entry point. Each call:
1. Ensures an authenticated session for the provider
2. Validates the input shape against provider capabilities
3. Resolves the current user and translates filters (when filters are given)
4. Delegates to the PagingCoordinator

Architecture:
    This module implements the Facade pattern over the session gate, the
    identity resolver, the filter translator and the paging coordinator.
    Collaborators are injected so tests can swap any of them.

Design Decisions:
    - Tagged results: every call returns QueryResult, never raises QueryError;
      a failed result is falsy and unwrap_or_none() gives None
    - Every failure is logged with its category before it is returned
    - Validation errors log at WARNING, call failures at ERROR

See Also:
    - PagingCoordinator: Bulk vs fan-out execution and cursor merging
    - QueryResult: Result type returned by every method
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Sequence
from typing import Any, TypeVar

from ..capability.registry import CapabilityRegistry, get_capability_registry
from ..core.base import AuthSessionProvider, ProviderTransport
from ..core.enums import IssueFilter, ProviderId, PullRequestFilter, QueryKind
from ..core.exceptions import (
    IdentityUnavailableError,
    ProviderCallFailedError,
    QueryError,
    SessionUnavailableError,
)
from ..models import (
    CursorEntry,
    IdentityFilterOptions,
    Issue,
    Page,
    ProjectCursorEntry,
    PullRequest,
    QueryResult,
    RepoCursorEntry,
    RepoDescriptor,
    Repository,
)
from ..runtime.definitions import PagingConfig
from ..runtime.filters import FilterTranslator
from ..runtime.identity import IdentityResolver
from ..runtime.paging import PagingCoordinator

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures caused by the provider or the network rather than the request
_CALL_FAILURES = (ProviderCallFailedError, IdentityUnavailableError, SessionUnavailableError)


class QueryAPI:
    """High-level facade for paged queries across hosting providers.

    Example:
        >>> async with QueryAPI(transport, auth) as api:
        ...     result = await api.get_pull_requests(
        ...         ProviderId.BITBUCKET,
        ...         [RepoDescriptor(namespace="acme", name="api")],
        ...         filters=[PullRequestFilter.AUTHOR],
        ...     )
        ...     if result:
        ...         for pr in result.page.values:
        ...             print(pr.title)
        ...         next_cursor = result.page.cursor
    """

    def __init__(
        self,
        transport: ProviderTransport,
        auth: AuthSessionProvider,
        *,
        capability_registry: CapabilityRegistry | None = None,
        config: PagingConfig | None = None,
        coordinator: PagingCoordinator | None = None,
        identity_resolver: IdentityResolver | None = None,
        filter_translator: FilterTranslator | None = None,
    ) -> None:
        """Initialize the QueryAPI.

        Args:
            transport: Provider transport used for every network call
            auth: Session gate consulted before every operation
            capability_registry: Optional registry (defaults to the global one)
            config: Optional paging configuration for the default coordinator
            coordinator: Optional paging coordinator
            identity_resolver: Optional identity resolver
            filter_translator: Optional filter translator
        """
        self._transport = transport
        self._auth = auth
        self._registry = capability_registry or get_capability_registry()
        self._coordinator = coordinator or PagingCoordinator(
            capability_registry=self._registry, config=config
        )
        self._identity = identity_resolver or IdentityResolver(
            transport, capability_registry=self._registry
        )
        self._filters = filter_translator or FilterTranslator(self._registry)
        self._closed = False

    async def ensure_session(self, provider_id: ProviderId) -> bool:
        """Check (and create if needed) an authenticated session for a provider."""
        try:
            await self._require_session(provider_id)
        except SessionUnavailableError as exc:
            self._log_failure("ensure_session", exc)
            return False
        return True

    async def get_pull_requests(
        self,
        provider_id: ProviderId,
        repos_or_ids: Sequence[RepoDescriptor] | Sequence[str] | Sequence[dict[str, Any]],
        *,
        filters: Sequence[PullRequestFilter | str] | None = None,
        cursor: str | None = None,
    ) -> QueryResult[PullRequest]:
        """Fetch one page of pull requests across repositories.

        Args:
            provider_id: Provider to query
            repos_or_ids: Repository descriptors, or opaque ids for bulk providers
            filters: Optional user filters applied to the current user
            cursor: Cursor from a previous page

        Returns:
            QueryResult holding the merged page or the categorized error
        """
        kind = QueryKind.PULL_REQUESTS

        async def run() -> Page[PullRequest]:
            organization = await self._prepare(provider_id, kind, repos_or_ids, cursor)
            options = await self._filter_options(provider_id, kind, filters, organization)

            async def query_unit(entry: RepoCursorEntry) -> Page[PullRequest]:
                return await self._transport.get_pull_requests_for_repo(
                    provider_id, entry.repo, cursor=entry.cursor, options=options
                )

            async def query_bulk(
                repos: Sequence[Any], bulk_cursor: str | None
            ) -> Page[PullRequest]:
                return await self._transport.get_pull_requests_for_repos(
                    provider_id, repos, cursor=bulk_cursor, options=options
                )

            return await self._coordinator.execute(
                provider_id,
                kind,
                repos_or_ids,
                cursor=cursor,
                query_unit=query_unit,
                query_bulk=query_bulk,
            )

        return await self._run("get_pull_requests", provider_id, run())

    async def get_issues(
        self,
        provider_id: ProviderId,
        repos_or_ids: Sequence[RepoDescriptor] | Sequence[str] | Sequence[dict[str, Any]],
        *,
        filters: Sequence[IssueFilter | str] | None = None,
        cursor: str | None = None,
    ) -> QueryResult[Issue]:
        """Fetch one page of issues across repositories.

        Organization-scoped providers search issues per project, so the
        repositories are grouped into their distinct projects.

        Args:
            provider_id: Provider to query
            repos_or_ids: Repository descriptors, or opaque ids for bulk providers
            filters: Optional user filters applied to the current user
            cursor: Cursor from a previous page

        Returns:
            QueryResult holding the merged page or the categorized error
        """
        kind = QueryKind.ISSUES

        async def run() -> Page[Issue]:
            organization = await self._prepare(provider_id, kind, repos_or_ids, cursor)
            options = await self._filter_options(provider_id, kind, filters, organization)

            async def query_unit(entry: CursorEntry) -> Page[Issue]:
                if isinstance(entry, ProjectCursorEntry):
                    return await self._transport.get_issues_for_project(
                        entry.namespace, entry.project, cursor=entry.cursor, options=options
                    )
                return await self._transport.get_issues_for_repo(
                    provider_id, entry.repo, cursor=entry.cursor, options=options
                )

            async def query_bulk(repos: Sequence[Any], bulk_cursor: str | None) -> Page[Issue]:
                return await self._transport.get_issues_for_repos(
                    provider_id, repos, cursor=bulk_cursor, options=options
                )

            return await self._coordinator.execute(
                provider_id,
                kind,
                repos_or_ids,
                cursor=cursor,
                query_unit=query_unit,
                query_bulk=query_bulk,
            )

        return await self._run("get_issues", provider_id, run())

    async def get_repositories_for_project(
        self,
        namespace: str,
        project: str,
        *,
        cursor: str | None = None,
    ) -> QueryResult[Repository]:
        """List repositories of an Azure DevOps project.

        Pass-through to the transport with session gating; no fan-out.
        """
        provider_id = ProviderId.AZURE_DEVOPS

        async def run() -> Page[Repository]:
            await self._require_session(provider_id)
            try:
                return await self._transport.get_repositories_for_project(
                    namespace, project, cursor=cursor
                )
            except Exception as exc:
                raise ProviderCallFailedError.wrap(
                    exc, provider_id=provider_id, unit=f"{namespace}/{project}"
                ) from exc

        return await self._run("get_repositories_for_project", provider_id, run())

    async def close(self) -> None:
        """Close the transport."""
        if self._closed:
            return
        self._closed = True
        await self._transport.close()

    async def __aenter__(self) -> QueryAPI:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()

    async def _require_session(self, provider_id: ProviderId) -> None:
        capability = self._registry.get(provider_id)
        try:
            ok = await self._auth.ensure_session(
                provider_id, capability.domain, list(capability.scopes)
            )
        except Exception as exc:
            raise SessionUnavailableError(
                f"Unable to establish a session for {provider_id}: {exc}",
                provider_id=provider_id,
            ) from exc
        if not ok:
            raise SessionUnavailableError(
                f"No session for provider {provider_id}", provider_id=provider_id
            )

    async def _prepare(
        self,
        provider_id: ProviderId,
        kind: QueryKind,
        repos_or_ids: Sequence[Any],
        cursor: str | None,
    ) -> str | None:
        """Gate on the session and validate input and cursor before any provider call."""
        await self._require_session(provider_id)
        return self._coordinator.validate_input(provider_id, kind, repos_or_ids, cursor)

    async def _filter_options(
        self,
        provider_id: ProviderId,
        kind: QueryKind,
        filters: Sequence[Any] | None,
        organization: str | None,
    ) -> IdentityFilterOptions | None:
        """Resolve filter options, checking filter support before any identity call."""
        if not filters:
            return None
        requested = self._filters.validate(provider_id, kind, filters)
        identity = await self._identity.resolve_identity(provider_id, organization)
        return self._filters.translate(provider_id, kind, requested, identity)

    async def _run(
        self, operation: str, provider_id: ProviderId, call: Awaitable[Page[T]]
    ) -> QueryResult[T]:
        try:
            page = await call
        except QueryError as exc:
            self._log_failure(operation, exc)
            return QueryResult.failure(exc)

        logger.debug(
            "Query completed",
            extra={
                "operation": operation,
                "provider_id": str(provider_id),
                "values": len(page.values),
                "more": page.more,
            },
        )
        return QueryResult.success(page)

    @staticmethod
    def _log_failure(operation: str, exc: QueryError) -> None:
        level = logging.ERROR if isinstance(exc, _CALL_FAILURES) else logging.WARNING
        logger.log(
            level,
            "%s failed: %s",
            operation,
            exc,
            extra={
                "operation": operation,
                "provider_id": str(exc.provider_id) if exc.provider_id is not None else None,
                "category": exc.category,
            },
        )
