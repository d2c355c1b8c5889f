"""Fan-out paging coordinator.

The PagingCoordinator answers a paged query over a set of repositories for
any provider. It:
1. Validates the input shape against the provider's capabilities
2. Chooses a single bulk call or a per-unit fan-out
3. Runs the per-unit calls concurrently
4. Merges pages and per-unit cursors into one composite cursor

Architecture:
    The coordinator is provider-agnostic. Everything provider-specific comes
    from the CapabilityRegistry (paging mode, organization scoping) or from
    the call functions the caller supplies (QueryUnit, QueryBulk).

Design Decisions:
    - Validation before any call: shape errors never cost a network round-trip
    - Resume from cursor: a non-empty caller cursor replaces the fresh unit
      list, so a caller pages through a fixed working set
    - Ordered merge: results are gathered by unit index, not arrival order
    - Fail-fast join: one failing unit fails the whole call, remaining calls
      are cancelled and no partial page is returned

See Also:
    - CursorCodec: Composite cursor wire format
    - QueryAPI: Supplies the transport-bound call functions
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from time import perf_counter
from typing import Any

from ..capability.registry import CapabilityRegistry, get_capability_registry
from ..core.enums import PagingMode, ProviderId, QueryKind
from ..core.exceptions import (
    MultipleOrganizationsNotSupportedError,
    NoOrganizationError,
    ProviderCallFailedError,
    UnsupportedInputError,
)
from ..models import (
    CompositeCursor,
    CursorEntry,
    Page,
    ProjectCursorEntry,
    RepoCursorEntry,
    RepoDescriptor,
    normalize_repos_input,
)
from .cursor import CursorCodec
from .definitions import PagingConfig, QueryBulk, QueryUnit
from .telemetry import (
    log_fanout_complete,
    log_fanout_planned,
    log_unit_completed,
    log_unit_error,
)

logger = logging.getLogger(__name__)


class PagingCoordinator:
    """Decides bulk vs fan-out execution and merges per-unit pages."""

    def __init__(
        self,
        *,
        capability_registry: CapabilityRegistry | None = None,
        config: PagingConfig | None = None,
        codec: CursorCodec | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            capability_registry: Optional registry (defaults to the global one)
            config: Optional paging configuration (defaults to unbounded fan-out)
            codec: Optional cursor codec
        """
        self._registry = capability_registry or get_capability_registry()
        self._config = config or PagingConfig()
        self._codec = codec or CursorCodec()

    def validate_input(
        self,
        provider_id: ProviderId,
        kind: QueryKind,
        repos_or_ids: Sequence[Any],
        cursor: str | None = None,
    ) -> str | None:
        """Validate the input shape and caller cursor for a provider and query kind.

        Returns:
            The single organization for organization-scoped providers, else None

        Raises:
            UnsupportedInputError: If the provider is unknown, ids are passed where
                descriptors are needed, descriptors lack namespace/project for an
                org-scoped provider, or a fan-out cursor is malformed or of the wrong kind
            NoOrganizationError: If an org-scoped query names no organization
            MultipleOrganizationsNotSupportedError: If it names more than one
        """
        if not self._registry.is_provider_supported(provider_id):
            raise UnsupportedInputError(
                f"Unsupported provider: {provider_id}", provider_id=provider_id
            )
        capability = self._registry.get(provider_id)
        repos = normalize_repos_input(repos_or_ids)

        if repos and isinstance(repos[0], str):
            if not capability.accepts_repo_ids(kind):
                raise UnsupportedInputError(
                    f"Unsupported input for provider {provider_id}: repository ids "
                    f"cannot be paged for {kind.value}",
                    provider_id=provider_id,
                )
            return None

        entry_type = self._fan_out_entry_type(provider_id, kind, repos)
        if entry_type is not None:
            self._codec.decode(cursor, entry_type)

        if not capability.organization_scoped:
            return None

        if not all(repo.namespace and repo.project for repo in repos):
            raise UnsupportedInputError(
                f"Unsupported input for provider {provider_id}: every repository "
                "needs a namespace and a project",
                provider_id=provider_id,
            )

        organizations = {repo.namespace for repo in repos}
        if not organizations:
            raise NoOrganizationError(
                f"No organizations found for provider {provider_id}", provider_id=provider_id
            )
        if len(organizations) > 1:
            raise MultipleOrganizationsNotSupportedError(
                f"Multiple organizations not supported for provider {provider_id}",
                provider_id=provider_id,
                organizations=organizations,
            )
        return next(iter(organizations))

    def plan_units(
        self,
        provider_id: ProviderId,
        kind: QueryKind,
        repos: Sequence[RepoDescriptor],
    ) -> list[CursorEntry]:
        """Build fresh paging units for descriptor input.

        Issue queries on an organization-scoped provider page per project
        (deduplicated, first-seen order); everything else pages per repository.
        """
        capability = self._registry.get(provider_id)
        if capability.organization_scoped and kind == QueryKind.ISSUES:
            units: dict[tuple[str, str], ProjectCursorEntry] = {}
            for repo in repos:
                assert repo.project is not None
                key = (repo.namespace, repo.project)
                if key not in units:
                    units[key] = ProjectCursorEntry(namespace=repo.namespace, project=repo.project)
            return list(units.values())
        return [RepoCursorEntry(repo=repo) for repo in repos]

    async def execute(
        self,
        provider_id: ProviderId,
        kind: QueryKind,
        repos_or_ids: Sequence[Any],
        *,
        cursor: str | None = None,
        query_unit: QueryUnit,
        query_bulk: QueryBulk,
    ) -> Page[Any]:
        """Run a paged query with the strategy the provider requires.

        Args:
            provider_id: Provider to query
            kind: Pull requests or issues
            repos_or_ids: Repository descriptors (or mappings) or opaque repo ids
            cursor: Cursor returned by a previous page, if any
            query_unit: Per-unit call used for fan-out
            query_bulk: Multi-repository call used for bulk paging

        Returns:
            Merged page

        Raises:
            QueryError: Validation failures (before any call) or ProviderCallFailedError
        """
        self.validate_input(provider_id, kind, repos_or_ids, cursor)
        repos = normalize_repos_input(repos_or_ids)

        entry_type = self._fan_out_entry_type(provider_id, kind, repos)
        if entry_type is None:
            return await self.bulk(provider_id, repos, cursor=cursor, query_bulk=query_bulk)

        descriptors = [repo for repo in repos if isinstance(repo, RepoDescriptor)]
        units = self.plan_units(provider_id, kind, descriptors)
        return await self.fan_out(
            provider_id, units, cursor=cursor, query_unit=query_unit, entry_type=entry_type
        )

    def _fan_out_entry_type(
        self,
        provider_id: ProviderId,
        kind: QueryKind,
        repos: Sequence[RepoDescriptor] | Sequence[str],
    ) -> type[CursorEntry] | None:
        """Cursor entry class for a fan-out query, or None when it runs as one bulk call."""
        capability = self._registry.get(provider_id)
        is_ids = bool(repos) and isinstance(repos[0], str)
        if is_ids or (
            capability.paging_mode(kind) == PagingMode.BULK and not capability.organization_scoped
        ):
            return None
        if capability.organization_scoped and kind == QueryKind.ISSUES:
            return ProjectCursorEntry
        return RepoCursorEntry

    async def bulk(
        self,
        provider_id: ProviderId,
        repos_or_ids: Sequence[RepoDescriptor] | Sequence[str],
        *,
        cursor: str | None,
        query_bulk: QueryBulk,
    ) -> Page[Any]:
        """Single bulk call; the caller's cursor is passed through verbatim."""
        logger.debug(
            "Bulk query",
            extra={"provider_id": str(provider_id), "total_repos": len(repos_or_ids)},
        )
        try:
            return await query_bulk(repos_or_ids, cursor)
        except ProviderCallFailedError:
            raise
        except Exception as exc:
            raise ProviderCallFailedError.wrap(exc, provider_id=provider_id) from exc

    async def fan_out(
        self,
        provider_id: ProviderId,
        units: Sequence[CursorEntry],
        *,
        cursor: str | None,
        query_unit: QueryUnit,
        entry_type: type[CursorEntry] | None = None,
    ) -> Page[Any]:
        """Query every unit concurrently and merge the results.

        A non-empty caller cursor replaces ``units`` with the units it names,
        each resumed from its stored cursor.

        Returns:
            Page whose cursor always encodes the still-paginating units
            (an empty list when none remain)

        Raises:
            UnsupportedInputError: If the caller cursor is malformed or of the wrong kind
            ProviderCallFailedError: If any unit call fails
        """
        decoded = self._codec.decode(cursor, entry_type)
        resumed = not decoded.is_empty
        pending: list[CursorEntry] = list(decoded.cursors) if resumed else list(units)

        log_fanout_planned(
            provider_id=str(provider_id),
            total_units=len(pending),
            resumed=resumed,
            max_concurrency=self._config.max_concurrency,
        )

        start = perf_counter()
        semaphore = (
            asyncio.Semaphore(self._config.max_concurrency)
            if self._config.max_concurrency is not None
            else None
        )
        tasks = [
            asyncio.ensure_future(
                self._run_unit(provider_id, index, entry, query_unit, semaphore)
            )
            for index, entry in enumerate(pending)
        ]
        try:
            pages = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        values: list[Any] = []
        remaining: list[CursorEntry] = []
        for entry, page in zip(pending, pages):
            values.extend(page.values)
            if page.more:
                remaining.append(entry.with_cursor(page.cursor))

        log_fanout_complete(
            provider_id=str(provider_id),
            total_units=len(pending),
            total_values=len(values),
            remaining_units=len(remaining),
            total_latency_ms=(perf_counter() - start) * 1000.0,
        )

        return Page(
            values=values,
            more=bool(remaining),
            cursor=self._codec.encode(CompositeCursor(cursors=remaining)),
        )

    async def _run_unit(
        self,
        provider_id: ProviderId,
        index: int,
        entry: CursorEntry,
        query_unit: QueryUnit,
        semaphore: asyncio.Semaphore | None,
    ) -> Page[Any]:
        unit_start = perf_counter()
        try:
            if semaphore is None:
                page = await query_unit(entry)
            else:
                async with semaphore:
                    page = await query_unit(entry)
        except Exception as exc:
            log_unit_error(
                provider_id=str(provider_id),
                unit=entry.label,
                unit_index=index,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            if isinstance(exc, ProviderCallFailedError):
                raise
            raise ProviderCallFailedError.wrap(
                exc, provider_id=provider_id, unit=entry.label
            ) from exc

        log_unit_completed(
            provider_id=str(provider_id),
            unit=entry.label,
            unit_index=index,
            values=len(page.values),
            more=page.more,
            latency_ms=(perf_counter() - unit_start) * 1000.0,
        )
        return page
