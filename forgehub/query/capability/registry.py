"""Capability registry describing how each hosting provider can be queried.

Architecture:
    The registry maps a provider id to a ProviderCapability entry holding:
    ProviderId -> QueryKind -> (PagingMode, supported filters, identity field)
    plus the auth scopes and web domain used to establish a session.

    The paging core and filter translator read this table instead of
    branching on provider identity, so adding a provider is a data change.

Design Decisions:
    - Static table: No network access, no discovery
    - Injected registry: QueryAPI and PagingCoordinator accept a custom
      registry for testing; get_capability_registry() returns the default
    - Unknown providers never raise: they resolve to a per-unit entry with
      no filters, so every query against them is rejected before any call
    - Identity-field selection lives next to filter support per query kind

See Also:
    - PagingCoordinator: Uses paging modes and organization scoping
    - FilterTranslator: Uses supported filters and identity fields
    - QueryAPI: Uses domain and scopes for session gating
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..core.enums import (
    IdentityField,
    IssueFilter,
    PagingMode,
    ProviderId,
    PullRequestFilter,
    QueryKind,
)

GITHUB_DOMAIN = "github.com"
GITLAB_DOMAIN = "gitlab.com"
BITBUCKET_DOMAIN = "bitbucket.org"
AZURE_DEVOPS_DOMAIN = "dev.azure.com"

GITHUB_SCOPES = ("repo", "read:user", "user:email")
GITLAB_SCOPES = ("read_api", "read_user", "read_repository")
BITBUCKET_SCOPES = ("account:read", "repository:read", "pullrequest:read", "issue:read")
AZURE_DEVOPS_SCOPES = ("vso.code", "vso.identity", "vso.project", "vso.profile", "vso.work")


def filter_value(value: Any) -> str:
    """Normalize a filter (enum member or plain string) to its string value."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class ProviderCapability:
    """Capabilities of one hosting provider.

    Attributes:
        provider_id: Provider identifier (enum member or raw string for unknowns)
        pull_request_paging: Paging mode for pull request queries
        issue_paging: Paging mode for issue queries
        pull_request_filters: Filters supported on pull request queries
        issue_filters: Filters supported on issue queries
        pull_request_identity: Identity field used for pull request filters
        issue_identity: Identity field used for issue filters
        scopes: Auth scopes requested when establishing a session
        domain: Web domain of the provider
        organization_scoped: Queries must stay within one organization and
            descriptors must carry a project
    """

    provider_id: ProviderId | str
    pull_request_paging: PagingMode = PagingMode.PER_UNIT
    issue_paging: PagingMode = PagingMode.PER_UNIT
    pull_request_filters: frozenset[PullRequestFilter] = field(default_factory=frozenset)
    issue_filters: frozenset[IssueFilter] = field(default_factory=frozenset)
    pull_request_identity: IdentityField = IdentityField.USERNAME
    issue_identity: IdentityField = IdentityField.USERNAME
    scopes: tuple[str, ...] = ()
    domain: str = ""
    organization_scoped: bool = False

    def paging_mode(self, kind: QueryKind) -> PagingMode:
        if kind == QueryKind.PULL_REQUESTS:
            return self.pull_request_paging
        return self.issue_paging

    def supported_filters(self, kind: QueryKind) -> frozenset[str]:
        """Supported filter values for a query kind."""
        if kind == QueryKind.PULL_REQUESTS:
            filters: frozenset[Any] = self.pull_request_filters
        else:
            filters = self.issue_filters
        return frozenset(filter_value(f) for f in filters)

    def unsupported_filters(self, kind: QueryKind, filters: Iterable[Any]) -> list[str]:
        """Requested filter values this provider cannot apply, in request order."""
        supported = self.supported_filters(kind)
        return [value for value in (filter_value(f) for f in filters) if value not in supported]

    def supports_filters(self, kind: QueryKind, filters: Iterable[Any]) -> bool:
        return not self.unsupported_filters(kind, filters)

    def identity_field(self, kind: QueryKind) -> IdentityField:
        if kind == QueryKind.PULL_REQUESTS:
            return self.pull_request_identity
        return self.issue_identity

    def accepts_repo_ids(self, kind: QueryKind) -> bool:
        """Whether opaque repo ids can be sent to this provider.

        Ids carry no namespace, so they only work with a bulk call and never
        with an organization-scoped provider.
        """
        return self.paging_mode(kind) == PagingMode.BULK and not self.organization_scoped


DEFAULT_CAPABILITIES: tuple[ProviderCapability, ...] = (
    ProviderCapability(
        provider_id=ProviderId.GITHUB,
        pull_request_paging=PagingMode.BULK,
        issue_paging=PagingMode.BULK,
        pull_request_filters=frozenset(PullRequestFilter),
        issue_filters=frozenset(IssueFilter),
        scopes=GITHUB_SCOPES,
        domain=GITHUB_DOMAIN,
    ),
    ProviderCapability(
        provider_id=ProviderId.GITLAB,
        pull_request_paging=PagingMode.BULK,
        issue_paging=PagingMode.BULK,
        pull_request_filters=frozenset(
            {
                PullRequestFilter.AUTHOR,
                PullRequestFilter.ASSIGNEE,
                PullRequestFilter.REVIEW_REQUESTED,
            }
        ),
        issue_filters=frozenset({IssueFilter.AUTHOR, IssueFilter.ASSIGNEE}),
        scopes=GITLAB_SCOPES,
        domain=GITLAB_DOMAIN,
    ),
    ProviderCapability(
        provider_id=ProviderId.BITBUCKET,
        pull_request_filters=frozenset({PullRequestFilter.AUTHOR}),
        pull_request_identity=IdentityField.ID,
        scopes=BITBUCKET_SCOPES,
        domain=BITBUCKET_DOMAIN,
    ),
    ProviderCapability(
        provider_id=ProviderId.AZURE_DEVOPS,
        pull_request_filters=frozenset(
            {
                PullRequestFilter.AUTHOR,
                PullRequestFilter.ASSIGNEE,
                PullRequestFilter.REVIEW_REQUESTED,
            }
        ),
        issue_filters=frozenset({IssueFilter.AUTHOR, IssueFilter.ASSIGNEE, IssueFilter.MENTION}),
        pull_request_identity=IdentityField.ID,
        # Work item queries match on display names
        issue_identity=IdentityField.NAME,
        scopes=AZURE_DEVOPS_SCOPES,
        domain=AZURE_DEVOPS_DOMAIN,
        organization_scoped=True,
    ),
)


def _key(provider_id: ProviderId | str) -> str:
    return filter_value(provider_id).lower()


class CapabilityRegistry:
    """Lookup table of provider capabilities keyed by provider id."""

    def __init__(self, capabilities: Iterable[ProviderCapability] | None = None) -> None:
        """Initialize the registry.

        Args:
            capabilities: Entries to register (defaults to DEFAULT_CAPABILITIES)
        """
        self._capabilities: dict[str, ProviderCapability] = {}
        for capability in DEFAULT_CAPABILITIES if capabilities is None else capabilities:
            self.register(capability)

    def register(self, capability: ProviderCapability) -> None:
        """Register or replace the entry for a provider."""
        self._capabilities[_key(capability.provider_id)] = capability

    def get(self, provider_id: ProviderId | str) -> ProviderCapability:
        """Get the capability entry for a provider.

        Unknown providers get a per-unit entry with nothing supported.
        """
        capability = self._capabilities.get(_key(provider_id))
        if capability is None:
            return ProviderCapability(provider_id=provider_id)
        return capability

    def is_provider_supported(self, provider_id: ProviderId | str) -> bool:
        return _key(provider_id) in self._capabilities

    def list_providers(self) -> list[str]:
        return list(self._capabilities.keys())

    def get_provider_domain(self, provider_id: ProviderId | str) -> str:
        return self.get(provider_id).domain

    def get_scopes_for_provider(self, provider_id: ProviderId | str) -> list[str]:
        return list(self.get(provider_id).scopes)

    def get_paging_mode(self, provider_id: ProviderId | str, kind: QueryKind) -> PagingMode:
        return self.get(provider_id).paging_mode(kind)

    def supports_filters(
        self, provider_id: ProviderId | str, kind: QueryKind, filters: Iterable[Any]
    ) -> bool:
        return self.get(provider_id).supports_filters(kind, filters)

    def describe_provider(self, provider_id: ProviderId | str) -> dict[str, Any] | None:
        """Describe a provider's capabilities as plain data, or None if unknown."""
        if not self.is_provider_supported(provider_id):
            return None
        capability = self.get(provider_id)
        return {
            "provider_id": _key(provider_id),
            "domain": capability.domain,
            "scopes": list(capability.scopes),
            "organization_scoped": capability.organization_scoped,
            "pull_requests": {
                "paging": capability.pull_request_paging.value,
                "filters": sorted(capability.supported_filters(QueryKind.PULL_REQUESTS)),
                "identity_field": capability.pull_request_identity.value,
                "accepts_repo_ids": capability.accepts_repo_ids(QueryKind.PULL_REQUESTS),
            },
            "issues": {
                "paging": capability.issue_paging.value,
                "filters": sorted(capability.supported_filters(QueryKind.ISSUES)),
                "identity_field": capability.issue_identity.value,
                "accepts_repo_ids": capability.accepts_repo_ids(QueryKind.ISSUES),
            },
        }


_DEFAULT_REGISTRY: CapabilityRegistry | None = None


def get_capability_registry() -> CapabilityRegistry:
    """Get the process-wide default registry (created on first access)."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = CapabilityRegistry()
    return _DEFAULT_REGISTRY
