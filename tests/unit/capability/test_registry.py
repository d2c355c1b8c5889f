"""Unit tests for the capability registry."""

from forgehub.query.capability import (
    CapabilityRegistry,
    ProviderCapability,
    get_capability_registry,
)
from forgehub.query.core import (
    IdentityField,
    IssueFilter,
    PagingMode,
    ProviderId,
    PullRequestFilter,
    QueryKind,
)


class TestDefaultCapabilities:
    """Test the built-in provider table."""

    def test_paging_modes(self):
        """Test bulk vs per-unit paging per provider."""
        registry = CapabilityRegistry()
        for kind in QueryKind:
            assert registry.get_paging_mode(ProviderId.GITHUB, kind) == PagingMode.BULK
            assert registry.get_paging_mode(ProviderId.GITLAB, kind) == PagingMode.BULK
            assert registry.get_paging_mode(ProviderId.BITBUCKET, kind) == PagingMode.PER_UNIT
            assert registry.get_paging_mode(ProviderId.AZURE_DEVOPS, kind) == PagingMode.PER_UNIT

    def test_github_supports_every_filter(self):
        """Test GitHub accepts all filters on both kinds."""
        registry = CapabilityRegistry()
        assert registry.supports_filters(
            ProviderId.GITHUB, QueryKind.PULL_REQUESTS, list(PullRequestFilter)
        )
        assert registry.supports_filters(ProviderId.GITHUB, QueryKind.ISSUES, list(IssueFilter))

    def test_gitlab_rejects_mention(self):
        """Test GitLab filter support."""
        capability = CapabilityRegistry().get(ProviderId.GITLAB)
        assert capability.unsupported_filters(
            QueryKind.PULL_REQUESTS, [PullRequestFilter.AUTHOR, PullRequestFilter.MENTION]
        ) == ["mention"]
        assert capability.supports_filters(
            QueryKind.ISSUES, [IssueFilter.AUTHOR, IssueFilter.ASSIGNEE]
        )

    def test_bitbucket_filters(self):
        """Test Bitbucket only filters pull requests by author."""
        capability = CapabilityRegistry().get(ProviderId.BITBUCKET)
        assert capability.supported_filters(QueryKind.PULL_REQUESTS) == {"author"}
        assert capability.supported_filters(QueryKind.ISSUES) == frozenset()
        assert capability.identity_field(QueryKind.PULL_REQUESTS) == IdentityField.ID

    def test_azure_devops_identity_fields(self):
        """Test Azure DevOps uses id for pull requests and display name for work items."""
        capability = CapabilityRegistry().get(ProviderId.AZURE_DEVOPS)
        assert capability.organization_scoped
        assert capability.identity_field(QueryKind.PULL_REQUESTS) == IdentityField.ID
        assert capability.identity_field(QueryKind.ISSUES) == IdentityField.NAME
        assert not capability.supports_filters(
            QueryKind.PULL_REQUESTS, [PullRequestFilter.MENTION]
        )
        assert capability.supports_filters(QueryKind.ISSUES, [IssueFilter.MENTION])

    def test_accepts_repo_ids(self):
        """Test ids are only accepted by bulk providers that are not org-scoped."""
        registry = CapabilityRegistry()
        assert registry.get(ProviderId.GITHUB).accepts_repo_ids(QueryKind.PULL_REQUESTS)
        assert registry.get(ProviderId.GITLAB).accepts_repo_ids(QueryKind.ISSUES)
        assert not registry.get(ProviderId.BITBUCKET).accepts_repo_ids(QueryKind.PULL_REQUESTS)
        assert not registry.get(ProviderId.AZURE_DEVOPS).accepts_repo_ids(QueryKind.ISSUES)

    def test_filters_accept_plain_strings(self):
        """Test string filter values are matched like enum members."""
        registry = CapabilityRegistry()
        assert registry.supports_filters(
            ProviderId.GITLAB, QueryKind.PULL_REQUESTS, ["review-requested"]
        )


class TestRegistryLookup:
    """Test lookup and registration."""

    def test_unknown_provider_gets_default_entry(self):
        """Test unknown providers resolve to per-unit with no filters."""
        registry = CapabilityRegistry()
        capability = registry.get("gitea")
        assert not registry.is_provider_supported("gitea")
        assert capability.paging_mode(QueryKind.PULL_REQUESTS) == PagingMode.PER_UNIT
        assert capability.supported_filters(QueryKind.ISSUES) == frozenset()
        assert registry.describe_provider("gitea") is None

    def test_lookup_is_case_insensitive(self):
        """Test provider keys are normalized."""
        assert CapabilityRegistry().is_provider_supported("GitHub")

    def test_register_replaces_entry(self):
        """Test register overrides an existing provider."""
        registry = CapabilityRegistry()
        registry.register(ProviderCapability(provider_id=ProviderId.GITHUB))
        assert registry.get_paging_mode(ProviderId.GITHUB, QueryKind.ISSUES) == PagingMode.PER_UNIT

    def test_custom_table(self):
        """Test a registry built from custom entries only."""
        registry = CapabilityRegistry([ProviderCapability(provider_id="gitea", domain="gitea.io")])
        assert registry.list_providers() == ["gitea"]
        assert registry.get_provider_domain("gitea") == "gitea.io"

    def test_session_parameters(self):
        """Test domain and scopes used for session gating."""
        registry = CapabilityRegistry()
        assert registry.get_provider_domain(ProviderId.AZURE_DEVOPS) == "dev.azure.com"
        assert "vso.work" in registry.get_scopes_for_provider(ProviderId.AZURE_DEVOPS)
        assert registry.get_scopes_for_provider("gitea") == []

    def test_describe_provider(self):
        """Test plain-data description of a provider."""
        info = CapabilityRegistry().describe_provider(ProviderId.GITLAB)
        assert info is not None
        assert info["provider_id"] == "gitlab"
        assert info["pull_requests"]["paging"] == "bulk"
        assert info["issues"]["filters"] == ["assignee", "author"]
        assert info["issues"]["accepts_repo_ids"] is True

    def test_default_registry_is_shared(self):
        """Test the default registry is a singleton."""
        assert get_capability_registry() is get_capability_registry()
