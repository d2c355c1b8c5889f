"""Core enumerations for standardized types across all hosting providers.

Architecture:
    This module defines the enums shared by the capability registry, the
    filter translator and the paging coordinator. String enums keep values
    readable in logs and stable across serialization.

Key Types:
    - ProviderId: Supported source-hosting providers
    - QueryKind: Pull request vs issue queries
    - PagingMode: Bulk (one call for many repositories) vs per-unit fan-out
    - PullRequestFilter / IssueFilter: Generic user-centric filters
    - IdentityField: Which field of the current user feeds a filter

See Also:
    - CapabilityRegistry: Maps providers to paging modes and filter support
    - FilterTranslator: Turns filters into provider query options
"""

from enum import Enum


class ProviderId(str, Enum):
    """Supported source-hosting providers."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"
    AZURE_DEVOPS = "azure-devops"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value


class QueryKind(str, Enum):
    """Kind of item a paged query returns."""

    PULL_REQUESTS = "pull_requests"
    ISSUES = "issues"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value


class PagingMode(str, Enum):
    """Pagination model a provider exposes for a query kind.

    BULK providers answer a multi-repository query with one call and one
    cursor. PER_UNIT providers only paginate within one repository or
    project, so the query has to be fanned out.
    """

    BULK = "bulk"
    PER_UNIT = "per_unit"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value


class PullRequestFilter(str, Enum):
    """User-centric filters for pull request queries."""

    AUTHOR = "author"
    ASSIGNEE = "assignee"
    REVIEW_REQUESTED = "review-requested"
    MENTION = "mention"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value


class IssueFilter(str, Enum):
    """User-centric filters for issue queries.

    Review requests only exist on pull requests, so there is no
    REVIEW_REQUESTED member here.
    """

    AUTHOR = "author"
    ASSIGNEE = "assignee"
    MENTION = "mention"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value


class IdentityField(str, Enum):
    """Field of the resolved current-user identity used as the filter value."""

    ID = "id"
    USERNAME = "username"
    NAME = "name"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value
