"""Forgehub Query - paged pull request and issue queries across hosting providers."""

from .api import QueryAPI
from .capability import (
    CapabilityRegistry,
    ProviderCapability,
    get_capability_registry,
)
from .core import (
    AuthSessionProvider,
    IdentityField,
    IdentityFieldMissingError,
    IdentityUnavailableError,
    IssueFilter,
    MultipleOrganizationsNotSupportedError,
    NoOrganizationError,
    PagingMode,
    ProviderCallFailedError,
    ProviderId,
    ProviderTransport,
    PullRequestFilter,
    QueryError,
    QueryKind,
    SessionUnavailableError,
    UnsupportedFilterError,
    UnsupportedInputError,
)
from .models import (
    CompositeCursor,
    Identity,
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
from .runtime import (
    CursorCodec,
    FilterTranslator,
    IdentityResolver,
    PagingConfig,
    PagingCoordinator,
)

__version__ = "0.1.0"

__all__ = [
    # API
    "QueryAPI",
    # Capability
    "CapabilityRegistry",
    "ProviderCapability",
    "get_capability_registry",
    # Collaborators
    "AuthSessionProvider",
    "ProviderTransport",
    # Enums
    "IdentityField",
    "IssueFilter",
    "PagingMode",
    "ProviderId",
    "PullRequestFilter",
    "QueryKind",
    # Exceptions
    "IdentityFieldMissingError",
    "IdentityUnavailableError",
    "MultipleOrganizationsNotSupportedError",
    "NoOrganizationError",
    "ProviderCallFailedError",
    "QueryError",
    "SessionUnavailableError",
    "UnsupportedFilterError",
    "UnsupportedInputError",
    # Models
    "CompositeCursor",
    "Identity",
    "IdentityFilterOptions",
    "Issue",
    "Page",
    "ProjectCursorEntry",
    "PullRequest",
    "QueryResult",
    "RepoCursorEntry",
    "RepoDescriptor",
    "Repository",
    # Runtime
    "CursorCodec",
    "FilterTranslator",
    "IdentityResolver",
    "PagingConfig",
    "PagingCoordinator",
]
