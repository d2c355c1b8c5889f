"""Core components."""

from .base import AuthSessionProvider, ProviderTransport
from .enums import (
    IdentityField,
    IssueFilter,
    PagingMode,
    ProviderId,
    PullRequestFilter,
    QueryKind,
)
from .exceptions import (
    IdentityFieldMissingError,
    IdentityUnavailableError,
    MultipleOrganizationsNotSupportedError,
    NoOrganizationError,
    ProviderCallFailedError,
    QueryError,
    SessionUnavailableError,
    UnsupportedFilterError,
    UnsupportedInputError,
)

__all__ = [
    "AuthSessionProvider",
    "ProviderTransport",
    "IdentityField",
    "IssueFilter",
    "PagingMode",
    "ProviderId",
    "PullRequestFilter",
    "QueryKind",
    "QueryError",
    "SessionUnavailableError",
    "UnsupportedInputError",
    "UnsupportedFilterError",
    "NoOrganizationError",
    "MultipleOrganizationsNotSupportedError",
    "IdentityUnavailableError",
    "IdentityFieldMissingError",
    "ProviderCallFailedError",
]
