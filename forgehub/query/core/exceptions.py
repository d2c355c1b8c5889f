"""Custom exception hierarchy.

Every exception carries a stable ``category`` string so callers and logs can
tell failure causes apart even where the facade collapses them into an empty
result.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import aiohttp

if TYPE_CHECKING:
    from .enums import ProviderId


class QueryError(Exception):
    """Base exception for all library errors."""

    category = "QueryError"

    def __init__(self, message: str, *, provider_id: ProviderId | str | None = None) -> None:
        super().__init__(message)
        self.provider_id = provider_id


class SessionUnavailableError(QueryError):
    """No authenticated session could be established for the provider."""

    category = "SessionUnavailable"


class UnsupportedInputError(QueryError):
    """Input shape does not match what the provider can page over.

    Raised for id-only input against a per-unit provider, for descriptors
    missing the fields an organization-scoped provider needs, and for
    malformed caller cursors.
    """

    category = "UnsupportedInput"


class UnsupportedFilterError(QueryError):
    """One or more requested filters are not supported by the provider."""

    category = "UnsupportedFilter"

    def __init__(
        self,
        message: str,
        *,
        provider_id: ProviderId | str | None = None,
        filters: Iterable[Any] = (),
    ) -> None:
        super().__init__(message, provider_id=provider_id)
        self.filters = list(filters)


class NoOrganizationError(QueryError):
    """Organization-scoped query resolved to zero organizations."""

    category = "NoOrganization"


class MultipleOrganizationsNotSupportedError(QueryError):
    """Organization-scoped query spans more than one organization."""

    category = "MultipleOrganizationsNotSupported"

    def __init__(
        self,
        message: str,
        *,
        provider_id: ProviderId | str | None = None,
        organizations: Iterable[str] = (),
    ) -> None:
        super().__init__(message, provider_id=provider_id)
        self.organizations = sorted(organizations)


class IdentityUnavailableError(QueryError):
    """The current-user record could not be produced."""

    category = "IdentityUnavailable"


class IdentityFieldMissingError(QueryError):
    """The identity field selected for filtering is empty."""

    category = "IdentityFieldMissing"

    def __init__(
        self,
        message: str,
        *,
        provider_id: ProviderId | str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, provider_id=provider_id)
        self.field = field


class ProviderCallFailedError(QueryError):
    """A transport-level call for a unit or bulk query failed."""

    category = "ProviderCallFailed"

    def __init__(
        self,
        message: str,
        *,
        provider_id: ProviderId | str | None = None,
        unit: Any = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, provider_id=provider_id)
        self.unit = unit
        self.status_code = status_code

    @classmethod
    def wrap(
        cls,
        exc: BaseException,
        *,
        provider_id: ProviderId | str | None = None,
        unit: Any = None,
    ) -> ProviderCallFailedError:
        """Build a ProviderCallFailedError describing a transport exception.

        HTTP status codes are carried over from aiohttp response errors.
        The original exception should be chained with ``raise ... from exc``.
        """
        status_code: int | None = None
        if isinstance(exc, aiohttp.ClientResponseError):
            status_code = exc.status
            detail = f"HTTP {exc.status}: {exc.message}"
        elif isinstance(exc, asyncio.TimeoutError):
            detail = "request timed out"
        else:
            detail = str(exc) or type(exc).__name__
        where = f" for {unit}" if unit is not None else ""
        return cls(
            f"Provider call failed{where}: {detail}",
            provider_id=provider_id,
            unit=unit,
            status_code=status_code,
        )
