"""Translation of generic user filters into provider query options."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..capability.registry import CapabilityRegistry, filter_value, get_capability_registry
from ..core.enums import ProviderId, PullRequestFilter, QueryKind
from ..core.exceptions import IdentityFieldMissingError, UnsupportedFilterError
from ..models import Identity, IdentityFilterOptions


class FilterTranslator:
    """Maps Author/Assignee/ReviewRequested/Mention onto IdentityFilterOptions.

    Which identity field fills the options (id, username or display name)
    comes from the provider's capability entry.
    """

    def __init__(self, capability_registry: CapabilityRegistry | None = None) -> None:
        self._registry = capability_registry or get_capability_registry()

    def validate(
        self, provider_id: ProviderId, kind: QueryKind, filters: Iterable[Any]
    ) -> list[str]:
        """Check filter support and return the normalized filter values.

        Raises:
            UnsupportedFilterError: If any filter is unsupported for this provider and kind
        """
        requested = [filter_value(f) for f in filters]
        unsupported = self._registry.get(provider_id).unsupported_filters(kind, requested)
        if unsupported:
            raise UnsupportedFilterError(
                f"Unsupported {kind.value} filters for provider {provider_id}: "
                f"{', '.join(unsupported)}",
                provider_id=provider_id,
                filters=unsupported,
            )
        return requested

    def translate(
        self,
        provider_id: ProviderId,
        kind: QueryKind,
        filters: Iterable[Any],
        identity: Identity,
    ) -> IdentityFilterOptions:
        """Build filter options for the requested filters from a resolved identity.

        Raises:
            UnsupportedFilterError: If any filter is unsupported
            IdentityFieldMissingError: If the provider's identity field is empty
        """
        requested = set(self.validate(provider_id, kind, filters))
        field = self._registry.get(provider_id).identity_field(kind)
        login = identity.get_field(field)
        if login is None:
            raise IdentityFieldMissingError(
                f"Current user for {provider_id} has no {field.value} to filter on",
                provider_id=provider_id,
                field=field.value,
            )

        return IdentityFilterOptions(
            author_login=login if PullRequestFilter.AUTHOR.value in requested else None,
            assignee_logins=[login] if PullRequestFilter.ASSIGNEE.value in requested else None,
            review_requested_login=(
                login if PullRequestFilter.REVIEW_REQUESTED.value in requested else None
            ),
            mention_login=login if PullRequestFilter.MENTION.value in requested else None,
        )
