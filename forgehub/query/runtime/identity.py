"""Current-user identity resolution."""

from __future__ import annotations

import logging

from ..capability.registry import CapabilityRegistry, get_capability_registry
from ..core.base import ProviderTransport
from ..core.enums import ProviderId
from ..core.exceptions import IdentityUnavailableError, NoOrganizationError
from ..models import Identity

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves the caller's identity on a provider through the transport.

    Results are not cached here; the transport may cache if it wants to.
    """

    def __init__(
        self,
        transport: ProviderTransport,
        *,
        capability_registry: CapabilityRegistry | None = None,
    ) -> None:
        self._transport = transport
        self._registry = capability_registry or get_capability_registry()

    async def resolve_identity(
        self, provider_id: ProviderId, organization: str | None = None
    ) -> Identity:
        """Resolve the current user.

        Organization-scoped providers resolve the user within ``organization``,
        which is then required. Other providers ignore it.

        Raises:
            NoOrganizationError: If an organization-scoped provider gets no organization
            IdentityUnavailableError: If the transport fails or returns no user
        """
        capability = self._registry.get(provider_id)
        if capability.organization_scoped and not organization:
            raise NoOrganizationError(
                f"Organization required to resolve identity for {provider_id}",
                provider_id=provider_id,
            )

        try:
            if capability.organization_scoped:
                identity = await self._transport.get_current_user_for_organization(
                    provider_id, organization
                )
            else:
                identity = await self._transport.get_current_user(provider_id)
        except Exception as exc:
            raise IdentityUnavailableError(
                f"Unable to get current user for {provider_id}: {exc}",
                provider_id=provider_id,
            ) from exc

        if identity is None:
            raise IdentityUnavailableError(
                f"Unable to get current user for {provider_id}", provider_id=provider_id
            )

        logger.debug(
            "Identity resolved",
            extra={"provider_id": str(provider_id), "organization": organization},
        )
        return identity
