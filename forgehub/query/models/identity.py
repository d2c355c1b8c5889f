"""Current-user identity and the filter options derived from it."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..core.enums import IdentityField


class Identity(BaseModel):
    """Current authenticated user on a provider.

    Providers fill different subsets: some filter on a stable ``id``,
    others on ``username``, and work-item search filters on display ``name``.
    """

    id: str | None = None
    username: str | None = None
    name: str | None = None
    email: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    def get_field(self, field: IdentityField) -> str | None:
        """Return the value of the given identity field, or None when empty."""
        value = getattr(self, field.value)
        return value or None


class IdentityFilterOptions(BaseModel):
    """Provider-agnostic filter payload handed to the transport.

    Only slots for requested filters are populated.
    """

    author_login: str | None = None
    assignee_logins: list[str] | None = None
    review_requested_login: str | None = None
    mention_login: str | None = None

    model_config = ConfigDict(frozen=True)

    def is_empty(self) -> bool:
        return not any(
            (
                self.author_login,
                self.assignee_logins,
                self.review_requested_login,
                self.mention_login,
            )
        )
