"""Encode and decode composite cursors."""

from __future__ import annotations

from pydantic import ValidationError

from ..core.exceptions import UnsupportedInputError
from ..models import CompositeCursor, CursorEntry


class CursorCodec:
    """Serializes CompositeCursor to the opaque string handed to callers.

    Output is compact JSON with absent per-unit cursors omitted, e.g.
    ``{"cursors":[{"repo":{"namespace":"o","name":"r"},"cursor":"c1"}]}``.
    """

    @staticmethod
    def encode(cursor: CompositeCursor) -> str:
        return cursor.model_dump_json(exclude_none=True)

    @staticmethod
    def decode(
        raw: str | None,
        entry_type: type[CursorEntry] | None = None,
    ) -> CompositeCursor:
        """Parse a caller cursor.

        Args:
            raw: Cursor string from a previous page (None or "" means start)
            entry_type: Expected entry class; entries of another kind are rejected

        Returns:
            Decoded CompositeCursor (empty when raw is absent)

        Raises:
            UnsupportedInputError: If the cursor is malformed or of the wrong kind
        """
        if not raw:
            return CompositeCursor()
        try:
            cursor = CompositeCursor.model_validate_json(raw)
        except ValidationError as exc:
            raise UnsupportedInputError(f"Malformed paging cursor: {raw!r}") from exc

        if entry_type is not None:
            for entry in cursor.cursors:
                if not isinstance(entry, entry_type):
                    raise UnsupportedInputError(
                        f"Paging cursor holds {type(entry).__name__} entries, "
                        f"expected {entry_type.__name__}"
                    )
        return cursor
