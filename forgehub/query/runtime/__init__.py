"""Runtime orchestration components."""

from .cursor import CursorCodec
from .definitions import PagingConfig, QueryBulk, QueryUnit
from .filters import FilterTranslator
from .identity import IdentityResolver
from .paging import PagingCoordinator

__all__ = [
    "CursorCodec",
    "FilterTranslator",
    "IdentityResolver",
    "PagingConfig",
    "PagingCoordinator",
    "QueryBulk",
    "QueryUnit",
]
