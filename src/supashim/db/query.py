"""
Query descriptor - accumulated, not-yet-executed query state.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

Direction = Literal["asc", "desc"]
Payload = dict[str, Any] | list[dict[str, Any]]


@dataclass(frozen=True)
class Predicate:
    """Equality condition: field = value."""

    field: str
    value: Any


@dataclass(frozen=True)
class SortDirective:
    """Sort on one field."""

    field: str
    direction: str = "asc"

    @property
    def ascending(self) -> bool:
        # Anything but "asc" sorts descending
        return self.direction.lower() == "asc"


@dataclass
class QueryDescriptor:
    """
    Everything a builder has accumulated for one table.

    Predicates are ANDed in insertion order. Only the first sort
    directive is applied at execution; the rest are kept so callers
    can see what was asked for.
    """

    table: str
    predicates: list[Predicate] = field(default_factory=list)
    sorts: list[SortDirective] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    insert_payload: Payload | None = None
    update_payload: dict[str, Any] | None = None

    @property
    def effective_sort(self) -> SortDirective | None:
        return self.sorts[0] if self.sorts else None

    def row_range(self, window: int) -> tuple[int, int] | None:
        """
        Zero-based inclusive row range for offset pagination.

        Without a limit the range covers `window` rows.
        """
        if self.offset is None:
            return None
        size = self.limit or window
        return self.offset, self.offset + size - 1
