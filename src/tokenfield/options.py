"""Option filtering for the suggestion dropdown.

The candidate list is derived state: it is recomputed from the catalog, the
current selection and the query every time it is needed and never stored on
its own. Matching is a plain case-insensitive substring test; catalog order
is preserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


def filter_options(
    options: Sequence[str],
    selected: Sequence[str],
    query: str,
    keep_duplicates: bool = False,
) -> list[str]:
    """Return the options visible for *query*, in catalog order.

    Options already in *selected* (exact match) are dropped unless
    *keep_duplicates* is set. An empty query matches everything.
    """
    needle = query.lower()
    taken = set() if keep_duplicates else set(selected)
    return [
        option
        for option in options
        if option not in taken and needle in option.lower()
    ]


def admits_custom_entry(
    options: Sequence[str], query: str, allow_custom: bool
) -> bool:
    """Whether *query* may be committed as a free-form value.

    Requires custom options to be allowed, a query that is not blank, and a
    query that is not itself a catalog option.
    """
    return allow_custom and query.strip() != "" and query not in options


@dataclass(frozen=True)
class CandidateView:
    """Rows of the dropdown: the filtered candidates plus an optional custom row.

    The custom row, when present, is addressed as index ``len(candidates)``.
    """

    candidates: tuple[str, ...] = ()
    custom_entry: str | None = None

    @property
    def rows(self) -> tuple[str, ...]:
        if self.custom_entry is None:
            return self.candidates
        return self.candidates + (self.custom_entry,)

    @classmethod
    def build(
        cls,
        options: Sequence[str],
        selected: Sequence[str],
        query: str,
        keep_duplicates: bool = False,
        allow_custom: bool = False,
    ) -> CandidateView:
        candidates = filter_options(options, selected, query, keep_duplicates)
        custom = query if admits_custom_entry(options, query, allow_custom) else None
        return cls(candidates=tuple(candidates), custom_entry=custom)

    @property
    def visible_count(self) -> int:
        return len(self.rows)

    @property
    def custom_index(self) -> int | None:
        if self.custom_entry is None:
            return None
        return len(self.candidates)

    def is_custom_row(self, index: int) -> bool:
        return self.custom_entry is not None and index == len(self.candidates)

    def row(self, index: int) -> str | None:
        """Value committed by row *index*, or ``None`` if there is no such row."""
        rows = self.rows
        if 0 <= index < len(rows):
            return rows[index]
        return None
