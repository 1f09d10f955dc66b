"""TokenSequence: the ordered selected values and the text-entry cursor."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator

logger = logging.getLogger(__name__)


class TokenSequence:
    """Ordered list of selected tokens plus the position of the entry point.

    ``cursor`` lives in ``[-1, len(selected)]``:

    * ``-1`` -- the entry point sits before the first token.
    * ``k`` -- the entry point sits immediately after token ``k``.
    * ``len(selected)`` -- the entry point sits after the last token.

    Values are not de-duplicated here; admission policy belongs to the
    caller. ``on_change`` receives a copy of the full list after every
    insertion or removal.
    """

    def __init__(
        self,
        initial: Iterable[str] = (),
        on_change: Callable[[list[str]], None] | None = None,
    ) -> None:
        self._selected: list[str] = list(initial)
        self._cursor: int = -1
        self.on_change = on_change

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._selected)

    def __getitem__(self, index: int) -> str:
        return self._selected[index]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._selected))

    # ------------------------------------------------------------------
    # Cursor movement
    # ------------------------------------------------------------------

    def set_cursor(self, index: int) -> None:
        self._cursor = index
        self._clamp()

    def move_cursor_left(self) -> bool:
        if self._cursor <= -1:
            return False
        self._cursor -= 1
        return True

    def move_cursor_right(self) -> bool:
        if self._cursor >= len(self._selected):
            return False
        self._cursor += 1
        return True

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert_after_cursor(self, value: str) -> int:
        """Insert *value* right after the cursor and move the cursor onto it.

        Returns the index of the new token.
        """
        index = min(self._cursor + 1, len(self._selected))
        self._selected.insert(index, value)
        self._cursor = index
        self._clamp()
        logger.debug("Inserted %r at %d", value, index)
        self._notify()
        return index

    def remove_at(self, index: int) -> bool:
        """Remove the token at *index*. Out-of-range indices are ignored."""
        if not self._pop(index):
            return False
        if self._cursor >= len(self._selected):
            self._cursor = len(self._selected) - 1
        self._clamp()
        self._notify()
        return True

    def remove_before_cursor(self) -> bool:
        """Remove the token at the cursor and step the entry point left.

        At the end position there is no token at the cursor, so only the
        entry point moves.
        """
        if self._cursor == -1:
            return False
        if self._cursor >= len(self._selected):
            self._cursor -= 1
            self._clamp()
            return True
        index = self._cursor
        self._pop(index)
        self._cursor = index - 1
        self._clamp()
        self._notify()
        return True

    def replace(self, values: Iterable[str], cursor: int = -1) -> None:
        """Swap in a new list without notifying (used when restoring state)."""
        self._selected = list(values)
        self._cursor = cursor
        self._clamp()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _pop(self, index: int) -> bool:
        if not 0 <= index < len(self._selected):
            return False
        removed = self._selected.pop(index)
        logger.debug("Removed %r from %d", removed, index)
        return True

    def _clamp(self) -> None:
        self._cursor = max(-1, min(self._cursor, len(self._selected)))

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(list(self._selected))
