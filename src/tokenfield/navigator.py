"""DropdownNavigator: open/closed state and the highlighted dropdown row."""

from __future__ import annotations

from tokenfield.options import CandidateView


class DropdownNavigator:
    """Tracks panel visibility and a wrap-around highlight.

    ``highlight_index`` is ``-1`` when nothing is highlighted, otherwise an
    index into the dropdown rows (the custom-entry row included).
    """

    def __init__(self) -> None:
        self.highlight_index: int = -1
        self.is_open: bool = False

    def open(self) -> bool:
        changed = not self.is_open
        self.is_open = True
        return changed

    def close(self) -> bool:
        changed = self.is_open
        self.is_open = False
        return changed

    def reset_highlight(self) -> None:
        self.highlight_index = -1

    def clamp(self, visible_count: int) -> None:
        """Drop a highlight that no longer addresses a row."""
        if self.highlight_index >= visible_count:
            self.highlight_index = -1

    def step_down(self, visible_count: int) -> int | None:
        """Move the highlight one row down, wrapping past the end to 0."""
        if visible_count <= 0:
            return None
        if self.highlight_index < 0 or self.highlight_index >= visible_count - 1:
            self.highlight_index = 0
        else:
            self.highlight_index += 1
        return self.highlight_index

    def step_up(self, visible_count: int) -> int | None:
        """Move the highlight one row up, wrapping past 0 to the last row."""
        if visible_count <= 0:
            return None
        if self.highlight_index <= 0 or self.highlight_index >= visible_count:
            self.highlight_index = visible_count - 1
        else:
            self.highlight_index -= 1
        return self.highlight_index

    def resolve_selection(self, view: CandidateView) -> str | None:
        """The highlighted row's value, else the first candidate, else ``None``."""
        if self.highlight_index != -1:
            value = view.row(self.highlight_index)
            if value is not None:
                return value
        if view.candidates:
            return view.candidates[0]
        return None
