"""MultiSelect component: a token field with a filtering dropdown."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Protocol

from tokenfield.component import CURSOR_MARKER
from tokenfield.controller import InteractionController, MultiSelectOptions, MultiSelectState
from tokenfield.keybindings import TokenFieldKeybindingsManager, get_token_field_keybindings
from tokenfield.keys import decode_text, is_key_release
from tokenfield.scheduling import Scheduler
from tokenfield.utils import truncate_to_width, visible_width

_PASTE_START = "\x1b[200~"
_PASTE_END = "\x1b[201~"

_REMOVE_GLYPH = "×"


class MultiSelectTheme(Protocol):
    token: Callable[[str], str]
    focused_token: Callable[[str], str]
    option: Callable[[str], str]
    highlighted_option: Callable[[str], str]
    custom_option: Callable[[str], str]
    placeholder: Callable[[str], str]
    scroll_info: Callable[[str], str]
    no_match: Callable[[str], str]


@dataclass(frozen=True)
class ControlElement:
    """A focusable part of one MultiSelect: a token chip, its remove button or an option row."""

    owner_id: int
    kind: Literal["token", "remove", "option"]
    index: int


@dataclass
class _Piece:
    text: str
    width: int
    is_entry: bool = False


class MultiSelect:
    """Token field component.

    Selected values render as chips with a single text-entry point sitting
    in one gap between them. Typing filters the catalog shown in the
    dropdown below; arrows move the entry point (left/right) or the
    highlight (up/down), Enter commits, Backspace on an empty query removes
    the token at the cursor and steps the entry point left.
    """

    def __init__(
        self,
        options: MultiSelectOptions,
        theme: MultiSelectTheme,
        on_change: Callable[[list[str]], None] | None = None,
        scheduler: Scheduler | None = None,
        keybindings: TokenFieldKeybindingsManager | None = None,
    ) -> None:
        self._theme = theme
        self._keybindings = keybindings
        self._max_visible = options.max_visible
        self._max_lines = options.max_lines
        self._scroll_offset = 0
        self._focused = False
        self._element_focused = False

        # Bracketed paste mode
        self._paste_buffer: str = ""
        self._is_in_paste: bool = False

        self.on_change = on_change
        self.on_focus_request: Callable[[], None] | None = None
        self.on_escape: Callable[[], None] | None = None
        self.on_tab: Callable[[], None] | None = None

        self._controller = InteractionController(
            options,
            host=self,
            on_change=self._handle_change,
            scheduler=scheduler,
        )

    # ------------------------------------------------------------------
    # Public state
    # ------------------------------------------------------------------

    @property
    def controller(self) -> InteractionController:
        return self._controller

    def get_value(self) -> list[str]:
        return self._controller.selected

    def get_query(self) -> str:
        return self._controller.query

    def get_state(self) -> MultiSelectState:
        return self._controller.snapshot()

    def element(self, kind: Literal["token", "remove", "option"], index: int) -> ControlElement:
        return ControlElement(id(self), kind, index)

    # ------------------------------------------------------------------
    # Focusable interface
    # ------------------------------------------------------------------

    @property
    def focused(self) -> bool:
        return self._focused

    @focused.setter
    def focused(self, value: bool) -> None:
        # Focus leaving one of our own elements is still a blur.
        if value == self._focused and (value or not self._element_focused):
            return
        self._focused = value
        self._element_focused = False
        if value:
            self._controller.focus()
        else:
            self._controller.blur()

    def focus_element(self, element: ControlElement) -> None:
        """Report that focus landed on one of this control's own elements.

        A later ``focused = False`` reports focus leaving that element.
        """
        self._focused = False
        self._element_focused = self.is_element_inside_control(element)
        self._controller.focus(element)

    # ------------------------------------------------------------------
    # ControlHost interface
    # ------------------------------------------------------------------

    def measure_text_width(self, text: str) -> int:
        return visible_width(text)

    def scroll_row_into_view(self, row_index: int) -> None:
        if row_index < self._scroll_offset:
            self._scroll_offset = row_index
        elif row_index >= self._scroll_offset + self._max_visible:
            self._scroll_offset = row_index - self._max_visible + 1

    def is_element_inside_control(self, element: object | None) -> bool:
        if element is self:
            return True
        return isinstance(element, ControlElement) and element.owner_id == id(self)

    def focus_text_entry(self) -> None:
        if not self._focused and self.on_focus_request:
            self.on_focus_request()

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def click_token(self, index: int) -> bool:
        return self._controller.click_token(index)

    def click_remove(self, index: int) -> bool:
        changed = self._controller.click_remove_token(index)
        self._sync_scroll()
        return changed

    def click_option(self, row: int) -> bool:
        if self._controller.view().is_custom_row(row):
            changed = self._controller.click_custom_entry()
        else:
            changed = self._controller.click_candidate(row)
        self._sync_scroll()
        return changed

    # ------------------------------------------------------------------
    # Keyboard input
    # ------------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        self._process_input(data)
        self._sync_scroll()

    def _process_input(self, data: str) -> None:
        if _PASTE_START in data:
            self._is_in_paste = True
            self._paste_buffer = ""
            data = data.replace(_PASTE_START, "")

        if self._is_in_paste:
            self._paste_buffer += data
            end_index = self._paste_buffer.find(_PASTE_END)
            if end_index != -1:
                paste_content = self._paste_buffer[:end_index]
                self._handle_paste(paste_content)
                self._is_in_paste = False
                remaining = self._paste_buffer[end_index + len(_PASTE_END):]
                self._paste_buffer = ""
                if remaining:
                    self._process_input(remaining)
            return

        if is_key_release(data):
            return

        kb = self._keybindings or get_token_field_keybindings()
        controller = self._controller

        if kb.matches(data, "cursorLeft"):
            controller.press("left")
        elif kb.matches(data, "cursorRight"):
            controller.press("right")
        elif kb.matches(data, "selectUp"):
            controller.press("up")
        elif kb.matches(data, "selectDown"):
            controller.press("down")
        elif kb.matches(data, "selectConfirm"):
            controller.press("enter")
        elif kb.matches(data, "deleteCharBackward"):
            controller.press("backspace")
        elif kb.matches(data, "focusNext"):
            if self.on_tab:
                self.on_tab()
        elif kb.matches(data, "blur"):
            if self.on_escape:
                self.on_escape()
        else:
            text = decode_text(data)
            if text:
                controller.type_text(text)

    def _sync_scroll(self) -> None:
        """Keep the dropdown window valid after the rows or highlight changed."""
        controller = self._controller
        if controller.highlight_index == -1:
            self._scroll_offset = 0
            return
        total = controller.view().visible_count
        self._scroll_offset = max(0, min(self._scroll_offset, total - self._max_visible))

    def _handle_paste(self, pasted_text: str) -> None:
        clean_text = pasted_text.replace("\r\n", "").replace("\r", "").replace("\n", "")
        if clean_text:
            self._controller.type_text(clean_text)

    def _handle_change(self, selected: list[str]) -> None:
        if self.on_change:
            self.on_change(selected)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        pass

    def render(self, width: int) -> list[str]:
        if width <= 0:
            return []
        lines = self._render_tokens(width)
        if self._controller.is_open:
            lines.extend(self._render_dropdown(width))
        return lines

    def _render_entry(self) -> _Piece:
        controller = self._controller
        query = controller.query
        marker = CURSOR_MARKER if self._focused else ""
        caret = "\x1b[7m \x1b[27m"
        if query:
            text = query + marker + caret
        else:
            placeholder = controller.config.placeholder
            text = marker + caret + (self._theme.placeholder(placeholder) if placeholder else "")
        return _Piece(text, max(controller.entry_width(), visible_width(text)), is_entry=True)

    def _build_pieces(self) -> list[_Piece]:
        controller = self._controller
        cursor = controller.cursor
        selected = controller.selected
        entry_gap = min(cursor, len(selected) - 1)

        pieces: list[_Piece] = []
        if entry_gap == -1:
            pieces.append(self._render_entry())
        for index, value in enumerate(selected):
            label = f"{value} {_REMOVE_GLYPH}"
            style = self._theme.focused_token if index == cursor else self._theme.token
            pieces.append(_Piece(style(label), visible_width(label)))
            if index == entry_gap:
                pieces.append(self._render_entry())
        return pieces

    def _render_tokens(self, width: int) -> list[str]:
        pieces = self._build_pieces()

        rows: list[list[_Piece]] = [[]]
        used = 0
        for piece in pieces:
            needed = piece.width + (1 if rows[-1] else 0)
            if rows[-1] and used + needed > width and self._max_lines > 1:
                rows.append([])
                used = 0
                needed = piece.width
            rows[-1].append(piece)
            used += needed

        entry_row = next(
            (i for i, row in enumerate(rows) if any(p.is_entry for p in row)), 0
        )
        start = max(0, min(entry_row - self._max_lines + 1, len(rows) - self._max_lines))
        visible_rows = rows[start:start + self._max_lines]

        if self._max_lines == 1:
            return [self._clip_around_entry(visible_rows[0], width)]
        return [
            truncate_to_width(" ".join(p.text for p in row), width, "")
            for row in visible_rows
        ]

    def _clip_around_entry(self, row: list[_Piece], width: int) -> str:
        """Single-line mode: drop pieces from the left until the entry fits."""
        entry_index = next((i for i, p in enumerate(row) if p.is_entry), 0)
        start = 0
        total = sum(p.width for p in row[: entry_index + 1]) + entry_index
        while start < entry_index and total > width:
            total -= row[start].width + 1
            start += 1
        return truncate_to_width(" ".join(p.text for p in row[start:]), width, "")

    def _render_dropdown(self, width: int) -> list[str]:
        controller = self._controller
        view = controller.view()
        highlight = controller.highlight_index
        total = view.visible_count

        if total == 0:
            return [self._theme.no_match(truncate_to_width("  No matching options", width, ""))]

        start = max(0, min(self._scroll_offset, total - self._max_visible))
        end = min(start + self._max_visible, total)

        lines: list[str] = []
        for index in range(start, end):
            value = view.row(index) or ""
            label = f'Add "{value}"' if view.is_custom_row(index) else value
            is_highlighted = index == highlight
            prefix = "→ " if is_highlighted else "  "
            text = truncate_to_width(prefix + label, width, "")
            if is_highlighted:
                lines.append(self._theme.highlighted_option(text))
            elif view.is_custom_row(index):
                lines.append(self._theme.custom_option(text))
            else:
                lines.append(self._theme.option(text))

        if start > 0 or end < total:
            scroll_text = f"  ({max(highlight, 0) + 1}/{total})"
            lines.append(self._theme.scroll_info(truncate_to_width(scroll_text, width, "")))

        return lines
