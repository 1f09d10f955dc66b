"""InteractionController: the keyboard/pointer state machine of the token field.

Every user intent (a keystroke, a click, a focus change) is turned into one
of the small intent records below and passed to
:meth:`InteractionController.dispatch`, which applies exactly one
transition and runs to completion before the next intent is processed.

The state is the combination of the token sequence and its cursor, the
query, whether the dropdown is open and which row is highlighted. There is
no separate state enumeration; the candidate rows are recomputed from that
state whenever they are needed.

Rendering is left to a :class:`ControlHost`, which measures text, scrolls
rows into view, moves keyboard focus and answers whether an element belongs
to the control.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Literal, Protocol

from tokenfield.navigator import DropdownNavigator
from tokenfield.options import CandidateView, admits_custom_entry
from tokenfield.scheduling import Scheduler, call_soon
from tokenfield.tokens import TokenSequence
from tokenfield.utils import drop_last_grapheme

logger = logging.getLogger(__name__)

# Extra columns reserved after the measured query so the caret has room.
ENTRY_PADDING = 1


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class MultiSelectOptions:
    """Construction-time configuration of one token field."""

    options: list[str] = field(default_factory=list)
    placeholder: str = ""
    max_lines: int = 1
    allow_custom_options: bool = False
    initial_value: list[str] = field(default_factory=list)
    keep_options_on_select: bool = False
    max_visible: int = 5

    def __post_init__(self) -> None:
        self.options = list(self.options)
        self.initial_value = list(self.initial_value)
        self.max_lines = max(1, self.max_lines)
        self.max_visible = max(1, self.max_visible)


# ---------------------------------------------------------------------------
# State record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MultiSelectState:
    """Serializable snapshot of the interaction state."""

    selected: tuple[str, ...] = ()
    cursor: int = -1
    query: str = ""
    is_open: bool = False
    highlight_index: int = -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected": list(self.selected),
            "cursor": self.cursor,
            "query": self.query,
            "isOpen": self.is_open,
            "highlightIndex": self.highlight_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MultiSelectState:
        return cls(
            selected=tuple(data.get("selected", ())),
            cursor=int(data.get("cursor", -1)),
            query=str(data.get("query", "")),
            is_open=bool(data.get("isOpen", False)),
            highlight_index=int(data.get("highlightIndex", -1)),
        )


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------

NavigationKey = Literal["left", "right", "up", "down", "enter", "backspace"]


@dataclass(frozen=True)
class TypeText:
    text: str


@dataclass(frozen=True)
class DeleteQueryChar:
    pass


@dataclass(frozen=True)
class KeyPress:
    key: NavigationKey


@dataclass(frozen=True)
class ClickCandidate:
    index: int


@dataclass(frozen=True)
class ClickCustomEntry:
    pass


@dataclass(frozen=True)
class ClickToken:
    index: int


@dataclass(frozen=True)
class ClickRemoveToken:
    index: int


@dataclass(frozen=True)
class FocusGained:
    """Focus moved onto the control.

    ``element`` is ``None`` for the text entry itself; otherwise it names
    whichever element received focus (an option row, a token chip).
    """

    element: object | None = None


@dataclass(frozen=True)
class FocusLost:
    pass


Intent = (
    TypeText
    | DeleteQueryChar
    | KeyPress
    | ClickCandidate
    | ClickCustomEntry
    | ClickToken
    | ClickRemoveToken
    | FocusGained
    | FocusLost
)


# ---------------------------------------------------------------------------
# Host collaborator
# ---------------------------------------------------------------------------


class ControlHost(Protocol):
    """Side effects the state machine asks of whoever renders it."""

    def measure_text_width(self, text: str) -> int: ...

    def scroll_row_into_view(self, row_index: int) -> None: ...

    def is_element_inside_control(self, element: object | None) -> bool: ...

    def focus_text_entry(self) -> None: ...


class NullHost:
    """A host with no surface: every side effect is a no-op."""

    def measure_text_width(self, text: str) -> int:
        return len(text)

    def scroll_row_into_view(self, row_index: int) -> None:
        pass

    def is_element_inside_control(self, element: object | None) -> bool:
        return False

    def focus_text_entry(self) -> None:
        pass


_TEXT_ENTRY = object()


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class InteractionController:
    """Drives TokenSequence, the option filter and DropdownNavigator."""

    def __init__(
        self,
        options: MultiSelectOptions | None = None,
        host: ControlHost | None = None,
        on_change: Callable[[list[str]], None] | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        # Copied so later edits to the caller's instance do not reach the control.
        self._config = replace(options) if options else MultiSelectOptions()
        self._host: ControlHost = host or NullHost()
        self._schedule: Scheduler = scheduler or call_soon
        self._tokens = TokenSequence(
            self._config.initial_value, on_change=self._emit_change
        )
        self._navigator = DropdownNavigator()
        self._query: str = ""
        self._active_element: object | None = None

        self.on_change = on_change

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> MultiSelectOptions:
        return self._config

    @property
    def selected(self) -> list[str]:
        return self._tokens.selected

    @property
    def cursor(self) -> int:
        return self._tokens.cursor

    @property
    def query(self) -> str:
        return self._query

    @property
    def is_open(self) -> bool:
        return self._navigator.is_open

    @property
    def highlight_index(self) -> int:
        return self._navigator.highlight_index

    def view(self) -> CandidateView:
        """Current dropdown rows, derived from the state."""
        return CandidateView.build(
            self._config.options,
            self._tokens.selected,
            self._query,
            keep_duplicates=self._config.keep_options_on_select,
            allow_custom=self._config.allow_custom_options,
        )

    def entry_width(self) -> int:
        """Columns the text entry needs for the query (or the placeholder)."""
        text = self._query or self._config.placeholder or ""
        return self._host.measure_text_width(text) + ENTRY_PADDING

    def snapshot(self) -> MultiSelectState:
        return MultiSelectState(
            selected=tuple(self._tokens.selected),
            cursor=self._tokens.cursor,
            query=self._query,
            is_open=self._navigator.is_open,
            highlight_index=self._navigator.highlight_index,
        )

    def restore(self, state: MultiSelectState) -> None:
        """Load *state* without firing ``on_change``."""
        self._tokens.replace(state.selected, state.cursor)
        self._query = state.query
        self._navigator.is_open = state.is_open
        self._navigator.highlight_index = state.highlight_index
        if state.highlight_index < -1:
            self._navigator.reset_highlight()
        self._navigator.clamp(self.view().visible_count)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, intent: Intent) -> bool:
        """Apply one intent. Returns whether any state changed."""
        match intent:
            case TypeText():
                if not intent.text:
                    return False
                return self._edit_query(self._query + intent.text)

            case DeleteQueryChar():
                if not self._query:
                    return False
                return self._edit_query(drop_last_grapheme(self._query))

            case KeyPress():
                return self._handle_key(intent.key)

            case ClickCandidate():
                value = self.view().row(intent.index)
                if value is None:
                    return False
                return self._commit(value)

            case ClickCustomEntry():
                if self.view().custom_entry is None:
                    return False
                return self._commit(self._query)

            case ClickToken():
                if not 0 <= intent.index < len(self._tokens):
                    return False
                self._tokens.set_cursor(intent.index)
                self._host.focus_text_entry()
                return True

            case ClickRemoveToken():
                return self._after_removal(self._tokens.remove_at(intent.index))

            case FocusGained():
                self._active_element = (
                    _TEXT_ENTRY if intent.element is None else intent.element
                )
                if intent.element is None:
                    return self._navigator.open()
                return False

            case FocusLost():
                self._active_element = None
                self._schedule(self._check_blur)
                return False

        return False

    def _handle_key(self, key: NavigationKey) -> bool:  # noqa: C901
        tokens = self._tokens
        navigator = self._navigator

        if key == "left":
            if not tokens.move_cursor_left():
                return False
            self._host.focus_text_entry()
            return True

        if key == "right":
            if not tokens.move_cursor_right():
                return False
            self._host.focus_text_entry()
            return True

        if key == "backspace":
            if self._query:
                return self._edit_query(drop_last_grapheme(self._query))
            return self._after_removal(tokens.remove_before_cursor())

        view = self.view()

        if key == "enter":
            if navigator.is_open and view.candidates:
                value = navigator.resolve_selection(view)
                if value is not None:
                    return self._commit(value)
            if admits_custom_entry(
                self._config.options, self._query, self._config.allow_custom_options
            ):
                return self._commit(self._query)
            logger.debug("Enter ignored for query %r", self._query)
            return False

        if key in ("up", "down"):
            if not navigator.is_open or view.visible_count == 0:
                return False
            if key == "down":
                index = navigator.step_down(view.visible_count)
            else:
                index = navigator.step_up(view.visible_count)
            if index is not None:
                self._host.scroll_row_into_view(index)
            return index is not None

        return False

    # ------------------------------------------------------------------
    # Convenience entry points
    # ------------------------------------------------------------------

    def type_text(self, text: str) -> bool:
        return self.dispatch(TypeText(text))

    def delete_query_char(self) -> bool:
        return self.dispatch(DeleteQueryChar())

    def press(self, key: NavigationKey) -> bool:
        return self.dispatch(KeyPress(key))

    def click_candidate(self, index: int) -> bool:
        return self.dispatch(ClickCandidate(index))

    def click_custom_entry(self) -> bool:
        return self.dispatch(ClickCustomEntry())

    def click_token(self, index: int) -> bool:
        return self.dispatch(ClickToken(index))

    def click_remove_token(self, index: int) -> bool:
        return self.dispatch(ClickRemoveToken(index))

    def focus(self, element: object | None = None) -> bool:
        return self.dispatch(FocusGained(element))

    def blur(self) -> bool:
        return self.dispatch(FocusLost())

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _edit_query(self, query: str) -> bool:
        self._query = query
        self._navigator.open()
        self._navigator.reset_highlight()
        return True

    def _commit(self, value: str) -> bool:
        self._tokens.insert_after_cursor(value)
        self._query = ""
        self._navigator.reset_highlight()
        self._navigator.open()
        self._host.focus_text_entry()
        return True

    def _after_removal(self, removed: bool) -> bool:
        if removed:
            self._navigator.clamp(self.view().visible_count)
        return removed

    def _check_blur(self) -> None:
        element = self._active_element
        inside = element is _TEXT_ENTRY or (
            element is not None and self._host.is_element_inside_control(element)
        )
        if inside:
            logger.debug("Focus stayed inside the control; dropdown kept open")
            return
        if self._navigator.close():
            logger.debug("Focus left the control; dropdown closed")

    def _emit_change(self, selected: list[str]) -> None:
        logger.debug("Selection changed: %r", selected)
        if self.on_change:
            self.on_change(selected)
