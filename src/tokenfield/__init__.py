"""tokenfield: token-based multi-value input for terminal UIs."""

# Components
from tokenfield.components import ControlElement, MultiSelect, MultiSelectTheme

# Component protocols
from tokenfield.component import CURSOR_MARKER, Component, Focusable, is_focusable

# State machine
from tokenfield.controller import (
    ClickCandidate,
    ClickCustomEntry,
    ClickRemoveToken,
    ClickToken,
    ControlHost,
    DeleteQueryChar,
    FocusGained,
    FocusLost,
    Intent,
    InteractionController,
    KeyPress,
    MultiSelectOptions,
    MultiSelectState,
    NullHost,
    TypeText,
)

# Keybindings
from tokenfield.keybindings import (
    DEFAULT_TOKEN_FIELD_KEYBINDINGS,
    TokenFieldAction,
    TokenFieldKeybindingsManager,
    get_token_field_keybindings,
    set_token_field_keybindings,
)

# Keyboard input handling
from tokenfield.keys import Key, KeyId, decode_text, is_key_release, matches_key, parse_key

# Dropdown navigation and filtering
from tokenfield.navigator import DropdownNavigator
from tokenfield.options import CandidateView, admits_custom_entry, filter_options

# Deferred decisions
from tokenfield.scheduling import DeferredQueue, Scheduler, call_soon

# Token storage
from tokenfield.tokens import TokenSequence

# Utilities
from tokenfield.utils import truncate_to_width, visible_width

__all__ = [
    # Components
    "ControlElement",
    "MultiSelect",
    "MultiSelectTheme",
    # Component protocols
    "CURSOR_MARKER",
    "Component",
    "Focusable",
    "is_focusable",
    # State machine
    "ClickCandidate",
    "ClickCustomEntry",
    "ClickRemoveToken",
    "ClickToken",
    "ControlHost",
    "DeleteQueryChar",
    "FocusGained",
    "FocusLost",
    "Intent",
    "InteractionController",
    "KeyPress",
    "MultiSelectOptions",
    "MultiSelectState",
    "NullHost",
    "TypeText",
    # Keybindings
    "DEFAULT_TOKEN_FIELD_KEYBINDINGS",
    "TokenFieldAction",
    "TokenFieldKeybindingsManager",
    "get_token_field_keybindings",
    "set_token_field_keybindings",
    # Keys
    "Key",
    "KeyId",
    "decode_text",
    "is_key_release",
    "matches_key",
    "parse_key",
    # Navigation and filtering
    "CandidateView",
    "DropdownNavigator",
    "admits_custom_entry",
    "filter_options",
    # Scheduling
    "DeferredQueue",
    "Scheduler",
    "call_soon",
    # Tokens
    "TokenSequence",
    # Utilities
    "truncate_to_width",
    "visible_width",
]
