"""Token field keybindings manager."""

from __future__ import annotations

from typing import Literal

from tokenfield.keys import KeyId, matches_key

TokenFieldAction = Literal[
    # Entry-point movement between tokens
    "cursorLeft",
    "cursorRight",
    # Dropdown
    "selectUp",
    "selectDown",
    "selectConfirm",
    # Editing
    "deleteCharBackward",
    # Focus
    "focusNext",
    "blur",
]

TokenFieldKeybindingsConfig = dict[TokenFieldAction, KeyId | list[KeyId]]

DEFAULT_TOKEN_FIELD_KEYBINDINGS: dict[TokenFieldAction, KeyId | list[KeyId]] = {
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "selectUp": ["up", "ctrl+p"],
    "selectDown": ["down", "ctrl+n"],
    "selectConfirm": "enter",
    "deleteCharBackward": "backspace",
    "focusNext": "tab",
    "blur": ["escape", "shift+tab"],
}


class TokenFieldKeybindingsManager:
    """Maps token field actions to the keys that trigger them."""

    def __init__(
        self, config: TokenFieldKeybindingsConfig | None = None
    ) -> None:
        self._action_to_keys: dict[TokenFieldAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: TokenFieldKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_TOKEN_FIELD_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: TokenFieldAction) -> bool:
        """Check if input matches a specific action."""
        return any(
            matches_key(data, key) for key in self._action_to_keys.get(action, [])
        )

    def action_for(self, data: str) -> TokenFieldAction | None:
        """First action bound to *data*, in declaration order."""
        for action in self._action_to_keys:
            if self.matches(data, action):
                return action
        return None

    def get_keys(self, action: TokenFieldAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: TokenFieldKeybindingsConfig) -> None:
        """Replace overrides; unspecified actions fall back to defaults."""
        self._build_maps(config)


_global_keybindings: TokenFieldKeybindingsManager | None = None


def get_token_field_keybindings() -> TokenFieldKeybindingsManager:
    global _global_keybindings
    if _global_keybindings is None:
        _global_keybindings = TokenFieldKeybindingsManager()
    return _global_keybindings


def set_token_field_keybindings(manager: TokenFieldKeybindingsManager) -> None:
    global _global_keybindings
    _global_keybindings = manager
