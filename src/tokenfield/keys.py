"""Keyboard input parsing and matching for the token field.

Raw terminal input arrives as strings such as ``"\\x1b[A"`` (legacy arrow
up) or ``"\\x1b[13;5u"`` (kitty-protocol ctrl+enter). ``matches_key`` checks
whether such input corresponds to a key identifier like ``"left"``,
``"ctrl+a"`` or ``"shift+tab"``; ``parse_key`` goes the other way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

KeyId = str

# ---------------------------------------------------------------------------
# Named keys
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    home = "home"
    end = "end"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

LOCK_MASK = 64 + 128

CODEPOINTS: dict[str, int] = {
    "escape": 27,
    "tab": 9,
    "enter": 13,
    "space": 32,
    "backspace": 127,
    "kp_enter": 57414,
}

# Final byte of ``CSI 1;<mod> X`` for cursor keys
_CURSOR_FINALS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# Number of ``CSI <n> ~`` for editing keys
_TILDE_NUMBERS: dict[str, str] = {
    "1": "home",
    "3": "delete",
    "4": "end",
    "7": "home",
    "8": "end",
}

LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
}

_MODIFIED_CURSOR_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHF])$")
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)(?::(\d+))?~$")

# CSI u: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::(\d*))?(?::(\d+))?(?:;(\d+)(?::(\d+))?)?u$"
)

_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")

_RELEASE_PATTERNS = re.compile(
    r"(?::3u|;[^:]*:3~|;[^:]*:3[ABCDHF])"
)


# ---------------------------------------------------------------------------
# Parsed sequences
# ---------------------------------------------------------------------------


@dataclass
class ParsedKey:
    """A decoded key press: base key name plus modifier bitmask."""

    key: str
    modifiers: int = 0
    event_type: int = 1  # 1 = press, 2 = repeat, 3 = release

    @property
    def key_id(self) -> KeyId:
        prefix = ""
        if self.modifiers & MODIFIERS["ctrl"]:
            prefix += "ctrl+"
        if self.modifiers & MODIFIERS["shift"]:
            prefix += "shift+"
        if self.modifiers & MODIFIERS["alt"]:
            prefix += "alt+"
        return prefix + self.key


def _decode_modifier(raw: str | None) -> int:
    if not raw:
        return 0
    return (int(raw) - 1) & ~LOCK_MASK


def _codepoint_key(codepoint: int) -> str | None:
    for name, code in CODEPOINTS.items():
        if code == codepoint:
            return "enter" if name == "kp_enter" else name
    if codepoint == 8:
        return "backspace"
    if 0 < codepoint < 0x110000:
        ch = chr(codepoint)
        if ch.isprintable():
            return ch.lower()
    return None


def is_key_release(data: str) -> bool:
    """Check if *data* is a kitty-protocol key release event."""
    if "\x1b[200~" in data:
        return False
    return bool(_RELEASE_PATTERNS.search(data))


def decode_key(data: str) -> ParsedKey | None:  # noqa: C901
    """Decode raw terminal input into a :class:`ParsedKey`, or ``None``."""
    if not data:
        return None

    # --- kitty CSI u ---------------------------------------------------
    kitty = _KITTY_CSI_U_RE.match(data)
    if kitty:
        key = _codepoint_key(int(kitty.group(1)))
        if key is None:
            return None
        event = int(kitty.group(5)) if kitty.group(5) else 1
        return ParsedKey(key, _decode_modifier(kitty.group(4)), event)

    # --- xterm modifyOtherKeys -----------------------------------------
    mok = _MODIFY_OTHER_KEYS_RE.match(data)
    if mok:
        key = _codepoint_key(int(mok.group(2)))
        if key is None:
            return None
        return ParsedKey(key, _decode_modifier(mok.group(1)))

    # --- modified cursor / editing keys --------------------------------
    cursor = _MODIFIED_CURSOR_RE.match(data)
    if cursor:
        event = int(cursor.group(2)) if cursor.group(2) else 1
        return ParsedKey(
            _CURSOR_FINALS[cursor.group(3)], _decode_modifier(cursor.group(1)), event
        )

    tilde = _MODIFIED_TILDE_RE.match(data)
    if tilde and tilde.group(1) in _TILDE_NUMBERS:
        event = int(tilde.group(3)) if tilde.group(3) else 1
        return ParsedKey(
            _TILDE_NUMBERS[tilde.group(1)], _decode_modifier(tilde.group(2)), event
        )

    # --- legacy sequences ----------------------------------------------
    if data in LEGACY_KEY_SEQUENCES:
        return ParsedKey(LEGACY_KEY_SEQUENCES[data])
    if data == "\x1b[Z":
        return ParsedKey("tab", MODIFIERS["shift"])

    # --- single bytes --------------------------------------------------
    if data == "\x1b":
        return ParsedKey("escape")
    if data in ("\r", "\n"):
        return ParsedKey("enter")
    if data == "\t":
        return ParsedKey("tab")
    if data == " ":
        return ParsedKey("space")
    if data == "\x7f":
        return ParsedKey("backspace")
    if data == "\x08":
        return ParsedKey("backspace", MODIFIERS["ctrl"])
    if data == "\x00":
        return ParsedKey("space", MODIFIERS["ctrl"])
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return ParsedKey(chr(ord(data) + ord("a") - 1), MODIFIERS["ctrl"])

    # --- alt + key (ESC prefix) ----------------------------------------
    if len(data) == 2 and data[0] == "\x1b":
        inner = decode_key(data[1])
        if inner is None:
            return None
        return ParsedKey(inner.key, inner.modifiers | MODIFIERS["alt"])

    # --- plain printable character -------------------------------------
    if len(data) == 1 and data.isprintable():
        if data.isalpha() and data.isupper():
            return ParsedKey(data.lower(), MODIFIERS["shift"])
        return ParsedKey(data)

    return None


def parse_key_id(key_id: KeyId) -> tuple[str, int] | None:
    """Split ``"ctrl+shift+a"`` into ``("a", ctrl|shift)``."""
    if not key_id:
        return None

    modifiers = 0
    key_parts: list[str] = []
    for part in key_id.split("+"):
        lower = part.lower()
        if lower in MODIFIERS:
            modifiers |= MODIFIERS[lower]
        else:
            key_parts.append(part)

    key = "+".join(key_parts)
    if not key:
        return None
    if key == "esc":
        key = "escape"
    elif key == "return":
        key = "enter"
    return key.lower() if len(key) == 1 else key, modifiers


def matches_key(data: str, key_id: KeyId) -> bool:
    """Return ``True`` if raw terminal *data* is the key named by *key_id*."""
    expected = parse_key_id(key_id)
    if expected is None:
        return False
    parsed = decode_key(data)
    if parsed is None:
        return False
    key, modifiers = expected
    # Backspace arrives as \x08 from terminals that send ctrl+h for it.
    if key == "backspace" and modifiers == 0 and data == "\x08":
        return True
    return parsed.key == key and parsed.modifiers == modifiers


def parse_key(data: str) -> KeyId | None:
    """Parse raw terminal input into a key identifier, or ``None``."""
    parsed = decode_key(data)
    return parsed.key_id if parsed is not None else None


def is_printable_input(data: str) -> bool:
    """Whether *data* is text to insert rather than a control sequence."""
    if not data:
        return False
    return not any(
        ord(ch) < 32 or ord(ch) == 0x7F or (0x80 <= ord(ch) <= 0x9F)
        for ch in data
    )


def decode_text(data: str) -> str | None:
    """Return the text *data* would type, or ``None`` for non-text input.

    Plain printable input is returned as is. Under the kitty protocol even
    ordinary characters arrive as ``CSI u`` sequences; unmodified or
    shift-only presses of printable keys decode to their character.
    """
    if is_printable_input(data):
        return data

    kitty = _KITTY_CSI_U_RE.match(data)
    if not kitty:
        return None
    modifiers = _decode_modifier(kitty.group(4))
    event = int(kitty.group(5)) if kitty.group(5) else 1
    if modifiers & ~MODIFIERS["shift"] or event == 3:
        return None
    codepoint = int(kitty.group(2) or kitty.group(1))
    if modifiers & MODIFIERS["shift"] and not kitty.group(2):
        ch = chr(codepoint).upper()
    else:
        ch = chr(codepoint)
    if codepoint < 32 or codepoint == 0x7F or not ch.isprintable():
        return None
    return ch
