"""Tests for tokenfield.keys -- keyboard input parsing and matching."""

from __future__ import annotations

import pytest

from tokenfield.keys import (
    Key,
    LEGACY_KEY_SEQUENCES,
    MODIFIERS,
    ParsedKey,
    decode_text,
    is_key_release,
    is_printable_input,
    matches_key,
    parse_key,
    parse_key_id,
)


# ---------------------------------------------------------------------------
# Key helper class
# ---------------------------------------------------------------------------


class TestKeyConstants:
    """Key class exposes named constants and modifier combinators."""

    def test_arrow_keys(self):
        assert Key.up == "up"
        assert Key.down == "down"
        assert Key.left == "left"
        assert Key.right == "right"

    def test_modifier_helpers(self):
        assert Key.ctrl("b") == "ctrl+b"
        assert Key.shift(Key.tab) == "shift+tab"
        assert Key.alt("x") == "alt+x"


# ---------------------------------------------------------------------------
# parse_key_id
# ---------------------------------------------------------------------------


class TestParseKeyId:
    def test_plain_key(self):
        assert parse_key_id("left") == ("left", 0)

    def test_combined_modifiers(self):
        assert parse_key_id("ctrl+shift+a") == (
            "a",
            MODIFIERS["ctrl"] | MODIFIERS["shift"],
        )

    def test_aliases(self):
        assert parse_key_id("esc") == ("escape", 0)
        assert parse_key_id("return") == ("enter", 0)

    def test_single_letter_is_lowercased(self):
        assert parse_key_id("ctrl+B") == ("b", MODIFIERS["ctrl"])

    def test_empty(self):
        assert parse_key_id("") is None
        assert parse_key_id("ctrl+") is None


# ---------------------------------------------------------------------------
# matches_key
# ---------------------------------------------------------------------------


class TestMatchesKeyLegacy:
    """Legacy escape sequences and single control bytes."""

    @pytest.mark.parametrize("sequence,key", sorted(LEGACY_KEY_SEQUENCES.items()))
    def test_legacy_sequences(self, sequence, key):
        assert matches_key(sequence, key) is True

    def test_enter(self):
        assert matches_key("\r", "enter") is True
        assert matches_key("\n", "enter") is True

    def test_escape(self):
        assert matches_key("\x1b", "escape") is True
        assert matches_key("\x1b", "esc") is True

    def test_tab_and_shift_tab(self):
        assert matches_key("\t", "tab") is True
        assert matches_key("\x1b[Z", "shift+tab") is True
        assert matches_key("\x1b[Z", "tab") is False

    def test_backspace(self):
        assert matches_key("\x7f", "backspace") is True

    def test_ctrl_h_counts_as_backspace(self):
        assert matches_key("\x08", "backspace") is True
        assert matches_key("\x08", "ctrl+backspace") is True

    def test_ctrl_letters(self):
        assert matches_key("\x02", "ctrl+b") is True
        assert matches_key("\x06", "ctrl+f") is True
        assert matches_key("\x02", "b") is False

    def test_alt_prefix(self):
        assert matches_key("\x1bb", "alt+b") is True

    def test_modified_cursor(self):
        assert matches_key("\x1b[1;5D", "ctrl+left") is True
        assert matches_key("\x1b[1;2A", "shift+up") is True
        assert matches_key("\x1b[1;5D", "left") is False

    def test_modified_tilde(self):
        assert matches_key("\x1b[3;5~", "ctrl+delete") is True

    def test_unknown_key_id(self):
        assert matches_key("\r", "") is False

    def test_plain_letter(self):
        assert matches_key("a", "a") is True
        assert matches_key("A", "shift+a") is True


class TestMatchesKeyKitty:
    """Kitty keyboard protocol CSI u sequences."""

    def test_enter(self):
        assert matches_key("\x1b[13u", "enter") is True

    def test_keypad_enter(self):
        assert matches_key("\x1b[57414u", "enter") is True

    def test_ctrl_enter(self):
        assert matches_key("\x1b[13;5u", "ctrl+enter") is True
        assert matches_key("\x1b[13;5u", "enter") is False

    def test_ctrl_letter(self):
        assert matches_key("\x1b[98;5u", "ctrl+b") is True

    def test_lock_bits_are_ignored(self):
        # ctrl with caps lock and num lock set
        assert matches_key("\x1b[98;197u", "ctrl+b") is True

    def test_backspace(self):
        assert matches_key("\x1b[127u", "backspace") is True

    def test_modify_other_keys(self):
        assert matches_key("\x1b[27;5;13~", "ctrl+enter") is True


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


class TestParseKey:
    def test_arrow(self):
        assert parse_key("\x1b[A") == "up"

    def test_ctrl_letter(self):
        assert parse_key("\x03") == "ctrl+c"

    def test_shift_letter(self):
        assert parse_key("A") == "shift+a"

    def test_alt_letter(self):
        assert parse_key("\x1ba") == "alt+a"

    def test_modifier_order(self):
        assert parse_key("\x1b[1;6C") == "ctrl+shift+right"

    def test_unrecognised(self):
        assert parse_key("") is None
        assert parse_key("abc") is None

    def test_parsed_key_id(self):
        parsed = ParsedKey("a", MODIFIERS["ctrl"] | MODIFIERS["alt"])
        assert parsed.key_id == "ctrl+alt+a"


# ---------------------------------------------------------------------------
# Release events
# ---------------------------------------------------------------------------


class TestIsKeyRelease:
    def test_kitty_release(self):
        assert is_key_release("\x1b[97;1:3u") is True

    def test_cursor_release(self):
        assert is_key_release("\x1b[1;1:3A") is True

    def test_press_is_not_release(self):
        assert is_key_release("\x1b[97;1:1u") is False
        assert is_key_release("a") is False

    def test_bracketed_paste_is_never_release(self):
        assert is_key_release("\x1b[200~x:3u\x1b[201~") is False


# ---------------------------------------------------------------------------
# Text input
# ---------------------------------------------------------------------------


class TestIsPrintableInput:
    def test_text(self):
        assert is_printable_input("abc") is True
        assert is_printable_input("é") is True
        assert is_printable_input("日本") is True

    def test_control_sequences(self):
        assert is_printable_input("\x1b[A") is False
        assert is_printable_input("\r") is False
        assert is_printable_input("\x7f") is False

    def test_empty(self):
        assert is_printable_input("") is False


class TestDecodeText:
    def test_plain_text(self):
        assert decode_text("re") == "re"

    def test_kitty_plain_character(self):
        assert decode_text("\x1b[97u") == "a"

    def test_kitty_shifted_character(self):
        assert decode_text("\x1b[97;2u") == "A"
        assert decode_text("\x1b[97:65;2u") == "A"

    def test_kitty_ctrl_is_not_text(self):
        assert decode_text("\x1b[97;5u") is None

    def test_kitty_release_is_not_text(self):
        assert decode_text("\x1b[97;1:3u") is None

    def test_kitty_control_key_is_not_text(self):
        assert decode_text("\x1b[13u") is None

    def test_escape_sequence_is_not_text(self):
        assert decode_text("\x1b[A") is None
