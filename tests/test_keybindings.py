"""Tests for rimtag.keybindings and rimtag.keys."""

from __future__ import annotations

import logging

from rimtag.keybindings import APP_ACTIONS, DEFAULT_KEYBINDINGS, KeybindingsManager
from rimtag.keys import Key, KeyEvent, is_digit_key, key_text, normalize_key_id, press


# ---------------------------------------------------------------------------
# Key identifiers
# ---------------------------------------------------------------------------


class TestNormalizeKeyId:
    """Named keys are canonicalized; single characters are left alone."""

    def test_single_chars_keep_case(self) -> None:
        assert normalize_key_id("T") == "T"
        assert normalize_key_id("t") == "t"

    def test_aliases(self) -> None:
        assert normalize_key_id("esc") == "escape"
        assert normalize_key_id("Return") == "enter"
        assert normalize_key_id("PageUp") == Key.page_up

    def test_modifier_order(self) -> None:
        assert normalize_key_id("alt+ctrl+x") == "ctrl+alt+x"

    def test_press_normalizes(self) -> None:
        assert press("ESC") == KeyEvent("escape")


class TestKeyText:
    """key_text returns what a key types, or None for non-text keys."""

    def test_plain_char(self) -> None:
        assert key_text("a") == "a"

    def test_space(self) -> None:
        assert key_text("space") == " "

    def test_named_keys_type_nothing(self) -> None:
        assert key_text("enter") is None
        assert key_text("ctrl+w") is None

    def test_control_chars_type_nothing(self) -> None:
        assert key_text("\x03") is None

    def test_grapheme_cluster_is_one_key(self) -> None:
        assert key_text("é") == "é"


class TestIsDigitKey:
    def test_digits(self) -> None:
        assert all(is_digit_key(str(d)) for d in range(10))

    def test_non_digits(self) -> None:
        assert not is_digit_key("a")
        assert not is_digit_key("10")
        assert not is_digit_key("٣")  # Arabic-indic three


# ---------------------------------------------------------------------------
# DEFAULT_KEYBINDINGS constant
# ---------------------------------------------------------------------------


class TestDefaultKeybindings:
    """DEFAULT_KEYBINDINGS covers every action."""

    def test_every_action_has_a_binding(self) -> None:
        assert set(DEFAULT_KEYBINDINGS) == APP_ACTIONS

    def test_vim_movement(self) -> None:
        assert DEFAULT_KEYBINDINGS["moveDown"] == ["j", "down"]
        assert DEFAULT_KEYBINDINGS["moveUp"] == ["k", "up"]

    def test_next_field_keys(self) -> None:
        assert DEFAULT_KEYBINDINGS["nextField"] == ["enter", "tab", "insert"]


# ---------------------------------------------------------------------------
# KeybindingsManager
# ---------------------------------------------------------------------------


class TestKeybindingsManager:
    """matches/get_keys/set_config behave like the defaults plus overrides."""

    def test_matches_default(self) -> None:
        kb = KeybindingsManager()
        assert kb.matches("j", "moveDown")
        assert kb.matches("down", "moveDown")
        assert not kb.matches("J", "moveDown")

    def test_matches_normalizes_input(self) -> None:
        kb = KeybindingsManager()
        assert kb.matches("esc", "cancel")

    def test_override_replaces_defaults(self) -> None:
        kb = KeybindingsManager({"quit": "x"})
        assert kb.matches("x", "quit")
        assert not kb.matches("q", "quit")

    def test_override_accepts_lists(self) -> None:
        kb = KeybindingsManager({"moveDown": ["n", "ctrl+n"]})
        assert kb.get_keys("moveDown") == ["n", "ctrl+n"]

    def test_unknown_action_is_ignored(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            kb = KeybindingsManager({"launchRockets": "r"})  # type: ignore[dict-item]
        assert "launchRockets" in caplog.text
        assert kb.get_keys("quit") == ["q"]

    def test_set_config_rebuilds_from_defaults(self) -> None:
        kb = KeybindingsManager({"quit": "x"})
        kb.set_config({})
        assert kb.matches("q", "quit")

    def test_action_for_returns_first_candidate(self) -> None:
        kb = KeybindingsManager()
        assert kb.action_for("l", ("moveUp", "moveRight")) == "moveRight"
        assert kb.action_for("z", ("moveUp", "moveRight")) is None
