"""Application keybindings manager."""

from __future__ import annotations

import logging
from typing import Literal, get_args

from rimtag.keys import KeyId, normalize_key_id

logger = logging.getLogger(__name__)

AppAction = Literal[
    # Cursor movement
    "moveUp",
    "moveDown",
    "moveLeft",
    "moveRight",
    # Modes
    "createTag",
    "showTags",
    "insertMode",
    "cancel",
    "quit",
    # Confirmation
    "confirm",
    "nextField",
    # Line editing
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteToLineStart",
    "deleteToLineEnd",
]

APP_ACTIONS: frozenset[str] = frozenset(get_args(AppAction))

KeybindingsConfig = dict[AppAction, KeyId | list[KeyId]]

DEFAULT_KEYBINDINGS: dict[AppAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "moveUp": ["k", "up"],
    "moveDown": ["j", "down"],
    "moveLeft": ["h", "left"],
    "moveRight": ["l", "right"],
    # Modes
    "createTag": "T",
    "showTags": "t",
    "insertMode": "i",
    "cancel": "escape",
    "quit": "q",
    # Confirmation
    "confirm": "enter",
    "nextField": ["enter", "tab", "insert"],
    # Line editing
    "cursorLeft": "left",
    "cursorRight": "right",
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "deleteCharBackward": "backspace",
    "deleteCharForward": ["delete", "ctrl+d"],
    "deleteWordBackward": ["ctrl+w", "alt+backspace"],
    "deleteToLineStart": "ctrl+u",
    "deleteToLineEnd": "ctrl+k",
}


class KeybindingsManager:
    """Maps key identifiers to application actions."""

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[AppAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: KeybindingsConfig) -> None:
        self._action_to_keys.clear()

        # Start with defaults
        for action, keys in DEFAULT_KEYBINDINGS.items():
            self._action_to_keys[action] = _key_list(keys)

        # Override with user config
        for action, keys in config.items():
            if action not in APP_ACTIONS:
                logger.warning("Ignoring keybinding for unknown action %r", action)
                continue
            self._action_to_keys[action] = _key_list(keys)

    def matches(self, key: KeyId, action: AppAction) -> bool:
        """Check if a key is bound to a specific action."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        return normalize_key_id(key) in keys

    def action_for(self, key: KeyId, candidates: tuple[AppAction, ...]) -> AppAction | None:
        """Return the first of ``candidates`` bound to ``key``."""
        for action in candidates:
            if self.matches(key, action):
                return action
        return None

    def get_keys(self, action: AppAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: KeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)


def _key_list(keys: KeyId | list[KeyId]) -> list[KeyId]:
    key_array = keys if isinstance(keys, list) else [keys]
    return [normalize_key_id(k) for k in key_array]
