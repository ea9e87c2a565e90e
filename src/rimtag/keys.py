"""Abstract key events consumed by the controller.

Raw terminal bytes are decoded by the host into key identifiers before they
reach this package. A key identifier is either a single printable grapheme
(``"j"``, ``"T"``, ``"#"``) or a named key such as ``"escape"``, ``"enter"`` or
``"ctrl+w"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import grapheme

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

KeyId = str

KeyEventType = Literal["press", "repeat", "release"]


# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants."""

    # Special keys
    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

KEY_ALIASES: dict[str, str] = {
    "esc": "escape",
    "return": "enter",
    "del": "delete",
    "ins": "insert",
    "pageup": "pageUp",
    "pagedown": "pageDown",
}

_MODIFIER_ORDER = ("ctrl", "shift", "alt")


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    key: KeyId
    kind: KeyEventType = "press"

    @property
    def is_press(self) -> bool:
        return self.kind == "press"


def press(key: KeyId) -> KeyEvent:
    """Build a press event for ``key`` after normalizing its identifier."""
    return KeyEvent(normalize_key_id(key))


# ---------------------------------------------------------------------------
# Key identifier helpers
# ---------------------------------------------------------------------------


def normalize_key_id(key_id: str) -> KeyId:
    """Canonical spelling of a key identifier.

    Single graphemes are returned untouched so ``"T"`` and ``"t"`` stay
    distinct. Named keys and modifiers are case-folded, aliases resolved and
    modifiers put in ``ctrl+shift+alt`` order.
    """
    if not key_id or grapheme.length(key_id) == 1:
        return key_id

    parts = key_id.split("+")
    # "ctrl++" style ids name the plus key itself
    if key_id.endswith("++"):
        parts = parts[:-2] + ["+"]
    base = parts[-1]
    modifiers = {p.lower() for p in parts[:-1]}

    if grapheme.length(base) != 1:
        lowered = base.lower()
        base = KEY_ALIASES.get(lowered, lowered)

    ordered = [m for m in _MODIFIER_ORDER if m in modifiers]
    return "+".join([*ordered, base])


def is_digit_key(key: KeyId) -> bool:
    """True for the ASCII digits that feed the repeat buffer."""
    return len(key) == 1 and "0" <= key <= "9"


def key_text(key: KeyId) -> str | None:
    """Return the text a key inserts into an edit buffer, if any."""
    if key == Key.space:
        return " "
    if grapheme.length(key) != 1:
        return None
    if any(ord(ch) < 32 or ord(ch) == 0x7F or 0x80 <= ord(ch) <= 0x9F for ch in key):
        return None
    return key
