"""Single-line edit buffer used by form fields."""

from __future__ import annotations

import re

import grapheme

from rimtag.keybindings import KeybindingsManager
from rimtag.keys import KeyId, key_text

_PUNCTUATION_REGEX = re.compile(r"[(){}\[\]<>.,;:'\"!?\+\-=*/\\|&%\^$#@~`]")


def _segment(text: str) -> list[str]:
    return list(grapheme.graphemes(text))


def is_whitespace_char(char: str) -> bool:
    return char.isspace()


def is_punctuation_char(char: str) -> bool:
    return bool(_PUNCTUATION_REGEX.match(char))


class LineBuffer:
    """Text plus a cursor, edited one key at a time.

    The cursor is a string offset that always sits on a grapheme boundary.
    """

    def __init__(self, keybindings: KeybindingsManager | None = None) -> None:
        self._value: str = ""
        self._cursor: int = 0
        self._kb = keybindings or KeybindingsManager()

    @property
    def value(self) -> str:
        return self._value

    @property
    def cursor(self) -> int:
        return self._cursor

    def set_value(self, value: str) -> None:
        """Replace the text and park the cursor at its end."""
        self._value = value
        self._cursor = len(value)

    def clear(self) -> None:
        self._value = ""
        self._cursor = 0

    def handle_key(self, key: KeyId) -> bool:
        """Apply one key. Returns False when the key means nothing to the buffer."""
        kb = self._kb

        if kb.matches(key, "deleteCharBackward"):
            self._handle_backspace()
        elif kb.matches(key, "deleteCharForward"):
            self._handle_forward_delete()
        elif kb.matches(key, "deleteWordBackward"):
            self._delete_word_backwards()
        elif kb.matches(key, "deleteToLineStart"):
            self._value = self._value[self._cursor :]
            self._cursor = 0
        elif kb.matches(key, "deleteToLineEnd"):
            self._value = self._value[: self._cursor]
        elif kb.matches(key, "cursorLeft"):
            if self._cursor > 0:
                graphemes = _segment(self._value[: self._cursor])
                self._cursor -= len(graphemes[-1])
        elif kb.matches(key, "cursorRight"):
            if self._cursor < len(self._value):
                graphemes = _segment(self._value[self._cursor :])
                self._cursor += len(graphemes[0])
        elif kb.matches(key, "cursorLineStart"):
            self._cursor = 0
        elif kb.matches(key, "cursorLineEnd"):
            self._cursor = len(self._value)
        else:
            text = key_text(key)
            if text is None:
                return False
            self.insert(text)
        return True

    def insert(self, text: str) -> None:
        self._value = self._value[: self._cursor] + text + self._value[self._cursor :]
        self._cursor += len(text)

    def _handle_backspace(self) -> None:
        if self._cursor > 0:
            graphemes = _segment(self._value[: self._cursor])
            gl = len(graphemes[-1])
            self._value = self._value[: self._cursor - gl] + self._value[self._cursor :]
            self._cursor -= gl

    def _handle_forward_delete(self) -> None:
        if self._cursor < len(self._value):
            graphemes = _segment(self._value[self._cursor :])
            gl = len(graphemes[0])
            self._value = self._value[: self._cursor] + self._value[self._cursor + gl :]

    def _delete_word_backwards(self) -> None:
        if self._cursor == 0:
            return
        graphemes = _segment(self._value[: self._cursor])
        start = self._cursor

        # Skip trailing whitespace
        while graphemes and is_whitespace_char(graphemes[-1]):
            start -= len(graphemes.pop())

        if graphemes:
            if is_punctuation_char(graphemes[-1]):
                while graphemes and is_punctuation_char(graphemes[-1]):
                    start -= len(graphemes.pop())
            else:
                while (
                    graphemes
                    and not is_whitespace_char(graphemes[-1])
                    and not is_punctuation_char(graphemes[-1])
                ):
                    start -= len(graphemes.pop())

        self._value = self._value[:start] + self._value[self._cursor :]
        self._cursor = start
