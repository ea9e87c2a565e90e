"""Sequential multi-field forms and the tag creation form."""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from typing import Callable, Generic, Protocol, TypeVar, Union

from rimtag.color import Color, random_color
from rimtag.errors import InvariantError
from rimtag.keybindings import KeybindingsManager
from rimtag.keys import KeyId
from rimtag.line_buffer import LineBuffer
from rimtag.models import MAX_SCORE, Tag

logger = logging.getLogger(__name__)

O = TypeVar("O")
O_co = TypeVar("O_co", covariant=True)


# ---------------------------------------------------------------------------
# Validation outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NextField:
    """The field was accepted; move on to the next one."""


@dataclass(frozen=True)
class Invalid:
    """The field was rejected; stay on it so the user can correct it."""


@dataclass(frozen=True)
class Done(Generic[O]):
    """The last field was accepted and the form produced ``value``."""

    value: O


FormPoll = Union[NextField, Invalid, Done[O]]

NEXT_FIELD = NextField()
INVALID = Invalid()


class FormSpec(Protocol[O_co]):
    """Field list and validation rules plugged into a ``FormEngine``."""

    prompts: tuple[str, ...]

    def validate(self, index: int, content: str) -> FormPoll: ...

    def read_back(self, index: int) -> str | None: ...

    def highlight(self) -> Color: ...


@dataclass(frozen=True)
class FormField:
    prompt: str
    text: str
    selected: bool


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class FormEngine(Generic[O]):
    """Walks a ``FormSpec`` field by field.

    Edits go to a live buffer and are validated on the fly only to refresh the
    highlight color. ``advance`` is the one transition that commits a field.
    """

    def __init__(
        self,
        spec_factory: Callable[[], FormSpec[O]],
        keybindings: KeybindingsManager | None = None,
    ) -> None:
        self._spec_factory = spec_factory
        self._spec = spec_factory()
        self._index = 0
        self._buffer = LineBuffer(keybindings)
        self._highlight = self._spec.highlight()

    @property
    def index(self) -> int:
        return self._index

    @property
    def value(self) -> str:
        return self._buffer.value

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def spec(self) -> FormSpec[O]:
        return self._spec

    @property
    def highlight(self) -> Color:
        return self._highlight

    @property
    def prompts(self) -> tuple[str, ...]:
        return self._spec.prompts

    def fields(self) -> list[FormField]:
        """What each field shows: the live buffer when selected, else its prior value."""
        result = []
        for idx, prompt in enumerate(self._spec.prompts):
            if idx == self._index:
                text = self._buffer.value
            else:
                text = self._spec.read_back(idx) or ""
            result.append(FormField(prompt=prompt, text=text, selected=idx == self._index))
        return result

    def handle_key(self, key: KeyId) -> None:
        """Edit the current field with one key."""
        self._buffer.handle_key(key)
        self._spec.validate(self._index, self._buffer.value)
        self._highlight = self._spec.highlight()

    def advance(self) -> FormPoll[O]:
        """Commit the current field."""
        result = self._spec.validate(self._index, self._buffer.value)
        if isinstance(result, NextField):
            if self._index + 1 >= len(self._spec.prompts):
                raise InvariantError(
                    f"Form spec asked to advance past its last field ({self._index})"
                )
            self._index += 1
            prior = self._spec.read_back(self._index)
            if prior is not None:
                self._buffer.set_value(prior)
            else:
                self._buffer.clear()
        self._highlight = self._spec.highlight()
        return result

    def reset(self) -> None:
        """Start over with a fresh spec and an empty first field."""
        self._spec = self._spec_factory()
        self._index = 0
        self._buffer.clear()
        self._highlight = self._spec.highlight()


# ---------------------------------------------------------------------------
# Tag form
# ---------------------------------------------------------------------------

_SCORE_RE = re.compile(r"\+?[0-9]+")


def parse_score(text: str) -> int | None:
    """Parse an unsigned 64-bit score, or return None."""
    value = text.strip()
    if not _SCORE_RE.fullmatch(value):
        return None
    score = int(value)
    if score > MAX_SCORE:
        return None
    return score


class TagForm:
    """Name, score and color of a new tag."""

    prompts: tuple[str, ...] = ("Name", "Score", "Color")

    def __init__(self, rng: random.Random | None = None) -> None:
        self.name: str = ""
        self.score: int | None = None
        self.color: Color = random_color(rng)

    def validate(self, index: int, content: str) -> FormPoll[Tag]:
        if index == 0:
            name = content.strip()
            if not name:
                return INVALID
            self.name = name
            return NEXT_FIELD
        if index == 1:
            score = parse_score(content)
            if score is None:
                return INVALID
            self.score = score
            return NEXT_FIELD
        if index == 2:
            try:
                self.color = Color.from_str(content)
            except ValueError:
                return INVALID
            return Done(self._build())
        return Done(self._build())

    def _build(self) -> Tag:
        if not self.name or self.score is None:
            raise InvariantError("Tag form completed before name and score were accepted")
        return Tag(name=self.name, score=self.score, color=self.color)

    def read_back(self, index: int) -> str | None:
        if index == 0:
            return self.name or None
        if index == 1:
            return str(self.score) if self.score is not None else None
        if index == 2:
            return str(self.color)
        logger.error("Invalid read with index %d for TagForm", index)
        return None

    def highlight(self) -> Color:
        return self.color
