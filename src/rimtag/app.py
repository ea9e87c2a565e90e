"""Modal controller: turns key events into actions and applies them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Union

from rimtag.color import Color
from rimtag.errors import InvariantError
from rimtag.form import Done, FormEngine, FormSpec, TagForm
from rimtag.keybindings import AppAction, KeybindingsManager
from rimtag.keys import KeyEvent, KeyId, is_digit_key
from rimtag.models import Catalogue, Mod, ModCollection, Tag
from rimtag.ordered import OrderedCollection

logger = logging.getLogger(__name__)

# Longest follow-up chain is AdvanceField -> ChangeMode -> ClearRepeat.
MAX_ACTION_CHAIN = 8


class Mode(Enum):
    NORMAL = "normal"
    CREATE_TAG = "create_tag"
    SHOW_TAGS = "show_tags"
    INSERT = "insert"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @property
    def color(self) -> Color:
        return _MODE_COLORS[self]

    @property
    def hint(self) -> str:
        return _MODE_HINTS[self]


_MODE_LABELS = {
    Mode.NORMAL: " NORMAL ",
    Mode.CREATE_TAG: " CREATE TAG ",
    Mode.SHOW_TAGS: " LISTING TAG ",
    Mode.INSERT: " INSERT ",
}

_MODE_COLORS = {
    Mode.NORMAL: Color(0x45, 0x89, 0xFF),
    Mode.CREATE_TAG: Color(0x42, 0xBE, 0x65),
    Mode.SHOW_TAGS: Color(0xFE, 0x83, 0x2B),
    Mode.INSERT: Color(0x42, 0xBE, 0x65),
}

_MODE_HINTS = {
    Mode.NORMAL: "'T' new tag, 't' list tags, 'i' tag mod, 'q' to quit",
    Mode.CREATE_TAG: "Creating new tag, ESC to go back.",
    Mode.SHOW_TAGS: "Listing created tags, ESC to go back",
    Mode.INSERT: "Inserting tag into selected mod, ESC to go back",
}


class MoveDirection(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def toward_start(self) -> bool:
        return self in (MoveDirection.UP, MoveDirection.LEFT)


_MOVE_ACTIONS: dict[AppAction, MoveDirection] = {
    "moveUp": MoveDirection.UP,
    "moveDown": MoveDirection.DOWN,
    "moveLeft": MoveDirection.LEFT,
    "moveRight": MoveDirection.RIGHT,
}


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClearRepeat:
    pass


@dataclass(frozen=True)
class AppendRepeat:
    digit: str


@dataclass(frozen=True)
class Move:
    direction: MoveDirection


@dataclass(frozen=True)
class EditField:
    key: KeyId


@dataclass(frozen=True)
class AdvanceField:
    pass


@dataclass(frozen=True)
class InsertTag:
    pass


@dataclass(frozen=True)
class ChangeMode:
    mode: Mode


@dataclass(frozen=True)
class Exit:
    pass


Action = Union[
    ClearRepeat, AppendRepeat, Move, EditField, AdvanceField, InsertTag, ChangeMode, Exit
]


@dataclass(frozen=True)
class StatusLine:
    label: str
    color: Color
    hint: str


def move_cursor(cursor: int | None, length: int, repeat: int, direction: MoveDirection) -> int | None:
    """Saturating cursor movement within ``[0, length - 1]``."""
    if cursor is None:
        return None
    if direction.toward_start:
        return max(cursor - repeat, 0)
    return min(cursor + repeat, max(length - 1, 0))


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class Controller:
    """Owns one tagging session: both collections, the cursors, the mode and the form."""

    def __init__(
        self,
        catalogue: Catalogue,
        keybindings: KeybindingsManager | None = None,
        tag_form_factory: Callable[[], FormSpec[Tag]] = TagForm,
    ) -> None:
        self._catalogue = catalogue
        self._kb = keybindings or KeybindingsManager()
        self._mode = Mode.NORMAL
        self._repeat = ""
        self._should_close = False
        self._mod_cursor: int | None = None
        self._tag_cursor: int | None = None
        self._form: FormEngine[Tag] = FormEngine(tag_form_factory, self._kb)
        self._revalidate_cursors()

    # -- read accessors ------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def mods(self) -> ModCollection:
        return self._catalogue.mods

    @property
    def tags(self) -> OrderedCollection[Tag]:
        return self._catalogue.tags

    @property
    def mod_cursor(self) -> int | None:
        return self._mod_cursor

    @property
    def tag_cursor(self) -> int | None:
        return self._tag_cursor

    @property
    def repeat_buffer(self) -> str:
        return self._repeat

    @property
    def form(self) -> FormEngine[Tag]:
        return self._form

    @property
    def should_close(self) -> bool:
        return self._should_close

    def selected_mod(self) -> Mod | None:
        return None if self._mod_cursor is None else self.mods.get(self._mod_cursor)

    def selected_tag(self) -> Tag | None:
        return None if self._tag_cursor is None else self.tags.get(self._tag_cursor)

    def status_line(self) -> StatusLine:
        hint = self._repeat or self._mode.hint
        return StatusLine(label=self._mode.label, color=self._mode.color, hint=hint)

    def result(self) -> Catalogue:
        """Hand the (possibly reordered) catalogue back to the host."""
        return self._catalogue

    # -- event translation ---------------------------------------------------

    def translate(self, mode: Mode, event: KeyEvent) -> Action | None:
        """Map a key event to at most one action. Never mutates state."""
        if not event.is_press:
            return None
        key = event.key
        if mode is Mode.NORMAL:
            return self._translate_normal(key)
        if mode is Mode.CREATE_TAG:
            return self._translate_create_tag(key)
        if mode is Mode.SHOW_TAGS:
            return self._translate_show_tags(key)
        return self._translate_insert(key)

    def _translate_normal(self, key: KeyId) -> Action | None:
        kb = self._kb
        if kb.matches(key, "cancel"):
            return ClearRepeat()
        if is_digit_key(key):
            return AppendRepeat(key)
        if kb.matches(key, "quit"):
            return Exit()
        if kb.matches(key, "createTag"):
            return ChangeMode(Mode.CREATE_TAG)
        if kb.matches(key, "showTags"):
            return ChangeMode(Mode.SHOW_TAGS)
        if kb.matches(key, "insertMode"):
            if self.mods.is_empty() or self.tags.is_empty():
                logger.debug("Insert mode needs at least one mod and one tag")
                return None
            return ChangeMode(Mode.INSERT)
        return self._translate_move(key)

    def _translate_create_tag(self, key: KeyId) -> Action:
        if self._kb.matches(key, "cancel"):
            return ChangeMode(Mode.NORMAL)
        if self._kb.matches(key, "nextField"):
            return AdvanceField()
        return EditField(key)

    def _translate_show_tags(self, key: KeyId) -> Action | None:
        if self._kb.matches(key, "cancel"):
            return ChangeMode(Mode.NORMAL)
        return None

    def _translate_insert(self, key: KeyId) -> Action | None:
        kb = self._kb
        if kb.matches(key, "cancel") or kb.matches(key, "quit"):
            return ChangeMode(Mode.NORMAL)
        if kb.matches(key, "confirm"):
            return InsertTag()
        if is_digit_key(key):
            return AppendRepeat(key)
        return self._translate_move(key)

    def _translate_move(self, key: KeyId) -> Action | None:
        action = self._kb.action_for(key, tuple(_MOVE_ACTIONS))
        if action is None:
            return None
        return Move(_MOVE_ACTIONS[action])

    # -- action application --------------------------------------------------

    def apply(self, action: Action) -> Action | None:
        """Perform ``action`` and return the follow-up action, if any."""
        if isinstance(action, ClearRepeat):
            self._repeat = ""
        elif isinstance(action, AppendRepeat):
            self._repeat += action.digit
        elif isinstance(action, Move):
            return self._apply_move(action.direction)
        elif isinstance(action, EditField):
            self._form.handle_key(action.key)
        elif isinstance(action, AdvanceField):
            return self._apply_advance()
        elif isinstance(action, InsertTag):
            return self._apply_insert_tag()
        elif isinstance(action, ChangeMode):
            return self._apply_change_mode(action.mode)
        elif isinstance(action, Exit):
            self._should_close = True
        else:
            raise InvariantError(f"Unknown action: {action!r}")
        return None

    def _repeat_count(self) -> int:
        try:
            return int(self._repeat)
        except ValueError:
            return 1

    def _apply_move(self, direction: MoveDirection) -> Action:
        d = self._repeat_count()
        if self._mode is Mode.NORMAL:
            self._mod_cursor = move_cursor(self._mod_cursor, len(self.mods), d, direction)
        elif self._mode is Mode.INSERT:
            self._tag_cursor = move_cursor(self._tag_cursor, len(self.tags), d, direction)
        return ClearRepeat()

    def _apply_advance(self) -> Action | None:
        result = self._form.advance()
        if not isinstance(result, Done):
            return None
        tag = result.value
        inserted = self.tags.upsert(tag)
        self._revalidate_cursors()
        logger.info("%s tag %r (score %d)", "Created" if inserted else "Updated", tag.name, tag.score)
        return ChangeMode(Mode.NORMAL)

    def _apply_insert_tag(self) -> Action:
        if self._mod_cursor is None or self._tag_cursor is None:
            raise InvariantError("InsertTag needs both a selected mod and a selected tag")
        tag = self.tags.get(self._tag_cursor)
        if tag is None:
            raise InvariantError(f"Tag cursor {self._tag_cursor} is out of range")
        self.mods.attach_tag(self._mod_cursor, tag)
        self._tag_cursor = 0
        self._revalidate_cursors()
        return ChangeMode(Mode.NORMAL)

    def _apply_change_mode(self, mode: Mode) -> Action:
        if mode is Mode.CREATE_TAG:
            self._form.reset()
        logger.debug("Mode %s -> %s", self._mode.value, mode.value)
        self._mode = mode
        return ClearRepeat()

    def _revalidate_cursors(self) -> None:
        self._mod_cursor = _clamp(self._mod_cursor, len(self.mods))
        self._tag_cursor = _clamp(self._tag_cursor, len(self.tags))

    # -- host helpers --------------------------------------------------------

    def handle_event(self, event: KeyEvent) -> None:
        """Translate one event and apply the resulting action chain."""
        action = self.translate(self._mode, event)
        if action is not None:
            run_actions(self, action)


def _clamp(cursor: int | None, length: int) -> int | None:
    if length == 0:
        return None
    if cursor is None:
        return 0
    return min(max(cursor, 0), length - 1)


def run_actions(controller: Controller, action: Action | None) -> None:
    """Apply ``action`` and every follow-up it produces."""
    depth = 0
    while action is not None:
        if depth >= MAX_ACTION_CHAIN:
            raise InvariantError(f"Action chain exceeded {MAX_ACTION_CHAIN} steps at {action!r}")
        action = controller.apply(action)
        depth += 1


def run_session(controller: Controller, events: Iterable[KeyEvent]) -> Catalogue:
    """Feed events one at a time until the session exits or the events run out."""
    for event in events:
        if controller.should_close:
            break
        controller.handle_event(event)
    return controller.result()
