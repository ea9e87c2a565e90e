"""rimtag: tag RimWorld mods and keep them sorted by tag rank."""

# Controller
from rimtag.app import (
    Action,
    AdvanceField,
    AppendRepeat,
    ChangeMode,
    ClearRepeat,
    Controller,
    EditField,
    Exit,
    InsertTag,
    Mode,
    Move,
    MoveDirection,
    StatusLine,
    run_actions,
    run_session,
)

# Catalogue persistence
from rimtag.catalogue import (
    load_catalogue,
    load_or_scan,
    merge_mods,
    read_about_xml,
    save_catalogue,
    scan_mods_dir,
)

# Colors
from rimtag.color import Color, random_color

# Errors
from rimtag.errors import CatalogueError, InvariantError, RimtagError

# Forms
from rimtag.form import Done, FormEngine, FormSpec, Invalid, NextField, TagForm

# Keybindings
from rimtag.keybindings import DEFAULT_KEYBINDINGS, AppAction, KeybindingsManager

# Keyboard input
from rimtag.keys import Key, KeyEvent, KeyId, press

# Line editing
from rimtag.line_buffer import LineBuffer

# Models
from rimtag.models import Catalogue, Dependency, Mod, ModCollection, ModMetadata, Tag
from rimtag.ordered import OrderedCollection, OrderedItem

__all__ = [
    # Controller
    "Action",
    "AdvanceField",
    "AppendRepeat",
    "ChangeMode",
    "ClearRepeat",
    "Controller",
    "EditField",
    "Exit",
    "InsertTag",
    "Mode",
    "Move",
    "MoveDirection",
    "StatusLine",
    "run_actions",
    "run_session",
    # Catalogue persistence
    "load_catalogue",
    "load_or_scan",
    "merge_mods",
    "read_about_xml",
    "save_catalogue",
    "scan_mods_dir",
    # Colors
    "Color",
    "random_color",
    # Errors
    "CatalogueError",
    "InvariantError",
    "RimtagError",
    # Forms
    "Done",
    "FormEngine",
    "FormSpec",
    "Invalid",
    "NextField",
    "TagForm",
    # Keybindings
    "DEFAULT_KEYBINDINGS",
    "AppAction",
    "KeybindingsManager",
    # Keyboard input
    "Key",
    "KeyEvent",
    "KeyId",
    "press",
    # Line editing
    "LineBuffer",
    # Models
    "Catalogue",
    "Dependency",
    "Mod",
    "ModCollection",
    "ModMetadata",
    "OrderedCollection",
    "OrderedItem",
    "Tag",
]
