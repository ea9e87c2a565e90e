"""Configuration management for rimtag. Stores settings at ~/.rimtag/settings.json."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from rimtag.keybindings import KeybindingsConfig, KeybindingsManager

logger = logging.getLogger(__name__)

DEFAULT_CATALOGUE_PATH = "mod_info.json"


@dataclass
class Settings:
    catalogue_path: str = DEFAULT_CATALOGUE_PATH
    mods_dir: str | None = None
    keybindings: KeybindingsConfig = field(default_factory=dict)

    def keybindings_manager(self) -> KeybindingsManager:
        return KeybindingsManager(self.keybindings)


def settings_from_dict(data: dict) -> Settings:
    """Deserialize Settings from a JSON-compatible dict."""
    keybindings = data.get("keybindings") or {}
    if not isinstance(keybindings, dict):
        raise ValueError("keybindings must be an object")
    for action, keys in keybindings.items():
        if isinstance(keys, str):
            continue
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise ValueError(f"keybinding for {action!r} must be a key or a list of keys")
    return Settings(
        catalogue_path=data.get("cataloguePath", DEFAULT_CATALOGUE_PATH),
        mods_dir=data.get("modsDir"),
        keybindings=keybindings,
    )


def settings_to_dict(settings: Settings) -> dict:
    """Serialize Settings to a JSON-compatible dict."""
    return {
        "cataloguePath": settings.catalogue_path,
        "modsDir": settings.mods_dir,
        "keybindings": dict(settings.keybindings),
    }


def get_config_dir() -> Path:
    return Path(os.environ.get("RIMTAG_CONFIG_DIR", Path.home() / ".rimtag"))


def _get_settings_path() -> Path:
    return get_config_dir() / "settings.json"


def load_settings() -> Settings:
    settings_path = _get_settings_path()
    if not settings_path.exists():
        return Settings()
    try:
        data = json.loads(settings_path.read_text())
        if not isinstance(data, dict):
            raise ValueError("settings must be a JSON object")
        return settings_from_dict(data)
    except (OSError, ValueError) as e:
        logger.warning("Error reading settings %s: %s; using defaults", settings_path, e)
        return Settings()


def save_settings(settings: Settings) -> None:
    settings_path = _get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(settings_to_dict(settings), indent=2))
