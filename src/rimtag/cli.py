"""CLI entry point for rimtag. Uses Click for argument parsing."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from rimtag.app import Controller, run_session
from rimtag.catalogue import load_catalogue, load_or_scan, merge_mods, save_catalogue, scan_mods_dir
from rimtag.config import Settings, get_config_dir, load_settings, save_settings, settings_to_dict
from rimtag.errors import CatalogueError
from rimtag.keybindings import APP_ACTIONS
from rimtag.keys import normalize_key_id, press
from rimtag.models import Catalogue

logger = logging.getLogger(__name__)


class _Context:
    def __init__(self, catalogue_path: Path | None, mods_dir: str | None) -> None:
        self.settings = load_settings()
        self.catalogue_path = catalogue_path
        self.mods_dir = mods_dir


@click.group(invoke_without_command=True)
@click.option(
    "--catalogue",
    "catalogue_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalogue file (default: from settings, else ./mod_info.json)",
)
@click.option(
    "--mods-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="RimWorld Mods directory used when no catalogue exists yet",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
)
@click.pass_context
def main(ctx, catalogue_path, mods_dir, log_level):
    """Tag RimWorld mods and keep them sorted by tag rank."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    state = _Context(catalogue_path, mods_dir)
    if state.catalogue_path is None:
        state.catalogue_path = Path(state.settings.catalogue_path)
    if state.mods_dir is None:
        state.mods_dir = state.settings.mods_dir
    ctx.obj = state
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _load(state: _Context) -> Catalogue:
    try:
        return load_or_scan(state.catalogue_path, state.mods_dir)
    except CatalogueError as e:
        raise click.ClickException(str(e)) from e


def _save(catalogue: Catalogue, state: _Context) -> None:
    try:
        save_catalogue(catalogue, state.catalogue_path)
    except CatalogueError as e:
        raise click.ClickException(str(e)) from e


def _echo_mods(catalogue: Catalogue, cursor: int | None = None) -> None:
    if catalogue.mods.is_empty():
        click.echo("No mods.")
        return
    for idx, mod in enumerate(catalogue.mods):
        marker = ">>" if idx == cursor else "  "
        tags = " ".join(f"{t.name}({t.score})" for t in mod.tags) or "N/A"
        click.echo(f"{marker}{idx:>3} {mod.name}  [{tags}]")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("mods_dir", type=click.Path(exists=True, file_okay=False))
@click.pass_obj
def scan(state: _Context, mods_dir):
    """Add mods found under MODS_DIR to the catalogue."""
    try:
        if state.catalogue_path.exists():
            catalogue = load_catalogue(state.catalogue_path)
        else:
            catalogue = Catalogue()
        added = merge_mods(catalogue, scan_mods_dir(mods_dir))
    except CatalogueError as e:
        raise click.ClickException(str(e)) from e
    _save(catalogue, state)
    click.echo(f"Added {added} mod(s); catalogue has {len(catalogue.mods)}.")


@main.command()
@click.pass_obj
def show(state: _Context):
    """List mods in tag order."""
    _echo_mods(_load(state))


@main.command()
@click.pass_obj
def tags(state: _Context):
    """List the tag catalogue."""
    catalogue = _load(state)
    if catalogue.tags.is_empty():
        click.echo("No tags.")
        return
    for tag in catalogue.tags:
        click.echo(f"{tag.score:>5} {tag.color} {tag.name}")


@main.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--dry-run", is_flag=True, help="Do not write the catalogue back")
@click.pass_obj
def play(state: _Context, keys, dry_run):
    """Replay KEYS (e.g. j j i enter) through an editing session."""
    controller = Controller(_load(state), keybindings=state.settings.keybindings_manager())
    catalogue = run_session(controller, (press(k) for k in keys))
    status = controller.status_line()
    logger.debug("Session ended in %s mode", controller.mode.value)
    if not dry_run:
        _save(catalogue, state)
    _echo_mods(catalogue, controller.mod_cursor)
    click.echo(f"{status.label.strip()}: {status.hint}")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@main.group("config", invoke_without_command=True)
@click.pass_context
def config_group(ctx):
    """Show or change saved settings."""
    if ctx.invoked_subcommand is None:
        click.echo(json.dumps(settings_to_dict(ctx.obj.settings), indent=2))


def _store(settings: Settings) -> None:
    try:
        save_settings(settings)
    except OSError as e:
        raise click.ClickException(f"Cannot write settings: {e}") from e
    click.echo(f"Saved settings to {get_config_dir() / 'settings.json'}")


@config_group.command("set")
@click.option("--catalogue-path", default=None, help="Default catalogue file")
@click.option("--mods-dir", default=None, help="Default RimWorld Mods directory")
@click.pass_obj
def config_set(state: _Context, catalogue_path, mods_dir):
    """Change the default catalogue file or mods directory."""
    if catalogue_path is None and mods_dir is None:
        raise click.UsageError("Nothing to set: pass --catalogue-path and/or --mods-dir")
    settings = state.settings
    if catalogue_path is not None:
        settings.catalogue_path = catalogue_path
    if mods_dir is not None:
        settings.mods_dir = mods_dir
    _store(settings)


@config_group.command("bind")
@click.argument("action")
@click.argument("keys", nargs=-1)
@click.pass_obj
def config_bind(state: _Context, action, keys):
    """Bind ACTION to KEYS, or restore its default when no keys are given."""
    if action not in APP_ACTIONS:
        raise click.BadParameter(
            f"unknown action {action!r}; choose from {', '.join(sorted(APP_ACTIONS))}",
            param_hint="ACTION",
        )
    settings = state.settings
    if keys:
        settings.keybindings[action] = [normalize_key_id(k) for k in keys]
    else:
        settings.keybindings.pop(action, None)
    _store(settings)


if __name__ == "__main__":
    main()
