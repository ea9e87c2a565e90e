"""Tests for the rimtag command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from rimtag.catalogue import load_catalogue, save_catalogue
from rimtag.cli import main
from rimtag.config import load_settings
from rimtag.models import Catalogue, Mod, ModCollection, ModMetadata, Tag
from rimtag.ordered import OrderedCollection


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("RIMTAG_CONFIG_DIR", str(tmp_path / "cfg"))


@pytest.fixture
def catalogue_path(tmp_path: Path) -> Path:
    path = tmp_path / "mod_info.json"
    catalogue = Catalogue(
        mods=ModCollection(
            Mod(ModMetadata(package_id=f"x.{n.lower()}", name=n)) for n in ("Alpha", "Beta", "Gamma")
        ),
        tags=OrderedCollection([Tag("Core", 1), Tag("Late", 9)]),
    )
    save_catalogue(catalogue, path)
    return path


def _about(mods_dir: Path, folder: str, name: str) -> None:
    about = mods_dir / folder / "About" / "About.xml"
    about.parent.mkdir(parents=True)
    about.write_text(
        f"<ModMetaData><name>{name}</name><packageId>x.{folder}</packageId></ModMetaData>"
    )


class TestMain:
    def test_help_without_command(self) -> None:
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 0
        assert "scan" in result.output
        assert "play" in result.output


class TestShowAndTags:
    def test_show(self, catalogue_path: Path) -> None:
        result = CliRunner().invoke(main, ["--catalogue", str(catalogue_path), "show"])
        assert result.exit_code == 0
        assert "Alpha  [N/A]" in result.output

    def test_show_empty(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["--catalogue", str(tmp_path / "none.json"), "show"])
        assert result.exit_code == 0
        assert "No mods." in result.output

    def test_tags(self, catalogue_path: Path) -> None:
        result = CliRunner().invoke(main, ["--catalogue", str(catalogue_path), "tags"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].endswith("Core")
        assert lines[1].endswith("Late")

    def test_malformed_catalogue(self, tmp_path: Path) -> None:
        path = tmp_path / "mod_info.json"
        path.write_text("nope")
        result = CliRunner().invoke(main, ["--catalogue", str(path), "show"])
        assert result.exit_code != 0
        assert "Malformed catalogue" in result.output


class TestScan:
    def test_scan_adds_mods(self, tmp_path: Path) -> None:
        mods_dir = tmp_path / "Mods"
        _about(mods_dir, "one", "One")
        _about(mods_dir, "two", "Two")
        path = tmp_path / "out.json"
        result = CliRunner().invoke(main, ["--catalogue", str(path), "scan", str(mods_dir)])
        assert result.exit_code == 0
        assert "Added 2 mod(s); catalogue has 2." in result.output
        assert len(load_catalogue(path).mods) == 2

    def test_rescan_keeps_known_mods(self, tmp_path: Path, catalogue_path: Path) -> None:
        mods_dir = tmp_path / "Mods"
        _about(mods_dir, "alpha", "Alpha again")
        _about(mods_dir, "delta", "Delta")
        result = CliRunner().invoke(main, ["--catalogue", str(catalogue_path), "scan", str(mods_dir)])
        assert result.exit_code == 0
        assert "Added 1 mod(s); catalogue has 4." in result.output


class TestPlay:
    def test_attach_tag_and_save(self, catalogue_path: Path) -> None:
        args = ["--catalogue", str(catalogue_path), "play", "j", "i", "j", "enter"]
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 0, result.output
        assert "NORMAL:" in result.output
        mods = load_catalogue(catalogue_path).mods
        assert mods.get(0).name == "Beta"
        assert [t.name for t in mods.get(0).tags] == ["Late"]

    def test_create_tag(self, catalogue_path: Path) -> None:
        keys = ["T", "N", "e", "w", "enter", "5", "enter", "ctrl+u", "#", "0", "0", "f", "f", "0", "0", "enter"]
        result = CliRunner().invoke(main, ["--catalogue", str(catalogue_path), "play", *keys])
        assert result.exit_code == 0, result.output
        tags = load_catalogue(catalogue_path).tags
        assert [t.name for t in tags] == ["Core", "New", "Late"]
        assert str(tags.get(1).color) == "#00ff00"

    def test_dry_run_does_not_save(self, catalogue_path: Path) -> None:
        before = catalogue_path.read_text()
        args = ["--catalogue", str(catalogue_path), "play", "--dry-run", "i", "enter"]
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 0, result.output
        assert ">>" in result.output
        assert catalogue_path.read_text() == before

    def test_status_shows_repeat_buffer(self, catalogue_path: Path) -> None:
        args = ["--catalogue", str(catalogue_path), "play", "--dry-run", "4"]
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 0
        assert result.output.rstrip().endswith("NORMAL: 4")


class TestConfig:
    """config writes settings.json and the other commands pick it up."""

    def test_show_defaults(self) -> None:
        result = CliRunner().invoke(main, ["config"])
        assert result.exit_code == 0
        assert json.loads(result.output)["cataloguePath"] == "mod_info.json"

    def test_set_then_show_uses_saved_catalogue(self, tmp_path: Path, catalogue_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["config", "set", "--catalogue-path", str(catalogue_path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "cfg" / "settings.json").exists()

        result = runner.invoke(main, ["show"])
        assert result.exit_code == 0
        assert "Alpha" in result.output

    def test_set_needs_an_option(self) -> None:
        result = CliRunner().invoke(main, ["config", "set"])
        assert result.exit_code != 0
        assert "Nothing to set" in result.output

    def test_bind_changes_play_keys(self, catalogue_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["config", "bind", "moveDown", "n"])
        assert result.exit_code == 0, result.output
        assert load_settings().keybindings == {"moveDown": ["n"]}

        args = ["--catalogue", str(catalogue_path), "play", "--dry-run", "n", "j"]
        result = runner.invoke(main, args)
        assert result.exit_code == 0
        assert ">>  1 Beta" in result.output

    def test_bind_without_keys_restores_default(self) -> None:
        runner = CliRunner()
        runner.invoke(main, ["config", "bind", "quit", "x"])
        result = runner.invoke(main, ["config", "bind", "quit"])
        assert result.exit_code == 0
        assert load_settings().keybindings == {}

    def test_bind_unknown_action(self) -> None:
        result = CliRunner().invoke(main, ["config", "bind", "launchRockets", "r"])
        assert result.exit_code != 0
        assert "unknown action" in result.output
