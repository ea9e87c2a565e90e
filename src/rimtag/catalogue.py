"""On-disk catalogue format and RimWorld About.xml scanning.

The catalogue is a single JSON document::

    {"version": 1, "mods": [...], "tags": [...]}

Mods carry their own copies of the tags attached to them. Collections are
written in their sorted order but re-sorted on load, so hand-edited files are
accepted in any order.
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rimtag.color import Color
from rimtag.errors import CatalogueError
from rimtag.models import MAX_SCORE, Catalogue, Dependency, Mod, ModCollection, ModMetadata, Tag
from rimtag.ordered import OrderedCollection

logger = logging.getLogger(__name__)

CURRENT_CATALOGUE_VERSION = 1

ABOUT_XML = Path("About") / "About.xml"


# --- File records ---


class TagRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    score: int = Field(default=0, ge=0, le=MAX_SCORE)
    color: str = "#ffffff"

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        Color.from_str(value)
        return value


class DependencyRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    package_id: str = Field(alias="packageId")
    display_name: str = Field(default="", alias="displayName")


class ModRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    package_id: str = Field(alias="packageId")
    name: str
    description: str = ""
    supported_versions: list[str] = Field(default_factory=list, alias="supportedVersions")
    load_after: list[str] = Field(default_factory=list, alias="loadAfter")
    dependencies_by_version: dict[str, list[DependencyRecord]] = Field(
        default_factory=dict, alias="modDependenciesByVersion"
    )
    tags: list[TagRecord] = Field(default_factory=list)


class CatalogueFile(BaseModel):
    """Top-level JSON document."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = CURRENT_CATALOGUE_VERSION
    mods: list[ModRecord] = Field(default_factory=list)
    tags: list[TagRecord] = Field(default_factory=list)


# --- Record conversion ---


def _tag_from_record(record: TagRecord) -> Tag:
    return Tag(name=record.name, score=record.score, color=Color.from_str(record.color))


def _tag_to_record(tag: Tag) -> TagRecord:
    return TagRecord(name=tag.name, score=tag.score, color=str(tag.color))


def _mod_from_record(record: ModRecord) -> Mod:
    metadata = ModMetadata(
        package_id=record.package_id,
        name=record.name,
        description=record.description,
        supported_versions=list(record.supported_versions),
        load_after=list(record.load_after),
        dependencies_by_version={
            version: [Dependency(d.package_id, d.display_name) for d in deps]
            for version, deps in record.dependencies_by_version.items()
        },
    )
    return Mod(metadata, OrderedCollection(_tag_from_record(t) for t in record.tags))


def _mod_to_record(mod: Mod) -> ModRecord:
    meta = mod.metadata
    return ModRecord(
        package_id=meta.package_id,
        name=meta.name,
        description=meta.description,
        supported_versions=list(meta.supported_versions),
        load_after=list(meta.load_after),
        dependencies_by_version={
            version: [
                DependencyRecord(package_id=d.package_id, display_name=d.display_name)
                for d in deps
            ]
            for version, deps in meta.dependencies_by_version.items()
        },
        tags=[_tag_to_record(t) for t in mod.tags],
    )


def catalogue_from_file(data: CatalogueFile) -> Catalogue:
    return Catalogue(
        mods=ModCollection(_mod_from_record(m) for m in data.mods),
        tags=OrderedCollection(_tag_from_record(t) for t in data.tags),
    )


def catalogue_to_file(catalogue: Catalogue) -> CatalogueFile:
    return CatalogueFile(
        mods=[_mod_to_record(m) for m in catalogue.mods],
        tags=[_tag_to_record(t) for t in catalogue.tags],
    )


# --- Load / save ---


def load_catalogue(path: str | Path) -> Catalogue:
    """Read a catalogue file.

    Raises:
        CatalogueError: The file is missing, not JSON, or does not match the schema.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogueError(f"Cannot read catalogue {path}: {e}") from e
    try:
        data = CatalogueFile.model_validate_json(text)
    except ValidationError as e:
        raise CatalogueError(f"Malformed catalogue {path}: {e}") from e
    if data.version > CURRENT_CATALOGUE_VERSION:
        raise CatalogueError(
            f"Catalogue {path} has version {data.version}, "
            f"newest supported is {CURRENT_CATALOGUE_VERSION}"
        )
    catalogue = catalogue_from_file(data)
    logger.info("Loaded %d mods and %d tags from %s", len(catalogue.mods), len(catalogue.tags), path)
    return catalogue


def save_catalogue(catalogue: Catalogue, path: str | Path) -> None:
    """Write a catalogue file, replacing any previous one."""
    path = Path(path)
    payload = catalogue_to_file(catalogue).model_dump(by_alias=True)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        tmp.replace(path)
    except OSError as e:
        raise CatalogueError(f"Cannot write catalogue {path}: {e}") from e
    logger.info("Saved %d mods and %d tags to %s", len(catalogue.mods), len(catalogue.tags), path)


# --- About.xml ---


def _text(element: ET.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _list_items(element: ET.Element | None) -> list[str]:
    if element is None:
        return []
    return [_text(li) for li in element.findall("li") if _text(li)]


def read_about_xml(path: str | Path) -> ModMetadata:
    """Parse a RimWorld ``About.xml`` into mod metadata.

    Raises:
        CatalogueError: The file cannot be parsed or lacks ``name``/``packageId``.
    """
    path = Path(path)
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        raise CatalogueError(f"Cannot parse {path}: {e}") from e

    package_id = _text(root.find("packageId"))
    name = _text(root.find("name"))
    if not package_id or not name:
        raise CatalogueError(f"{path} is missing name or packageId")

    dependencies: dict[str, list[Dependency]] = {}
    by_version = root.find("modDependenciesByVersion")
    if by_version is not None:
        for version in by_version:
            deps = [
                Dependency(_text(li.find("packageId")), _text(li.find("displayName")))
                for li in version.findall("li")
                if _text(li.find("packageId"))
            ]
            dependencies[version.tag] = deps

    return ModMetadata(
        package_id=package_id,
        name=name,
        description=_text(root.find("description")),
        supported_versions=_list_items(root.find("supportedVersions")),
        load_after=_list_items(root.find("loadAfter")),
        dependencies_by_version=dependencies,
    )


def scan_mods_dir(mods_dir: str | Path) -> list[Mod]:
    """Build untagged mods from every ``<mod>/About/About.xml`` under ``mods_dir``.

    Mods whose About.xml is missing or unreadable are skipped with a warning.
    """
    mods_dir = Path(mods_dir)
    if not mods_dir.is_dir():
        raise CatalogueError(f"Mods directory not found: {mods_dir}")

    mods: list[Mod] = []
    for entry in sorted(mods_dir.iterdir()):
        if not entry.is_dir():
            continue
        about = entry / ABOUT_XML
        if not about.is_file():
            logger.warning("Skipping %s: no %s", entry.name, ABOUT_XML)
            continue
        try:
            mods.append(Mod(read_about_xml(about)))
        except CatalogueError as e:
            logger.warning("Skipping %s: %s", entry.name, e)
    logger.info("Scanned %d mods in %s", len(mods), mods_dir)
    return mods


def merge_mods(catalogue: Catalogue, mods: Iterable[Mod]) -> int:
    """Add mods the catalogue does not know yet. Returns how many were added."""
    added = 0
    for mod in mods:
        if catalogue.mods.get_by_identifier(mod.identifier()) is None:
            catalogue.mods.upsert(mod)
            added += 1
    return added


def load_or_scan(path: str | Path, mods_dir: str | Path | None) -> Catalogue:
    """Load the catalogue file, or build a fresh one from ``mods_dir``."""
    path = Path(path)
    if path.exists():
        try:
            return load_catalogue(path)
        except CatalogueError as e:
            if mods_dir is None:
                raise
            logger.warning("%s; rebuilding from %s", e, mods_dir)
    if mods_dir is None:
        return Catalogue()
    return Catalogue(mods=ModCollection(scan_mods_dir(mods_dir)))
