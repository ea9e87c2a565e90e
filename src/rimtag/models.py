"""Mods, tags and the catalogue that holds both."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from rimtag.color import WHITE, Color
from rimtag.ordered import OrderedCollection

logger = logging.getLogger(__name__)

MAX_SCORE = 2**64 - 1


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


@dataclass(eq=False)
class Tag:
    """A named, ranked, colored label. Two tags are equal when their names are."""

    name: str
    score: int = 0
    color: Color = WHITE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def identifier(self) -> str:
        return self.name

    def patch(self, other: Tag) -> None:
        self.score = other.score
        self.color = other.color

    def compare(self, other: Tag) -> int:
        return _cmp(self.score, other.score) or _cmp(self.name, other.name)


@dataclass
class Dependency:
    package_id: str
    display_name: str = ""


@dataclass
class ModMetadata:
    package_id: str
    name: str
    description: str = ""
    supported_versions: list[str] = field(default_factory=list)
    load_after: list[str] = field(default_factory=list)
    dependencies_by_version: dict[str, list[Dependency]] = field(default_factory=dict)


@dataclass
class Mod:
    metadata: ModMetadata
    tags: OrderedCollection[Tag] = field(default_factory=OrderedCollection)

    @property
    def name(self) -> str:
        return self.metadata.name

    def identifier(self) -> str:
        return self.metadata.package_id

    def patch(self, other: Mod) -> None:
        self.metadata = replace(other.metadata, package_id=self.metadata.package_id)
        self.tags = other.tags

    def tag_scores(self) -> list[int]:
        return [tag.score for tag in self.tags]

    def compare(self, other: Mod) -> int:
        # Untagged mods sink below every tagged one.
        if self.tags.is_empty() or other.tags.is_empty():
            order = _cmp(self.tags.is_empty(), other.tags.is_empty())
            if order:
                return order
            return _cmp(self.name, other.name)
        return _cmp(self.tag_scores(), other.tag_scores()) or _cmp(self.name, other.name)


class ModCollection(OrderedCollection[Mod]):
    def attach_tag(self, index: int, tag: Tag) -> None:
        """Upsert a copy of ``tag`` into the mod at ``index``, then re-sort.

        Raises:
            IndexError: ``index`` does not point at a mod.
        """
        mod = self.get(index)
        if mod is None:
            raise IndexError(f"No mod at index {index} (have {len(self)})")
        mod.tags.upsert(replace(tag))
        self.force_resort()
        logger.debug("Attached tag %r to %s", tag.name, mod.identifier())


@dataclass
class Catalogue:
    """Everything a session edits: the mod list and the tag catalogue."""

    mods: ModCollection = field(default_factory=ModCollection)
    tags: OrderedCollection[Tag] = field(default_factory=OrderedCollection)
