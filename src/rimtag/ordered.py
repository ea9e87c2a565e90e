"""Generic container that keeps its elements sorted and unique by identifier."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Generic, Iterable, Iterator, Protocol, TypeVar


class OrderedItem(Protocol):
    """Capabilities an element needs to live in an ``OrderedCollection``."""

    def identifier(self) -> str: ...

    def patch(self, other: OrderedItem) -> None: ...

    def compare(self, other: OrderedItem) -> int: ...


T = TypeVar("T", bound=OrderedItem)


class OrderedCollection(Generic[T]):
    """Sequence sorted by ``T.compare`` with at most one element per identifier.

    The only mutation is ``upsert``: a new identifier is inserted at its sorted
    position, a known identifier has its other fields patched and is moved to
    wherever its new fields put it. Elements mutated behind the collection's
    back (a mod whose nested tags changed) need an explicit ``force_resort``.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._data: list[T] = []
        by_id: dict[str, T] = {}
        for item in items:
            existing = by_id.get(item.identifier())
            if existing is not None:
                existing.patch(item)
                continue
            by_id[item.identifier()] = item
            self._data.append(item)
        self.force_resort()

    def upsert(self, item: T) -> bool:
        """Insert ``item`` or patch the element sharing its identifier.

        Returns True when a new element was inserted.
        """
        index = self.index_of(item.identifier())
        if index is not None:
            existing = self._data.pop(index)
            existing.patch(item)
            self._data.insert(self._insertion_point(existing), existing)
            return False
        self._data.insert(self._insertion_point(item), item)
        return True

    def _insertion_point(self, item: T) -> int:
        # Lower bound: first position whose element does not compare less.
        lo, hi = 0, len(self._data)
        while lo < hi:
            mid = (lo + hi) // 2
            if self._data[mid].compare(item) < 0:
                lo = mid + 1
            else:
                hi = mid
        return lo

    def force_resort(self) -> None:
        """Re-sort every element, e.g. after an element's order key changed."""
        self._data.sort(key=cmp_to_key(lambda a, b: a.compare(b)))

    def get_by_identifier(self, identifier: str) -> T | None:
        for item in self._data:
            if item.identifier() == identifier:
                return item
        return None

    def index_of(self, identifier: str) -> int | None:
        for idx, item in enumerate(self._data):
            if item.identifier() == identifier:
                return idx
        return None

    def get(self, index: int) -> T | None:
        if 0 <= index < len(self._data):
            return self._data[index]
        return None

    def first(self) -> T | None:
        return self._data[0] if self._data else None

    def is_empty(self) -> bool:
        return not self._data

    def to_list(self) -> list[T]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"
