"""Container domain model."""
from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator, Mapping, Sequence
from typing import Generic, TypeVar

from .base import ContainerItem, ItemTypeMismatch

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


def _noop() -> None:
    pass


class Container(Generic[K]):
    """Items grouped by key, appended in order.

    Keys that expose an ``item_type`` attribute (see CalendarKey) pin the
    item variant they hold; mismatches raise ItemTypeMismatch instead of
    being stored or returned.
    """

    def __init__(self, content: Mapping[K, Sequence[ContainerItem]] | None = None):
        """Create an empty container, or one seeded with content."""
        self._storage: dict[K, list[ContainerItem]] = {}
        self.on_change: Callable[[], None] = _noop

        for key, items in (content or {}).items():
            items = list(items)
            for item in items:
                self._check_item(item, key)
            self._storage[key] = items

    @staticmethod
    def _declared_type(key: K) -> type | None:
        return getattr(key, "item_type", None)

    def _check_item(self, item: ContainerItem, key: K) -> None:
        declared = self._declared_type(key)
        if declared is not None and not isinstance(item, declared):
            raise ItemTypeMismatch(
                f"Key {key!r} holds {declared.__name__}, got {type(item).__name__}"
            )

    def add(self, item: ContainerItem, key: K) -> None:
        """Append an item under key and notify the change callback."""
        self._check_item(item, key)
        self._storage.setdefault(key, []).append(item)
        self.on_change()

    def items(self, key: K, item_type: type[T]) -> list[T]:
        """Get all items under key, narrowed to item_type.

        Raises ItemTypeMismatch if the key (or anything stored under it)
        is not of the requested type.
        """
        declared = self._declared_type(key)
        if declared is not None and not issubclass(declared, item_type):
            raise ItemTypeMismatch(
                f"Key {key!r} holds {declared.__name__}, not {item_type.__name__}"
            )

        stored = self._storage.get(key, [])
        for item in stored:
            if not isinstance(item, item_type):
                raise ItemTypeMismatch(
                    f"Item under {key!r} is {type(item).__name__}, "
                    f"not {item_type.__name__}"
                )
        return list(stored)

    def count(self, key: K) -> int:
        """Number of items stored under key."""
        return len(self._storage.get(key, []))

    def keys(self) -> list[K]:
        """Keys that have been populated, in insertion order."""
        return list(self._storage)

    @property
    def content(self) -> dict[K, tuple[ContainerItem, ...]]:
        """Snapshot of the whole mapping."""
        return {key: tuple(items) for key, items in self._storage.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._storage

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    def __len__(self) -> int:
        return sum(len(items) for items in self._storage.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{key!r}: {len(items)}" for key, items in self._storage.items())
        return f"Container({{{counts}}})"
