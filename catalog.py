"""Read-only reference collections: the book catalog and the patron list.

Both are filled once at load time. Lookups raise ``NotFound`` and
enumeration returns a fresh iterator on every call, so callers can walk the
collection as often as they like.
"""

from __future__ import annotations

import logging
from typing import Dict, Generic, Iterable, Iterator, TypeVar

from book import Book
from errors import NotFound
from patron import Patron

logger = logging.getLogger(__name__)

T = TypeVar("T", Book, Patron)


class _Registry(Generic[T]):
    kind = "record"

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: Dict[int, T] = {}
        self.load(items)

    def load(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def add(self, item: T) -> None:
        if item.id in self._items:
            raise ValueError(f"{self.kind.capitalize()} with id {item.id} already exists.")
        self._items[item.id] = item
        logger.debug(f"Loaded {self.kind} {item.id}")

    def get(self, item_id: int) -> T:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFound(f"{self.kind.capitalize()} {item_id} not found.") from None

    def all(self) -> Iterator[T]:
        yield from self._items.values()

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)


class Catalog(_Registry[Book]):
    """Books owned by the library, keyed by id."""

    kind = "book"


class Patrons(_Registry[Patron]):
    """Registered borrowers, keyed by id."""

    kind = "patron"
