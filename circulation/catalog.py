from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

from config import settings

from .errors import CapacityExceededError, DuplicateIdError, NotFoundError
from .item import Item
from .policy import Category

logger = logging.getLogger(__name__)


class ItemRepository:
    """Holds every item in the library, indexed by id.

    Views are returned in insertion order. Removing an item never touches a
    patron's borrowed count, even if the item is currently on loan.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        self.capacity = settings.item_capacity if capacity is None else capacity
        self._items: List[Item] = []
        self._index: Dict[str, Item] = {}
        self.item_count = 0

    # ------------------------- Core operations ------------------------- #
    def add(self, item: Item) -> bool:
        """Store a new item. Prevent duplicates by id."""
        if item.item_id in self._index:
            logger.warning(f"Rejected item {item.item_id}: id already in use")
            raise DuplicateIdError("item", item.item_id)
        if self.item_count >= self.capacity:
            logger.warning(f"Rejected item {item.item_id}: catalogue full ({self.capacity})")
            raise CapacityExceededError("item", self.capacity)

        self._items.append(item)
        self._index[item.item_id] = item
        self.item_count += 1
        logger.info(f"Added item {item.item_id}: {item.title}")
        return True

    def remove(self, item_id: str) -> bool:
        item = self._index.pop(item_id, None)
        if item is None:
            return False

        self._items.remove(item)
        self.item_count -= 1
        if not item.available:
            logger.warning(f"Removed item {item_id} while on loan to {item.borrower_id}")
        else:
            logger.info(f"Removed item {item_id}")
        return True

    def find_by_id(self, item_id: str) -> Optional[Item]:
        return self._index.get(item_id)

    def get(self, item_id: str) -> Item:
        item = self._index.get(item_id)
        if item is None:
            raise NotFoundError("item", item_id)
        return item

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._index

    def __len__(self) -> int:
        return self.item_count

    # ------------------------- Views ------------------------- #
    def list_items(self) -> List[Item]:
        return list(self._items)

    def list_available(self) -> List[Item]:
        return [item for item in self._items if item.available]

    def list_borrowed(self) -> List[Item]:
        return [item for item in self._items if not item.available]

    def list_borrowed_by(self, patron_id: str, sort_by_due: bool = False) -> List[Item]:
        loans = [item for item in self._items if not item.available and item.borrower_id == patron_id]
        if sort_by_due:
            loans.sort(key=lambda item: item.due_on)
        return loans

    def list_overdue(self, on: datetime) -> List[Item]:
        """Borrowed items past their due date at ``on``, soonest due first."""
        overdue = [item for item in self._items if item.is_overdue(on)]
        return sorted(overdue, key=lambda item: item.due_on)

    def search_by_title(self, keyword: str) -> List[Item]:
        term = keyword.strip().lower()
        return [item for item in self._items if term in item.title.lower()]

    def search_by_author(self, keyword: str) -> List[Item]:
        term = keyword.strip().lower()
        return [item for item in self._items if item.author and term in item.author.lower()]

    def get_statistics(self) -> Dict[str, Any]:
        """Item counts, recomputed on every call."""
        borrowed = sum(1 for item in self._items if not item.available)
        by_category = Counter((item.category or Category.GENERAL).value for item in self._items)
        return {
            "total_items": self.item_count,
            "available_items": self.item_count - borrowed,
            "borrowed_items": borrowed,
            "by_category": {category.value: by_category.get(category.value, 0) for category in Category},
            "capacity": self.capacity,
        }
