from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .catalog import ItemRepository
from .errors import DuplicateIdError, NotBorrowedError, NotFoundError
from .item import Item
from .lending import CheckInResult, check_in, checkout, release_orphaned_loan
from .patron import Patron
from .patrons import PatronRepository

logger = logging.getLogger(__name__)


class Library:
    """Wires the item and patron repositories to the lending rules.

    Callers work with ids; this class resolves them, raising ``NotFoundError``
    for unknown ones, and hands the objects to ``circulation.lending``.
    """

    def __init__(self, items: Optional[ItemRepository] = None,
                 patrons: Optional[PatronRepository] = None) -> None:
        self.items = items if items is not None else ItemRepository()
        self.patrons = patrons if patrons is not None else PatronRepository()

    # ------------------------- Catalogue ------------------------- #
    def add_item(self, item: Item) -> Item:
        self.items.add(item)
        return item

    def remove_item(self, item_id: str) -> Item:
        """Administrative removal. A borrowed item is dropped without a return."""
        item = self.items.get(item_id)
        self.items.remove(item_id)
        return item

    def find_item(self, item_id: str) -> Optional[Item]:
        return self.items.find_by_id(item_id)

    def search_items(self, query: str) -> List[Item]:
        """Search by title or author, keeping catalogue order."""
        matches = {item.item_id for item in self.items.search_by_title(query)}
        matches.update(item.item_id for item in self.items.search_by_author(query))
        return [item for item in self.items.list_items() if item.item_id in matches]

    # ------------------------- Patrons ------------------------- #
    def add_patron(self, patron: Patron) -> Patron:
        """Register a patron.

        An id that still has loans recorded against it, left by a removed
        patron, is treated as taken until those items are returned.
        """
        if patron.patron_id not in self.patrons and self.items.list_borrowed_by(patron.patron_id):
            raise DuplicateIdError("patron", patron.patron_id)
        self.patrons.add(patron)
        return patron

    def remove_patron(self, patron_id: str) -> Patron:
        patron = self.patrons.get(patron_id)
        self.patrons.remove(patron_id)
        if patron.borrowed_count:
            logger.warning(f"Patron {patron_id} removed with {patron.borrowed_count} item(s) still on loan")
        return patron

    def find_patron(self, patron_id: str) -> Optional[Patron]:
        return self.patrons.find_by_id(patron_id)

    # ------------------------- Circulation ------------------------- #
    def borrow(self, item_id: str, patron_id: str, when: Optional[datetime] = None) -> datetime:
        """Check ``item_id`` out to ``patron_id`` and return the due date."""
        item = self.items.get(item_id)
        patron = self.patrons.get(patron_id)
        return checkout(item, patron, when or datetime.now())

    def return_item(self, item_id: str, when: Optional[datetime] = None) -> CheckInResult:
        item = self.items.get(item_id)
        when = when or datetime.now()
        if item.available:
            raise NotBorrowedError(item_id)
        # The borrower may have been removed since the loan was made.
        patron = self.patrons.find_by_id(item.borrower_id)
        if patron is None:
            return release_orphaned_loan(item, when)
        return check_in(item, when, patron)

    def loans_for(self, patron_id: str) -> List[Item]:
        """Items on loan to ``patron_id``, soonest due first."""
        if patron_id not in self.patrons:
            raise NotFoundError("patron", patron_id)
        return self.items.list_borrowed_by(patron_id, sort_by_due=True)

    def overdue_items(self, on: Optional[datetime] = None) -> List[Item]:
        return self.items.list_overdue(on or datetime.now())

    def get_statistics(self) -> Dict[str, Any]:
        """Combined catalogue and patron statistics."""
        stats = self.items.get_statistics()
        patron_stats = self.patrons.get_statistics()
        return {
            "total_items": stats["total_items"],
            "available_items": stats["available_items"],
            "borrowed_items": stats["borrowed_items"],
            "items_by_category": stats["by_category"],
            "total_patrons": patron_stats["total_patrons"],
            "patrons_by_role": patron_stats["by_role"],
            "active_borrowers": patron_stats["active_borrowers"],
        }
