from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from .policy import Category, fine_for, overdue_days


class Item:
    """A single lendable item in the library."""

    def __init__(self, item_id: str, title: str, category: Category | None = Category.GENERAL,
                 author: str | None = None, isbn: str | None = None) -> None:
        if not item_id or not item_id.strip():
            raise ValueError("Item id cannot be empty.")
        self._item_id = item_id.strip()
        self.title = title.strip()
        self.category = category
        self.author = author.strip() if author else None
        self.isbn = isbn.strip() if isbn else None

        # Loan state, owned by circulation.lending
        self.available = True
        self.borrower_id: str | None = None
        self.borrowed_on: datetime | None = None
        self.due_on: datetime | None = None

    @property
    def item_id(self) -> str:
        return self._item_id

    @property
    def category_name(self) -> str:
        return (self.category or Category.GENERAL).value

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        state = "available" if self.available else f"on loan to {self.borrower_id}"
        return f"{self.title} [{self.category_name}] (ID: {self.item_id}, {state})"

    def __repr__(self) -> str:
        return f"Item(item_id={self.item_id!r}, title={self.title!r}, available={self.available})"

    # ------------------------- Fine preview ------------------------- #
    def is_overdue(self, on: datetime) -> bool:
        if self.available or self.due_on is None:
            return False
        return on > self.due_on

    def overdue_days(self, on: datetime) -> int:
        if not self.is_overdue(on):
            return 0
        return overdue_days(on, self.due_on)

    def calculate_fine(self, on: datetime) -> Decimal:
        """Fine that would be charged if the item came back ``on`` that moment."""
        if not self.is_overdue(on):
            return Decimal("0")
        return fine_for(self.category, on, self.due_on)

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "title": self.title,
            "category": self.category_name,
            "author": self.author,
            "isbn": self.isbn,
            "available": self.available,
            "borrower_id": self.borrower_id,
            "borrowed_on": self.borrowed_on.isoformat() if self.borrowed_on else None,
            "due_on": self.due_on.isoformat() if self.due_on else None,
        }

    @staticmethod
    def from_dict(data: dict) -> "Item":
        """Build a fresh, available item from descriptive fields.

        Loan state is never restored from a dict; only the lending core sets it.
        """
        category = data.get("category")
        if isinstance(category, str):
            category = Category(category)
        return Item(
            item_id=data["item_id"],
            title=data["title"],
            category=category or Category.GENERAL,
            author=data.get("author"),
            isbn=data.get("isbn"),
        )
