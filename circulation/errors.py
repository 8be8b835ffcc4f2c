from __future__ import annotations

from enum import Enum


class LibraryError(Exception):
    """Base class for circulation errors surfaced to the front-end."""


class NotFoundError(LibraryError, LookupError):
    """No item or patron is stored under the requested id."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} with id {key} not found.")


class DuplicateIdError(LibraryError, ValueError):
    """An item or patron with the same id already exists."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} with id {key} already exists.")


class CapacityExceededError(LibraryError):
    """The repository insertion ceiling has been reached."""

    def __init__(self, kind: str, capacity: int) -> None:
        self.kind = kind
        self.capacity = capacity
        super().__init__(f"{kind.capitalize()} storage is full (capacity: {capacity}).")


class Ineligibility(Enum):
    ITEM_UNAVAILABLE = "item is already on loan"
    ROLE_RESTRICTED = "students cannot borrow reference items"
    LIMIT_REACHED = "patron has reached the borrow limit"


class NotEligibleError(LibraryError):
    """Borrow preconditions are not met; ``reason`` says which one."""

    def __init__(self, item_id: str, patron_id: str, reason: Ineligibility) -> None:
        self.item_id = item_id
        self.patron_id = patron_id
        self.reason = reason
        super().__init__(f"Patron {patron_id} cannot borrow item {item_id}: {reason.value}.")


class NotBorrowedError(LibraryError):
    """Check-in of an item that has no matching active loan."""

    def __init__(self, item_id: str, detail: str = "is not on loan") -> None:
        self.item_id = item_id
        super().__init__(f"Item {item_id} {detail}.")
