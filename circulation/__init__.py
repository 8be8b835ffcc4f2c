"""In-memory library circulation: items, patrons, loans and overdue fines."""

from .errors import (
    CapacityExceededError,
    DuplicateIdError,
    Ineligibility,
    LibraryError,
    NotBorrowedError,
    NotEligibleError,
    NotFoundError,
)
from .policy import Category, Role
from .item import Item
from .patron import Patron
from .lending import CheckInResult, can_borrow, check_in, checkout
from .catalog import ItemRepository
from .patrons import PatronRepository
from .library import Library
from .seed import seed_demo_data

__all__ = [
    "CapacityExceededError",
    "DuplicateIdError",
    "Ineligibility",
    "LibraryError",
    "NotBorrowedError",
    "NotEligibleError",
    "NotFoundError",
    "Category",
    "Role",
    "Item",
    "Patron",
    "CheckInResult",
    "can_borrow",
    "check_in",
    "checkout",
    "ItemRepository",
    "PatronRepository",
    "Library",
    "seed_demo_data",
]
