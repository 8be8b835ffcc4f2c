"""Item checkout and check-in.

These functions are the only code that changes loan state. Each one updates
the item and the borrower's counter together, so after a call returns either
both moved or neither did.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from .errors import Ineligibility, NotBorrowedError, NotEligibleError
from .item import Item
from .patron import Patron
from .policy import Category, Role, daily_fine_rate, loan_days, overdue_days

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    item_id: str
    patron_id: str
    overdue: bool
    overdue_days: int
    fine: Decimal


def ineligibility_reason(item: Item, patron: Patron) -> Optional[Ineligibility]:
    """Return the first rule that blocks the loan, or None if it may go ahead."""
    if not item.available:
        return Ineligibility.ITEM_UNAVAILABLE
    if item.category is Category.REFERENCE and patron.role is Role.STUDENT:
        return Ineligibility.ROLE_RESTRICTED
    if patron.has_reached_borrow_limit():
        return Ineligibility.LIMIT_REACHED
    return None


def can_borrow(item: Item, patron: Patron) -> bool:
    return ineligibility_reason(item, patron) is None


def due_date(item: Item, patron: Patron, borrowed_on: datetime) -> datetime:
    return borrowed_on + timedelta(days=loan_days(item.category, patron.role))


def checkout(item: Item, patron: Patron, borrowed_on: datetime) -> datetime:
    """Lend ``item`` to ``patron`` and return the due date.

    Raises:
        NotEligibleError: the item is on loan, the role may not borrow this
            category, or the patron is at the borrow limit. Nothing is changed.
    """
    reason = ineligibility_reason(item, patron)
    if reason is not None:
        logger.warning(f"Checkout refused: item={item.item_id} patron={patron.patron_id} reason={reason.name}")
        raise NotEligibleError(item.item_id, patron.patron_id, reason)

    due_on = due_date(item, patron, borrowed_on)

    item.borrower_id = patron.patron_id
    item.borrowed_on = borrowed_on
    item.due_on = due_on
    item.available = False
    patron.borrowed_count += 1

    logger.info(f"Checked out item={item.item_id} to patron={patron.patron_id}, due {due_on:%Y-%m-%d}")
    return due_on


def _close_loan(item: Item, returned_on: datetime) -> CheckInResult:
    borrower_id = item.borrower_id
    overdue = returned_on > item.due_on
    days = overdue_days(returned_on, item.due_on) if overdue else 0
    fine = days * daily_fine_rate(item.category) if overdue else Decimal("0")

    item.borrower_id = None
    item.borrowed_on = None
    item.due_on = None
    item.available = True

    if overdue:
        logger.info(f"Item {item.item_id} returned {days} day(s) late by {borrower_id}, fine {fine}")
    else:
        logger.info(f"Item {item.item_id} returned on time by {borrower_id}")
    return CheckInResult(
        item_id=item.item_id,
        patron_id=borrower_id,
        overdue=overdue,
        overdue_days=days,
        fine=fine,
    )


def check_in(item: Item, returned_on: datetime, patron: Patron) -> CheckInResult:
    """Return ``item`` to the shelf, decrement ``patron``'s count and report any fine.

    Raises:
        NotBorrowedError: the item is not on loan, or is on loan to someone
            other than ``patron``. Nothing is changed.
    """
    if item.available:
        raise NotBorrowedError(item.item_id)
    if patron.patron_id != item.borrower_id:
        raise NotBorrowedError(item.item_id, f"is not on loan to patron {patron.patron_id}")

    result = _close_loan(item, returned_on)
    if patron.borrowed_count > 0:
        patron.borrowed_count -= 1
    return result


def release_orphaned_loan(item: Item, returned_on: datetime) -> CheckInResult:
    """Check in an item whose borrower has been removed from the library.

    No patron counter exists to update, so only the item is released.

    Raises:
        NotBorrowedError: the item is not on loan.
    """
    if item.available:
        raise NotBorrowedError(item.item_id)
    logger.warning(f"Releasing item {item.item_id} held by unregistered borrower {item.borrower_id}")
    return _close_loan(item, returned_on)
