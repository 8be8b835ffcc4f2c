"""Lending policy tables.

Loan length depends on the item category and on whether the borrower is a
teacher; the daily fine depends on the category only. A missing category is
treated as general stock.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta
from decimal import Decimal


class Category(enum.Enum):
    TEXTBOOK = "Textbook"
    REFERENCE = "Reference"
    FICTION = "Fiction"
    PERIODICAL = "Periodical"
    GENERAL = "General"


class Role(enum.Enum):
    STUDENT = "Student"
    TEACHER = "Teacher"
    LIBRARIAN = "Librarian"


# Librarians are effectively unlimited.
ROLE_LIMITS: dict[Role, int] = {
    Role.STUDENT: 5,
    Role.TEACHER: 20,
    Role.LIBRARIAN: 999,
}

# (teacher days, everyone else days)
LOAN_DAYS: dict[Category, tuple[int, int]] = {
    Category.TEXTBOOK: (90, 60),
    Category.REFERENCE: (30, 0),
    Category.FICTION: (30, 30),
    Category.PERIODICAL: (14, 14),
    Category.GENERAL: (60, 30),
}

DAILY_FINE_RATES: dict[Category, Decimal] = {
    Category.TEXTBOOK: Decimal("0.3"),
    Category.REFERENCE: Decimal("1.0"),
    Category.FICTION: Decimal("0.5"),
    Category.PERIODICAL: Decimal("0.8"),
    Category.GENERAL: Decimal("0.5"),
}


def borrow_limit(role: Role) -> int:
    return ROLE_LIMITS[role]


def loan_days(category: Category | None, role: Role) -> int:
    """Number of days a patron with ``role`` may keep an item of ``category``."""
    teacher_days, other_days = LOAN_DAYS[category or Category.GENERAL]
    return teacher_days if role is Role.TEACHER else other_days


def daily_fine_rate(category: Category | None) -> Decimal:
    return DAILY_FINE_RATES[category or Category.GENERAL]


def overdue_days(returned_on: datetime, due_on: datetime) -> int:
    """Whole days late, at least one as soon as ``returned_on`` passes ``due_on``."""
    if returned_on <= due_on:
        return 0
    return max(1, (returned_on - due_on) // timedelta(days=1))


def fine_for(category: Category | None, returned_on: datetime, due_on: datetime) -> Decimal:
    return overdue_days(returned_on, due_on) * daily_fine_rate(category)
