from datetime import datetime

import pytest

from circulation import Category, Item, Library, Patron, Role
from circulation.catalog import ItemRepository
from circulation.patrons import PatronRepository

DAY_ZERO = datetime(2024, 3, 1, 10, 0)


@pytest.fixture
def day_zero():
    return DAY_ZERO


@pytest.fixture
def catalog():
    return ItemRepository(capacity=100)


@pytest.fixture
def patrons():
    return PatronRepository(capacity=50)


@pytest.fixture
def student():
    return Patron("S1", "Ada Student", Role.STUDENT)


@pytest.fixture
def teacher():
    return Patron("T1", "Grace Teacher", Role.TEACHER)


@pytest.fixture
def textbook():
    return Item("B1", "Linear Algebra", Category.TEXTBOOK, author="Gilbert Strang")


@pytest.fixture
def lib(catalog, patrons, student, teacher, textbook):
    # Fresh in-memory library for every test
    library = Library(items=catalog, patrons=patrons)
    library.add_patron(student)
    library.add_patron(teacher)
    library.add_item(textbook)
    library.add_item(Item("R1", "Oxford Dictionary", Category.REFERENCE))
    library.add_item(Item("F1", "Dune", Category.FICTION, author="Frank Herbert"))
    return library
