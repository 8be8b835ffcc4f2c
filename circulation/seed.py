from __future__ import annotations

from .item import Item
from .library import Library
from .patron import Patron
from .policy import Category, Role

DEMO_ITEMS = [
    ("B001", "Thinking in Java", "Bruce Eckel", "978-7-111-21382-6", Category.TEXTBOOK),
    ("B002", "Introduction to Algorithms", "Thomas H. Cormen", "978-7-111-07575-2", Category.TEXTBOOK),
    ("B003", "Code Complete", "Steve McConnell", "978-7-111-18777-6", Category.TEXTBOOK),
    ("B004", "Java EE Reference", "Steve McConnell", "978-7-111-15847-2", Category.REFERENCE),
    ("B005", "Design Patterns", "Erich Gamma", "978-7-111-12575-8", Category.REFERENCE),
    ("B006", "The Three-Body Problem", "Liu Cixin", "978-7-5366-9293-0", Category.FICTION),
    ("B007", "To Live", "Yu Hua", "978-7-5063-8649-8", Category.FICTION),
    ("B008", "Computer Science", "Computer Science Press", "1002-137X", Category.PERIODICAL),
    ("B009", "University Journal", "University Press", "1005-1805", Category.PERIODICAL),
]

DEMO_PATRONS = [
    ("L001", "Head Librarian", Role.LIBRARIAN),
    ("T001", "Prof. Zhang", Role.TEACHER),
    ("T002", "Prof. Li", Role.TEACHER),
    ("S001", "Wang Xiaoming", Role.STUDENT),
    ("S002", "Li Xiaohong", Role.STUDENT),
    ("S003", "Zhao Xiaogang", Role.STUDENT),
]


def seed_demo_data(library: Library) -> Library:
    """Load the sample catalogue and patrons, skipping ids already present."""
    for item_id, title, author, isbn, category in DEMO_ITEMS:
        if item_id not in library.items:
            library.add_item(Item(item_id, title, category, author=author, isbn=isbn))
    for patron_id, name, role in DEMO_PATRONS:
        if patron_id not in library.patrons:
            library.add_patron(Patron(patron_id, name, role))
    return library
