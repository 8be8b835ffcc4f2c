import json

import pytest
from typer.testing import CliRunner

from config import settings
from main import app, LibraryManager

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_library(monkeypatch):
    # Every test starts from the seeded demo catalogue in plain output mode
    monkeypatch.setenv("LIB_CLI_OUTPUT", "plain")
    monkeypatch.setattr(settings, "seed_demo_data", True)
    LibraryManager.reset()
    yield
    LibraryManager.reset()


def test_list_seeded_items():
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "B001 - Thinking in Java [Textbook] (available)" in result.stdout
    assert "B009 - University Journal [Periodical] (available)" in result.stdout


def test_list_empty_library(monkeypatch):
    monkeypatch.setattr(settings, "seed_demo_data", False)
    LibraryManager.reset()
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No items in library." in result.stdout


def test_borrow_then_return_late():
    result = runner.invoke(app, ["borrow", "B001", "S001", "--on", "2024-03-01"])
    assert result.exit_code == 0
    assert "Item B001 checked out to S001. Due: 2024-04-30" in result.stdout

    result = runner.invoke(app, ["list", "--borrowed"])
    assert "B001 - Thinking in Java [Textbook] (on loan to S001, due 2024-04-30)" in result.stdout

    result = runner.invoke(app, ["return", "B001", "--on", "2024-05-05"])
    assert result.exit_code == 0
    assert "Item B001 returned 5 day(s) late. Fine: 1.50" in result.stdout
    assert LibraryManager.get_instance().find_patron("S001").borrowed_count == 0


def test_return_on_time():
    runner.invoke(app, ["borrow", "B006", "T001", "--on", "2024-03-01"])
    result = runner.invoke(app, ["return", "B006", "--on", "2024-03-10"])
    assert "Item B006 returned on time." in result.stdout


def test_ids_are_normalised():
    result = runner.invoke(app, ["borrow", "b006", "s002", "--on", "2024-03-01"])
    assert "Item B006 checked out to S002." in result.stdout


def test_student_cannot_borrow_reference():
    result = runner.invoke(app, ["borrow", "B004", "S001"])
    assert result.exit_code == 0
    assert "Error: Patron S001 cannot borrow item B004: students cannot borrow reference items." in result.stdout


def test_return_item_not_on_loan():
    result = runner.invoke(app, ["return", "B002"])
    assert result.exit_code == 0
    assert "Error: Item B002 is not on loan." in result.stdout


def test_borrow_unknown_patron():
    result = runner.invoke(app, ["borrow", "B001", "S404"])
    assert "Error: Patron with id S404 not found." in result.stdout


def test_invalid_date():
    result = runner.invoke(app, ["borrow", "B001", "S001", "--on", "first of may"])
    assert "Error: Invalid date 'first of may', expected YYYY-MM-DD." in result.stdout
    assert LibraryManager.get_instance().find_item("B001").available is True


def test_date_with_offset_is_rejected():
    result = runner.invoke(app, ["borrow", "B001", "S001", "--on", "2024-03-01T10:00+02:00"])
    assert result.exit_code == 0
    assert "timezone offsets are not supported" in result.stdout
    assert LibraryManager.get_instance().find_item("B001").available is True

    result = runner.invoke(app, ["overdue", "--on", "2024-06-01"])
    assert result.exit_code == 0
    assert "No overdue items." in result.stdout


def test_find_item():
    result = runner.invoke(app, ["find", "B006"])
    assert result.exit_code == 0
    assert "Item Found" in result.stdout
    assert "Title: The Three-Body Problem" in result.stdout
    assert "Category: Fiction" in result.stdout
    assert "Status: available" in result.stdout


def test_find_item_not_found():
    result = runner.invoke(app, ["find", "nonexistent"])
    assert "Item with ID NONEXISTENT not found." in result.stdout


def test_loans_and_overdue():
    runner.invoke(app, ["borrow", "B008", "T001", "--on", "2024-03-01"])
    runner.invoke(app, ["borrow", "B001", "T001", "--on", "2024-03-01"])

    result = runner.invoke(app, ["loans", "T001"])
    lines = [line for line in result.stdout.splitlines() if line.startswith("B00")]
    assert [line.split(" - ")[0] for line in lines] == ["B008", "B001"]

    result = runner.invoke(app, ["overdue", "--on", "2024-03-20"])
    assert "B008 - Computer Science (borrower T001, 5 day(s) late, fine 4.00)" in result.stdout
    assert "B001" not in result.stdout


def test_no_overdue_items():
    result = runner.invoke(app, ["overdue"])
    assert "No overdue items." in result.stdout


def test_stats_plain():
    runner.invoke(app, ["borrow", "B007", "S003", "--on", "2024-03-01"])
    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 0
    assert "Total Items: 9" in result.stdout
    assert "Borrowed Items: 1" in result.stdout
    assert "Total Patrons: 6" in result.stdout
    assert "Student: 3" in result.stdout


def test_json_output():
    result = runner.invoke(app, ["--output", "json", "list", "--available"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout.strip().splitlines()[-1])
    assert len(payload) == 9
    assert payload[0]["item_id"] == "B001"
    assert payload[0]["category"] == "Textbook"


def test_add_and_remove_item():
    result = runner.invoke(app, ["add-item", "n1", "New Arrival", "--category", "fiction", "--author", "Anon"])
    assert "Successfully added: New Arrival (N1)" in result.stdout

    result = runner.invoke(app, ["add-item", "N1", "Duplicate"])
    assert "Error: Item with id N1 already exists." in result.stdout

    result = runner.invoke(app, ["remove-item", "N1"])
    assert "Item with ID N1 has been removed." in result.stdout

    result = runner.invoke(app, ["remove-item", "N1"])
    assert "Error: Item with id N1 not found." in result.stdout


def test_add_item_bad_category():
    result = runner.invoke(app, ["add-item", "N2", "Mystery", "--category", "comics"])
    assert "Error: Unknown category 'comics'." in result.stdout


def test_add_and_remove_patron():
    result = runner.invoke(app, ["add-patron", "T9", "Dr. Who", "--role", "teacher"])
    assert "Successfully registered: Dr. Who (Teacher, limit 20)" in result.stdout

    result = runner.invoke(app, ["patrons"])
    assert "T9 - Dr. Who [Teacher] 0/20" in result.stdout

    result = runner.invoke(app, ["remove-patron", "T9"])
    assert "Patron with ID T9 has been removed." in result.stdout


def test_reset_discards_loans():
    runner.invoke(app, ["borrow", "B001", "S001"])
    result = runner.invoke(app, ["reset"])
    assert "Library state has been reset." in result.stdout
    assert LibraryManager.get_instance().find_item("B001").available is True
