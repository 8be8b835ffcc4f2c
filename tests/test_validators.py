from datetime import datetime

import pytest

from circulation import Category, Role
from utils.validators import IdValidator, TextValidator, parse_category, parse_date, parse_role


def test_normalize_id():
    assert IdValidator.normalize_id("  b001 ") == "B001"
    assert IdValidator.normalize_id(None) == ""


@pytest.mark.parametrize("raw, ok", [("B001", True), ("s-2", True), ("", False), ("   ", False), ("B 01", False)])
def test_is_valid_id(raw, ok):
    assert IdValidator.is_valid_id(raw) is ok


def test_text_validation():
    assert TextValidator.validate_title("1984") is True
    assert TextValidator.validate_title("  ") is False
    assert TextValidator.validate_name("Ada") is True
    assert TextValidator.validate_name("12345") is False
    assert TextValidator.validate_name(None) is False


def test_parse_date():
    assert parse_date("2024-03-01") == datetime(2024, 3, 1)
    assert parse_date("2024-03-01T09:30") == datetime(2024, 3, 1, 9, 30)
    assert parse_date("") is None
    assert parse_date(None) is None
    with pytest.raises(ValueError, match="expected YYYY-MM-DD"):
        parse_date("yesterday")


def test_parse_date_rejects_utc_offsets():
    with pytest.raises(ValueError, match="timezone offsets are not supported"):
        parse_date("2024-03-01T10:00+02:00")


def test_parse_category_and_role():
    assert parse_category("textbook") is Category.TEXTBOOK
    assert parse_category("REFERENCE") is Category.REFERENCE
    assert parse_category(None) is Category.GENERAL
    assert parse_role("Librarian") is Role.LIBRARIAN
    with pytest.raises(ValueError, match="Unknown role"):
        parse_role("admin")
