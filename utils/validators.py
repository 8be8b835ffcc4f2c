import re
from datetime import datetime
from typing import Optional

from circulation.policy import Category, Role

_ID_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9_-]*$")


class IdValidator:
    """Normalises and checks the short ids used for items and patrons (e.g. B001, S002)."""

    @staticmethod
    def normalize_id(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip().upper()

    @staticmethod
    def is_valid_id(raw: Optional[str]) -> bool:
        return bool(_ID_PATTERN.match(IdValidator.normalize_id(raw)))


class TextValidator:
    """Basic checks for titles and names entered at the prompt."""

    @staticmethod
    def _is_non_empty_alpha(text: Optional[str]) -> bool:
        if text is None:
            return False
        t = text.strip()
        if not t:
            return False
        return any(c.isalpha() for c in t)

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        # titles may be mostly digits ("1984") but not empty
        return bool(title and title.strip())

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        return TextValidator._is_non_empty_alpha(name)


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` or a local ISO timestamp. Empty input means "now".

    All loan dates are naive local times, so a timestamp with a UTC offset is
    rejected.
    """
    if raw is None or not raw.strip():
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date '{raw}', expected YYYY-MM-DD.") from exc
    if parsed.tzinfo is not None:
        raise ValueError(f"Invalid date '{raw}', timezone offsets are not supported.")
    return parsed


def parse_category(raw: Optional[str]) -> Category:
    """Accept a category by value or name, case-insensitive. Empty means General."""
    if raw is None or not raw.strip():
        return Category.GENERAL
    key = raw.strip().lower()
    for category in Category:
        if key in (category.value.lower(), category.name.lower()):
            return category
    choices = ", ".join(c.value for c in Category)
    raise ValueError(f"Unknown category '{raw}'. Choose one of: {choices}.")


def parse_role(raw: Optional[str]) -> Role:
    key = (raw or "").strip().lower()
    for role in Role:
        if key in (role.value.lower(), role.name.lower()):
            return role
    choices = ", ".join(r.value for r in Role)
    raise ValueError(f"Unknown role '{raw}'. Choose one of: {choices}.")
