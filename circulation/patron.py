from __future__ import annotations

from .policy import Role, borrow_limit


class Patron:
    """A library user. The borrow limit is fixed by role when the patron is created."""

    def __init__(self, patron_id: str, name: str, role: Role = Role.STUDENT) -> None:
        if not patron_id or not patron_id.strip():
            raise ValueError("Patron id cannot be empty.")
        self._patron_id = patron_id.strip()
        self.name = name.strip()
        self._role = role
        self._max_borrow_limit = borrow_limit(role)
        self.borrowed_count = 0

    @property
    def patron_id(self) -> str:
        return self._patron_id

    @property
    def role(self) -> Role:
        return self._role

    @property
    def max_borrow_limit(self) -> int:
        return self._max_borrow_limit

    def has_reached_borrow_limit(self) -> bool:
        return self.borrowed_count >= self.max_borrow_limit

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} ({self.role.value}, ID: {self.patron_id})"

    def __repr__(self) -> str:
        return (f"Patron(patron_id={self.patron_id!r}, role={self.role.value!r}, "
                f"borrowed_count={self.borrowed_count})")

    def to_dict(self) -> dict:
        return {
            "patron_id": self.patron_id,
            "name": self.name,
            "role": self.role.value,
            "borrowed_count": self.borrowed_count,
            "max_borrow_limit": self.max_borrow_limit,
        }
