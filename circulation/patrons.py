from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from config import settings

from .errors import CapacityExceededError, DuplicateIdError, NotFoundError
from .patron import Patron
from .policy import Role

logger = logging.getLogger(__name__)


class PatronRepository:
    """Holds every registered patron, indexed by id."""

    def __init__(self, capacity: Optional[int] = None) -> None:
        self.capacity = settings.patron_capacity if capacity is None else capacity
        self._patrons: Dict[str, Patron] = {}

    def add(self, patron: Patron) -> bool:
        if patron.patron_id in self._patrons:
            logger.warning(f"Rejected patron {patron.patron_id}: id already in use")
            raise DuplicateIdError("patron", patron.patron_id)
        if len(self._patrons) >= self.capacity:
            logger.warning(f"Rejected patron {patron.patron_id}: registry full ({self.capacity})")
            raise CapacityExceededError("patron", self.capacity)

        self._patrons[patron.patron_id] = patron
        logger.info(f"Registered patron {patron.patron_id}: {patron.name} ({patron.role.value})")
        return True

    def remove(self, patron_id: str) -> bool:
        patron = self._patrons.pop(patron_id, None)
        if patron is None:
            return False
        logger.info(f"Removed patron {patron_id}")
        return True

    def find_by_id(self, patron_id: str) -> Optional[Patron]:
        return self._patrons.get(patron_id)

    def get(self, patron_id: str) -> Patron:
        patron = self._patrons.get(patron_id)
        if patron is None:
            raise NotFoundError("patron", patron_id)
        return patron

    def __contains__(self, patron_id: str) -> bool:
        return patron_id in self._patrons

    def __len__(self) -> int:
        return len(self._patrons)

    def list_patrons(self) -> List[Patron]:
        return list(self._patrons.values())

    def count_by_role(self, role: Role) -> int:
        return sum(1 for patron in self._patrons.values() if patron.role is role)

    def search_by_name(self, keyword: str) -> List[Patron]:
        term = keyword.strip().lower()
        return [patron for patron in self._patrons.values() if term in patron.name.lower()]

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_patrons": len(self._patrons),
            "by_role": {role.value: self.count_by_role(role) for role in Role},
            "active_borrowers": sum(1 for patron in self._patrons.values() if patron.borrowed_count > 0),
            "capacity": self.capacity,
        }
