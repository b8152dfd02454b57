"""Account managers that quotes can be assigned to."""

from __future__ import annotations

import threading
from typing import Iterable, List, Optional

from core.exceptions import InvalidOrderSettingError
from logging_config import get_logger


logger = get_logger(__name__)


DEFAULT_ACCOUNT_MANAGERS = ("Ryan", "Kyle", "Anthony", "Clarence")


class AccountManagerRegistry:
    """Thread-safe, ordered list of manager names."""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._lock = threading.Lock()
        self._names: List[str] = list(names or DEFAULT_ACCOUNT_MANAGERS)

    def list(self) -> List[str]:
        with self._lock:
            return list(self._names)

    @property
    def default(self) -> str:
        """First manager, used when a quote names none."""
        with self._lock:
            return self._names[0] if self._names else ""

    def add(self, name: str) -> str:
        """
        Add a manager.

        Raises:
            InvalidOrderSettingError: If the name is blank or already listed
        """
        name = (name or "").strip()
        if not name:
            raise InvalidOrderSettingError("account_manager", name, "name is required")

        with self._lock:
            if name in self._names:
                raise InvalidOrderSettingError("account_manager", name, "already exists")
            self._names.append(name)

        logger.info(f"Added account manager '{name}'")
        return name

    def delete(self, name: str) -> bool:
        """Remove a manager. Returns False if the name was not listed."""
        with self._lock:
            if name not in self._names:
                return False
            self._names.remove(name)

        logger.info(f"Deleted account manager '{name}'")
        return True
