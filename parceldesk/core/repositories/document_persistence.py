from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class DocumentPersistence(ABC):
    """
    Persistence port for the reservation document: `{"reservations": [...]}`.
    """

    @abstractmethod
    def read(self) -> dict[str, Any] | None:
        """
        Return the stored document, or None if nothing has been written yet.

        Raises PersistenceError when the document exists but cannot be read or parsed.
        """
        raise NotImplementedError

    @abstractmethod
    def write(self, document: dict[str, Any]) -> None:
        """Replace the stored document as a whole. Raises PersistenceError on failure."""
        raise NotImplementedError
