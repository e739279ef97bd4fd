from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from parceldesk.core.entities.reservation import Reservation, ReservationStatus


class ReservationRepository(ABC):
    """
    Repository interface for the reservation collection.

    Implementations own the in-memory collection and persist the whole of it on every upsert.
    """

    @abstractmethod
    def load(self) -> int:
        """(Re)load the collection from persistence; never raises. Returns the number of reservations."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, key: str) -> Reservation | None:
        """Return the reservation whose id or tracking number equals `key`, or None if missing."""
        raise NotImplementedError

    @abstractmethod
    def upsert(self, reservation: Reservation) -> None:
        """Insert or replace a reservation, then persist the entire collection."""
        raise NotImplementedError

    @abstractmethod
    def list_by_status(self, status: ReservationStatus | None = None) -> list[Reservation]:
        raise NotImplementedError

    @abstractmethod
    def list_by_statuses(self, statuses: Iterable[ReservationStatus]) -> list[Reservation]:
        raise NotImplementedError
