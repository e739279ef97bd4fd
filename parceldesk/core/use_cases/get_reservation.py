from __future__ import annotations

from dataclasses import dataclass

from parceldesk.core.entities.reservation import Reservation, ReservationStatus
from parceldesk.core.errors import NotFoundError
from parceldesk.core.repositories.reservation_repository import ReservationRepository

# Statuses shown on the store staff dashboard
STAGING_STATUSES: tuple[ReservationStatus, ...] = (ReservationStatus.CHECKED_IN, ReservationStatus.READY)


@dataclass(frozen=True, slots=True)
class LabelDTO:
    """
    Use-case return type for GET /api/reservations/{key}/label
    """
    id: str
    tracking_number: str
    storage_location: str | None
    item_description: str
    customer_name: str | None


class GetReservationUseCase:
    def __init__(self, *, reservation_repo: ReservationRepository) -> None:
        self._reservation_repo = reservation_repo

    def execute(self, *, key: str) -> Reservation:
        reservation = self._reservation_repo.find_by_id(key)
        if reservation is None:
            raise NotFoundError("Not found")
        return reservation


class GetLabelUseCase:
    def __init__(self, *, reservation_repo: ReservationRepository) -> None:
        self._reservation_repo = reservation_repo

    def execute(self, *, key: str) -> LabelDTO:
        reservation = self._reservation_repo.find_by_id(key)
        if reservation is None or reservation.tracking_number is None:
            raise NotFoundError("Reservation or tracking number not found")

        return LabelDTO(
            id=reservation.id,
            tracking_number=reservation.tracking_number,
            storage_location=reservation.storage_location,
            item_description=reservation.item_description,
            customer_name=reservation.customer_name,
        )


class ListReservationsUseCase:
    def __init__(self, *, reservation_repo: ReservationRepository) -> None:
        self._reservation_repo = reservation_repo

    def execute(self, *, status: ReservationStatus | None = None) -> list[Reservation]:
        return self._reservation_repo.list_by_status(status)

    def staged(self) -> list[Reservation]:
        return self._reservation_repo.list_by_statuses(STAGING_STATUSES)
