from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from parceldesk.core.entities.lifecycle import EVENT_TYPES, Action
from parceldesk.core.entities.reservation import Reservation, ReservationStatus
from parceldesk.core.errors import ValidationError
from parceldesk.core.repositories.reservation_repository import ReservationRepository
from parceldesk.core.use_cases.lifecycle import Clock, IdGenerator

CUSTOMER_ACTOR = "customer"


@dataclass(frozen=True, slots=True)
class NewReservation:
    item_description: str | None
    customer_name: str | None = None
    customer_contact: str | None = None
    weight_estimate: str | None = None
    desired_window: str | None = None


class CreateReservationUseCase:
    def __init__(self, *, reservation_repo: ReservationRepository, clock: Clock, ids: IdGenerator) -> None:
        self._reservation_repo = reservation_repo
        self._clock = clock
        self._ids = ids

    def execute(self, request: NewReservation) -> Reservation:
        if request.item_description is None or not request.item_description.strip():
            raise ValidationError("itemDescription required")

        now = self._clock.now()
        reservation = Reservation(
            id=self._unused_id(),
            item_description=request.item_description,
            customer_name=request.customer_name or None,
            customer_contact=request.customer_contact or None,
            weight_estimate=request.weight_estimate or None,
            desired_window=request.desired_window or None,
            status=ReservationStatus.RESERVED,
            created_at=now,
            updated_at=now,
        )
        reservation.record_event(
            event_type=EVENT_TYPES[Action.CREATE],
            actor=CUSTOMER_ACTOR,
            at=now,
            note="Reservation created",
        )
        self._reservation_repo.upsert(reservation)

        logger.info("create {}: reserved", reservation.id)
        return reservation

    def _unused_id(self) -> str:
        # ids are never reused, and must not collide with a tracking number either
        while True:
            candidate = self._ids.reservation_id()
            if self._reservation_repo.find_by_id(candidate) is None:
                return candidate
