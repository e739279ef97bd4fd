from __future__ import annotations

from datetime import datetime
from typing import Protocol

from loguru import logger

from parceldesk.core.entities.lifecycle import EVENT_TYPES, Action, TransitionRejected, next_status
from parceldesk.core.entities.reservation import Reservation, ReservationStatus
from parceldesk.core.errors import ConflictError, NotFoundError
from parceldesk.core.repositories.reservation_repository import ReservationRepository


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class IdGenerator(Protocol):
    """
    Produces short opaque identifiers. Uniqueness against existing reservations is checked by the caller.
    """

    def reservation_id(self) -> str:
        raise NotImplementedError

    def tracking_number(self) -> str:
        raise NotImplementedError


class LifecycleUseCase:
    """
    Shared template for reservation transitions:
    locate -> apply field changes -> resolve next status -> append one event -> persist.
    """

    action: Action

    def __init__(self, *, reservation_repo: ReservationRepository, clock: Clock) -> None:
        self._reservation_repo = reservation_repo
        self._clock = clock

    def _locate(self, key: str) -> Reservation:
        reservation = self._reservation_repo.find_by_id(key)
        if reservation is None:
            raise NotFoundError(f"Reservation {key!r} not found")
        return reservation

    def _resolve(self, reservation: Reservation) -> ReservationStatus:
        """Look up the next status in the transition table; ConflictError when the action is rejected."""
        try:
            return next_status(reservation.status, self.action, held=reservation.driver_id is not None)
        except TransitionRejected as e:
            raise ConflictError(str(e)) from e

    def _transition(self, reservation: Reservation, *, actor: str, note: str) -> Reservation:
        return self._commit(reservation, self._resolve(reservation), actor=actor, note=note)

    def _commit(self, reservation: Reservation, status: ReservationStatus, *, actor: str, note: str) -> Reservation:
        previous = reservation.status
        reservation.status = status
        reservation.record_event(
            event_type=EVENT_TYPES[self.action],
            actor=actor,
            at=self._clock.now(),
            note=note,
        )
        self._reservation_repo.upsert(reservation)

        logger.info(
            "{} {}: {} -> {} by {}",
            self.action.value,
            reservation.id,
            previous.value,
            status.value,
            actor,
        )
        return reservation
