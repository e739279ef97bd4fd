from __future__ import annotations

from parceldesk.core.entities.lifecycle import Action
from parceldesk.core.entities.reservation import Reservation
from parceldesk.core.errors import ConflictError
from parceldesk.core.repositories.reservation_repository import ReservationRepository
from parceldesk.core.use_cases.lifecycle import Clock, IdGenerator, LifecycleUseCase


class AssignTrackingUseCase(LifecycleUseCase):
    """
    Front-desk check-in: label the package with a tracking number and record where it is stored.

    The tracking number is assigned once; repeated calls keep it and never move the status
    back from checked_in. A repeat that changes nothing appends no event.
    """

    action = Action.ASSIGN_TRACKING

    def __init__(self, *, reservation_repo: ReservationRepository, clock: Clock, ids: IdGenerator) -> None:
        super().__init__(reservation_repo=reservation_repo, clock=clock)
        self._ids = ids

    def execute(
        self,
        *,
        key: str,
        actor: str,
        tracking_number: str | None = None,
        storage_location: str | None = None,
        front_desk_tags: list[str] | None = None,
    ) -> Reservation:
        reservation = self._locate(key)

        if reservation.tracking_number is not None:
            number = reservation.tracking_number
        elif tracking_number:
            number = tracking_number
        else:
            number = self._unused_tracking_number()

        if tracking_number and tracking_number != number:
            raise ConflictError(
                f"Reservation {reservation.id} already has tracking number {reservation.tracking_number}"
            )

        owner = self._reservation_repo.find_by_id(number)
        if owner is not None and owner.id != reservation.id:
            raise ConflictError(f"Tracking number {number} is already in use")

        before = (reservation.tracking_number, reservation.storage_location, list(reservation.front_desk_tags))

        try:
            reservation.assign_tracking_number(number)
        except ValueError as e:
            raise ConflictError(str(e)) from e

        if storage_location:
            reservation.storage_location = storage_location
        if front_desk_tags is not None:
            reservation.set_tags(front_desk_tags)

        after = (reservation.tracking_number, reservation.storage_location, reservation.front_desk_tags)
        status = self._resolve(reservation)
        if after == before and status is reservation.status:
            # repeating an identical check-in changes nothing and is not recorded again
            return reservation

        return self._commit(reservation, status, actor=actor, note=f"Assigned tracking {number}")

    def _unused_tracking_number(self) -> str:
        while True:
            candidate = self._ids.tracking_number()
            if self._reservation_repo.find_by_id(candidate) is None:
                return candidate
