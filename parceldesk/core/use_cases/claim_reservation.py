from __future__ import annotations

from parceldesk.core.entities.lifecycle import Action
from parceldesk.core.entities.reservation import Reservation
from parceldesk.core.use_cases.lifecycle import LifecycleUseCase


class ClaimReservationUseCase(LifecycleUseCase):
    """
    A driver takes a reservation out for delivery.

    Raises ConflictError (and records nothing) when the reservation is already out with a driver.
    """

    action = Action.CLAIM

    def execute(self, *, key: str, actor: str, driver_id: str) -> Reservation:
        reservation = self._locate(key)

        # resolve against the current holder, before driver_id is overwritten
        status = self._resolve(reservation)

        reservation.driver_id = driver_id
        return self._commit(reservation, status, actor=actor, note=f"Claimed by {driver_id}")
