from __future__ import annotations

from parceldesk.core.entities.lifecycle import Action
from parceldesk.core.entities.reservation import Reservation
from parceldesk.core.use_cases.lifecycle import LifecycleUseCase


class MoveToLoadingUseCase(LifecycleUseCase):
    action = Action.MOVE_TO_LOADING

    def execute(self, *, key: str, actor: str) -> Reservation:
        reservation = self._locate(key)
        return self._transition(reservation, actor=actor, note="Moved to loading bay")


class MarkReadyUseCase(LifecycleUseCase):
    action = Action.MARK_READY

    def execute(self, *, key: str, actor: str) -> Reservation:
        reservation = self._locate(key)
        return self._transition(reservation, actor=actor, note="Marked ready for delivery")
