from __future__ import annotations

from enum import Enum

from parceldesk.core.entities.reservation import ReservationStatus


class Action(str, Enum):
    CREATE = "create"
    ASSIGN_TRACKING = "assign_tracking"
    EDIT = "edit"
    MOVE_TO_LOADING = "move_to_loading"
    MARK_READY = "mark_ready"
    CLAIM = "claim"
    DELIVER = "deliver"


class TransitionRejected(ValueError):
    def __init__(self, current: ReservationStatus, action: Action) -> None:
        super().__init__(f"Cannot {action.value} a reservation in status {current.value}")
        self.current = current
        self.action = action


EVENT_TYPES: dict[Action, str] = {
    Action.CREATE: "reserved",
    Action.ASSIGN_TRACKING: "checked_in",
    Action.EDIT: "edited",
    Action.MOVE_TO_LOADING: "moved_to_loading",
    Action.MARK_READY: "marked_ready",
    Action.CLAIM: "claimed",
    Action.DELIVER: "delivered",
}

_S = ReservationStatus

# (current status, action) -> next status. Actions missing a row for a status
# leave the status unchanged. Rejections live in _HELD_REJECTIONS.
_TRANSITIONS: dict[Action, dict[ReservationStatus, ReservationStatus]] = {
    Action.ASSIGN_TRACKING: {_S.RESERVED: _S.CHECKED_IN},
    Action.EDIT: {},
    Action.MOVE_TO_LOADING: {s: _S.READY for s in _S},
    Action.MARK_READY: {s: _S.READY for s in _S},
    Action.CLAIM: {s: _S.OUT_FOR_DELIVERY for s in _S},
    Action.DELIVER: {s: _S.DELIVERED for s in _S},
}

# Rejections that only apply once a driver holds the reservation.
_HELD_REJECTIONS: set[tuple[ReservationStatus, Action]] = {
    (_S.OUT_FOR_DELIVERY, Action.CLAIM),
}


def next_status(current: ReservationStatus, action: Action, *, held: bool = False) -> ReservationStatus:
    """
    Resolve the status an action moves a reservation to.

    `held` is True when a driver is already assigned. Raises TransitionRejected when the
    action is not allowed from `current`.
    """
    if action is Action.CREATE:
        return _S.RESERVED

    if held and (current, action) in _HELD_REJECTIONS:
        raise TransitionRejected(current, action)

    return _TRANSITIONS[action].get(current, current)
