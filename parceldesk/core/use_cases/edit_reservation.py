from __future__ import annotations

from typing import Any, Mapping

from parceldesk.core.entities.lifecycle import Action
from parceldesk.core.entities.reservation import Reservation
from parceldesk.core.errors import ValidationError
from parceldesk.core.use_cases.lifecycle import LifecycleUseCase

EDITABLE_FIELDS: tuple[str, ...] = (
    "item_description",
    "customer_name",
    "customer_contact",
    "weight_estimate",
    "storage_location",
    "front_desk_tags",
)


class EditReservationUseCase(LifecycleUseCase):
    """Overwrite allow-listed descriptive fields. Keys outside EDITABLE_FIELDS are ignored."""

    action = Action.EDIT

    def execute(self, *, key: str, actor: str, changes: Mapping[str, Any]) -> Reservation:
        reservation = self._locate(key)

        if "item_description" in changes:
            description = changes["item_description"]
            if description is None or not str(description).strip():
                raise ValidationError("itemDescription cannot be empty")

        for name in EDITABLE_FIELDS:
            if name not in changes:
                continue
            if name == "front_desk_tags":
                reservation.set_tags(changes[name] or [])
            else:
                setattr(reservation, name, changes[name])

        return self._transition(reservation, actor=actor, note="Edited details")
