from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ReservationStatus(str, Enum):
    RESERVED = "reserved"
    CHECKED_IN = "checked_in"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"

    @classmethod
    def parse(cls, value: str) -> ReservationStatus:
        # "stored" was never set by any transition and is read as "ready"
        if value == "stored":
            return cls.READY
        return cls(value)


class ProofKind(str, Enum):
    PHOTO = "photo"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class Proof:
    kind: ProofKind
    value: str


@dataclass(frozen=True, slots=True)
class ReservationEvent:
    event_type: str
    actor: str
    timestamp: datetime
    note: str


@dataclass(slots=True)
class Reservation:
    id: str
    item_description: str
    created_at: datetime
    updated_at: datetime
    status: ReservationStatus = ReservationStatus.RESERVED
    tracking_number: str | None = None
    customer_name: str | None = None
    customer_contact: str | None = None
    weight_estimate: str | None = None
    desired_window: str | None = None
    storage_location: str | None = None
    front_desk_tags: list[str] = field(default_factory=list)
    driver_id: str | None = None
    proof: Proof | None = None
    events: list[ReservationEvent] = field(default_factory=list)

    def matches(self, key: str) -> bool:
        return self.id == key or (self.tracking_number is not None and self.tracking_number == key)

    def assign_tracking_number(self, tracking_number: str) -> None:
        if self.tracking_number is not None and self.tracking_number != tracking_number:
            raise ValueError(
                f"Reservation {self.id} already has tracking number {self.tracking_number}"
            )
        self.tracking_number = tracking_number

    def set_tags(self, tags: list[str]) -> None:
        """Replace the front-desk tags, dropping duplicates but keeping first-seen order."""
        self.front_desk_tags = list(dict.fromkeys(tags))

    def record_event(self, *, event_type: str, actor: str, at: datetime, note: str) -> ReservationEvent:
        """
        Append an audit event and refresh `updated_at`.

        `updated_at` never moves backwards, even when the supplied time is older than the last mutation.
        """
        timestamp = max(at, self.updated_at)
        event = ReservationEvent(event_type=event_type, actor=actor, timestamp=timestamp, note=note)
        self.events.append(event)
        self.updated_at = timestamp
        return event
