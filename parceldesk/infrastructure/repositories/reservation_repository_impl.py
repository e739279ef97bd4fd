from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Iterable

from loguru import logger

from parceldesk.core.entities.reservation import (
    Proof,
    ProofKind,
    Reservation,
    ReservationEvent,
    ReservationStatus,
)
from parceldesk.core.errors import PersistenceError
from parceldesk.core.repositories.document_persistence import DocumentPersistence
from parceldesk.core.repositories.reservation_repository import ReservationRepository


class ReservationRepositoryImpl(ReservationRepository):
    """
    In-memory reservation collection persisted through a DocumentPersistence port.

    Responsibilities:
      - own the collection and its storage order
      - translate between core Reservation entities and camelCase document records
      - rewrite the whole document on every upsert

    Reads hand out copies, so a caller's changes only become visible through upsert.
    """

    def __init__(self, persistence: DocumentPersistence) -> None:
        self._persistence = persistence
        self._reservations: list[Reservation] = []

    def load(self) -> int:
        try:
            document = self._persistence.read()
        except PersistenceError as e:
            logger.warning("Reservation document unreadable, starting empty: {}", e)
            document = None

        reservations: list[Reservation] = []
        if document is not None:
            try:
                records = document["reservations"]
                reservations = [self._record_to_reservation(r) for r in records]
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Reservation document malformed, starting empty: {!r}", e)
                reservations = []

        self._reservations = reservations
        logger.info("Loaded {} reservation(s)", len(reservations))
        return len(reservations)

    def find_by_id(self, key: str) -> Reservation | None:
        for reservation in self._reservations:
            if reservation.matches(key):
                return copy.deepcopy(reservation)
        return None

    def upsert(self, reservation: Reservation) -> None:
        previous = list(self._reservations)
        stored = copy.deepcopy(reservation)

        for idx, existing in enumerate(self._reservations):
            if existing.id == reservation.id:
                self._reservations[idx] = stored
                break
        else:
            self._reservations.append(stored)

        try:
            self._persistence.write(self.to_document())
        except PersistenceError:
            self._reservations = previous
            logger.error("Failed to persist reservation {}", reservation.id)
            raise

    def list_by_status(self, status: ReservationStatus | None = None) -> list[Reservation]:
        return [
            copy.deepcopy(r) for r in self._reservations
            if status is None or r.status is status
        ]

    def list_by_statuses(self, statuses: Iterable[ReservationStatus]) -> list[Reservation]:
        wanted = set(statuses)
        return [copy.deepcopy(r) for r in self._reservations if r.status in wanted]

    def to_document(self) -> dict[str, Any]:
        return {"reservations": [self._reservation_to_record(r) for r in self._reservations]}

    @staticmethod
    def _reservation_to_record(reservation: Reservation) -> dict[str, Any]:
        """
        Normalize enums, datetimes and nested values for persistence
        """
        proof = None
        if reservation.proof is not None:
            proof = {"type": reservation.proof.kind.value, "value": reservation.proof.value}

        return {
            "id": reservation.id,
            "trackingNumber": reservation.tracking_number,
            "customerName": reservation.customer_name,
            "customerContact": reservation.customer_contact,
            "itemDescription": reservation.item_description,
            "weightEstimate": reservation.weight_estimate,
            "desiredWindow": reservation.desired_window,
            "status": reservation.status.value,
            "storageLocation": reservation.storage_location,
            "frontDeskTags": list(reservation.front_desk_tags),
            "driverId": reservation.driver_id,
            "proof": proof,
            "createdAt": reservation.created_at.isoformat(),
            "updatedAt": reservation.updated_at.isoformat(),
            "events": [
                {
                    "eventType": e.event_type,
                    "actor": e.actor,
                    "timestamp": e.timestamp.isoformat(),
                    "note": e.note,
                }
                for e in reservation.events
            ],
        }

    @staticmethod
    def _record_to_reservation(record: Any) -> Reservation:
        """Raises ValueError when the record is not shaped like a persisted reservation."""
        if not isinstance(record, dict):
            raise ValueError(f"reservation record must be an object, got {type(record).__name__}")

        proof_record = record.get("proof")
        proof = None
        if proof_record:
            if not isinstance(proof_record, dict):
                raise ValueError("proof must be an object")
            proof = Proof(kind=ProofKind(proof_record["type"]), value=proof_record["value"])

        events = record.get("events", [])
        if not isinstance(events, list) or not all(isinstance(e, dict) for e in events):
            raise ValueError("events must be a list of objects")

        return Reservation(
            id=record["id"],
            tracking_number=record.get("trackingNumber"),
            customer_name=record.get("customerName"),
            customer_contact=record.get("customerContact"),
            item_description=record["itemDescription"],
            weight_estimate=record.get("weightEstimate"),
            desired_window=record.get("desiredWindow"),
            status=ReservationStatus.parse(record["status"]),
            storage_location=record.get("storageLocation"),
            front_desk_tags=list(record.get("frontDeskTags") or []),
            driver_id=record.get("driverId"),
            proof=proof,
            created_at=_parse_timestamp(record["createdAt"]),
            updated_at=_parse_timestamp(record["updatedAt"]),
            events=[
                ReservationEvent(
                    event_type=e["eventType"],
                    actor=e["actor"],
                    timestamp=_parse_timestamp(e["timestamp"]),
                    note=e.get("note", ""),
                )
                for e in events
            ],
        )


def _parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; timestamps without an offset are taken as UTC."""
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be an ISO-8601 string, got {type(value).__name__}")
    # accept the "Z" UTC designator, which fromisoformat rejects before Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
