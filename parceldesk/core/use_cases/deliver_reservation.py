from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from parceldesk.core.entities.lifecycle import Action
from parceldesk.core.entities.reservation import Proof, ProofKind, Reservation
from parceldesk.core.repositories.blob_store import BlobStore
from parceldesk.core.repositories.reservation_repository import ReservationRepository
from parceldesk.core.use_cases.lifecycle import Clock, LifecycleUseCase


@dataclass(frozen=True, slots=True)
class ProofUpload:
    filename: str | None
    stream: BinaryIO


class DeliverReservationUseCase(LifecycleUseCase):
    """
    Record delivery with optional proof.

    An uploaded photo wins over text; text proof is only taken when `proof_type == "text"`.
    Without either, any earlier proof is left as it is.
    """

    action = Action.DELIVER

    def __init__(self, *, reservation_repo: ReservationRepository, clock: Clock, blob_store: BlobStore) -> None:
        super().__init__(reservation_repo=reservation_repo, clock=clock)
        self._blob_store = blob_store

    def execute(
        self,
        *,
        key: str,
        actor: str,
        upload: ProofUpload | None = None,
        proof_type: str | None = None,
        proof_value: str | None = None,
    ) -> Reservation:
        reservation = self._locate(key)

        if upload is not None:
            reference = self._blob_store.save(upload.filename, upload.stream)
            reservation.proof = Proof(kind=ProofKind.PHOTO, value=reference)
        elif proof_type == ProofKind.TEXT.value and proof_value:
            reservation.proof = Proof(kind=ProofKind.TEXT, value=proof_value)

        return self._transition(reservation, actor=actor, note="Delivered")
