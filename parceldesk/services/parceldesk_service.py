from __future__ import annotations

from dataclasses import dataclass

from parceldesk.core.entities.reservation import Reservation as CoreReservation
from parceldesk.core.entities.reservation import ReservationStatus as CoreStatus
from parceldesk.core.repositories.blob_store import BlobStore
from parceldesk.core.repositories.reservation_repository import ReservationRepository
from parceldesk.core.use_cases.assign_tracking import AssignTrackingUseCase
from parceldesk.core.use_cases.claim_reservation import ClaimReservationUseCase
from parceldesk.core.use_cases.create_reservation import CreateReservationUseCase, NewReservation
from parceldesk.core.use_cases.deliver_reservation import DeliverReservationUseCase, ProofUpload
from parceldesk.core.use_cases.edit_reservation import EditReservationUseCase
from parceldesk.core.use_cases.get_reservation import (
    GetLabelUseCase,
    GetReservationUseCase,
    ListReservationsUseCase,
)
from parceldesk.core.use_cases.lifecycle import Clock, IdGenerator
from parceldesk.core.use_cases.stage_reservation import MarkReadyUseCase, MoveToLoadingUseCase
from parceldesk.infrastructure.config import Settings
from parceldesk.infrastructure.database import Base, build_engine, build_sessionmaker
from parceldesk.infrastructure.providers import ShortIdGenerator, SystemClock
from parceldesk.infrastructure.repositories.blob_store_impl import LocalBlobStore
from parceldesk.infrastructure.repositories.json_document_persistence_impl import JsonDocumentPersistence
from parceldesk.infrastructure.repositories.reservation_repository_impl import ReservationRepositoryImpl
from parceldesk.infrastructure.repositories.sql_document_persistence_impl import SqlDocumentPersistence
from parceldesk.schemas.models import (
    AssignTracking,
    Event,
    Label,
    Proof,
    ProofType,
    Reservation,
    ReservationCreate,
    ReservationCreated,
    ReservationEdit,
    Status,
    TrackView,
)

# schema field name -> entity attribute, for the fields front desk may edit
_EDIT_FIELD_MAP: dict[str, str] = {
    "itemDescription": "item_description",
    "customerName": "customer_name",
    "customerContact": "customer_contact",
    "weightEstimate": "weight_estimate",
    "storageLocation": "storage_location",
    "frontDeskTags": "front_desk_tags",
}


@dataclass(slots=True)
class ServiceContext:
    """Collaborators shared by every request: the store plus its clock, id generator and blob store."""

    reservation_repo: ReservationRepository
    clock: Clock
    ids: IdGenerator
    blob_store: BlobStore


def build_context(settings: Settings) -> ServiceContext:
    """
    Wire the store to the configured persistence backend. The store is not loaded here.
    """
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    if settings.persistence_backend == "sql":
        engine = build_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        persistence = SqlDocumentPersistence(build_sessionmaker(engine))
    else:
        persistence = JsonDocumentPersistence(file_path=settings.db_file)

    return ServiceContext(
        reservation_repo=ReservationRepositoryImpl(persistence),
        clock=SystemClock(),
        ids=ShortIdGenerator(),
        blob_store=LocalBlobStore(directory=settings.uploads_dir),
    )


def _tags(value: list[str] | str | None) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [value] if value else []
    return list(value)


def _to_schema(reservation: CoreReservation) -> Reservation:
    proof = None
    if reservation.proof is not None:
        proof = Proof(type=ProofType(reservation.proof.kind.value), value=reservation.proof.value)

    return Reservation(
        id=reservation.id,
        trackingNumber=reservation.tracking_number,
        customerName=reservation.customer_name,
        customerContact=reservation.customer_contact,
        itemDescription=reservation.item_description,
        weightEstimate=reservation.weight_estimate,
        desiredWindow=reservation.desired_window,
        status=Status(reservation.status.value),
        storageLocation=reservation.storage_location,
        frontDeskTags=list(reservation.front_desk_tags),
        driverId=reservation.driver_id,
        proof=proof,
        createdAt=reservation.created_at,
        updatedAt=reservation.updated_at,
        events=[
            Event(eventType=e.event_type, actor=e.actor, timestamp=e.timestamp, note=e.note)
            for e in reservation.events
        ],
    )


def track_url(base_url: str, reservation_id: str) -> str:
    return f"{base_url.rstrip('/')}/track/{reservation_id}"


def create_reservation_service(body: ReservationCreate, ctx: ServiceContext, *, base_url: str) -> ReservationCreated:
    use_case = CreateReservationUseCase(reservation_repo=ctx.reservation_repo, clock=ctx.clock, ids=ctx.ids)

    reservation = use_case.execute(
        NewReservation(
            item_description=body.itemDescription,
            customer_name=body.customerName,
            customer_contact=body.customerContact,
            weight_estimate=body.weightEstimate,
            desired_window=body.desiredWindow,
        )
    )
    return ReservationCreated(id=reservation.id, qrUrl=track_url(base_url, reservation.id))


def get_reservation_service(key: str, ctx: ServiceContext) -> Reservation:
    use_case = GetReservationUseCase(reservation_repo=ctx.reservation_repo)
    return _to_schema(use_case.execute(key=key))


def track_reservation_service(key: str, ctx: ServiceContext, *, base_url: str) -> TrackView:
    use_case = GetReservationUseCase(reservation_repo=ctx.reservation_repo)
    reservation = use_case.execute(key=key)
    return TrackView(reservation=_to_schema(reservation), trackUrl=track_url(base_url, reservation.id))


def list_reservations_service(status: Status | None, ctx: ServiceContext) -> list[Reservation]:
    use_case = ListReservationsUseCase(reservation_repo=ctx.reservation_repo)
    core_status = CoreStatus(status.value) if status is not None else None
    return [_to_schema(r) for r in use_case.execute(status=core_status)]


def staged_reservations_service(ctx: ServiceContext) -> list[Reservation]:
    use_case = ListReservationsUseCase(reservation_repo=ctx.reservation_repo)
    return [_to_schema(r) for r in use_case.staged()]


def get_label_service(key: str, ctx: ServiceContext) -> Label:
    use_case = GetLabelUseCase(reservation_repo=ctx.reservation_repo)

    dto = use_case.execute(key=key)

    return Label(
        id=dto.id,
        trackingNumber=dto.tracking_number,
        storageLocation=dto.storage_location,
        itemDescription=dto.item_description,
        customerName=dto.customer_name,
    )


def assign_tracking_service(key: str, body: AssignTracking, ctx: ServiceContext, *, actor: str) -> Reservation:
    use_case = AssignTrackingUseCase(reservation_repo=ctx.reservation_repo, clock=ctx.clock, ids=ctx.ids)

    reservation = use_case.execute(
        key=key,
        actor=actor,
        tracking_number=body.trackingNumber,
        storage_location=body.storageLocation,
        front_desk_tags=_tags(body.frontDeskTags),
    )
    return _to_schema(reservation)


def edit_reservation_service(key: str, body: ReservationEdit, ctx: ServiceContext, *, actor: str) -> Reservation:
    """
    Only fields present in the request body are applied; explicit nulls clear a field.
    """
    use_case = EditReservationUseCase(reservation_repo=ctx.reservation_repo, clock=ctx.clock)

    supplied = body.model_dump(exclude_unset=True)
    changes = {_EDIT_FIELD_MAP[name]: value for name, value in supplied.items() if name in _EDIT_FIELD_MAP}
    if "front_desk_tags" in changes:
        changes["front_desk_tags"] = _tags(changes["front_desk_tags"])

    return _to_schema(use_case.execute(key=key, actor=actor, changes=changes))


def move_to_loading_service(key: str, ctx: ServiceContext, *, actor: str) -> Reservation:
    use_case = MoveToLoadingUseCase(reservation_repo=ctx.reservation_repo, clock=ctx.clock)
    return _to_schema(use_case.execute(key=key, actor=actor))


def mark_ready_service(key: str, ctx: ServiceContext, *, actor: str) -> Reservation:
    use_case = MarkReadyUseCase(reservation_repo=ctx.reservation_repo, clock=ctx.clock)
    return _to_schema(use_case.execute(key=key, actor=actor))


def claim_reservation_service(key: str, ctx: ServiceContext, *, actor: str, driver_id: str) -> Reservation:
    use_case = ClaimReservationUseCase(reservation_repo=ctx.reservation_repo, clock=ctx.clock)
    return _to_schema(use_case.execute(key=key, actor=actor, driver_id=driver_id))


def deliver_reservation_service(
    key: str,
    ctx: ServiceContext,
    *,
    actor: str,
    upload: ProofUpload | None = None,
    proof_type: str | None = None,
    proof_value: str | None = None,
) -> Reservation:
    use_case = DeliverReservationUseCase(
        reservation_repo=ctx.reservation_repo,
        clock=ctx.clock,
        blob_store=ctx.blob_store,
    )

    reservation = use_case.execute(
        key=key,
        actor=actor,
        upload=upload,
        proof_type=proof_type,
        proof_value=proof_value,
    )
    return _to_schema(reservation)
