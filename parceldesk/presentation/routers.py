from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from parceldesk.core.entities.lifecycle import Action
from parceldesk.core.entities.role import Role
from parceldesk.core.use_cases.deliver_reservation import ProofUpload
from parceldesk.infrastructure.config import Settings
from parceldesk.presentation.auth import Principal, require, require_role
from parceldesk.schemas.models import (
    AssignTracking,
    Label,
    Reservation,
    ReservationCreate,
    ReservationCreated,
    ReservationEdit,
    RoleHome,
    Status,
    StoreDashboard,
    TrackView,
)
from parceldesk.services.parceldesk_service import (
    ServiceContext,
    assign_tracking_service,
    claim_reservation_service,
    create_reservation_service,
    deliver_reservation_service,
    edit_reservation_service,
    get_label_service,
    get_reservation_service,
    list_reservations_service,
    mark_ready_service,
    move_to_loading_service,
    staged_reservations_service,
    track_reservation_service,
)

router = APIRouter()


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context


def get_base_url(request: Request) -> str:
    """Public base URL for tracking links; honours proxy headers when BASE_URL is not configured."""
    settings: Settings = request.app.state.settings
    if settings.base_url:
        return settings.base_url.rstrip("/")

    proto = request.headers.get("x-forwarded-proto") or request.url.scheme
    host = request.headers.get("x-forwarded-host") or request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"


@router.get("/")
def get_index() -> dict:
    return {"service": "parceldesk", "reserve": "/api/reservations", "track": "/track/{id}"}


@router.get("/health")
def get_health() -> dict:
    return {"ok": True}


@router.post("/api/reservations", response_model=ReservationCreated, status_code=201)
def post_reservations(
    body: ReservationCreate,
    ctx: ServiceContext = Depends(get_context),
    base_url: str = Depends(get_base_url),
) -> ReservationCreated:
    """
    Reserve a drop-off slot

    Returns:
      - 201 with the reservation id and its tracking URL
      - 400 if itemDescription is missing or blank
    """
    return create_reservation_service(body, ctx, base_url=base_url)


@router.get("/api/reservations", response_model=list[Reservation])
def get_reservations(status: Status | None = None, ctx: ServiceContext = Depends(get_context)) -> list[Reservation]:
    return list_reservations_service(status, ctx)


@router.get("/api/reservations/{key}", response_model=Reservation)
def get_reservations_key(key: str, ctx: ServiceContext = Depends(get_context)) -> Reservation:
    return get_reservation_service(key, ctx)


@router.get("/track/{key}", response_model=TrackView)
def get_track_key(
    key: str,
    ctx: ServiceContext = Depends(get_context),
    base_url: str = Depends(get_base_url),
) -> TrackView:
    return track_reservation_service(key, ctx, base_url=base_url)


# Front desk

@router.get("/desk", response_model=RoleHome)
def get_desk(principal: Principal = Depends(require_role(Role.FRONTDESK))) -> RoleHome:
    return RoleHome(role=principal.role.value, user=principal.user)


@router.post("/api/reservations/{key}/assign-tracking", response_model=Reservation)
def post_assign_tracking(
    key: str,
    body: AssignTracking,
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require(Action.ASSIGN_TRACKING)),
) -> Reservation:
    """
    Check a package in

    Returns:
      - 200 with the updated reservation
      - 404 if unknown
      - 409 if a different tracking number is already assigned or the number is taken
    """
    return assign_tracking_service(key, body, ctx, actor=principal.role.value)


@router.get("/api/reservations/{key}/label", response_model=Label)
def get_label(
    key: str,
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require_role(Role.FRONTDESK)),
) -> Label:
    return get_label_service(key, ctx)


@router.put("/api/reservations/{key}", response_model=Reservation)
def put_reservation(
    key: str,
    body: ReservationEdit,
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require(Action.EDIT)),
) -> Reservation:
    return edit_reservation_service(key, body, ctx, actor=principal.role.value)


# Store

@router.get("/store", response_model=StoreDashboard)
def get_store(
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require_role(Role.STORE)),
) -> StoreDashboard:
    return StoreDashboard(
        role=principal.role.value,
        user=principal.user,
        reservations=staged_reservations_service(ctx),
    )


@router.post("/api/reservations/{key}/move-to-loading", response_model=Reservation)
def post_move_to_loading(
    key: str,
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require(Action.MOVE_TO_LOADING)),
) -> Reservation:
    return move_to_loading_service(key, ctx, actor=principal.role.value)


@router.post("/api/reservations/{key}/mark-ready", response_model=Reservation)
def post_mark_ready(
    key: str,
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require(Action.MARK_READY)),
) -> Reservation:
    return mark_ready_service(key, ctx, actor=principal.role.value)


# Driver

@router.get("/driver", response_model=RoleHome)
def get_driver(principal: Principal = Depends(require_role(Role.DRIVER))) -> RoleHome:
    return RoleHome(role=principal.role.value, user=principal.user)


@router.post("/api/reservations/{key}/claim", response_model=Reservation)
def post_claim(
    key: str,
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require(Action.CLAIM)),
) -> Reservation:
    """
    Claim a reservation for delivery

    Returns:
      - 200 with the updated reservation
      - 404 if unknown
      - 409 if it is already out for delivery with a driver
    """
    return claim_reservation_service(key, ctx, actor=principal.role.value, driver_id=principal.user)


@router.post("/api/reservations/{key}/deliver", response_model=Reservation)
def post_deliver(
    key: str,
    proofPhoto: UploadFile | None = File(None),
    proofType: str | None = Form(None),
    proofValue: str | None = Form(None),
    ctx: ServiceContext = Depends(get_context),
    principal: Principal = Depends(require(Action.DELIVER)),
) -> Reservation:
    upload = None
    if proofPhoto is not None and proofPhoto.filename:
        upload = ProofUpload(filename=proofPhoto.filename, stream=proofPhoto.file)

    return deliver_reservation_service(
        key,
        ctx,
        actor=principal.role.value,
        upload=upload,
        proof_type=proofType,
        proof_value=proofValue,
    )
