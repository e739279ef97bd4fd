from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Union

from pydantic import BaseModel


class Status(Enum):
    reserved = 'reserved'
    checked_in = 'checked_in'
    ready = 'ready'
    out_for_delivery = 'out_for_delivery'
    delivered = 'delivered'


class ProofType(Enum):
    photo = 'photo'
    text = 'text'


class ReservationCreate(BaseModel):
    customerName: str | None = None
    customerContact: str | None = None
    itemDescription: str | None = None
    weightEstimate: str | None = None
    desiredWindow: str | None = None


class ReservationCreated(BaseModel):
    id: str
    qrUrl: str


class AssignTracking(BaseModel):
    trackingNumber: str | None = None
    storageLocation: str | None = None
    frontDeskTags: Union[List[str], str, None] = None


class ReservationEdit(BaseModel):
    itemDescription: str | None = None
    customerName: str | None = None
    customerContact: str | None = None
    weightEstimate: str | None = None
    storageLocation: str | None = None
    frontDeskTags: Union[List[str], str, None] = None


class Proof(BaseModel):
    type: ProofType
    value: str


class Event(BaseModel):
    eventType: str
    actor: str
    timestamp: datetime
    note: str


class Reservation(BaseModel):
    id: str
    trackingNumber: str | None
    customerName: str | None
    customerContact: str | None
    itemDescription: str
    weightEstimate: str | None
    desiredWindow: str | None
    status: Status
    storageLocation: str | None
    frontDeskTags: List[str]
    driverId: str | None
    proof: Proof | None
    createdAt: datetime
    updatedAt: datetime
    events: List[Event]


class TrackView(BaseModel):
    reservation: Reservation
    trackUrl: str


class Label(BaseModel):
    id: str
    trackingNumber: str
    storageLocation: str | None
    itemDescription: str
    customerName: str | None


class RoleHome(BaseModel):
    role: str
    user: str


class StoreDashboard(RoleHome):
    reservations: List[Reservation]


class LoginPrompt(BaseModel):
    role: str
    message: str | None = None
