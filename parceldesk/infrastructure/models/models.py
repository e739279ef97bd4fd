from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from parceldesk.infrastructure.database import Base


class ReservationRecordModel(Base):
    """One row per reservation; `record` holds the same camelCase document as db.json."""

    __tablename__ = "reservation_records"

    reservation_id: Mapped[str] = mapped_column(String, primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    record: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
