from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from parceldesk.core.errors import PersistenceError
from parceldesk.core.repositories.document_persistence import DocumentPersistence
from parceldesk.infrastructure.models.models import ReservationRecordModel


class SqlDocumentPersistence(DocumentPersistence):
    """
    SQLAlchemy implementation of the document port.

    The document is still rewritten as a whole, but inside one transaction.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def read(self) -> dict[str, Any] | None:
        try:
            with self._session_factory() as db:
                rows = db.scalars(select(ReservationRecordModel).order_by(ReservationRecordModel.position)).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot read reservations table: {e}") from e

        if not rows:
            return None
        return {"reservations": [row.record for row in rows]}

    def write(self, document: dict[str, Any]) -> None:
        db: Session = self._session_factory()
        try:
            db.execute(delete(ReservationRecordModel))
            for position, record in enumerate(document.get("reservations", [])):
                db.add(
                    ReservationRecordModel(
                        reservation_id=record["id"],
                        position=position,
                        record=record,
                    )
                )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"Cannot write reservations table: {e}") from e
        finally:
            db.close()
