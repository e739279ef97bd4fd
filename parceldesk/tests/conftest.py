from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterator

import pytest
from starlette.testclient import TestClient

from parceldesk.core.errors import PersistenceError
from parceldesk.core.repositories.document_persistence import DocumentPersistence
from parceldesk.infrastructure.config import Settings
from parceldesk.infrastructure.repositories.blob_store_impl import LocalBlobStore
from parceldesk.infrastructure.repositories.reservation_repository_impl import ReservationRepositoryImpl
from parceldesk.main import create_app
from parceldesk.services.parceldesk_service import ServiceContext

START = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


class SteppingClock:
    """Advances by `step` on every reading; `rewind` moves it backwards."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def now(self) -> datetime:
        value = self.current
        self.current += self.step
        return value

    def rewind(self, delta: timedelta) -> None:
        self.current -= delta


class SequenceIds:
    def __init__(self) -> None:
        self._n = 0
        self.queued_ids: list[str] = []

    def reservation_id(self) -> str:
        if self.queued_ids:
            return self.queued_ids.pop(0)
        self._n += 1
        return f"R{self._n:06d}"

    def tracking_number(self) -> str:
        self._n += 1
        return f"T-{self._n:06d}"


class InMemoryPersistence(DocumentPersistence):
    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self.document = copy.deepcopy(document)
        self.writes = 0
        self.fail_writes = False
        self.fail_reads = False

    def read(self) -> dict[str, Any] | None:
        if self.fail_reads:
            raise PersistenceError("disk on fire")
        return copy.deepcopy(self.document)

    def write(self, document: dict[str, Any]) -> None:
        if self.fail_writes:
            raise PersistenceError("disk full")
        self.document = copy.deepcopy(document)
        self.writes += 1


@pytest.fixture()
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture()
def ids() -> SequenceIds:
    return SequenceIds()


@pytest.fixture()
def persistence() -> InMemoryPersistence:
    return InMemoryPersistence()


@pytest.fixture()
def store(persistence: InMemoryPersistence) -> ReservationRepositoryImpl:
    repo = ReservationRepositoryImpl(persistence)
    repo.load()
    return repo


@pytest.fixture()
def ctx(store: ReservationRepositoryImpl, clock: SteppingClock, ids: SequenceIds, tmp_path: Path) -> ServiceContext:
    return ServiceContext(
        reservation_repo=store,
        clock=clock,
        ids=ids,
        blob_store=LocalBlobStore(directory=tmp_path / "uploads"),
    )


@pytest.fixture()
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        persistence_backend="json",
        session_secret="test-secret",
        front_desk_pass="fd-pass",
        store_pass="st-pass",
        driver_pass="dr-pass",
        base_url="http://parcels.test",
        log_level="WARNING",
    )


@pytest.fixture()
def client(test_settings: Settings) -> Iterator[TestClient]:
    app = create_app(test_settings)
    with TestClient(app) as c:
        yield c
