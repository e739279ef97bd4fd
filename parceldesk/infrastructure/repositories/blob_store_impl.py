from __future__ import annotations

import shutil
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

from parceldesk.core.errors import PersistenceError
from parceldesk.core.repositories.blob_store import BlobStore


class LocalBlobStore(BlobStore):
    """Flat directory of uploads, addressed by generated file names under `url_prefix`."""

    def __init__(self, *, directory: str | Path, url_prefix: str = "/uploads") -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)
        self._url_prefix = url_prefix.rstrip("/")

    def save(self, filename: str | None, stream: BinaryIO) -> str:
        suffix = Path(filename).suffix if filename else ""
        name = f"{uuid4().hex}{suffix}"
        try:
            with (self._directory / name).open("wb") as f:
                shutil.copyfileobj(stream, f)
        except OSError as e:
            raise PersistenceError(f"Cannot store upload: {e}") from e
        return f"{self._url_prefix}/{name}"
