from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from parceldesk.core.errors import PersistenceError
from parceldesk.core.repositories.document_persistence import DocumentPersistence


class JsonDocumentPersistence(DocumentPersistence):
    """
    Single JSON file holding the whole reservation document.

    Writes go to a temporary file in the same directory which then replaces the target,
    so a reader never sees a half-written document.
    """

    def __init__(self, *, file_path: str | Path) -> None:
        self._path = Path(file_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            with self._path.open(encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read {self._path}: {e}") from e

    def write(self, document: dict[str, Any]) -> None:
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Cannot write {self._path}: {e}") from e
