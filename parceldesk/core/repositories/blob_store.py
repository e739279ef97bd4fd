from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO


class BlobStore(ABC):
    @abstractmethod
    def save(self, filename: str | None, stream: BinaryIO) -> str:
        """Store an uploaded file and return a retrievable reference (path or URL)."""
        raise NotImplementedError
