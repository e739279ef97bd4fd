from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ShortIdGenerator:
    """Short uppercase ids: `R1A2B3C` for reservations, `T-1A2B3C` for tracking numbers."""

    def __init__(self, *, length: int = 6) -> None:
        self._length = length

    def _token(self) -> str:
        return uuid4().hex[: self._length].upper()

    def reservation_id(self) -> str:
        return f"R{self._token()}"

    def tracking_number(self) -> str:
        return f"T-{self._token()}"
