"""Rate-limit bookkeeping from GitHub response headers.

GitHub reports the current quota window on every response through three
headers. The tracker keeps only the most recent complete set; it is an
advisory hint for the user, never a gate in front of requests.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Mapping, Optional
import httpx
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from loguru import logger

LIMIT_HEADER = "x-ratelimit-limit"
REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"

LOW_QUOTA_RATIO = 0.2


class QuotaSnapshot(BaseModel):
    """Most recently observed API consumption window."""

    model_config = ConfigDict(frozen=True)

    limit: int
    remaining: int
    reset: int

    @field_validator("remaining")
    @classmethod
    def _cap_remaining(cls, v: int, info: ValidationInfo) -> int:
        limit = info.data.get("limit")
        return min(v, limit) if limit is not None else v

    @property
    def reset_at(self) -> datetime:
        return datetime.fromtimestamp(self.reset, tz=timezone.utc)

    def is_low(self, threshold: float = LOW_QUOTA_RATIO) -> bool:
        """True when less than `threshold` of the limit is left."""
        if self.limit <= 0:
            return True
        return self.remaining / self.limit < threshold


def reset_from_headers(headers: Mapping[str, str]) -> Optional[datetime]:
    """Return the reset time advertised in `headers`, if it parses."""
    raw = httpx.Headers(headers).get(RESET_HEADER)
    try:
        return datetime.fromtimestamp(int(raw), tz=timezone.utc) if raw else None
    except (TypeError, ValueError, OverflowError, OSError):
        return None


class QuotaTracker:
    """Keeps the latest `QuotaSnapshot` seen on any response.

    Concurrent requests may observe in any order; the last call wins.
    """

    def __init__(self) -> None:
        self._snapshot: Optional[QuotaSnapshot] = None

    def observe(self, headers: Mapping[str, str]) -> None:
        """Replace the snapshot if all three quota headers are present."""
        h = httpx.Headers(headers)
        raw = (h.get(LIMIT_HEADER), h.get(REMAINING_HEADER), h.get(RESET_HEADER))
        if any(v is None for v in raw):
            return
        try:
            limit, remaining, reset = (int(v) for v in raw)
        except ValueError:
            logger.debug("ignoring non-numeric rate-limit headers: {}", raw)
            return
        self._snapshot = QuotaSnapshot(limit=limit, remaining=remaining, reset=reset)

    def current(self) -> Optional[QuotaSnapshot]:
        return self._snapshot
