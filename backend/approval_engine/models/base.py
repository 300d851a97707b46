from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def now_utc() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


class TimestampMixin(BaseModel):
    """Mixin that adds created_at / updated_at timestamps."""

    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)
