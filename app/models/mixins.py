"""Column mixins shared by models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """created_at / updated_at maintained on insert and update."""

    created_at = Column(DateTime, nullable=False, default=_utcnow)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)
