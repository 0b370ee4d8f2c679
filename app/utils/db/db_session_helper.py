"""Context manager for database work outside a request scope."""

from __future__ import annotations

import contextlib
from typing import Iterator

from sqlalchemy.orm import Session

from app.db import SessionLocal


@contextlib.contextmanager
def db_session() -> Iterator[Session]:
    """Yield a session and always close it; callers commit their own work."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
