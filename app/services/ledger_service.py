"""
Service for the message ledger (customer and operator messages per customer).

Entries are immutable; only insert. Read back oldest-first for history views.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.constants.catalog import HISTORY_RANGE_HOURS, HistoryRange
from app.exceptions import StorageError
from app.models.message_ledger import MessageLedgerEntry
from app.utils.clock import Clock, utc_now


class LedgerService:
    """Append and read ledger entries. No update/delete."""

    def __init__(self, db: Session, clock: Optional[Clock] = None) -> None:
        self.db = db
        self._clock = clock or utc_now

    def build_entry(
        self,
        customer_id: int,
        sender_role: str,
        text: Optional[str] = None,
        media_kind: Optional[str] = None,
        media_ref: Optional[str] = None,
        translated_text: Optional[str] = None,
    ) -> MessageLedgerEntry:
        return MessageLedgerEntry(
            customer_id=customer_id,
            sender_role=sender_role,
            text=text or None,
            media_kind=media_kind,
            media_ref=media_ref,
            translated_text=translated_text,
            created_at=self._clock(),
        )

    def append(
        self,
        customer_id: int,
        sender_role: str,
        text: Optional[str] = None,
        media_kind: Optional[str] = None,
        media_ref: Optional[str] = None,
        translated_text: Optional[str] = None,
    ) -> MessageLedgerEntry:
        """Persist one entry."""
        entry = self.build_entry(
            customer_id, sender_role, text, media_kind, media_ref, translated_text
        )
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"ledger append failed: {e}") from e
        self.db.refresh(entry)
        return entry

    def history(
        self, customer_id: int, since: Optional[datetime] = None
    ) -> List[MessageLedgerEntry]:
        """Entries for a customer, oldest first, optionally only those at or after `since`."""
        q = self.db.query(MessageLedgerEntry).filter(
            MessageLedgerEntry.customer_id == customer_id
        )
        if since is not None:
            # stored naive in UTC
            q = q.filter(MessageLedgerEntry.created_at >= since.replace(tzinfo=None))
        try:
            return q.order_by(
                MessageLedgerEntry.created_at.asc(), MessageLedgerEntry.id.asc()
            ).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"ledger read failed: {e}") from e

    def history_for_range(
        self, customer_id: int, history_range: HistoryRange
    ) -> List[MessageLedgerEntry]:
        hours = HISTORY_RANGE_HOURS[history_range]
        since = None if hours is None else self._clock() - timedelta(hours=hours)
        return self.history(customer_id, since)
