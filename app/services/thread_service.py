"""
Thread correlation between customer conversations and the operator group.

An anchor is the operator-group message a customer's later messages are posted
under. It stays active for a fixed window from its creation (use does not
extend it). Every emitted operator message is mapped back to its customer so
replies can be routed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, StorageError
from app.models.conversation_thread import ConversationThread
from app.models.message_mapping import MessageMapping
from app.utils.clock import Clock, ensure_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_THREAD_WINDOW = timedelta(hours=48)


@dataclass(frozen=True)
class AnchorInfo:
    anchor_message_id: str
    created_at: datetime
    age: timedelta

    @property
    def age_hours(self) -> int:
        return int(self.age.total_seconds() // 3600)


def is_active(created_at: datetime, now: datetime, window: timedelta) -> bool:
    """Active strictly inside the window; an anchor exactly `window` old is expired."""
    return ensure_utc(now) - ensure_utc(created_at) < window


class ThreadService:
    def __init__(
        self,
        db: Session,
        window: timedelta = DEFAULT_THREAD_WINDOW,
        clock: Optional[Clock] = None,
    ) -> None:
        self.db = db
        self.window = window
        self._clock = clock or utc_now

    def _storage_error(self, action: str, e: Exception) -> StorageError:
        self.db.rollback()
        return StorageError(f"{action} failed: {e}")

    def find_active_anchor(
        self, customer_id: Optional[int], page_id: str, now: Optional[datetime] = None
    ) -> Optional[AnchorInfo]:
        """Most recent anchor for (customer, page) if still inside the window."""
        if customer_id is None:
            return None
        now = ensure_utc(now or self._clock())
        try:
            latest = (
                self.db.query(ConversationThread)
                .filter(
                    ConversationThread.customer_id == customer_id,
                    ConversationThread.page_id == page_id,
                )
                .order_by(
                    ConversationThread.created_at.desc(), ConversationThread.id.desc()
                )
                .first()
            )
        except SQLAlchemyError as e:
            raise self._storage_error("anchor lookup", e) from e
        if latest is None:
            return None
        created_at = ensure_utc(latest.created_at)
        if not is_active(created_at, now, self.window):
            return None
        return AnchorInfo(
            anchor_message_id=latest.anchor_message_id,
            created_at=created_at,
            age=now - created_at,
        )

    def record_anchor(
        self, customer_id: int, page_id: str, anchor_message_id: str
    ) -> ConversationThread:
        thread = ConversationThread(
            customer_id=customer_id,
            page_id=page_id,
            anchor_message_id=str(anchor_message_id),
            created_at=self._clock(),
        )
        try:
            self.db.add(thread)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._storage_error("anchor insert", e) from e
        self.db.refresh(thread)
        return thread

    def record_mapping(
        self,
        operator_message_id: str,
        page_id: str,
        external_user_id: str,
        customer_id: Optional[int],
        language: Optional[str],
    ) -> MessageMapping:
        """Insert or overwrite the mapping for an operator message id."""
        key = str(operator_message_id)
        try:
            mapping = self.db.get(MessageMapping, key)
            if mapping is None:
                mapping = MessageMapping(operator_message_id=key)
                self.db.add(mapping)
            mapping.page_id = page_id
            mapping.external_user_id = external_user_id
            mapping.customer_id = customer_id
            mapping.detected_language = language
            mapping.created_at = self._clock()
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._storage_error("mapping upsert", e) from e
        self.db.refresh(mapping)
        return mapping

    def get_mapping(self, operator_message_id: str) -> MessageMapping:
        try:
            mapping = self.db.get(MessageMapping, str(operator_message_id))
        except SQLAlchemyError as e:
            raise self._storage_error("mapping lookup", e) from e
        if mapping is None:
            raise NotFoundError(f"no mapping for operator message {operator_message_id}")
        return mapping
