"""Service for canned quick replies."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.constants.catalog import DEFAULT_QUICK_REPLIES
from app.exceptions import NotFoundError, StorageError
from app.models.quick_reply import QuickReply
from app.schemas.quick_reply import QuickReplyCreate, QuickReplyUpdate


class QuickReplyService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_quick_reply(self, quick_reply_id: int) -> Optional[QuickReply]:
        """Fetch a quick reply by ID."""
        try:
            return (
                self.db.query(QuickReply)
                .filter(QuickReply.id == quick_reply_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"quick reply lookup failed: {e}") from e

    def require_quick_reply(self, quick_reply_id: int) -> QuickReply:
        quick_reply = self.get_quick_reply(quick_reply_id)
        if quick_reply is None:
            raise NotFoundError(f"quick reply {quick_reply_id} not found")
        return quick_reply

    def get_quick_replies(self) -> List[QuickReply]:
        try:
            return self.get_quick_replies_query().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"quick reply listing failed: {e}") from e

    def get_quick_replies_query(self) -> Query[QuickReply]:
        """Get a query for quick replies (for pagination)."""
        return self.db.query(QuickReply).order_by(QuickReply.id.asc())

    def create_quick_reply(self, data: QuickReplyCreate) -> QuickReply:
        quick_reply = QuickReply(**data.model_dump())
        self.db.add(quick_reply)
        self.db.commit()
        self.db.refresh(quick_reply)
        return quick_reply

    def update_quick_reply(
        self, quick_reply_id: int, data: QuickReplyUpdate
    ) -> Optional[QuickReply]:
        quick_reply = self.get_quick_reply(quick_reply_id)
        if quick_reply is None:
            return None
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(quick_reply, key, value)
        self.db.commit()
        self.db.refresh(quick_reply)
        return quick_reply

    def delete_quick_reply(self, quick_reply_id: int) -> bool:
        quick_reply = self.get_quick_reply(quick_reply_id)
        if quick_reply is None:
            return False
        self.db.delete(quick_reply)
        self.db.commit()
        return True

    def seed_defaults(self) -> int:
        """Insert the default quick replies that are missing; returns how many were added."""
        existing = {key for (key,) in self.db.query(QuickReply.key).all()}
        added = 0
        for item in DEFAULT_QUICK_REPLIES:
            if item["key"] in existing:
                continue
            self.db.add(QuickReply(**item))
            added += 1
        if added:
            self.db.commit()
        return added
