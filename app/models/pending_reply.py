"""PendingReply model: a translated operator reply waiting for confirmation."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.db import Base

PENDING_STATUS = "pending"
SENDING_STATUS = "sending"


class PendingReply(Base):
    """Claimed as sending while a confirm is in flight; deleted once sent or cancelled."""

    __tablename__ = "pending_replies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    confirm_token = Column(String(128), unique=True, nullable=False, index=True)
    page_id = Column(String(255), nullable=False)
    external_user_id = Column(String(255), nullable=False)
    customer_id = Column(Integer, nullable=True)
    original_text = Column(Text, nullable=False)
    translated_text = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=PENDING_STATUS)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
