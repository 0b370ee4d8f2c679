"""MessageMapping model: operator-channel message id -> customer conversation."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.db import Base


class MessageMapping(Base):
    __tablename__ = "message_mappings"

    operator_message_id = Column(String(64), primary_key=True)
    page_id = Column(String(255), nullable=False)
    external_user_id = Column(String(255), nullable=False)
    # Null when the inbound path had to fall back to an unpersisted customer
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=True
    )
    detected_language = Column(String(10), nullable=True)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
