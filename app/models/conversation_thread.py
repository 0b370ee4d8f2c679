"""
ConversationThread model: the operator-channel message a customer's messages
are grouped under.

Rows are never updated; a newer row supersedes an older one once the older
one has left the freshness window.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from app.db import Base


class ConversationThread(Base):
    __tablename__ = "conversation_threads"

    __table_args__ = (
        Index(
            "ix_conversation_threads_customer_page_created",
            "customer_id",
            "page_id",
            "created_at",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    page_id = Column(String(255), nullable=False)
    anchor_message_id = Column(String(64), nullable=False)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
