"""
MessageLedgerEntry model: every customer or operator message attributable to a
customer.

Append-only; read back for the operator history view.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from app.db import Base

SENDER_CUSTOMER = "customer"
SENDER_OPERATOR = "operator"


class MessageLedgerEntry(Base):
    __tablename__ = "message_ledger"

    __table_args__ = (
        Index("ix_message_ledger_customer_created", "customer_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    sender_role = Column(String(16), nullable=False)  # 'customer' | 'operator'
    text = Column(Text, nullable=True)
    media_kind = Column(String(32), nullable=True)
    media_ref = Column(Text, nullable=True)
    translated_text = Column(Text, nullable=True)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
