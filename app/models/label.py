"""Label catalog and customer-label assignments."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.db import Base


class Label(Base):
    __tablename__ = "labels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    emoji = Column(String(10), nullable=True)
    color = Column(String(20), nullable=True)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )


class CustomerLabel(Base):
    __tablename__ = "customer_labels"

    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), primary_key=True
    )
    label_id = Column(
        Integer, ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True
    )
    added_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
