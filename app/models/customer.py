"""Customer model: one durable identity per (external user, page)."""

from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin


class Customer(Base, TimestampMixin):
    """
    A person writing to one of the configured pages.

    The (external_user_id, page_id) pair is unique; the store's constraint is
    what settles concurrent first-contact inserts.
    """

    __tablename__ = "customers"

    __table_args__ = (
        UniqueConstraint(
            "external_user_id", "page_id", name="uq_customers_external_user_page"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_user_id = Column(String(255), nullable=False)
    page_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    avatar = Column(Text, nullable=True)

    labels = relationship(
        "Label",
        secondary="customer_labels",
        lazy="selectin",
        order_by="Label.name",
    )

    @property
    def short_id(self) -> str:
        """Trailing six characters of the external id, as shown to operators."""
        return (self.external_user_id or "")[-6:]
