"""Service for the label catalog and customer label assignment."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.constants.catalog import DEFAULT_LABELS
from app.exceptions import NotFoundError, StorageError
from app.models.customer import Customer
from app.models.label import CustomerLabel, Label
from app.schemas.label import LabelCreate


def normalize_label_name(name: str) -> str:
    return (name or "").strip().lstrip("#").lower()


class LabelService:
    """Manages labels and which customers carry them."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_label(self, label_id: int) -> Optional[Label]:
        """Fetch a label by ID."""
        return self.db.query(Label).filter(Label.id == label_id).first()

    def get_label_by_name(self, name: str) -> Optional[Label]:
        return (
            self.db.query(Label)
            .filter(Label.name == normalize_label_name(name))
            .first()
        )

    def get_labels(self) -> List[Label]:
        return self.get_labels_query().all()

    def get_labels_query(self) -> Query[Label]:
        """Get a query for labels (for pagination)."""
        return self.db.query(Label).order_by(Label.name.asc())

    def create_label(self, data: LabelCreate) -> Label:
        label = Label(
            name=normalize_label_name(data.name), emoji=data.emoji, color=data.color
        )
        self.db.add(label)
        self.db.commit()
        self.db.refresh(label)
        return label

    def delete_label(self, label_id: int) -> bool:
        label = self.get_label(label_id)
        if label is None:
            return False
        self.db.delete(label)
        self.db.commit()
        return True

    def get_customer_labels(self, customer_id: Optional[int]) -> List[Label]:
        """Labels of a customer, by name. Raises StorageError when the store fails."""
        if customer_id is None:
            return []
        try:
            return (
                self.db.query(Label)
                .join(CustomerLabel, CustomerLabel.label_id == Label.id)
                .filter(CustomerLabel.customer_id == customer_id)
                .order_by(Label.name.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"label lookup failed: {e}") from e

    def _resolve(self, customer_id: int, label_name: str) -> tuple[Customer, Label]:
        customer = self.db.query(Customer).filter(Customer.id == customer_id).first()
        if customer is None:
            raise NotFoundError(f"customer {customer_id} not found")
        label = self.get_label_by_name(label_name)
        if label is None:
            raise NotFoundError(f"label {label_name} not found")
        return customer, label

    def assign_label(self, customer_id: int, label_name: str) -> Label:
        """Attach a label to a customer; assigning twice is a no-op."""
        customer, label = self._resolve(customer_id, label_name)
        existing = self.db.get(CustomerLabel, (customer.id, label.id))
        if existing is None:
            try:
                self.db.add(CustomerLabel(customer_id=customer.id, label_id=label.id))
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                raise StorageError(f"label assignment failed: {e}") from e
            self.db.expire(customer, ["labels"])
        return label

    def remove_label(self, customer_id: int, label_name: str) -> bool:
        """Detach a label; returns False when the customer did not carry it."""
        customer, label = self._resolve(customer_id, label_name)
        existing = self.db.get(CustomerLabel, (customer.id, label.id))
        if existing is None:
            return False
        try:
            self.db.delete(existing)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"label removal failed: {e}") from e
        self.db.expire(customer, ["labels"])
        return True

    def seed_defaults(self) -> int:
        """Insert the default labels that are missing; returns how many were added."""
        existing = {name for (name,) in self.db.query(Label.name).all()}
        added = 0
        for item in DEFAULT_LABELS:
            if item["name"] in existing:
                continue
            self.db.add(Label(**item))
            added += 1
        if added:
            self.db.commit()
        return added
