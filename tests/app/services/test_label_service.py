"""Tests for LabelService."""

import pytest
from sqlalchemy.orm import Session

from app.constants.catalog import DEFAULT_LABELS
from app.exceptions import NotFoundError
from app.models.label import CustomerLabel, Label
from app.schemas.label import LabelCreate
from app.services.label_service import LabelService, normalize_label_name


def test_normalize_label_name():
    assert normalize_label_name("  #VIP ") == "vip"


def test_seed_defaults_is_idempotent(db: Session):
    service = LabelService(db)
    assert service.seed_defaults() == len(DEFAULT_LABELS)
    assert service.seed_defaults() == 0
    assert db.query(Label).count() == len(DEFAULT_LABELS)


def test_create_label_normalizes_name(db: Session):
    label = LabelService(db).create_label(LabelCreate(name="Hot-Lead", emoji="🔥"))
    assert label.id is not None
    assert label.name == "hot-lead"


def test_get_labels_sorted_by_name(db: Session, setup_default_labels):
    names = [label.name for label in LabelService(db).get_labels()]
    assert names == sorted(names)


def test_assign_label_is_idempotent(db: Session, setup_customer, setup_default_labels):
    service = LabelService(db)

    service.assign_label(setup_customer.id, "VIP")
    service.assign_label(setup_customer.id, "#vip")

    assert db.query(CustomerLabel).count() == 1
    assert [label.name for label in service.get_customer_labels(setup_customer.id)] == ["vip"]


def test_assign_unknown_label(db: Session, setup_customer):
    with pytest.raises(NotFoundError):
        LabelService(db).assign_label(setup_customer.id, "nope")


def test_assign_label_to_unknown_customer(db: Session, setup_default_labels):
    with pytest.raises(NotFoundError):
        LabelService(db).assign_label(424242, "vip")


def test_remove_label(db: Session, setup_customer, setup_default_labels):
    service = LabelService(db)
    service.assign_label(setup_customer.id, "vip")

    assert service.remove_label(setup_customer.id, "vip") is True
    assert service.remove_label(setup_customer.id, "vip") is False
    assert service.get_customer_labels(setup_customer.id) == []


def test_customer_labels_for_unpersisted_customer(db: Session):
    assert LabelService(db).get_customer_labels(None) == []


def test_delete_label(db: Session, setup_label):
    service = LabelService(db)
    assert service.delete_label(setup_label.id) is True
    assert service.get_label(setup_label.id) is None
    assert service.delete_label(setup_label.id) is False
