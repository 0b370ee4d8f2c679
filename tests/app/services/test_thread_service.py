"""Tests for ThreadService."""

from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.conversation_thread import ConversationThread
from app.services.thread_service import ThreadService, is_active


@pytest.fixture
def threads(db: Session, clock):
    return ThreadService(db, window=timedelta(hours=48), clock=clock)


def test_is_active_boundary(clock):
    created = clock()
    window = timedelta(hours=48)
    assert is_active(created, created + timedelta(hours=47, minutes=59), window)
    assert not is_active(created, created + timedelta(hours=48), window)


def test_no_anchor_for_unknown_customer(threads, setup_customer):
    assert threads.find_active_anchor(setup_customer.id, "p1") is None
    assert threads.find_active_anchor(None, "p1") is None


def test_anchor_active_inside_window(threads, setup_customer, clock):
    threads.record_anchor(setup_customer.id, "p1", "1001")
    clock.advance(minutes=10)

    anchor = threads.find_active_anchor(setup_customer.id, "p1")

    assert anchor is not None
    assert anchor.anchor_message_id == "1001"
    assert anchor.age == timedelta(minutes=10)
    assert anchor.age_hours == 0


def test_anchor_expires_at_exactly_window(threads, setup_customer, clock):
    threads.record_anchor(setup_customer.id, "p1", "1001")
    clock.advance(hours=48)
    assert threads.find_active_anchor(setup_customer.id, "p1") is None


def test_anchor_is_scoped_to_page(threads, setup_customer):
    threads.record_anchor(setup_customer.id, "p1", "1001")
    assert threads.find_active_anchor(setup_customer.id, "p2") is None


def test_newest_anchor_wins(threads, setup_customer, clock, db):
    threads.record_anchor(setup_customer.id, "p1", "1001")
    clock.advance(hours=50)
    threads.record_anchor(setup_customer.id, "p1", "2002")
    clock.advance(hours=1)

    anchor = threads.find_active_anchor(setup_customer.id, "p1")

    assert anchor.anchor_message_id == "2002"
    assert anchor.age_hours == 1
    assert db.query(ConversationThread).count() == 2


def test_record_and_get_mapping(threads, setup_customer):
    threads.record_mapping("1001", "p1", setup_customer.external_user_id, setup_customer.id, "en")

    mapping = threads.get_mapping("1001")

    assert mapping.page_id == "p1"
    assert mapping.external_user_id == setup_customer.external_user_id
    assert mapping.customer_id == setup_customer.id
    assert mapping.detected_language == "en"


def test_record_mapping_overwrites(threads, setup_customer):
    threads.record_mapping("1001", "p1", "old-user", None, "en")
    threads.record_mapping("1001", "p1", setup_customer.external_user_id, setup_customer.id, "ja")

    mapping = threads.get_mapping("1001")

    assert mapping.external_user_id == setup_customer.external_user_id
    assert mapping.detected_language == "ja"


def test_get_mapping_missing(threads):
    with pytest.raises(NotFoundError):
        threads.get_mapping("404")
