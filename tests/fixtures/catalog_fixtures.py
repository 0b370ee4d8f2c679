"""Fixtures for labels and quick replies."""

import pytest

from app.models.label import Label
from app.models.quick_reply import QuickReply
from app.services.label_service import LabelService
from app.services.quick_reply_service import QuickReplyService


@pytest.fixture(scope="function")
def setup_default_labels(db):
    """Seed the default label catalog."""
    LabelService(db).seed_defaults()
    return db.query(Label).order_by(Label.name).all()


@pytest.fixture(scope="function")
def setup_label(db, faker):
    label = Label(name=faker.unique.word().lower(), emoji="⭐", color="#FFD700")
    db.add(label)
    db.commit()
    db.refresh(label)
    return label


@pytest.fixture(scope="function")
def setup_quick_replies(db):
    """Seed the default quick replies."""
    QuickReplyService(db).seed_defaults()
    return db.query(QuickReply).order_by(QuickReply.id).all()


@pytest.fixture(scope="function")
def setup_quick_reply(db):
    quick_reply = QuickReply(
        key="chao",
        emoji="👋",
        text_vi="Xin chào! Shop có thể giúp gì cho bạn?",
        text_en="Hello! How can I help you?",
    )
    db.add(quick_reply)
    db.commit()
    db.refresh(quick_reply)
    return quick_reply
