"""Tests for QuickReplyService."""

import pytest
from sqlalchemy.orm import Session

from app.constants.catalog import DEFAULT_QUICK_REPLIES
from app.exceptions import NotFoundError
from app.schemas.quick_reply import QuickReplyCreate, QuickReplyUpdate
from app.services.quick_reply_service import QuickReplyService


def test_seed_defaults(db: Session):
    service = QuickReplyService(db)
    assert service.seed_defaults() == len(DEFAULT_QUICK_REPLIES)
    assert service.seed_defaults() == 0
    assert [qr.key for qr in service.get_quick_replies()][0] == "chao"


def test_text_for_language(setup_quick_reply):
    assert setup_quick_reply.text_for("vi").startswith("Xin chào")
    assert setup_quick_reply.text_for("en") == "Hello! How can I help you?"
    assert setup_quick_reply.text_for("ja") == "Hello! How can I help you?"
    assert setup_quick_reply.text_for(None) == "Hello! How can I help you?"


def test_create_update_delete(db: Session):
    service = QuickReplyService(db)
    created = service.create_quick_reply(
        QuickReplyCreate(key="hetHang", text_vi="Hết hàng", text_en="Out of stock")
    )

    updated = service.update_quick_reply(created.id, QuickReplyUpdate(emoji="😔"))
    assert updated.emoji == "😔"
    assert updated.text_vi == "Hết hàng"

    assert service.delete_quick_reply(created.id) is True
    assert service.get_quick_reply(created.id) is None
    assert service.update_quick_reply(created.id, QuickReplyUpdate(emoji="x")) is None


def test_require_quick_reply(db: Session, setup_quick_reply):
    service = QuickReplyService(db)
    assert service.require_quick_reply(setup_quick_reply.id).key == "chao"
    with pytest.raises(NotFoundError):
        service.require_quick_reply(999)
