"""Canned operator replies with Vietnamese and English variants."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.db import Base


class QuickReply(Base):
    __tablename__ = "quick_replies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False)
    emoji = Column(String(10), nullable=True)
    text_vi = Column(Text, nullable=False)
    text_en = Column(Text, nullable=False)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    def text_for(self, language: str | None) -> str:
        """Vietnamese customers get text_vi; everyone else gets text_en."""
        return self.text_vi if (language or "").lower() == "vi" else self.text_en
