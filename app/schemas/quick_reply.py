"""Pydantic schemas for quick replies."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class QuickReplyCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    emoji: Optional[str] = Field(default=None, max_length=10)
    text_vi: str
    text_en: str


class QuickReplyUpdate(BaseModel):
    emoji: Optional[str] = None
    text_vi: Optional[str] = None
    text_en: Optional[str] = None


class QuickReplyRead(BaseModel):
    id: int
    key: str
    emoji: Optional[str] = None
    text_vi: str
    text_en: str
    created_at: datetime

    model_config = {"from_attributes": True}
