"""Pydantic schemas for labels."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LabelCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    emoji: Optional[str] = Field(default=None, max_length=10)
    color: Optional[str] = Field(default=None, max_length=20)


class LabelRead(BaseModel):
    id: int
    name: str
    emoji: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CustomerLabelAssign(BaseModel):
    label_name: str
