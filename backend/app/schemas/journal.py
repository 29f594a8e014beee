"""
Duet Backend — Journal Schemas
================================
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel

JournalType = Literal["memory", "special_day"]


class JournalFields(CamelModel):
    title: Optional[str] = None
    color_code: Optional[str] = Field(default=None, max_length=50)
    date_time: Optional[datetime] = None
    lat: Optional[Decimal] = Field(default=None, ge=-90, le=90)
    long: Optional[Decimal] = Field(default=None, ge=-180, le=180)
    location: Optional[str] = None
    images: Optional[str] = Field(default=None, description="Comma-separated image URLs")
    description: Optional[str] = None


class JournalCreate(JournalFields):
    relationship_id: int = Field(gt=0)
    type: JournalType


class JournalUpdate(JournalFields):
    """Update body; the entry id travels in the body, not the path."""

    id: int = Field(gt=0)
    type: Optional[JournalType] = None


class JournalResponse(CamelModel):
    id: int
    relationship_id: int
    type: str
    title: Optional[str] = None
    color_code: Optional[str] = None
    date_time: datetime
    lat: Optional[Decimal] = None
    long: Optional[Decimal] = None
    location: Optional[str] = None
    images: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CommentCreate(CamelModel):
    user_id: int = Field(gt=0)
    comment: str = Field(min_length=1, max_length=5000)


class CommentResponse(CamelModel):
    id: int
    journal_id: int
    user_id: int
    comment: str
    created_at: datetime
