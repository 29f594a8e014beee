"""
Duet Backend — User Schemas
=============================
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel

DistanceUnit = Literal["km", "mi"]


class UserFields(CamelModel):
    """Profile fields a client may set on create or update."""

    transaction_id: Optional[str] = None
    social_id: Optional[str] = None
    name: Optional[str] = Field(default=None, max_length=255)
    gender: Optional[str] = Field(default=None, max_length=30)
    birth_date: Optional[date] = None
    lat: Optional[Decimal] = Field(default=None, ge=-90, le=90)
    long: Optional[Decimal] = Field(default=None, ge=-180, le=180)
    anniversary: Optional[date] = None
    relationship_status: Optional[str] = Field(default=None, max_length=100)
    expectations: Optional[str] = None
    invite_code: Optional[str] = Field(default=None, max_length=100)
    lang: Optional[str] = Field(default=None, max_length=5)
    distance_unit: Optional[DistanceUnit] = None
    hide_content: Optional[bool] = None
    location_permission: Optional[bool] = None
    mood: Optional[str] = Field(default=None, max_length=100)
    profile_img: Optional[str] = None
    is_active: Optional[bool] = None


class UserCreate(UserFields):
    uuid: str = Field(min_length=1, max_length=100, description="Device/install identifier")


class UserUpdate(UserFields):
    last_active_at: Optional[datetime] = None


class UserResponse(CamelModel):
    id: int
    uuid: str
    transaction_id: Optional[str] = None
    social_id: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    lat: Optional[Decimal] = None
    long: Optional[Decimal] = None
    anniversary: Optional[date] = None
    relationship_status: Optional[str] = None
    expectations: Optional[str] = None
    invite_code: Optional[str] = None
    lang: str
    distance_unit: str
    hide_content: bool
    location_permission: bool
    mood: Optional[str] = None
    profile_img: Optional[str] = None
    is_active: bool
    deleted: bool
    last_active_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
