"""
Notification, contact message and newsletter domain models
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field

from app.domain.base import DomainModel

NOTIFICATION_ORDER_PLACED = "ORDER_PLACED"
NOTIFICATION_CONTACT_MESSAGE = "CONTACT_MESSAGE"
NOTIFICATION_LOW_STOCK = "LOW_STOCK"


class Notification(DomainModel):
    id: int
    type: str
    title: str
    message: str
    data: Optional[Any] = None
    is_read: bool
    created_at: datetime


class NotificationMarkRead(BaseModel):
    """Either explicit ids or mark_all"""
    ids: List[int] = Field(default_factory=list)
    mark_all: bool = False


class ContactMessage(DomainModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    is_read: bool
    created_at: datetime


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ContactMessageUpdate(BaseModel):
    is_read: bool


class Subscriber(DomainModel):
    id: int
    email: str
    is_active: bool
    created_at: datetime


class SubscribeRequest(BaseModel):
    email: EmailStr
