# barberqueue/models.py

from typing import Optional
from datetime import datetime, time, timezone

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    full_name: str
    role: str = Field(index=True)  # barber or customer
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Shop(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    address: str
    phone: Optional[str] = None
    opening_time: time = time(9, 0)
    closing_time: time = time(18, 0)
    # next queue_position handed out by this shop; only ever incremented
    next_queue_position: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ShopBarber(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("shop_id", "barber_id", name="uq_shop_barber"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    shop_id: int = Field(foreign_key="shop.id", index=True)
    barber_id: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)


class Appointment(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("shop_id", "queue_position", name="uq_shop_queue_position"),
        Index("ix_appointment_queue", "shop_id", "status", "queue_position"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    shop_id: int = Field(foreign_key="shop.id", index=True)
    customer_id: int = Field(foreign_key="user.id", index=True)
    barber_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    status: str = "waiting"
    queue_position: int
    service_type: str
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=utcnow)
