# barberqueue/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime, time
from typing import List, Optional


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    barber = "barber"
    customer = "customer"


class AppointmentStatus(str, Enum):
    waiting = "waiting"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


TERMINAL_STATUSES = (AppointmentStatus.completed, AppointmentStatus.cancelled)
ACTIVE_STATUSES = (AppointmentStatus.waiting, AppointmentStatus.in_progress)


class ServiceType(str, Enum):
    haircut = "haircut"
    beard_trim = "beard_trim"
    haircut_beard = "haircut_beard"
    shave = "shave"


class UserPublic(BaseModel):
    id: int
    email: str
    full_name: str
    role: UserRole
    phone: Optional[str] = None


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    full_name: str = Field(min_length=1)
    role: UserRole
    phone: Optional[str] = None


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None


class ShopCreate(BaseModel):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    phone: Optional[str] = None
    opening_time: time = time(9, 0)
    closing_time: time = time(18, 0)


class ShopUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    opening_time: Optional[time] = None
    closing_time: Optional[time] = None


class ShopPublic(BaseModel):
    id: int
    name: str
    address: str
    phone: Optional[str] = None
    opening_time: time
    closing_time: time


class ShopBarberPublic(BaseModel):
    id: int
    shop_id: int
    barber_id: int
    created_at: datetime


# service_type is a plain str so unknown values reach the queue manager's InvalidInput
class AppointmentCreate(BaseModel):
    service_type: str
    notes: Optional[str] = None


class AppointmentPublic(BaseModel):
    id: int
    shop_id: int
    customer_id: int
    barber_id: Optional[int] = None
    status: AppointmentStatus
    queue_position: int
    service_type: str
    notes: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class QueueView(BaseModel):
    shop_id: int
    waiting: List[AppointmentPublic]
    in_progress: List[AppointmentPublic]


class QueueVersion(BaseModel):
    shop_id: int
    version: int


class ErrorResponse(BaseModel):
    error: str
    detail: str


ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (403, 404, 409, 422)
}
