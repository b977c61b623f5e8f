"""
Domain entities shared by the services, repositories and routers.

Entities are frozen: repositories hand out copies and every change goes back
through a repository call, so a shop's catalog or a booking can never be
mutated behind the store's back.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class BookingStatus(str, Enum):
    WAITING = "waiting"
    IN_CHAIR = "in_chair"
    DONE = "done"


class SubscriptionStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Shop:
    id: str
    name: str
    owner_email: str
    admin_secret: str = field(repr=False)
    created_at: datetime
    owner_name: str = ""
    city: str = ""
    subscription_status: str = SubscriptionStatus.PENDING.value


@dataclass(frozen=True)
class Barber:
    id: str
    shop_id: str
    name: str


@dataclass(frozen=True)
class Service:
    id: str
    shop_id: str
    name: str
    duration_minutes: int
    price: float
    is_active: bool = True


@dataclass(frozen=True)
class Booking:
    id: str
    shop_id: str
    client_name: str
    client_phone: str
    service_name: str
    scheduled_at: datetime
    created_at: datetime
    service_id: Optional[str] = None
    barber_id: Optional[str] = None
    barber_name: Optional[str] = None
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.WAITING
    is_walk_in: bool = False
