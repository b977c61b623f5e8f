"""
Request/response models for the JSON surfaces.

The tablet client speaks camelCase, so every model aliases its fields with
``to_camel`` and accepts either spelling on input.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .entities import Barber, Booking, Service, Shop


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Requests ===

class SignupRequest(BaseModel):
    """Signup body from the HTML form or a JSON client."""
    shop_name: Optional[str] = Field(None, validation_alias=AliasChoices("shopName", "name", "shop_name"))
    owner_name: Optional[str] = Field(None, validation_alias=AliasChoices("ownerName", "owner_name"))
    email: Optional[str] = Field(None, validation_alias=AliasChoices("email", "ownerEmail", "owner_email"))
    city: Optional[str] = None
    shop_id: Optional[str] = Field(None, validation_alias=AliasChoices("shopId", "shop_id"))


class BookingCreateRequest(CamelModel):
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    barber_id: Optional[str] = None
    barber_name: Optional[str] = None
    service_id: Optional[str] = None
    service_name: Optional[str] = None
    date_iso: Optional[str] = Field(None, alias="dateISO")
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    is_walk_in: bool = False


class BookingStatusRequest(CamelModel):
    status: Optional[str] = None


class BarberCreateRequest(CamelModel):
    name: Optional[str] = None


class ServiceUpdateRequest(CamelModel):
    # Numeric fields stay loosely typed: bad values fall back instead of failing.
    duration_minutes: Any = None
    price: Any = None
    is_active: Any = None


class ServiceCreateRequest(ServiceUpdateRequest):
    name: Optional[str] = None


# === Responses ===

class BarberOut(CamelModel):
    id: str
    name: str

    @classmethod
    def of(cls, barber: Barber) -> "BarberOut":
        return cls(id=barber.id, name=barber.name)


class ServiceOut(CamelModel):
    id: str
    name: str
    duration_minutes: int
    price: float
    is_active: bool

    @classmethod
    def of(cls, service: Service) -> "ServiceOut":
        return cls(
            id=service.id,
            name=service.name,
            duration_minutes=service.duration_minutes,
            price=service.price,
            is_active=service.is_active,
        )


class BookingOut(CamelModel):
    id: str
    shop_id: str
    client_name: str
    client_phone: str
    barber_id: Optional[str]
    barber_name: Optional[str]
    service_id: Optional[str]
    service_name: str
    scheduled_time: datetime
    notes: Optional[str]
    status: str
    is_walk_in: bool
    created_at: datetime

    @classmethod
    def of(cls, booking: Booking) -> "BookingOut":
        return cls(
            id=booking.id,
            shop_id=booking.shop_id,
            client_name=booking.client_name,
            client_phone=booking.client_phone,
            barber_id=booking.barber_id,
            barber_name=booking.barber_name,
            service_id=booking.service_id,
            service_name=booking.service_name,
            scheduled_time=booking.scheduled_at,
            notes=booking.notes,
            status=booking.status.value,
            is_walk_in=booking.is_walk_in,
            created_at=booking.created_at,
        )


class ShopSummary(CamelModel):
    """Shop listing entry. Never carries the admin secret."""
    shop_id: str
    name: str
    owner_name: str
    owner_email: str
    city: str
    subscription_status: str
    created_at: datetime

    @classmethod
    def of(cls, shop: Shop) -> "ShopSummary":
        return cls(
            shop_id=shop.id,
            name=shop.name,
            owner_name=shop.owner_name,
            owner_email=shop.owner_email,
            city=shop.city,
            subscription_status=shop.subscription_status,
            created_at=shop.created_at,
        )


class SignupResponse(CamelModel):
    ok: bool = True
    shop_id: str
    shop_name: str
    owner_email: str
    admin_secret: str
    subscription_status: str
    created_at: datetime
    booking_url: str
    api_url: str
    dashboard_url: str


class ShopConfigOut(CamelModel):
    shop_id: str
    name: str
    subscription_status: str
    barbers: list[BarberOut]
    services: list[ServiceOut]


class HealthOut(CamelModel):
    ok: bool
    shop_count: int
    booking_count: int
