from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .core.db import Base
from .entities import BookingStatus, SubscriptionStatus


class ShopRecord(Base):
    __tablename__ = "shops"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shop_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    owner_email: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    admin_secret: Mapped[str] = mapped_column(String(128), nullable=False)
    subscription_status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=SubscriptionStatus.PENDING.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class BarberRecord(Base):
    __tablename__ = "barbers"

    # Autoincrement pk preserves insertion (display) order.
    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    barber_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    shop_id: Mapped[str] = mapped_column(ForeignKey("shops.shop_id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class ServiceRecord(Base):
    __tablename__ = "services"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    shop_id: Mapped[str] = mapped_column(ForeignKey("shops.shop_id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class BookingRecord(Base):
    __tablename__ = "bookings"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    shop_id: Mapped[str] = mapped_column(ForeignKey("shops.shop_id"), nullable=False, index=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    barber_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    barber_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    service_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    service_name: Mapped[str] = mapped_column(String(255), nullable=False)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=BookingStatus.WAITING.value)
    is_walk_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
