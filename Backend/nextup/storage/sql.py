"""
SQLAlchemy-backed store.

One ``SqlStore`` wraps one ``AsyncSession``. Every write commits before
returning so a later request sees it; any driver error is rolled back,
logged with its operation and shop id, and re-raised as ``StorageFailure``.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional, Sequence, Type

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import Base
from ..core.errors import Conflict, StorageFailure
from ..entities import Barber, Booking, BookingStatus, Service, Shop
from ..models import BarberRecord, BookingRecord, ServiceRecord, ShopRecord
from .base import Store

logger = logging.getLogger(__name__)


def scoped_select(model: Type[Base], shop_id: str) -> Select:
    """
    Create a SELECT statement pre-filtered by shop_id.

    Usage:
        stmt = scoped_select(ServiceRecord, shop_id).where(ServiceRecord.is_active.is_(True))
    """
    return select(model).where(model.shop_id == shop_id)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@asynccontextmanager
async def _storage_errors(session: AsyncSession, operation: str, shop_id: Optional[str] = None):
    try:
        yield
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Storage error during %s (shop_id=%s)", operation, shop_id)
        raise StorageFailure(operation, shop_id) from exc


def _to_shop(row: ShopRecord) -> Shop:
    return Shop(
        id=row.shop_id,
        name=row.name,
        owner_name=row.owner_name,
        owner_email=row.owner_email,
        city=row.city,
        admin_secret=row.admin_secret,
        subscription_status=row.subscription_status,
        created_at=_aware(row.created_at),
    )


def _to_barber(row: BarberRecord) -> Barber:
    return Barber(id=row.barber_id, shop_id=row.shop_id, name=row.name)


def _to_service(row: ServiceRecord) -> Service:
    return Service(
        id=row.service_id,
        shop_id=row.shop_id,
        name=row.name,
        duration_minutes=row.duration_minutes,
        price=row.price,
        is_active=row.is_active,
    )


def _to_booking(row: BookingRecord) -> Booking:
    return Booking(
        id=row.booking_id,
        shop_id=row.shop_id,
        client_name=row.client_name,
        client_phone=row.client_phone,
        barber_id=row.barber_id,
        barber_name=row.barber_name,
        service_id=row.service_id,
        service_name=row.service_name,
        scheduled_at=_aware(row.scheduled_at),
        notes=row.notes,
        status=BookingStatus(row.status),
        is_walk_in=row.is_walk_in,
        created_at=_aware(row.created_at),
    )


def _barber_row(barber: Barber) -> BarberRecord:
    return BarberRecord(barber_id=barber.id, shop_id=barber.shop_id, name=barber.name)


def _service_row(service: Service) -> ServiceRecord:
    return ServiceRecord(
        service_id=service.id,
        shop_id=service.shop_id,
        name=service.name,
        duration_minutes=service.duration_minutes,
        price=service.price,
        is_active=service.is_active,
    )


class SqlShopRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, shop: Shop, barbers: Sequence[Barber], services: Sequence[Service]) -> Shop:
        async with _storage_errors(self.session, "create_shop", shop.id):
            self.session.add(
                ShopRecord(
                    shop_id=shop.id,
                    name=shop.name,
                    owner_name=shop.owner_name,
                    owner_email=shop.owner_email,
                    city=shop.city,
                    admin_secret=shop.admin_secret,
                    subscription_status=shop.subscription_status,
                    created_at=shop.created_at,
                )
            )
            try:
                # Flush the shop first so the catalog rows' foreign key resolves.
                await self.session.flush()
            except IntegrityError:
                await self.session.rollback()
                raise Conflict(f"Shop id already exists: {shop.id}", shop_id=shop.id)
            self.session.add_all([_barber_row(b) for b in barbers])
            self.session.add_all([_service_row(s) for s in services])
            await self.session.commit()
        return shop

    async def get(self, shop_id: str) -> Optional[Shop]:
        async with _storage_errors(self.session, "get_shop", shop_id):
            result = await self.session.execute(select(ShopRecord).where(ShopRecord.shop_id == shop_id))
            row = result.scalar_one_or_none()
        return _to_shop(row) if row else None

    async def list(self) -> list[Shop]:
        async with _storage_errors(self.session, "list_shops"):
            result = await self.session.execute(
                select(ShopRecord).order_by(ShopRecord.created_at.desc(), ShopRecord.id.desc())
            )
            rows = result.scalars().all()
        return [_to_shop(row) for row in rows]

    async def count(self) -> int:
        async with _storage_errors(self.session, "count_shops"):
            return await self.session.scalar(select(func.count()).select_from(ShopRecord))


class SqlCatalogRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_barber(self, barber: Barber) -> Barber:
        async with _storage_errors(self.session, "add_barber", barber.shop_id):
            self.session.add(_barber_row(barber))
            await self.session.commit()
        return barber

    async def remove_barber(self, shop_id: str, barber_id: str) -> bool:
        async with _storage_errors(self.session, "remove_barber", shop_id):
            result = await self.session.execute(
                delete(BarberRecord).where(
                    BarberRecord.shop_id == shop_id,
                    BarberRecord.barber_id == barber_id,
                )
            )
            await self.session.commit()
        return result.rowcount > 0

    async def list_barbers(self, shop_id: str) -> list[Barber]:
        async with _storage_errors(self.session, "list_barbers", shop_id):
            result = await self.session.execute(
                scoped_select(BarberRecord, shop_id).order_by(BarberRecord.pk)
            )
            rows = result.scalars().all()
        return [_to_barber(row) for row in rows]

    async def add_service(self, service: Service) -> Service:
        async with _storage_errors(self.session, "add_service", service.shop_id):
            self.session.add(_service_row(service))
            await self.session.commit()
        return service

    async def _find_service(self, shop_id: str, service_id: str) -> Optional[ServiceRecord]:
        result = await self.session.execute(
            scoped_select(ServiceRecord, shop_id).where(ServiceRecord.service_id == service_id)
        )
        return result.scalar_one_or_none()

    async def get_service(self, shop_id: str, service_id: str) -> Optional[Service]:
        async with _storage_errors(self.session, "get_service", shop_id):
            row = await self._find_service(shop_id, service_id)
        return _to_service(row) if row else None

    async def save_service(self, service: Service) -> Service:
        async with _storage_errors(self.session, "update_service", service.shop_id):
            row = await self._find_service(service.shop_id, service.id)
            if row is not None:
                row.name = service.name
                row.duration_minutes = service.duration_minutes
                row.price = service.price
                row.is_active = service.is_active
                await self.session.commit()
        return service

    async def list_services(self, shop_id: str, active_only: bool = False) -> list[Service]:
        stmt = scoped_select(ServiceRecord, shop_id)
        if active_only:
            stmt = stmt.where(ServiceRecord.is_active.is_(True))
        async with _storage_errors(self.session, "list_services", shop_id):
            result = await self.session.execute(stmt.order_by(ServiceRecord.pk))
            rows = result.scalars().all()
        return [_to_service(row) for row in rows]


class SqlBookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, booking: Booking) -> Booking:
        async with _storage_errors(self.session, "create_booking", booking.shop_id):
            self.session.add(
                BookingRecord(
                    booking_id=booking.id,
                    shop_id=booking.shop_id,
                    client_name=booking.client_name,
                    client_phone=booking.client_phone,
                    barber_id=booking.barber_id,
                    barber_name=booking.barber_name,
                    service_id=booking.service_id,
                    service_name=booking.service_name,
                    scheduled_at=booking.scheduled_at,
                    notes=booking.notes,
                    status=booking.status.value,
                    is_walk_in=booking.is_walk_in,
                    created_at=booking.created_at,
                )
            )
            await self.session.commit()
        return booking

    async def _find_booking(self, shop_id: str, booking_id: str) -> Optional[BookingRecord]:
        result = await self.session.execute(
            scoped_select(BookingRecord, shop_id).where(BookingRecord.booking_id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get(self, shop_id: str, booking_id: str) -> Optional[Booking]:
        async with _storage_errors(self.session, "get_booking", shop_id):
            row = await self._find_booking(shop_id, booking_id)
        return _to_booking(row) if row else None

    async def list_for_shop(self, shop_id: str, since: Optional[datetime] = None) -> list[Booking]:
        stmt = scoped_select(BookingRecord, shop_id)
        if since is not None:
            stmt = stmt.where(BookingRecord.scheduled_at >= since)
        stmt = stmt.order_by(BookingRecord.scheduled_at, BookingRecord.pk)
        async with _storage_errors(self.session, "list_bookings", shop_id):
            result = await self.session.execute(stmt)
            rows = result.scalars().all()
        return [_to_booking(row) for row in rows]

    async def set_status(self, shop_id: str, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        async with _storage_errors(self.session, "set_booking_status", shop_id):
            row = await self._find_booking(shop_id, booking_id)
            if row is None:
                return None
            row.status = status.value
            await self.session.commit()
            await self.session.refresh(row)
        return _to_booking(row)

    async def count(self) -> int:
        async with _storage_errors(self.session, "count_bookings"):
            return await self.session.scalar(select(func.count()).select_from(BookingRecord))


class SqlStore(Store):
    def __init__(self, session: AsyncSession):
        super().__init__(
            shops=SqlShopRepository(session),
            catalog=SqlCatalogRepository(session),
            bookings=SqlBookingRepository(session),
        )
