"""
In-memory store.

Backs the ``memory`` storage mode and the test suite. State lives on the
``MemoryStore`` instance (attached to ``app.state``), never in module globals.
"""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.errors import Conflict
from ..entities import Barber, Booking, BookingStatus, Service, Shop
from .base import Store


class _MemoryState:
    def __init__(self):
        self.lock = asyncio.Lock()
        self.shops: dict[str, Shop] = {}
        self.barbers: dict[str, list[Barber]] = {}
        self.services: dict[str, list[Service]] = {}
        self.bookings: list[Booking] = []


class MemoryShopRepository:
    def __init__(self, state: _MemoryState):
        self._state = state

    async def add(self, shop: Shop, barbers: Sequence[Barber], services: Sequence[Service]) -> Shop:
        async with self._state.lock:
            if shop.id in self._state.shops:
                raise Conflict(f"Shop id already exists: {shop.id}", shop_id=shop.id)
            self._state.shops[shop.id] = shop
            self._state.barbers[shop.id] = list(barbers)
            self._state.services[shop.id] = list(services)
        return shop

    async def get(self, shop_id: str) -> Optional[Shop]:
        return self._state.shops.get(shop_id)

    async def list(self) -> list[Shop]:
        return sorted(self._state.shops.values(), key=lambda s: s.created_at, reverse=True)

    async def count(self) -> int:
        return len(self._state.shops)


class MemoryCatalogRepository:
    def __init__(self, state: _MemoryState):
        self._state = state

    async def add_barber(self, barber: Barber) -> Barber:
        async with self._state.lock:
            self._state.barbers.setdefault(barber.shop_id, []).append(barber)
        return barber

    async def remove_barber(self, shop_id: str, barber_id: str) -> bool:
        async with self._state.lock:
            barbers = self._state.barbers.get(shop_id, [])
            kept = [b for b in barbers if b.id != barber_id]
            self._state.barbers[shop_id] = kept
        return len(kept) != len(barbers)

    async def list_barbers(self, shop_id: str) -> list[Barber]:
        return list(self._state.barbers.get(shop_id, []))

    async def add_service(self, service: Service) -> Service:
        async with self._state.lock:
            self._state.services.setdefault(service.shop_id, []).append(service)
        return service

    async def get_service(self, shop_id: str, service_id: str) -> Optional[Service]:
        for service in self._state.services.get(shop_id, []):
            if service.id == service_id:
                return service
        return None

    async def save_service(self, service: Service) -> Service:
        async with self._state.lock:
            services = self._state.services.get(service.shop_id, [])
            self._state.services[service.shop_id] = [
                service if s.id == service.id else s for s in services
            ]
        return service

    async def list_services(self, shop_id: str, active_only: bool = False) -> list[Service]:
        services = self._state.services.get(shop_id, [])
        return [s for s in services if s.is_active or not active_only]


class MemoryBookingRepository:
    def __init__(self, state: _MemoryState):
        self._state = state

    async def add(self, booking: Booking) -> Booking:
        async with self._state.lock:
            self._state.bookings.append(booking)
        return booking

    async def get(self, shop_id: str, booking_id: str) -> Optional[Booking]:
        for booking in self._state.bookings:
            if booking.id == booking_id and booking.shop_id == shop_id:
                return booking
        return None

    async def list_for_shop(self, shop_id: str, since: Optional[datetime] = None) -> list[Booking]:
        matches = [
            b for b in self._state.bookings
            if b.shop_id == shop_id and (since is None or b.scheduled_at >= since)
        ]
        # sorted() is stable, so ties keep append order.
        return sorted(matches, key=lambda b: b.scheduled_at)

    async def set_status(self, shop_id: str, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        async with self._state.lock:
            for index, booking in enumerate(self._state.bookings):
                if booking.id == booking_id and booking.shop_id == shop_id:
                    updated = replace(booking, status=status)
                    self._state.bookings[index] = updated
                    return updated
        return None

    async def count(self) -> int:
        return len(self._state.bookings)


class MemoryStore(Store):
    def __init__(self):
        state = _MemoryState()
        super().__init__(
            shops=MemoryShopRepository(state),
            catalog=MemoryCatalogRepository(state),
            bookings=MemoryBookingRepository(state),
        )
