"""
Repository protocols.

Services depend on these interfaces only. Two implementations exist:
``memory.MemoryStore`` (process-local, used for tests and demos) and
``sql.SqlStore`` (SQLAlchemy, one per request session).

Every catalog and booking call takes the owning ``shop_id`` and must only
return rows carrying that id.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..entities import Barber, Booking, BookingStatus, Service, Shop


class ShopRepository(Protocol):
    async def add(self, shop: Shop, barbers: Sequence[Barber], services: Sequence[Service]) -> Shop:
        """Store a shop together with its starter catalog. Raises Conflict on a taken id."""

    async def get(self, shop_id: str) -> Optional[Shop]: ...

    async def list(self) -> list[Shop]:
        """All shops, newest first."""

    async def count(self) -> int: ...


class CatalogRepository(Protocol):
    async def add_barber(self, barber: Barber) -> Barber: ...

    async def remove_barber(self, shop_id: str, barber_id: str) -> bool: ...

    async def list_barbers(self, shop_id: str) -> list[Barber]: ...

    async def add_service(self, service: Service) -> Service: ...

    async def get_service(self, shop_id: str, service_id: str) -> Optional[Service]: ...

    async def save_service(self, service: Service) -> Service: ...

    async def list_services(self, shop_id: str, active_only: bool = False) -> list[Service]: ...


class BookingRepository(Protocol):
    async def add(self, booking: Booking) -> Booking: ...

    async def get(self, shop_id: str, booking_id: str) -> Optional[Booking]: ...

    async def list_for_shop(self, shop_id: str, since: Optional[datetime] = None) -> list[Booking]:
        """Bookings of one shop ordered by scheduled time, then creation order."""

    async def set_status(self, shop_id: str, booking_id: str, status: BookingStatus) -> Optional[Booking]: ...

    async def count(self) -> int: ...


@dataclass
class Store:
    shops: ShopRepository
    catalog: CatalogRepository
    bookings: BookingRepository
