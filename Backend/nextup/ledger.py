"""
Booking Ledger.

Bookings are appended by the customer form or by the tablet (walk-ins) and
afterwards only change status. They reference their shop by id and are
always read back through a shop-scoped query.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from .catalog import ANY_BARBER_NAME
from .core.errors import NotFound, ValidationError, shop_not_found
from .entities import Booking, BookingStatus
from .identity import BOOKING_PREFIX, IdGenerator
from .registry import utc_now
from .storage import Store

logger = logging.getLogger(__name__)

_DATE_TIME_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")


def combine_date_time(date_str: str, time_str: str, tz: ZoneInfo) -> Optional[datetime]:
    """Combine a calendar date and a clock time in ``tz`` into a UTC instant."""
    combined = f"{date_str.strip()} {time_str.strip()}"
    for fmt in _DATE_TIME_FORMATS:
        try:
            local = datetime.strptime(combined, fmt)
        except ValueError:
            continue
        return local.replace(tzinfo=tz).astimezone(timezone.utc)
    return None


def parse_iso_instant(value: str, tz: ZoneInfo) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are read in ``tz``."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.astimezone(timezone.utc)


def _clean(value) -> str:
    return "" if value is None else str(value).strip()


class BookingLedger:
    def __init__(
        self,
        store: Store,
        ids: IdGenerator,
        booking_timezone: str = "UTC",
        lenient_datetime: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.ids = ids
        self.tz = ZoneInfo(booking_timezone)
        self.lenient_datetime = lenient_datetime
        self.clock = clock

    async def _require_shop(self, shop_id: str) -> None:
        if await self.store.shops.get(shop_id) is None:
            raise shop_not_found(shop_id)

    async def _resolve_service(
        self, shop_id: str, service_id: str, service_name: str
    ) -> tuple[Optional[str], str]:
        services = await self.store.catalog.list_services(shop_id)
        if service_id:
            match = next((s for s in services if s.id == service_id), None)
            if match is None:
                raise ValidationError(f"Unknown service: {service_id}", ["serviceId"])
            return match.id, match.name
        match = _find_by_name(services, service_name)
        return (match.id, match.name) if match else (None, service_name)

    async def _resolve_barber(
        self, shop_id: str, barber_id: str, barber_name: str
    ) -> tuple[Optional[str], Optional[str]]:
        if not barber_id and (not barber_name or barber_name.lower() == ANY_BARBER_NAME.lower()):
            return None, None
        barbers = await self.store.catalog.list_barbers(shop_id)
        if barber_id:
            match = next((b for b in barbers if b.id == barber_id), None)
            if match is None:
                raise ValidationError(f"Unknown barber: {barber_id}", ["barberId"])
        else:
            match = _find_by_name(barbers, barber_name)
            if match is None:
                return None, barber_name
        if match.name.lower() == ANY_BARBER_NAME.lower():
            return None, None
        return match.id, match.name

    def _scheduled_at(
        self,
        date: str,
        time: str,
        date_iso: str,
        is_walk_in: bool,
    ) -> datetime:
        if date_iso:
            parsed = parse_iso_instant(date_iso, self.tz)
        elif date and time:
            parsed = combine_date_time(date, time, self.tz)
        elif is_walk_in:
            return self.clock()
        else:
            parsed = None
        if parsed is not None:
            return parsed
        if self.lenient_datetime:
            logger.warning("Unparseable booking date/time, recording current time instead")
            return self.clock()
        raise ValidationError("Date and time could not be understood", ["dateTime"])

    async def create_booking(
        self,
        shop_id: str,
        client_name: Optional[str],
        client_phone: Optional[str],
        service_id: Optional[str] = None,
        service_name: Optional[str] = None,
        barber_id: Optional[str] = None,
        barber_name: Optional[str] = None,
        date: Optional[str] = None,
        time: Optional[str] = None,
        date_iso: Optional[str] = None,
        notes: Optional[str] = None,
        is_walk_in: bool = False,
    ) -> Booking:
        await self._require_shop(shop_id)

        client_name, client_phone = _clean(client_name), _clean(client_phone)
        service_id, service_name = _clean(service_id), _clean(service_name)
        date, time, date_iso = _clean(date), _clean(time), _clean(date_iso)

        missing = []
        if not client_name:
            missing.append("clientName")
        if not client_phone and not is_walk_in:
            missing.append("clientPhone")
        if not service_id and not service_name:
            missing.append("serviceName")
        if not is_walk_in and not date_iso:
            missing.extend(field for field, value in (("date", date), ("time", time)) if not value)
        if missing:
            raise ValidationError.missing(missing)

        scheduled_at = self._scheduled_at(date, time, date_iso, is_walk_in)
        resolved_service_id, resolved_service_name = await self._resolve_service(
            shop_id, service_id, service_name
        )
        resolved_barber_id, resolved_barber_name = await self._resolve_barber(
            shop_id, _clean(barber_id), _clean(barber_name)
        )

        booking = Booking(
            id=self.ids.new_id(BOOKING_PREFIX),
            shop_id=shop_id,
            client_name=client_name,
            client_phone=client_phone,
            service_id=resolved_service_id,
            service_name=resolved_service_name,
            barber_id=resolved_barber_id,
            barber_name=resolved_barber_name,
            scheduled_at=scheduled_at,
            notes=_clean(notes) or None,
            status=BookingStatus.WAITING,
            is_walk_in=is_walk_in,
            created_at=self.clock(),
        )
        await self.store.bookings.add(booking)
        logger.info(
            "Booking %s created for shop %s (walk_in=%s)", booking.id, shop_id, is_walk_in
        )
        return booking

    async def list_bookings(self, shop_id: str, since: Optional[datetime] = None) -> list[Booking]:
        await self._require_shop(shop_id)
        if since is not None:
            if since.tzinfo is None:
                since = since.replace(tzinfo=timezone.utc)
            # Stored instants are UTC; SQLite compares them as wall-clock text.
            since = since.astimezone(timezone.utc)
        return await self.store.bookings.list_for_shop(shop_id, since)

    async def set_status(self, shop_id: str, booking_id: str, status: Optional[str]) -> Booking:
        """Move a booking to any of the three statuses; order is not enforced."""
        try:
            new_status = BookingStatus(_clean(status))
        except ValueError:
            allowed = ", ".join(s.value for s in BookingStatus)
            raise ValidationError(f"status must be one of: {allowed}", ["status"])

        await self._require_shop(shop_id)
        booking = await self.store.bookings.set_status(shop_id, booking_id, new_status)
        if booking is None:
            raise NotFound(f"Booking not found: {booking_id}")
        logger.info("Booking %s of shop %s set to %s", booking_id, shop_id, new_status.value)
        return booking


def _find_by_name(items: list, name: str):
    wanted = name.strip().lower()
    return next((item for item in items if item.name.lower() == wanted), None)
