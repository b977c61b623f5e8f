"""
Catalog Manager: a shop's barbers and services.

Every operation is scoped by shop id and fails with NotFound when the shop
does not exist. Numeric form input is parsed leniently: an unparseable value
falls back to a default on create and keeps the stored value on update.
"""

import logging
import math
from dataclasses import replace
from typing import Any, Optional

from .core.errors import NotFound, ValidationError, shop_not_found
from .entities import Barber, Service, Shop
from .identity import BARBER_PREFIX, SERVICE_PREFIX, IdGenerator
from .storage import Store

logger = logging.getLogger(__name__)

ANY_BARBER_NAME = "Any barber"
DEFAULT_BARBER_NAMES = (ANY_BARBER_NAME, "Chair 1", "Chair 2")
# (name, duration_minutes, price)
DEFAULT_SERVICES = (
    ("Regular cut", 30, 25.0),
    ("Fade & beard", 45, 35.0),
    ("Beard trim", 20, 15.0),
)
FALLBACK_DURATION_MINUTES = 30
FALLBACK_PRICE = 25.0


def parse_duration(value: Any) -> Optional[int]:
    """
    Positive whole minutes, or None if the value does not parse.

    Only whole numbers are accepted: "45.5" and "45 min" are rejected rather
    than truncated to 45.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        minutes = int(value) if value.is_integer() else None
    elif isinstance(value, int):
        minutes = value
    else:
        try:
            minutes = int(str(value).strip())
        except ValueError:
            return None
    if minutes is None or minutes <= 0:
        return None
    return minutes


def parse_price(value: Any) -> Optional[float]:
    """Non-negative finite price, or None if the value does not parse."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(price) or price < 0:
        return None
    return round(price, 2)


def parse_is_active(value: Any) -> bool:
    """Active unless the literal "false" (or a JSON false) was supplied."""
    return not (value is False or value == "false")


class CatalogManager:
    def __init__(self, store: Store, ids: IdGenerator):
        self.store = store
        self.ids = ids

    async def _require_shop(self, shop_id: str) -> Shop:
        shop = await self.store.shops.get(shop_id)
        if shop is None:
            raise shop_not_found(shop_id)
        return shop

    def seed_defaults(self, shop_id: str) -> tuple[list[Barber], list[Service]]:
        """
        Build the starter catalog for a new shop.

        The registry stores these together with the shop record, so a shop
        never exists without its catalog.
        """
        barbers = [
            Barber(id=self.ids.new_id(BARBER_PREFIX), shop_id=shop_id, name=name)
            for name in DEFAULT_BARBER_NAMES
        ]
        services = [
            Service(
                id=self.ids.new_id(SERVICE_PREFIX),
                shop_id=shop_id,
                name=name,
                duration_minutes=duration,
                price=price,
                is_active=True,
            )
            for name, duration, price in DEFAULT_SERVICES
        ]
        return barbers, services

    async def add_barber(self, shop_id: str, name: Optional[str]) -> Barber:
        await self._require_shop(shop_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError.missing(["name"])
        barber = Barber(id=self.ids.new_id(BARBER_PREFIX), shop_id=shop_id, name=name)
        await self.store.catalog.add_barber(barber)
        logger.info("Barber %s added to shop %s", barber.id, shop_id)
        return barber

    async def remove_barber(self, shop_id: str, barber_id: Optional[str]) -> None:
        await self._require_shop(shop_id)
        if not barber_id:
            return
        removed = await self.store.catalog.remove_barber(shop_id, barber_id)
        if removed:
            logger.info("Barber %s removed from shop %s", barber_id, shop_id)

    async def add_service(
        self,
        shop_id: str,
        name: Optional[str],
        duration_minutes: Any = None,
        price: Any = None,
        is_active: Any = None,
    ) -> Service:
        await self._require_shop(shop_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError.missing(["name"])
        duration = parse_duration(duration_minutes)
        numeric_price = parse_price(price)
        service = Service(
            id=self.ids.new_id(SERVICE_PREFIX),
            shop_id=shop_id,
            name=name,
            duration_minutes=duration if duration is not None else FALLBACK_DURATION_MINUTES,
            price=numeric_price if numeric_price is not None else FALLBACK_PRICE,
            is_active=parse_is_active(is_active),
        )
        await self.store.catalog.add_service(service)
        logger.info("Service %s added to shop %s", service.id, shop_id)
        return service

    async def update_service(
        self,
        shop_id: str,
        service_id: Optional[str],
        duration_minutes: Any = None,
        price: Any = None,
        is_active: Any = None,
    ) -> Service:
        """Apply only the fields that parse; omitted is_active leaves it as stored."""
        await self._require_shop(shop_id)
        current = await self.store.catalog.get_service(shop_id, service_id or "")
        if current is None:
            raise NotFound(f"Service not found: {service_id}")

        changes: dict[str, Any] = {}
        duration = parse_duration(duration_minutes)
        if duration is not None:
            changes["duration_minutes"] = duration
        numeric_price = parse_price(price)
        if numeric_price is not None:
            changes["price"] = numeric_price
        if is_active is not None:
            changes["is_active"] = parse_is_active(is_active)

        if not changes:
            return current
        updated = await self.store.catalog.save_service(replace(current, **changes))
        logger.info("Service %s of shop %s updated: %s", service_id, shop_id, sorted(changes))
        return updated

    async def list_barbers(self, shop_id: str) -> list[Barber]:
        await self._require_shop(shop_id)
        return await self.store.catalog.list_barbers(shop_id)

    async def list_services(self, shop_id: str) -> list[Service]:
        await self._require_shop(shop_id)
        return await self.store.catalog.list_services(shop_id)

    async def list_active_services(self, shop_id: str) -> list[Service]:
        await self._require_shop(shop_id)
        return await self.store.catalog.list_services(shop_id, active_only=True)
