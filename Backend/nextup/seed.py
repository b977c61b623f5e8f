import logging
from typing import Optional

from .entities import Barber, Service, Shop
from .identity import BARBER_PREFIX, SERVICE_PREFIX, IdGenerator
from .registry import utc_now
from .storage import Store

logger = logging.getLogger(__name__)

DEMO_SHOP_ID = "demo-shop"
DEMO_SHOP_NAME = "NextUp Demo Shop"
DEMO_OWNER_EMAIL = "demo@nextup.local"
DEMO_BARBERS = ("Alex", "Jay")
DEMO_SERVICES = (
    ("Regular Cut", 30, 25.0),
    ("Fade & Beard", 45, 40.0),
)


async def seed_demo_shop(store: Store, ids: IdGenerator, admin_secret: Optional[str] = None) -> Shop:
    """Create the demo shop unless it already exists."""
    existing = await store.shops.get(DEMO_SHOP_ID)
    if existing:
        return existing

    shop = Shop(
        id=DEMO_SHOP_ID,
        name=DEMO_SHOP_NAME,
        owner_email=DEMO_OWNER_EMAIL,
        admin_secret=admin_secret or ids.new_admin_secret(),
        created_at=utc_now(),
    )
    barbers = [
        Barber(id=ids.new_id(BARBER_PREFIX), shop_id=shop.id, name=name)
        for name in DEMO_BARBERS
    ]
    services = [
        Service(
            id=ids.new_id(SERVICE_PREFIX),
            shop_id=shop.id,
            name=name,
            duration_minutes=duration,
            price=price,
        )
        for name, duration, price in DEMO_SERVICES
    ]
    await store.shops.add(shop, barbers, services)
    logger.info("Seeded demo shop %s", shop.id)
    return shop
