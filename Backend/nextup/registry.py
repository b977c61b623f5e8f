"""
Shop Registry: provisioning, lookup and admin-secret authentication.

A shop is created exactly once at signup together with its starter catalog
and a freshly generated admin secret. The secret is the shop's only
credential; it is returned by ``create_shop`` and otherwise only to callers
that already proved they hold it.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Callable, Optional

from .catalog import CatalogManager
from .core.errors import Unauthorized, ValidationError, shop_not_found
from .entities import Shop, SubscriptionStatus
from .identity import IdGenerator, generate_slug
from .storage import Store

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _secrets_match(supplied: str, stored: str) -> bool:
    return secrets.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))


class ShopRegistry:
    def __init__(
        self,
        store: Store,
        ids: IdGenerator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.ids = ids
        self.clock = clock
        self.catalog = CatalogManager(store, ids)

    async def create_shop(
        self,
        name: Optional[str],
        owner_email: Optional[str],
        owner_name: Optional[str] = None,
        city: Optional[str] = None,
        shop_id: Optional[str] = None,
    ) -> Shop:
        """
        Provision a shop.

        ``shop_id`` pins an explicit identifier (slugified, no random suffix);
        a taken id raises Conflict instead of overwriting the existing shop.
        """
        name = (name or "").strip()
        owner_email = (owner_email or "").strip()
        missing = [field for field, value in (("shopName", name), ("email", owner_email)) if not value]
        if missing:
            raise ValidationError.missing(missing)

        if shop_id is not None:
            shop_id = generate_slug(shop_id)
            if not shop_id:
                raise ValidationError("Shop id must contain letters or digits", ["shopId"])
        else:
            shop_id = self.ids.new_shop_id(name)

        shop = Shop(
            id=shop_id,
            name=name,
            owner_name=(owner_name or "").strip(),
            owner_email=owner_email,
            city=(city or "").strip(),
            admin_secret=self.ids.new_admin_secret(),
            subscription_status=SubscriptionStatus.PENDING.value,
            created_at=self.clock(),
        )
        barbers, services = self.catalog.seed_defaults(shop.id)
        await self.store.shops.add(shop, barbers, services)
        logger.info(
            "Shop created: shop_id=%s barbers=%d services=%d",
            shop.id, len(barbers), len(services),
        )
        return shop

    async def get_shop(self, shop_id: str) -> Shop:
        shop = await self.store.shops.get(shop_id)
        if shop is None:
            raise shop_not_found(shop_id)
        return shop

    async def authenticate(
        self,
        shop_id: Optional[str],
        admin_secret: Optional[str],
        email: Optional[str] = None,
    ) -> Shop:
        """
        Return the shop when id and secret (and email, if given) all match.

        Every mismatch, including an unknown shop, raises the same Unauthorized.
        """
        shop = await self.store.shops.get(shop_id) if shop_id else None
        authorized = (
            shop is not None
            and bool(admin_secret)
            and _secrets_match(admin_secret, shop.admin_secret)
            and (email is None or email.strip().lower() == shop.owner_email.lower())
        )
        if not authorized:
            logger.warning("Admin authentication rejected for shop_id=%s", shop_id)
            raise Unauthorized()
        return shop

    async def list_shops(self) -> list[Shop]:
        return await self.store.shops.list()
