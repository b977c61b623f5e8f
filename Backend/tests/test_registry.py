"""
Tests for shop provisioning, lookup and admin-secret authentication.
"""
from datetime import datetime, timedelta, timezone

import pytest

from nextup.catalog import DEFAULT_BARBER_NAMES
from nextup.core.errors import Conflict, NotFound, Unauthorized, ValidationError
from nextup.identity import SequenceIdGenerator
from nextup.registry import ShopRegistry


@pytest.mark.asyncio
async def test_create_shop_returns_full_record(registry):
    shop = await registry.create_shop(
        "  Gallari  ", "a@b.com", owner_name="Gio", city="Tirana"
    )

    assert shop.name == "Gallari"
    assert shop.owner_email == "a@b.com"
    assert shop.owner_name == "Gio"
    assert shop.city == "Tirana"
    assert shop.id.startswith("gallari-")
    assert shop.admin_secret
    assert shop.subscription_status == "pending"
    assert shop.created_at.tzinfo is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, email, missing",
    [
        ("", "a@b.com", ["shopName"]),
        ("Gallari", "   ", ["email"]),
        (None, None, ["shopName", "email"]),
    ],
)
async def test_create_shop_requires_name_and_email(registry, store, name, email, missing):
    with pytest.raises(ValidationError) as exc_info:
        await registry.create_shop(name, email)

    assert exc_info.value.fields == missing
    assert await store.shops.count() == 0


@pytest.mark.asyncio
async def test_create_shop_seeds_default_catalog(registry, catalog):
    shop = await registry.create_shop("Gallari", "a@b.com")

    barbers = await catalog.list_barbers(shop.id)
    services = await catalog.list_services(shop.id)

    assert [b.name for b in barbers] == list(DEFAULT_BARBER_NAMES)
    assert len(services) == 3
    assert all(s.is_active for s in services)
    assert all(b.shop_id == shop.id for b in barbers)


@pytest.mark.asyncio
async def test_shop_ids_are_unique(registry):
    shops = [await registry.create_shop("Gallari", f"owner{i}@b.com") for i in range(50)]
    assert len({s.id for s in shops}) == 50


@pytest.mark.asyncio
async def test_explicit_shop_id_is_slugified(registry):
    shop = await registry.create_shop("Gallari", "a@b.com", shop_id="Gallari Tirana")
    assert shop.id == "gallari-tirana"


@pytest.mark.asyncio
async def test_duplicate_explicit_shop_id_conflicts_without_overwrite(registry):
    first = await registry.create_shop("Gallari", "a@b.com", shop_id="gallari")

    with pytest.raises(Conflict):
        await registry.create_shop("Someone Else", "x@y.com", shop_id="gallari")

    stored = await registry.get_shop("gallari")
    assert stored.owner_email == "a@b.com"
    assert stored.admin_secret == first.admin_secret


@pytest.mark.asyncio
async def test_unusable_explicit_shop_id_is_rejected(registry):
    with pytest.raises(ValidationError) as exc_info:
        await registry.create_shop("Gallari", "a@b.com", shop_id="!!!")
    assert exc_info.value.fields == ["shopId"]


@pytest.mark.asyncio
async def test_get_shop_unknown_raises_not_found(registry):
    with pytest.raises(NotFound):
        await registry.get_shop("nope")


@pytest.mark.asyncio
async def test_authenticate_succeeds_with_exact_credentials(registry, shop):
    assert (await registry.authenticate(shop.id, shop.admin_secret)).id == shop.id
    assert (await registry.authenticate(shop.id, shop.admin_secret, email=" OWNER@gallari.com ")).id == shop.id


@pytest.mark.asyncio
async def test_authenticate_mismatches_are_indistinguishable(registry, shop, other_shop):
    attempts = [
        (shop.id, "wrong-secret", None),
        (shop.id, other_shop.admin_secret, None),
        ("unknown-shop", shop.admin_secret, None),
        (shop.id, shop.admin_secret, "someone@else.com"),
        (shop.id, "", None),
        (shop.id, None, None),
        (None, shop.admin_secret, None),
        (shop.id, shop.admin_secret[:-1], None),
        (shop.id, shop.admin_secret + "x", None),
        (shop.id, "sécret-ñ", None),
    ]
    messages = set()
    for shop_id, secret, email in attempts:
        with pytest.raises(Unauthorized) as exc_info:
            await registry.authenticate(shop_id, secret, email=email)
        messages.add(exc_info.value.message)

    assert len(messages) == 1


@pytest.mark.asyncio
async def test_list_shops_newest_first(store):
    ids = SequenceIdGenerator()
    times = iter(datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(days=d) for d in range(3))
    registry = ShopRegistry(store, ids, clock=lambda: next(times))

    created = [await registry.create_shop(f"Shop {n}", "a@b.com") for n in range(3)]

    listed = await registry.list_shops()
    assert [s.id for s in listed] == [s.id for s in reversed(created)]
