"""
Tests for booking creation, listing and status changes.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from nextup.core.errors import NotFound, ValidationError
from nextup.entities import BookingStatus
from nextup.ledger import BookingLedger, combine_date_time, parse_iso_instant


def _booking_kwargs(**overrides):
    data = dict(
        client_name="Sam",
        client_phone="555-0100",
        service_name="Regular cut",
        barber_name="Chair 1",
        date="2025-03-02",
        time="10:30",
    )
    data.update(overrides)
    return data


def test_combine_date_time_converts_to_utc():
    result = combine_date_time("2025-07-01", "09:15", ZoneInfo("Europe/Tirana"))
    assert result == datetime(2025, 7, 1, 7, 15, tzinfo=timezone.utc)


def test_combine_date_time_rejects_garbage():
    assert combine_date_time("tomorrow", "noonish", ZoneInfo("UTC")) is None


def test_parse_iso_instant_handles_z_suffix():
    assert parse_iso_instant("2025-03-02T10:30:00Z", ZoneInfo("UTC")) == datetime(
        2025, 3, 2, 10, 30, tzinfo=timezone.utc
    )


@pytest.mark.asyncio
async def test_create_booking(ledger, catalog, shop, clock):
    booking = await ledger.create_booking(shop.id, **_booking_kwargs(notes=" fade "))

    services = {s.name: s.id for s in await catalog.list_services(shop.id)}
    barbers = {b.name: b.id for b in await catalog.list_barbers(shop.id)}
    assert booking.shop_id == shop.id
    assert booking.id.startswith("bk_")
    assert booking.status is BookingStatus.WAITING
    assert booking.scheduled_at == datetime(2025, 3, 2, 10, 30, tzinfo=timezone.utc)
    assert booking.service_id == services["Regular cut"]
    assert booking.barber_id == barbers["Chair 1"]
    assert booking.notes == "fade"
    assert booking.created_at == clock.now
    assert booking.is_walk_in is False


@pytest.mark.asyncio
async def test_create_booking_reports_missing_fields(ledger, store, shop):
    with pytest.raises(ValidationError) as exc_info:
        await ledger.create_booking(shop.id, client_name=" ", client_phone=None, date="2025-03-02")

    assert exc_info.value.fields == ["clientName", "clientPhone", "serviceName", "time"]
    assert await store.bookings.count() == 0


@pytest.mark.asyncio
async def test_create_booking_unknown_shop(ledger):
    with pytest.raises(NotFound):
        await ledger.create_booking("ghost", **_booking_kwargs())


@pytest.mark.asyncio
async def test_unparseable_datetime_is_rejected(ledger, store, shop):
    with pytest.raises(ValidationError) as exc_info:
        await ledger.create_booking(shop.id, **_booking_kwargs(date="someday"))

    assert exc_info.value.fields == ["dateTime"]
    assert await store.bookings.count() == 0


@pytest.mark.asyncio
async def test_lenient_mode_records_current_time(store, ids, clock, shop):
    lenient = BookingLedger(store, ids, lenient_datetime=True, clock=clock)

    booking = await lenient.create_booking(shop.id, **_booking_kwargs(time="half past"))

    assert booking.scheduled_at == clock.now


@pytest.mark.asyncio
async def test_booking_timezone_applies_to_date_and_time(store, ids, clock, shop):
    ledger = BookingLedger(store, ids, booking_timezone="America/New_York", clock=clock)

    booking = await ledger.create_booking(shop.id, **_booking_kwargs(date="2025-01-15", time="09:00"))

    assert booking.scheduled_at == datetime(2025, 1, 15, 14, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_date_iso_replaces_date_and_time(ledger, shop):
    booking = await ledger.create_booking(
        shop.id, **_booking_kwargs(date=None, time=None, date_iso="2025-03-05T16:45:00+01:00")
    )
    assert booking.scheduled_at == datetime(2025, 3, 5, 15, 45, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_walk_in_defaults(ledger, shop, clock):
    booking = await ledger.create_booking(
        shop.id, client_name="Walk-in Joe", client_phone=None,
        service_name="Beard trim", is_walk_in=True,
    )

    assert booking.is_walk_in is True
    assert booking.client_phone == ""
    assert booking.scheduled_at == clock.now
    assert booking.barber_id is None


@pytest.mark.asyncio
async def test_barber_resolution(ledger, shop):
    any_barber = await ledger.create_booking(shop.id, **_booking_kwargs(barber_name="any BARBER"))
    free_text = await ledger.create_booking(shop.id, **_booking_kwargs(barber_name="Luca"))
    unassigned = await ledger.create_booking(shop.id, **_booking_kwargs(barber_name=""))

    assert (any_barber.barber_id, any_barber.barber_name) == (None, None)
    assert (free_text.barber_id, free_text.barber_name) == (None, "Luca")
    assert (unassigned.barber_id, unassigned.barber_name) == (None, None)


@pytest.mark.asyncio
async def test_unknown_catalog_ids_are_rejected(ledger, catalog, shop, other_shop):
    foreign_service = (await catalog.list_services(other_shop.id))[0]
    foreign_barber = (await catalog.list_barbers(other_shop.id))[1]

    with pytest.raises(ValidationError) as exc_info:
        await ledger.create_booking(shop.id, **_booking_kwargs(service_id=foreign_service.id))
    assert exc_info.value.fields == ["serviceId"]

    with pytest.raises(ValidationError) as exc_info:
        await ledger.create_booking(shop.id, **_booking_kwargs(barber_id=foreign_barber.id))
    assert exc_info.value.fields == ["barberId"]


@pytest.mark.asyncio
async def test_unmatched_service_name_is_kept(ledger, shop):
    booking = await ledger.create_booking(shop.id, **_booking_kwargs(service_name="Mullet"))
    assert (booking.service_id, booking.service_name) == (None, "Mullet")


@pytest.mark.asyncio
async def test_list_bookings_sorted_with_stable_ties(ledger, shop):
    late = await ledger.create_booking(shop.id, **_booking_kwargs(client_name="Late", time="15:00"))
    tie_a = await ledger.create_booking(shop.id, **_booking_kwargs(client_name="A", time="09:00"))
    tie_b = await ledger.create_booking(shop.id, **_booking_kwargs(client_name="B", time="09:00"))

    listed = await ledger.list_bookings(shop.id)

    assert [b.id for b in listed] == [tie_a.id, tie_b.id, late.id]


@pytest.mark.asyncio
async def test_list_bookings_is_shop_scoped(ledger, shop, other_shop):
    mine = await ledger.create_booking(shop.id, **_booking_kwargs())
    await ledger.create_booking(other_shop.id, **_booking_kwargs(service_name="Fade & beard"))

    assert [b.id for b in await ledger.list_bookings(shop.id)] == [mine.id]


@pytest.mark.asyncio
async def test_list_bookings_since(ledger, shop):
    await ledger.create_booking(shop.id, **_booking_kwargs(date="2025-03-01"))
    later = await ledger.create_booking(shop.id, **_booking_kwargs(date="2025-03-03"))

    since = datetime(2025, 3, 2)
    assert [b.id for b in await ledger.list_bookings(shop.id, since=since)] == [later.id]
    assert await ledger.list_bookings(shop.id, since=since + timedelta(days=5)) == []


@pytest.mark.asyncio
async def test_set_status_any_order(ledger, shop):
    booking = await ledger.create_booking(shop.id, **_booking_kwargs())

    done = await ledger.set_status(shop.id, booking.id, "done")
    back = await ledger.set_status(shop.id, booking.id, "in_chair")

    assert done.status is BookingStatus.DONE
    assert back.status is BookingStatus.IN_CHAIR
    assert (await ledger.list_bookings(shop.id))[0].status is BookingStatus.IN_CHAIR


@pytest.mark.asyncio
async def test_set_status_validation(ledger, shop, other_shop):
    booking = await ledger.create_booking(shop.id, **_booking_kwargs())

    with pytest.raises(ValidationError) as exc_info:
        await ledger.set_status(shop.id, booking.id, "finished")
    assert exc_info.value.fields == ["status"]

    with pytest.raises(NotFound):
        await ledger.set_status(other_shop.id, booking.id, "done")
    with pytest.raises(NotFound):
        await ledger.set_status(shop.id, "bk_missing", "done")
