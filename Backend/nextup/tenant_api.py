"""
Tenant API consumed by the tablet app.

All routes live under /api/shops/{shop_id} and require the shop's admin
secret (``X-Admin-Secret`` header or ``adminSecret`` query parameter).
An unknown shop answers 404 before the secret is checked.

    GET    /config                      -> shop name, status, barbers, services
    GET    /bookings?since=ISO          -> bookings by scheduled time
    POST   /bookings                    -> walk-in (or any staff-entered) booking
    PATCH  /bookings/{booking_id}       -> status change
    POST   /barbers                     -> add barber
    DELETE /barbers/{barber_id}         -> remove barber (idempotent)
    POST   /services                    -> add service
    PATCH  /services/{service_id}       -> update service
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from .catalog import CatalogManager
from .deps import get_catalog, get_ledger, require_admin_shop
from .entities import Shop
from .ledger import BookingLedger
from .schemas import (
    BarberCreateRequest,
    BarberOut,
    BookingCreateRequest,
    BookingOut,
    BookingStatusRequest,
    ServiceCreateRequest,
    ServiceOut,
    ServiceUpdateRequest,
    ShopConfigOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shops/{shop_id}", tags=["tenant-api"])


@router.get("/config", response_model=ShopConfigOut)
async def shop_config(
    shop: Shop = Depends(require_admin_shop),
    catalog: CatalogManager = Depends(get_catalog),
):
    barbers = await catalog.list_barbers(shop.id)
    services = await catalog.list_services(shop.id)
    return ShopConfigOut(
        shop_id=shop.id,
        name=shop.name,
        subscription_status=shop.subscription_status,
        barbers=[BarberOut.of(b) for b in barbers],
        services=[ServiceOut.of(s) for s in services],
    )


@router.get("/bookings", response_model=list[BookingOut])
async def list_bookings(
    since: Optional[datetime] = None,
    shop: Shop = Depends(require_admin_shop),
    ledger: BookingLedger = Depends(get_ledger),
):
    bookings = await ledger.list_bookings(shop.id, since)
    return [BookingOut.of(b) for b in bookings]


@router.post("/bookings", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: BookingCreateRequest,
    shop: Shop = Depends(require_admin_shop),
    ledger: BookingLedger = Depends(get_ledger),
):
    booking = await ledger.create_booking(
        shop.id,
        client_name=body.client_name,
        client_phone=body.client_phone,
        service_id=body.service_id,
        service_name=body.service_name,
        barber_id=body.barber_id,
        barber_name=body.barber_name,
        date=body.date,
        time=body.time,
        date_iso=body.date_iso,
        notes=body.notes,
        is_walk_in=body.is_walk_in,
    )
    return BookingOut.of(booking)


@router.patch("/bookings/{booking_id}", response_model=BookingOut)
async def set_booking_status(
    booking_id: str,
    body: BookingStatusRequest,
    shop: Shop = Depends(require_admin_shop),
    ledger: BookingLedger = Depends(get_ledger),
):
    booking = await ledger.set_status(shop.id, booking_id, body.status)
    return BookingOut.of(booking)


@router.post("/barbers", response_model=BarberOut, status_code=status.HTTP_201_CREATED)
async def add_barber(
    body: BarberCreateRequest,
    shop: Shop = Depends(require_admin_shop),
    catalog: CatalogManager = Depends(get_catalog),
):
    return BarberOut.of(await catalog.add_barber(shop.id, body.name))


@router.delete("/barbers/{barber_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_barber(
    barber_id: str,
    shop: Shop = Depends(require_admin_shop),
    catalog: CatalogManager = Depends(get_catalog),
):
    await catalog.remove_barber(shop.id, barber_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/services", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
async def add_service(
    body: ServiceCreateRequest,
    shop: Shop = Depends(require_admin_shop),
    catalog: CatalogManager = Depends(get_catalog),
):
    service = await catalog.add_service(
        shop.id,
        body.name,
        duration_minutes=body.duration_minutes,
        price=body.price,
        is_active=body.is_active,
    )
    return ServiceOut.of(service)


@router.patch("/services/{service_id}", response_model=ServiceOut)
async def update_service(
    service_id: str,
    body: ServiceUpdateRequest,
    shop: Shop = Depends(require_admin_shop),
    catalog: CatalogManager = Depends(get_catalog),
):
    service = await catalog.update_service(
        shop.id,
        service_id,
        duration_minutes=body.duration_minutes,
        price=body.price,
        is_active=body.is_active,
    )
    return ServiceOut.of(service)
