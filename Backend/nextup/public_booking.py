"""
Customer-facing booking form.

    GET  /book/{shop_id} -> form with the shop's barbers and active services
    POST /book/{shop_id} -> append a booking, or re-render the form with the
                            missing fields listed
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse

from . import pages
from .catalog import CatalogManager
from .core.errors import NotFound, ValidationError
from .deps import get_catalog, get_ledger, get_registry, read_payload
from .ledger import BookingLedger
from .registry import ShopRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/book", tags=["public-booking"])

FIELD_LABELS = {
    "clientName": "name",
    "clientPhone": "phone",
    "serviceName": "service",
    "serviceId": "service",
    "barberId": "barber",
    "date": "date",
    "time": "time",
    "dateTime": "a valid date and time",
}


def describe_fields(fields: list[str]) -> str:
    labels = list(dict.fromkeys(FIELD_LABELS.get(f, f) for f in fields))
    return ", ".join(labels)


async def _render_form(
    shop_id: str,
    registry: ShopRegistry,
    catalog: CatalogManager,
    message: str | None = None,
    values: dict | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    shop = await registry.get_shop(shop_id)
    barbers = await catalog.list_barbers(shop_id)
    services = await catalog.list_active_services(shop_id)
    return HTMLResponse(
        pages.booking_form(shop, barbers, services, message, values),
        status_code=status_code,
    )


@router.get("/{shop_id}", response_class=HTMLResponse)
async def booking_page(
    shop_id: str,
    registry: ShopRegistry = Depends(get_registry),
    catalog: CatalogManager = Depends(get_catalog),
):
    try:
        return await _render_form(shop_id, registry, catalog)
    except NotFound:
        return HTMLResponse(pages.not_found_page(), status_code=status.HTTP_404_NOT_FOUND)


@router.post("/{shop_id}", response_class=HTMLResponse)
async def submit_booking(
    shop_id: str,
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    catalog: CatalogManager = Depends(get_catalog),
    ledger: BookingLedger = Depends(get_ledger),
):
    payload = await read_payload(request)
    try:
        shop = await registry.get_shop(shop_id)
    except NotFound:
        return HTMLResponse(pages.not_found_page(), status_code=status.HTTP_404_NOT_FOUND)

    try:
        booking = await ledger.create_booking(
            shop_id,
            client_name=payload.get("clientName"),
            client_phone=payload.get("clientPhone"),
            service_id=payload.get("serviceId"),
            service_name=payload.get("serviceName"),
            barber_id=payload.get("barberId"),
            barber_name=payload.get("barberName"),
            date=payload.get("date"),
            time=payload.get("time"),
            notes=payload.get("notes"),
        )
    except ValidationError as exc:
        message = f"Please fill in {describe_fields(exc.fields)}." if exc.fields else exc.message
        return await _render_form(
            shop_id, registry, catalog, message, payload, status.HTTP_400_BAD_REQUEST
        )
    return HTMLResponse(pages.booking_thanks(shop, booking))
