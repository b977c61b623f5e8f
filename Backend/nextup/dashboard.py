"""
Owner dashboard.

Login takes email + shop id + admin secret and stores the secret in an
HTTP-only cookie scoped to /dashboard. Every dashboard page and mutation
re-authenticates from that cookie; failures send the owner back to the login
form with one generic message.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from . import pages
from .catalog import CatalogManager
from .core.config import Settings, get_settings
from .core.errors import NotFound, Unauthorized, ValidationError
from .deps import get_catalog, get_ledger, get_registry, read_payload
from .entities import Shop
from .ledger import BookingLedger
from .registry import ShopRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

LOGIN_FAILED_MESSAGE = (
    "We couldn't find a shop with that combination. "
    "Check your email, Shop ID and Admin secret."
)


def _dashboard_url(shop_id: str, error: Optional[str] = None) -> str:
    url = f"/dashboard/shops/{quote(shop_id)}"
    return f"{url}?error={quote(error)}" if error else url


def _to_login() -> RedirectResponse:
    return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)


async def _session_shop(
    request: Request,
    shop_id: str,
    registry: ShopRegistry,
    settings: Settings,
    form_secret: Optional[str] = None,
) -> Optional[Shop]:
    # The form field stands in for the cookie when the browser has none.
    secret = request.cookies.get(settings.dashboard_cookie_name) or form_secret
    try:
        return await registry.authenticate(shop_id, secret)
    except Unauthorized:
        return None


@router.get("", response_class=HTMLResponse)
async def login_page():
    return pages.dashboard_login()


@router.post("")
async def login(
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    payload = await read_payload(request)
    try:
        shop = await registry.authenticate(
            str(payload.get("shopId") or "").strip(),
            str(payload.get("adminSecret") or "").strip(),
            email=str(payload.get("email") or ""),
        )
    except Unauthorized:
        return HTMLResponse(
            pages.dashboard_login(LOGIN_FAILED_MESSAGE),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    response = RedirectResponse(_dashboard_url(shop.id), status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.dashboard_cookie_name,
        shop.admin_secret,
        httponly=True,
        samesite="lax",
        path="/dashboard",
    )
    return response


@router.get("/shops/{shop_id}", response_class=HTMLResponse)
async def shop_dashboard(
    shop_id: str,
    request: Request,
    error: Optional[str] = None,
    registry: ShopRegistry = Depends(get_registry),
    catalog: CatalogManager = Depends(get_catalog),
    ledger: BookingLedger = Depends(get_ledger),
    settings: Settings = Depends(get_settings),
):
    try:
        await registry.get_shop(shop_id)
    except NotFound:
        return HTMLResponse(pages.not_found_page(), status_code=status.HTTP_404_NOT_FOUND)
    shop = await _session_shop(request, shop_id, registry, settings)
    if shop is None:
        return _to_login()
    return pages.dashboard_shop(
        shop,
        await catalog.list_barbers(shop_id),
        await catalog.list_services(shop_id),
        await ledger.list_bookings(shop_id),
        error,
    )


async def _mutate(request, shop_id, registry, settings, action) -> RedirectResponse:
    """Read the form, authenticate, run ``action(payload)``, redirect back."""
    payload = await read_payload(request)
    form_secret = str(payload.get("adminSecret") or "").strip() or None
    shop = await _session_shop(request, shop_id, registry, settings, form_secret)
    if shop is None:
        return _to_login()
    try:
        await action(payload)
    except (ValidationError, NotFound) as exc:
        return RedirectResponse(_dashboard_url(shop.id, exc.message), status_code=status.HTTP_303_SEE_OTHER)
    return RedirectResponse(_dashboard_url(shop.id), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/shops/{shop_id}/barbers/add")
async def add_barber(
    shop_id: str,
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    catalog: CatalogManager = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    async def action(payload):
        await catalog.add_barber(shop_id, payload.get("name"))

    return await _mutate(request, shop_id, registry, settings, action)


@router.post("/shops/{shop_id}/barbers/delete")
async def delete_barber(
    shop_id: str,
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    catalog: CatalogManager = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    async def action(payload):
        await catalog.remove_barber(shop_id, payload.get("barberId"))

    return await _mutate(request, shop_id, registry, settings, action)


@router.post("/shops/{shop_id}/services/add")
async def add_service(
    shop_id: str,
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    catalog: CatalogManager = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    async def action(payload):
        await catalog.add_service(
            shop_id,
            payload.get("name"),
            duration_minutes=payload.get("durationMinutes"),
            price=payload.get("price"),
            is_active=payload.get("isActive"),
        )

    return await _mutate(request, shop_id, registry, settings, action)


@router.post("/shops/{shop_id}/services/update")
async def update_service(
    shop_id: str,
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    catalog: CatalogManager = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    async def action(payload):
        await catalog.update_service(
            shop_id,
            payload.get("serviceId"),
            duration_minutes=payload.get("durationMinutes"),
            price=payload.get("price"),
            is_active=payload.get("isActive"),
        )

    return await _mutate(request, shop_id, registry, settings, action)
