"""
Shop onboarding and the shop listing.

    GET  /signup            -> signup form
    POST /signup            -> form post (HTML) or JSON body (JSON)
    POST /api/shops         -> programmatic signup, optional explicit shopId
    POST /api/shops/signup  -> same, kept for older clients
    GET  /api/shops         -> all shops, newest first, without secrets

These endpoints DO NOT require a shop credential; they create the shop.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from . import pages
from .core.config import Settings, get_settings
from .core.errors import ValidationError
from .deps import get_registry, parse_signup, public_base_url, read_payload, wants_json
from .entities import Shop
from .registry import ShopRegistry
from .schemas import ShopSummary, SignupRequest, SignupResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["onboarding"])


def build_signup_response(shop: Shop, base_url: str) -> SignupResponse:
    return SignupResponse(
        shop_id=shop.id,
        shop_name=shop.name,
        owner_email=shop.owner_email,
        admin_secret=shop.admin_secret,
        subscription_status=shop.subscription_status,
        created_at=shop.created_at,
        booking_url=f"{base_url}/book/{shop.id}",
        api_url=f"{base_url}/api/shops/{shop.id}/bookings",
        dashboard_url=f"{base_url}/dashboard/shops/{shop.id}",
    )


async def _create(registry: ShopRegistry, signup: SignupRequest, allow_explicit_id: bool) -> Shop:
    return await registry.create_shop(
        name=signup.shop_name,
        owner_email=signup.email,
        owner_name=signup.owner_name,
        city=signup.city,
        shop_id=signup.shop_id if allow_explicit_id else None,
    )


@router.get("/signup", response_class=HTMLResponse)
async def signup_page():
    return pages.signup_form()


@router.post("/signup")
async def signup(
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """
    Create a shop from the signup form or a JSON body.

    JSON callers get the SignupResponse (201); form callers get the success
    page, or the form again with a message when a required field is missing.
    """
    payload = await read_payload(request)
    signup_data = parse_signup(payload)
    base_url = public_base_url(request, settings)

    if wants_json(request):
        shop = await _create(registry, signup_data, allow_explicit_id=False)
        body = build_signup_response(shop, base_url)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=body.model_dump(mode="json", by_alias=True))

    try:
        shop = await _create(registry, signup_data, allow_explicit_id=False)
    except ValidationError:
        return HTMLResponse(
            pages.signup_form("Please fill in at least shop name and contact email.", payload),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    links = build_signup_response(shop, base_url)
    return HTMLResponse(
        pages.signup_success(shop, links.booking_url, links.api_url, links.dashboard_url)
    )


@router.post("/api/shops", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
@router.post("/api/shops/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def create_shop(
    body: SignupRequest,
    request: Request,
    registry: ShopRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """
    Programmatic shop creation.

    Error Codes:
    - 400: shop name or owner email missing
    - 409: explicit shopId already taken
    """
    shop = await _create(registry, body, allow_explicit_id=True)
    return build_signup_response(shop, public_base_url(request, settings))


@router.get("/api/shops", response_model=list[ShopSummary])
async def list_shops(registry: ShopRegistry = Depends(get_registry)):
    shops = await registry.list_shops()
    return [ShopSummary.of(shop) for shop in shops]
