"""
FastAPI dependencies: store selection, service construction, admin auth.
"""

import json
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, Query, Request
from pydantic import ValidationError as PydanticValidationError

from .catalog import CatalogManager
from .core.config import Settings, get_settings
from .core.db import get_sessionmaker
from .core.errors import ValidationError
from .entities import Shop
from .identity import IdGenerator
from .ledger import BookingLedger
from .registry import ShopRegistry
from .schemas import SignupRequest
from .storage import SqlStore, Store


async def get_store(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[Store]:
    """One store per request: the shared memory store, or a fresh SQL session."""
    if settings.uses_memory_storage:
        yield request.app.state.memory_store
        return
    async with get_sessionmaker()() as session:
        yield SqlStore(session)


def get_id_generator(request: Request) -> IdGenerator:
    return request.app.state.ids


def get_registry(
    store: Store = Depends(get_store),
    ids: IdGenerator = Depends(get_id_generator),
) -> ShopRegistry:
    return ShopRegistry(store, ids)


def get_catalog(
    store: Store = Depends(get_store),
    ids: IdGenerator = Depends(get_id_generator),
) -> CatalogManager:
    return CatalogManager(store, ids)


def get_ledger(
    store: Store = Depends(get_store),
    ids: IdGenerator = Depends(get_id_generator),
    settings: Settings = Depends(get_settings),
) -> BookingLedger:
    return BookingLedger(
        store,
        ids,
        booking_timezone=settings.booking_timezone,
        lenient_datetime=settings.lenient_booking_datetime,
    )


async def require_admin_shop(
    shop_id: str,
    x_admin_secret: Optional[str] = Header(None, alias="X-Admin-Secret"),
    admin_secret: Optional[str] = Query(None, alias="adminSecret"),
    registry: ShopRegistry = Depends(get_registry),
) -> Shop:
    """
    Tenant API guard: 404 for an unknown shop, then 401 unless the admin
    secret (header or query parameter) matches.
    """
    await registry.get_shop(shop_id)
    return await registry.authenticate(shop_id, x_admin_secret or admin_secret)


async def read_payload(request: Request) -> dict:
    """Body of a form post or a JSON request as a flat dict."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except json.JSONDecodeError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(body, dict):
            raise ValidationError("JSON body must be an object")
        return body
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def wants_json(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith("application/json")


def parse_signup(payload: dict) -> SignupRequest:
    try:
        return SignupRequest.model_validate(payload)
    except PydanticValidationError as exc:
        fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        raise ValidationError("Invalid signup fields", fields)


def public_base_url(request: Request, settings: Settings) -> str:
    return (settings.public_base_url or str(request.base_url)).rstrip("/")
