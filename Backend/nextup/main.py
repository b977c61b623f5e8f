import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from . import dashboard, onboarding, pages, public_booking, tenant_api
from .core.config import Settings, get_settings
from .core.db import get_sessionmaker, init_db
from .core.errors import register_exception_handlers
from .deps import get_store
from .identity import IdGenerator
from .schemas import HealthOut
from .seed import seed_demo_shop
from .storage import MemoryStore, SqlStore, Store

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def _startup(app: FastAPI, settings: Settings) -> None:
    if settings.uses_memory_storage:
        if settings.seed_demo_shop:
            await seed_demo_shop(app.state.memory_store, app.state.ids, settings.demo_admin_secret or None)
        return
    await init_db()
    if settings.seed_demo_shop:
        async with get_sessionmaker()() as session:
            await seed_demo_shop(SqlStore(session), app.state.ids, settings.demo_admin_secret or None)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await _startup(app, settings)
        logger.info("NextUp backend started (storage=%s)", settings.storage_backend)
        yield

    app = FastAPI(title="NextUp Booking Backend", lifespan=lifespan)
    app.state.memory_store = MemoryStore()
    app.state.ids = IdGenerator()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(onboarding.router)
    app.include_router(public_booking.router)
    app.include_router(dashboard.router)
    app.include_router(tenant_api.router)

    @app.get("/", response_class=HTMLResponse)
    async def home():
        return pages.home_page()

    @app.get("/health", response_model=HealthOut)
    async def healthcheck(store: Store = Depends(get_store)):
        return HealthOut(
            ok=True,
            shop_count=await store.shops.count(),
            booking_count=await store.bookings.count(),
        )

    return app


app = create_app()
