from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import Database
from shared.config.settings import Settings, get_settings
from shared.errors import MarketplaceError
from shared.observability import setup_observability
from shared.security import limiter, order_rate_limit

# Imported so every model registers with Base before create_all
from services.user_service.models import User  # noqa: F401
from services.product_service.models import Product  # noqa: F401
from services.order_service.models import Order  # noqa: F401

from services.order_service.placement import OrderPlacementService
from services.order_service.router import router as order_router
from services.product_service.router import router as product_router
from services.user_service.policy import RolePolicy
from services.user_service.router import router as auth_router

logger = structlog.get_logger(__name__)


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the marketplace API.

    The storage handle and role policy are created here, once, and handed to
    routers through ``app.state``. Pass ``database`` to reuse an existing
    handle (tests do).
    """
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.db_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database.available:
            await database.create_all()
        else:
            logger.warning("storage_unavailable", detail="DATABASE_URL is not set; reads degrade, writes fail")
        yield
        await database.dispose()

    app = FastAPI(title="Marketplace", version=settings.version, lifespan=lifespan)

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, settings)

    app.state.settings = settings
    app.state.db = database
    app.state.role_policy = RolePolicy(settings.admin_open_ids)
    app.state.order_placement = OrderPlacementService(database)

    # --- SECURITY SETUP ---
    limiter.enabled = settings.rate_limit_enabled
    order_rate_limit.value = settings.order_rate_limit
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)

    @app.get("/health", include_in_schema=False)
    async def health_check():
        return {
            "service": settings.service_name,
            "status": "running",
            "database": "available" if database.available else "unavailable",
        }

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(order_router)

    return app
