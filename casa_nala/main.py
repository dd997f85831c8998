"""
Casa Nala API application.

Run locally:
    uvicorn casa_nala.main:app --reload

Seed the demo menu and the bootstrap admin first:
    python -m casa_nala.seed
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import config
from .auth import AccessDenied
from .db import init_db
from .logging_config import setup_logging
from .middleware import AdminCookieGateMiddleware, RequestIDMiddleware
from .rate_limit import limiter
from .routes import (
    admin_console_router,
    admin_inventory_router,
    admin_menu_router,
    admin_orders_router,
    admin_settings_router,
    auth_router,
    boards_router,
    chat_router,
    mesero_router,
    orders_router,
    public_router,
)

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)

# Routers mounted both at the root and under /api/v1
VERSIONED_ROUTERS = (
    public_router,
    orders_router,
    auth_router,
    admin_console_router,
    admin_orders_router,
    boards_router,
    mesero_router,
    admin_menu_router,
    admin_inventory_router,
    admin_settings_router,
)


async def access_denied_handler(request: Request, exc: AccessDenied) -> JSONResponse:
    decision = exc.decision
    return JSONResponse(
        status_code=403,
        content={
            "detail": "Acceso denegado. No tienes permiso para ver esta página.",
            "outcome": decision.outcome.value,
            "links": decision.links,
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s API started", config.RESTAURANT_NAME)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Casa Nala API",
        description="Ordering, kitchen workflow and admin console for Casa Nala",
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Health check endpoints"},
            {"name": "Orders", "description": "Order submission and checkout"},
            {"name": "Admin - Orders", "description": "Order listing and status changes"},
            {"name": "Admin - Boards", "description": "Kitchen, delivery and pickup boards"},
        ],
    )

    # Starlette runs the last-added middleware first
    app.add_middleware(AdminCookieGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(AccessDenied, access_denied_handler)

    @app.get("/health", tags=["Health"])
    def health() -> Dict[str, str]:
        """Health check endpoint. Returns ok if the service is running."""
        return {"status": "ok"}

    api_v1_router = APIRouter(prefix="/api/v1")
    for router in VERSIONED_ROUTERS:
        api_v1_router.include_router(router)
    app.include_router(api_v1_router)

    for router in VERSIONED_ROUTERS:
        app.include_router(router)
    app.include_router(chat_router)

    return app


app = create_app()
