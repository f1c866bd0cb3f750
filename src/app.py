"""Storefront FastAPI application.

Catalog administration, cart, orders and identity-provider synchronization
behind one HTTP server. The database is opened at startup and disposed at
shutdown; handlers receive sessions through a dependency.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog.api.routes import admin_product_router
from identity.api.routes import user_router, webhook_router
from ordering.api.routes import cart_router, order_router
from shared.config import get_settings
from shared.database import get_database
from shared.errors import register_exception_handlers
from shared.logging import configure_logging, request_context

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = get_settings()
    database = get_database()
    database.init()
    if not settings.is_production:
        # Production schemas are managed with `manage.py setup-db`
        database.create_all()
    logger.info("Storefront started", environment=settings.environment)
    yield
    database.dispose()
    logger.info("Storefront stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Storefront API",
        description="E-commerce backend: catalog, cart, orders and identity sync",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind a request id and the route into every log line of the request."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        with request_context(request_id, request.method, request.url.path):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    register_exception_handlers(app)

    app.include_router(webhook_router)
    app.include_router(user_router)
    app.include_router(admin_product_router)
    app.include_router(cart_router)
    app.include_router(order_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "environment": settings.environment})

    return app


app = create_app()
