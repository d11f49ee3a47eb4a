"""KalaKart commerce FastAPI application.

Builds the services for one data directory, pushes the Protean domain
context around every request, and maps domain errors to HTTP responses.

Usage:
    uvicorn commerce.app:create_app --factory --host 0.0.0.0 --port 8000
"""

from collections.abc import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from commerce.api.middleware import register_domain_context, register_exception_handlers
from commerce.api.routes import cart_router, checkout_router, earnings_router, order_router, session_router
from commerce.config import CommerceSettings
from commerce.domain import commerce
from commerce.services import build_services
from commerce.utils.logging import configure_logging


def create_app(settings: CommerceSettings | None = None, accounts: Iterable[dict] = ()) -> FastAPI:
    settings = settings or CommerceSettings.from_env()
    configure_logging(settings, log_dir=settings.log_dir)
    commerce.init()

    app = FastAPI(
        title="KalaKart Commerce API",
        description="Cart, simulated payment, orders and artist earnings",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_domain_context(app)
    register_exception_handlers(app)

    with commerce.domain_context():
        app.state.services = build_services(settings, accounts=accounts)

    app.include_router(session_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(earnings_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": commerce.name})

    return app
