"""Storefront FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

PROTEAN_ENV selects the configuration overlay from domain.toml (the
"production" overlay switches the database to PostgreSQL).
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.api.cart import cart_router, wishlist_router
from storefront.api.catalogue import category_router, product_router
from storefront.api.coupons import admin_coupon_router, coupon_router
from storefront.api.orders import admin_order_router, order_router
from storefront.domain import storefront
from storefront.order.placement import OrderPipeline
from storefront.settings import load_settings
from storefront.shared.errors import StorefrontError
from storefront.utils.logging import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

routers = [
    product_router,
    category_router,
    coupon_router,
    admin_coupon_router,
    order_router,
    admin_order_router,
    cart_router,
    wishlist_router,
]


def create_app(init_domain: bool = True) -> FastAPI:
    """Build the application.

    Tests that have already initialized the domain pass ``init_domain=False``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_domain:
            storefront.init()
        with storefront.domain_context():
            app.state.pipeline = OrderPipeline(load_settings(storefront))
        logger.info("storefront_started", domain=storefront.name)
        yield
        logger.info("storefront_stopped", domain=storefront.name)

    app = FastAPI(
        title="Storefront API",
        description="Catalogue, coupons, carts and order placement",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context and tag log lines with a request id."""
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        bind_request_context(request_id=request_id, user_id=request.headers.get("X-User-Id"))
        try:
            with storefront.domain_context():
                response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-Id"] = request_id
        return response

    register_exception_handlers(app)

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=str(exc))
        else:
            logger.info("request_rejected", path=request.url.path, error=type(exc).__name__, messages=exc.messages)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.messages})

    for router in routers:
        app.include_router(router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name})

    return app


app = create_app()
