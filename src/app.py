"""Teahouse FastAPI application.

Serves the customer menu and cart, checkout, the admin order endpoints and
the live admin board websocket. Commands are processed synchronously.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay: the default keeps everything in
# memory, "production" stores carts and orders in SQLite.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from ordering.domain import ordering
from ordering.utils.logging import bind_request_context, clear_request_context, configure_logging

configure_logging()
ordering.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Teahouse API",
    description="Drink ordering — menu, carts, orders and the admin board",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

_UNSCOPED_PATHS = ("/health", "/docs", "/openapi.json")


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context for each API request."""
    if request.url.path.startswith(_UNSCOPED_PATHS):
        return await call_next(request)
    bind_request_context(method=request.method, path=request.url.path)
    try:
        with ordering.domain_context():
            response = await call_next(request)
    finally:
        clear_request_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api.live import live_router  # noqa: E402
from ordering.api.routes import admin_router, cart_router, menu_router, order_router  # noqa: E402

app.include_router(menu_router)
app.include_router(cart_router)
app.include_router(live_router)
app.include_router(order_router)
app.include_router(admin_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
            },
        }
    )
