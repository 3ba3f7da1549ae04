"""FoodStream FastAPI application.

Backend for the food-ordering client: per-restaurant orders and delivery
tracking, processed synchronously over HTTP. Each request is wrapped in the
correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8082 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from delivery.domain import delivery
from ordering.domain import ordering
from ordering.utils.logging import bind_request, configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied.
configure_logging()
ordering.init()
delivery.init()

API_PREFIX = "/api/v1"

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    f"{API_PREFIX}/orders": ordering,
    f"{API_PREFIX}/delivery": delivery,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="FoodStream API",
    description="Food ordering backend — Ordering & Delivery domains",
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
    """Push the correct Protean domain context and a request id for each request."""
    request_id = bind_request(request.headers.get("x-request-id"))
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
    else:
        # No domain match: health check and docs pass straight through
        response = await call_next(request)
    response.headers["x-request-id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from delivery.api.routes import delivery_router  # noqa: E402
from ordering.api.routes import order_router  # noqa: E402

app.include_router(order_router, prefix=API_PREFIX)
app.include_router(delivery_router, prefix=API_PREFIX)
register_exception_handlers(app)


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
                "delivery": {"name": delivery.name},
            },
        }
    )
