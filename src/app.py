"""Shipment console FastAPI application.

Web server that processes operator actions synchronously via HTTP.
Each request is wrapped in the shipment domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from shipment.domain import shipment  # noqa: E402

shipment.init()

_DOMAIN_PREFIXES = ("/shipment", "/couriers", "/catalogue")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Shipment Console API",
    description="Gathering, distribution and delivery of marketplace orders",
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
    """Push the shipment domain context for API requests."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        with shipment.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error handlers
# ---------------------------------------------------------------------------
from shipment.api.errors import register_exception_handlers  # noqa: E402
from shipment.api.routes import catalogue_router, courier_router, shipment_router  # noqa: E402

app.include_router(shipment_router)
app.include_router(courier_router)
app.include_router(catalogue_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": shipment.name}})
