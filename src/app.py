"""Cafe FastAPI application.

Serves the cafe domain over HTTP and processes commands synchronously. Every
request under a domain prefix runs inside the cafe domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - unset        → in-memory database
#   - "production" → PostgreSQL
from cafe.domain import cafe  # noqa: E402
from cafe.utils.logging import log_context  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

cafe.init()

_DOMAIN_PREFIXES = ("/items", "/orders", "/tax")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Cafe API",
    description="Cafe point of sale: menu, orders and tax",
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
    """Push the cafe domain context for domain routes."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        with cafe.domain_context(), log_context(
            method=request.method,
            path=request.url.path,
            username=request.headers.get("x-username"),
        ):
            response = await call_next(request)
        return response
    # Health check, docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error handling
# ---------------------------------------------------------------------------
from cafe.api import items_router, orders_router, register_error_handlers, tax_router  # noqa: E402

app.include_router(items_router)
app.include_router(orders_router)
app.include_router(tax_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": cafe.name}})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
