"""FastAPI application entry point for the VendorGPT marketplace API."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vendor_gpt.app.config import get_settings
from vendor_gpt.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)
from vendor_gpt.domain.schemas import HealthResponse
from vendor_gpt.infra.database import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: initialize database on startup."""
    await init_db()
    yield


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.debug else logging.WARNING,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

app = FastAPI(
    title="VendorGPT API",
    lifespan=lifespan,
    debug=settings.debug,
)

_cors_origins = settings.cors_origins_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=("*" not in _cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Domain errors -> HTTP
# ---------------------------------------------------------------------------

_STATUS_CODES: dict[type[MarketplaceError], int] = {
    ValidationError: 422,
    NotFoundError: 404,
    PermissionDeniedError: 403,
    ConflictError: 409,
    InvalidTransitionError: 400,
    StoreError: 503,
}


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    status_code = 500
    for error_type, code in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)

    content = {"detail": str(exc)}
    if isinstance(exc, ValidationError) and exc.fields:
        content["fields"] = exc.fields
    return JSONResponse(status_code=status_code, content=content)


# ---------------------------------------------------------------------------
# Route includes
# ---------------------------------------------------------------------------
from vendor_gpt.app.routes.bids import router as bids_router  # noqa: E402
from vendor_gpt.app.routes.chat import router as chat_router  # noqa: E402
from vendor_gpt.app.routes.feeds import router as feeds_router  # noqa: E402
from vendor_gpt.app.routes.orders import router as orders_router  # noqa: E402
from vendor_gpt.app.routes.products import router as products_router  # noqa: E402
from vendor_gpt.app.routes.users import router as users_router  # noqa: E402

app.include_router(chat_router)
app.include_router(products_router)
app.include_router(bids_router)
app.include_router(orders_router)
app.include_router(users_router)
app.include_router(feeds_router)


@app.get("/health", tags=["health"], response_model=HealthResponse)
async def health_check():
    """Return service health status."""
    return {"status": "ok", "service": "vendor-gpt"}


def run() -> None:
    """Run the application with uvicorn (used by project.scripts entry point)."""
    uvicorn.run(
        "vendor_gpt.app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
