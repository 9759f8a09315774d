"""KeyStay — FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keystay.api.v1.access_codes import router as access_codes_router
from keystay.api.v1.auth import router as auth_router
from keystay.api.v1.bookings import router as bookings_router
from keystay.api.v1.dashboard import router as dashboard_router
from keystay.api.v1.properties import router as properties_router
from keystay.api.v1.rooms import router as rooms_router
from keystay.config import settings
from keystay.database import engine
from keystay.errors import KeyStayError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("%s %s starting (%s)", settings.app_name, settings.app_version, settings.environment)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Keyless check-in for guesthouses and small hotels: bookings, rooms, and door access codes.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KeyStayError)
async def keystay_error_handler(request: Request, exc: KeyStayError) -> JSONResponse:
    """Render service-layer errors as ``{"detail", "code"}`` with their HTTP status."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Routers
app.include_router(auth_router)
app.include_router(properties_router)
app.include_router(rooms_router)
app.include_router(bookings_router)
app.include_router(access_codes_router)
app.include_router(dashboard_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    return {"status": "healthy", "service": settings.app_name, "environment": settings.environment}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
