import asyncio
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salon_booking.api.routes import availability, bookings, time_off, waitlist
from salon_booking.core.config import settings, _ENV_FILE
from salon_booking.core.db import async_session_maker
from salon_booking.core.errors import BookingEngineError
from salon_booking.repositories.sql import SqlStore
from salon_booking.services.booking_service import purge_expired_waitlist

if os.getenv("ENV") != "production":
    logging.basicConfig(level=logging.DEBUG)
else:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
    )
logger = logging.getLogger(__name__)


async def _run_waitlist_cleanup() -> None:
    """Delete waitlist entries whose target date has passed."""
    try:
        async with async_session_maker() as session:
            try:
                n = await purge_expired_waitlist(SqlStore(session))
                if n:
                    logger.info("Waitlist cleanup: deleted %d expired entr(y/ies)", n)
            except Exception:
                await session.rollback()
                raise
    except Exception as e:
        logger.exception("Waitlist cleanup failed: %s", e)


def _startup_log() -> None:
    logger.info("Loading .env from: %s (exists: %s)", _ENV_FILE, _ENV_FILE.exists())
    logger.info(
        "Slot step %d min, waitlist fan-out %d, reservation lock timeout %.1fs",
        settings.slot_step_minutes,
        settings.waitlist_notify_limit,
        settings.reservation_lock_timeout_seconds,
    )
    if not settings.email_enabled:
        logger.warning("SMTP not configured; confirmation and waitlist emails are disabled")


@asynccontextmanager
async def lifespan(app: FastAPI):
    _startup_log()
    # Startup: run cleanup once
    await _run_waitlist_cleanup()
    # Background: run every interval
    task = asyncio.create_task(_cleanup_loop())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


async def _cleanup_loop() -> None:
    while True:
        await asyncio.sleep(settings.waitlist_cleanup_interval_seconds)
        await _run_waitlist_cleanup()


app = FastAPI(
    title="Salon Booking API",
    description="Availability, conflict-free reservations and waitlist matching for salons and spas",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(availability.router, prefix="/api/v1")
app.include_router(bookings.router, prefix="/api/v1")
app.include_router(waitlist.router, prefix="/api/v1")
app.include_router(time_off.router, prefix="/api/v1")


def _cors_headers(origin: str | None) -> dict[str, str]:
    """Add CORS headers to error responses so the browser doesn't block them."""
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Authorization, Content-Type",
    }
    if origin and origin in settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = origin
    elif settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = settings.cors_origins_list[0]
    return headers


@app.exception_handler(BookingEngineError)
async def booking_error_handler(request: Request, exc: BookingEngineError) -> JSONResponse:
    """Typed engine errors: 400/404/409 are the caller's to fix, 503 is retryable."""
    if exc.status_code >= 500:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=_cors_headers(request.headers.get("origin")),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return actual error in JSON; include CORS so 500 responses are not blocked by browser."""
    origin = request.headers.get("origin")
    headers = _cors_headers(origin)
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=headers,
        )
    logger.exception("Unhandled exception: %s", exc)
    detail = f"{type(exc).__name__}: {str(exc)}"
    return JSONResponse(
        status_code=500,
        content={"detail": detail},
        headers=headers,
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
