# main.py
import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from interval_reminder.config import get_settings
from interval_reminder.features.countdown import start_countdown_ticker, stop_countdown_ticker
from interval_reminder.logging import RequestLoggingMiddleware, init_logging
from interval_reminder.notifications import LocalNotificationService, get_notification_service
from interval_reminder.routes import router
from interval_reminder.services.reminder_service import ReminderController

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
init_logging()
logger = logging.getLogger("interval_reminder")


# ---------------------------------------------------------------------------
# App lifespan (startup/shutdown)
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown tasks."""
    settings = get_settings()

    logger.info("Startup: starting scheduler...")
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.start()

    notifier = get_notification_service(settings, scheduler)
    if isinstance(notifier, LocalNotificationService):
        notifier.set_categories([settings.notification_category])
    controller = ReminderController(notifier, settings=settings)

    app.state.scheduler = scheduler
    app.state.controller = controller

    # Permission is fire-and-forget; the answer is only logged
    controller.request_permission()
    controller.refresh()
    start_countdown_ticker(scheduler, controller)

    yield  # app runs during this block

    # Cleanup
    logger.info("Shutdown: stopping countdown ticker...")
    try:
        stop_countdown_ticker(scheduler)
        scheduler.shutdown(wait=False)
        logger.info("Cleanup complete.")
    except Exception as e:
        logger.error("Error during shutdown cleanup: %s", e)


# ---------------------------------------------------------------------------
# FastAPI Application
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Interval Reminder",
    version="1.0.0",
    description=(
        "Single-screen reminder service.\n\n"
        "- Start a batch of local notifications every N hours\n"
        "- Cancel all pending notifications\n"
        "- Read a live countdown to the next one"
    ),
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Base Routes
# ---------------------------------------------------------------------------

@app.get("/", tags=["Health"])
async def root():
    """Basic health check to verify the service is running."""
    return {"status": "ok", "message": "Interval Reminder is running."}


app.include_router(router)


# -------------------------------
# Unified error response handlers
# -------------------------------
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "HTTPException: %s %s -> %s | detail=%s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.detail,
    )
    body = {"error": exc.detail if isinstance(exc.detail, str) else "Error"}
    if isinstance(exc.detail, dict):
        body = dict(exc.detail)
        body.setdefault("error", "Error")
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(
        "ValidationError: %s %s | errors=%s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url.path,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
