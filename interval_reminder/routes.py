import logging
from fastapi import APIRouter, HTTPException, Request
from interval_reminder import schemas
from interval_reminder.scheduler import InvalidIntervalError
from interval_reminder.services.reminder_service import (
    INVALID_INPUT_MESSAGE,
    INVALID_INPUT_TITLE,
    ReminderController,
)

logger = logging.getLogger("interval_reminder.routes")
router = APIRouter(prefix="/reminder", tags=["Reminder"])


def _controller(request: Request) -> ReminderController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Reminder service not ready")
    return controller


@router.get("", response_model=schemas.ScreenOut)
async def get_screen(request: Request):
    controller = _controller(request)
    controller.refresh()
    return controller.snapshot()


@router.post(
    "/start",
    response_model=schemas.ScreenOut,
    responses={400: {"model": schemas.InvalidInputOut}},
)
async def start_reminders(body: schemas.StartRequest, request: Request):
    controller = _controller(request)
    try:
        controller.start(body.interval)
    except InvalidIntervalError:
        raise HTTPException(
            status_code=400,
            detail={
                "error": INVALID_INPUT_TITLE,
                "details": INVALID_INPUT_MESSAGE,
                "interval": controller.interval_text,
            },
        )
    return controller.snapshot()


@router.post("/cancel", response_model=schemas.ScreenOut)
async def cancel_reminders(request: Request):
    controller = _controller(request)
    controller.cancel()
    return controller.snapshot()
