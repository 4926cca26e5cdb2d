from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
from datetime import datetime

from interval_reminder.scheduler import ScheduleStatus


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class StartRequest(BaseModel):
    interval: Optional[str] = Field(None, description="Interval in hours, as typed by the user")

    @field_validator("interval", mode="before")
    @classmethod
    def _stringify_numbers(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class ScreenOut(BaseModel):
    status: ScheduleStatus = Field(..., description="Whether a schedule is running")
    interval_hours: float = Field(..., description="Interval currently in effect")
    interval_text: str = Field(..., description="Interval as shown in the input field")
    next_fire_time: Optional[datetime] = Field(None, description="When the next reminder is due")
    countdown: str = Field(..., description="Time remaining as HH:MM:SS, or --:--:-- when idle")
    label: str = Field(..., description="Countdown label text")
    pending_notifications: int = Field(..., description="Notifications waiting for delivery")


class InvalidInputOut(BaseModel):
    error: str = Field(..., description="Notice title")
    details: str = Field(..., description="Notice message")
    interval: str = Field(..., description="Interval text after the reset")
