"""
Interval scheduler: turns a validated interval into a batch of fire times
and projects the countdown to the next one.
"""
import math
import re
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

DEFAULT_INTERVAL_HOURS = 4.0
BATCH_SIZE = 24
IDLE_DISPLAY = "--:--:--"
MIN_STEP = timedelta(microseconds=1)
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class InvalidIntervalError(ValueError):
    """Interval text is missing, non-numeric, non-finite or not positive."""

    def __init__(self, text: Optional[str]):
        self.text = text
        super().__init__(f"Invalid interval: {text!r}")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class ScheduleStatus(str, Enum):
    idle = "idle"
    active = "active"


class ScheduleState(BaseModel):
    status: ScheduleStatus = Field(ScheduleStatus.idle, description="Idle or active schedule")
    interval_hours: Optional[float] = Field(None, description="Interval of the active schedule")
    next_fire_time: Optional[datetime] = Field(None, description="Next notification due")

    @classmethod
    def idle(cls) -> "ScheduleState":
        return cls()

    @property
    def is_active(self) -> bool:
        return self.status == ScheduleStatus.active


class ScheduledNotification(BaseModel):
    identifier: str = Field(..., description="Identifier handed to the notification service")
    fire_time: datetime = Field(..., description="Absolute time the notification is due")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def format_remaining(seconds: float) -> str:
    """Format a duration as zero-padded HH:MM:SS; hours are not wrapped at 24."""
    total = max(0, math.ceil(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class IntervalScheduler:
    """Pure, synchronous scheduling policy. Performs no I/O."""

    def __init__(self, batch_size: int = BATCH_SIZE):
        self.batch_size = batch_size

    def validate(self, text: Optional[str], now: Optional[datetime] = None) -> float:
        """Parse interval text into hours.

        Accepts plain decimal notation only. The interval must be at least one
        microsecond, and the last fire time of a full batch must be
        representable (from `now`, when given).
        """
        if text is None:
            raise InvalidIntervalError(text)
        cleaned = str(text).strip()
        if not DECIMAL_PATTERN.match(cleaned):
            raise InvalidIntervalError(text)
        hours = float(cleaned)
        if not math.isfinite(hours) or hours <= 0:
            raise InvalidIntervalError(text)
        try:
            if timedelta(hours=hours) < MIN_STEP:
                raise InvalidIntervalError(text)
            horizon = timedelta(seconds=hours * 3600 * self.batch_size)
            if now is not None:
                now + horizon  # OverflowError past datetime.max
        except OverflowError:
            raise InvalidIntervalError(text) from None
        return hours

    def start(self, interval_hours: float, now: datetime) -> Tuple[ScheduleState, List[ScheduledNotification]]:
        """Build the active state and the batch of future fire times.

        The caller must clear any previously pending batch before submitting
        this one.
        """
        step = interval_hours * 3600
        state = ScheduleState(
            status=ScheduleStatus.active,
            interval_hours=interval_hours,
            next_fire_time=now + timedelta(seconds=step),
        )
        batch = [
            ScheduledNotification(
                identifier=f"notification_{i}",
                fire_time=now + timedelta(seconds=step * (i + 1)),
            )
            for i in range(self.batch_size)
        ]
        return state, batch

    @staticmethod
    def cancel() -> ScheduleState:
        return ScheduleState.idle()

    @staticmethod
    def tick(state: ScheduleState, now: datetime) -> Tuple[ScheduleState, str]:
        """Project the countdown at `now`.

        Once the fire time has passed it moves forward by whole intervals,
        never from `now`, so the cadence grid stays fixed.
        """
        if not state.is_active or state.next_fire_time is None or not state.interval_hours:
            return state, IDLE_DISPLAY

        step = timedelta(hours=state.interval_hours)
        if now >= state.next_fire_time:
            # skip every interval that elapsed while unobserved
            missed = (now - state.next_fire_time) // step
            state.next_fire_time += step * missed
            while now >= state.next_fire_time:
                state.next_fire_time += step

        remaining = (state.next_fire_time - now).total_seconds()
        return state, format_remaining(remaining)
