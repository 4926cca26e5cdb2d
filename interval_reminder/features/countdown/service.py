"""
Countdown ticker: periodic job that refreshes the reminder screen's countdown
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from interval_reminder.services.reminder_service import ReminderController

logger = logging.getLogger("interval_reminder.countdown")

TICKER_JOB_ID = "countdown_ticker"


async def refresh_countdown(controller: ReminderController) -> str:
    """One tick. Declared async so the scheduler runs it on the event loop."""
    return controller.refresh()


def start_countdown_ticker(scheduler: AsyncIOScheduler, controller: ReminderController) -> None:
    """Start the periodic countdown refresh."""
    if scheduler.get_job(TICKER_JOB_ID) is not None:
        logger.warning("Countdown ticker already running")
        return

    settings = controller.settings

    scheduler.add_job(
        refresh_countdown,
        trigger=IntervalTrigger(seconds=settings.countdown_tick_seconds),
        args=[controller],
        id=TICKER_JOB_ID,
        name="Refresh reminder countdown",
        replace_existing=True,
        max_instances=1,  # Prevent overlapping runs
        coalesce=True,
    )
    logger.info("Countdown ticker started (every %s second(s))", settings.countdown_tick_seconds)


def stop_countdown_ticker(scheduler: AsyncIOScheduler) -> None:
    """Stop the periodic countdown refresh."""
    if scheduler.get_job(TICKER_JOB_ID) is None:
        logger.warning("Countdown ticker not running")
        return

    scheduler.remove_job(TICKER_JOB_ID)
    logger.info("Countdown ticker stopped")


def is_ticker_running(scheduler: AsyncIOScheduler) -> bool:
    """Check if the ticker job is registered on a running scheduler."""
    return scheduler.running and scheduler.get_job(TICKER_JOB_ID) is not None
