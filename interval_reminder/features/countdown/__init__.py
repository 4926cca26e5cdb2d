"""
Countdown feature: 1 Hz refresh of the time remaining until the next reminder
"""
from .service import start_countdown_ticker, stop_countdown_ticker, is_ticker_running

__all__ = ["start_countdown_ticker", "stop_countdown_ticker", "is_ticker_running"]
