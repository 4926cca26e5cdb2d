from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App environment
    env: str = Field(default="development", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")

    # Scheduling
    default_interval_hours: float = Field(default=4.0, alias="DEFAULT_INTERVAL_HOURS")
    notification_batch_size: int = Field(default=24, alias="NOTIFICATION_BATCH_SIZE")  # platform pending-notification cap
    countdown_tick_seconds: float = Field(default=1.0, alias="COUNTDOWN_TICK_SECONDS")

    # Notification delivery
    # local → APScheduler jobs on the app loop
    # memory → record only (tests / headless)
    notification_backend: str = Field(default="local", alias="NOTIFICATION_BACKEND")
    notifications_permitted: bool = Field(default=True, alias="NOTIFICATIONS_PERMITTED")
    notification_title: str = Field(default="🔔 REMINDER 🔔", alias="NOTIFICATION_TITLE")
    notification_subtitle: str = Field(default="Time to Check In!", alias="NOTIFICATION_SUBTITLE")
    notification_body_template: str = Field(
        default="Your {interval}-HOUR Notification!", alias="NOTIFICATION_BODY_TEMPLATE"
    )
    notification_sound: str = Field(default="default", alias="NOTIFICATION_SOUND")
    notification_category: str = Field(default="customNotification", alias="NOTIFICATION_CATEGORY")

    # Optional webhook hand-off for delivered notifications
    push_url: Optional[str] = Field(default=None, alias="PUSH_URL")
    push_token: Optional[str] = Field(default=None, alias="PUSH_TOKEN")

    # Logging configuration used by interval_reminder.logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    console_log_level: str = Field(default="INFO", alias="CONSOLE_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
