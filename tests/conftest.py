import os
from datetime import datetime, timezone

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

# Ensure .env is loaded, then FORCE the in-memory backend for tests regardless of .env
load_dotenv()
os.environ["ENV"] = "test"
os.environ["NOTIFICATION_BACKEND"] = "memory"
os.environ["NOTIFICATIONS_PERMITTED"] = "true"
os.environ.pop("PUSH_URL", None)
os.environ.pop("NOTIFICATION_BATCH_SIZE", None)
os.environ.pop("DEFAULT_INTERVAL_HOURS", None)

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for controller tests."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    from interval_reminder.config import Settings

    return Settings()


@pytest.fixture()
def client(clock):
    from interval_reminder.main import app

    with TestClient(app) as c:
        c.app.state.controller.clock = clock
        yield c
