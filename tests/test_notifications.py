"""
Tests for the notification collaborators
"""
import json
import httpx
import pytest
import pytest_asyncio
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from interval_reminder.config import Settings
from interval_reminder.notifications import (
    InMemoryNotificationService,
    LocalNotificationService,
    NotificationTemplate,
    PendingNotification,
    PermissionKind,
    get_notification_service,
)
from interval_reminder.scheduler import IntervalScheduler
from interval_reminder.utils import push


def _settings(**overrides) -> Settings:
    values = {"NOTIFICATION_BACKEND": "local", "PUSH_URL": None}
    values.update(overrides)
    return Settings(**values)


def _batch(hours=1.0, size=24):
    now = datetime.now(timezone.utc)
    _, batch = IntervalScheduler(batch_size=size).start(hours, now)
    return batch


@pytest_asyncio.fixture
async def scheduler():
    sched = AsyncIOScheduler(timezone="UTC")
    sched.start()
    yield sched
    sched.shutdown(wait=False)


class TestTemplate:
    def test_from_settings_renders_interval(self, settings):
        template = NotificationTemplate.from_settings(settings)
        assert template.render_body(2.0) == "Your 2.0-HOUR Notification!"
        assert template.render_body(0.5) == "Your 0.5-HOUR Notification!"


class TestFactory:
    def test_memory_backend(self):
        service = get_notification_service(_settings(NOTIFICATION_BACKEND="memory"))
        assert isinstance(service, InMemoryNotificationService)

    def test_local_backend_needs_scheduler(self):
        with pytest.raises(ValueError):
            get_notification_service(_settings())

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_notification_service(_settings(NOTIFICATION_BACKEND="carrier-pigeon"))


class TestLocalNotificationService:
    @pytest.mark.asyncio
    async def test_schedule_registers_one_job_per_fire_time(self, scheduler, settings):
        service = LocalNotificationService(scheduler, _settings())
        batch = _batch()

        service.schedule(batch, NotificationTemplate.from_settings(settings), 1.0)

        jobs = {job.id: job for job in scheduler.get_jobs()}
        assert len(jobs) == 24
        for entry in batch:
            assert jobs[entry.identifier].trigger.run_date == entry.fire_time
        assert [n.identifier for n in service.pending()] == [e.identifier for e in batch]

    @pytest.mark.asyncio
    async def test_cancel_all_leaves_other_jobs(self, scheduler, settings):
        async def other():
            return None

        scheduler.add_job(other, "interval", seconds=60, id="countdown_ticker")
        service = LocalNotificationService(scheduler, _settings())
        service.schedule(_batch(), NotificationTemplate.from_settings(settings), 1.0)

        service.cancel_all()

        assert [job.id for job in scheduler.get_jobs()] == ["countdown_ticker"]
        assert service.pending() == []

    @pytest.mark.asyncio
    async def test_reschedule_keeps_at_most_one_batch(self, scheduler, settings):
        service = LocalNotificationService(scheduler, _settings())
        template = NotificationTemplate.from_settings(settings)

        service.schedule(_batch(1.0), template, 1.0)
        service.cancel_all()
        service.schedule(_batch(2.0, size=5), template, 2.0)

        assert len(scheduler.get_jobs()) == 5
        assert all(n.body == "Your 2.0-HOUR Notification!" for n in service.pending())

    @pytest.mark.asyncio
    async def test_request_permission_follows_settings(self, scheduler):
        granted = LocalNotificationService(scheduler, _settings(NOTIFICATIONS_PERMITTED=True))
        denied = LocalNotificationService(scheduler, _settings(NOTIFICATIONS_PERMITTED=False))
        kinds = [PermissionKind.alert, PermissionKind.sound]

        assert await granted.request_permission(kinds) is True
        assert await denied.request_permission(kinds) is False
        assert denied.permission_granted is False


def _notification(settings, identifier="notification_0"):
    entry = _batch(size=1)[0].model_copy(update={"identifier": identifier})
    return PendingNotification.build(entry, NotificationTemplate.from_settings(settings), 4.0)


class TestDelivery:
    @pytest.mark.asyncio
    async def test_deliver_without_push(self, scheduler, settings, monkeypatch):
        calls = []

        async def fake_push(*args, **kwargs):
            calls.append(args)

        monkeypatch.setattr("interval_reminder.notifications.local.send_push_notification", fake_push)
        service = LocalNotificationService(scheduler, _settings())

        assert await service.deliver(_notification(settings)) is True
        assert calls == []

    @pytest.mark.asyncio
    async def test_deliver_pushes_when_configured(self, scheduler, settings, monkeypatch):
        calls = []

        async def fake_push(push_url, notification, token=None):
            calls.append((push_url, notification, token))

        monkeypatch.setattr("interval_reminder.notifications.local.send_push_notification", fake_push)
        service = LocalNotificationService(
            scheduler, _settings(PUSH_URL="https://example.test/hook", PUSH_TOKEN="secret")
        )

        assert await service.deliver(_notification(settings)) is True
        url, payload, token = calls[0]
        assert url == "https://example.test/hook"
        assert payload["body"] == "Your 4.0-HOUR Notification!"
        assert token == "secret"

    @pytest.mark.asyncio
    async def test_push_failure_is_swallowed_by_delivery(self, scheduler, settings, monkeypatch):
        async def failing_push(*args, **kwargs):
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr("interval_reminder.notifications.local.send_push_notification", failing_push)
        service = LocalNotificationService(scheduler, _settings(PUSH_URL="https://example.test/hook"))

        assert await service.deliver(_notification(settings)) is True

    @pytest.mark.asyncio
    async def test_denied_permission_suppresses_delivery(self, scheduler, settings):
        service = LocalNotificationService(scheduler, _settings(NOTIFICATIONS_PERMITTED=False))
        await service.request_permission([PermissionKind.alert])
        service.schedule(_batch(size=2), NotificationTemplate.from_settings(settings), 1.0)

        first = service.pending()[0]
        assert await service.deliver(first) is False
        assert [n.identifier for n in service.pending()] == ["notification_1"]


class TestPush:
    @pytest.mark.asyncio
    async def test_posts_payload_with_bearer_token(self, monkeypatch, settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            push.httpx,
            "AsyncClient",
            lambda **kw: real_client(transport=httpx.MockTransport(handler), **kw),
        )

        notification = _notification(settings).model_dump()
        await push.send_push_notification("https://example.test/hook", notification, token="abc")

        assert seen["auth"] == "Bearer abc"
        assert seen["body"]["id"] == "notification_0"
        assert seen["body"]["title"] == "🔔 REMINDER 🔔"

    @pytest.mark.asyncio
    async def test_http_error_is_raised(self, monkeypatch, settings):
        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            push.httpx,
            "AsyncClient",
            lambda **kw: real_client(transport=httpx.MockTransport(lambda r: httpx.Response(503)), **kw),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await push.send_push_notification("https://example.test/hook", _notification(settings).model_dump())

    @pytest.mark.asyncio
    async def test_no_url_is_a_noop(self):
        await push.send_push_notification("", {"identifier": "notification_0"})
