"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from scheduling.conf import SchedulingSettings
from scheduling.services.event_service import EventService
from tests.fakes import (
    OWNER,
    RESPONDENT,
    FakeTaskScheduler,
    FakeUserDirectory,
    InMemoryEventStore,
    RecordingNotificationQueue,
)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def scheduling_settings() -> SchedulingSettings:
    return SchedulingSettings(
        base_url="https://schedule.example.com",
        default_owner_name="Somebody",
        reminder_delays_hours=(24, 72),
        everyone_responded_template_id=8,
        group_invite_template_id=9,
        listmonk_url="https://listmonk.example.com",
        listmonk_username="api",
        listmonk_password="secret",
        chat_webhook_url="https://chat.example.com/hook",
        redis_url="redis://localhost:6379",
        response_write_retries=3,
        http_timeout_seconds=5.0,
    )


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def users() -> FakeUserDirectory:
    return FakeUserDirectory(OWNER, RESPONDENT)


@pytest.fixture
def scheduler() -> FakeTaskScheduler:
    return FakeTaskScheduler()


@pytest.fixture
def notifications() -> RecordingNotificationQueue:
    return RecordingNotificationQueue()


@pytest.fixture
def service(store, users, scheduler, notifications, scheduling_settings) -> EventService:
    return EventService(
        store=store,
        users=users,
        scheduler=scheduler,
        notifications=notifications,
        settings=scheduling_settings,
    )
