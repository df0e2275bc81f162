"""Tests for database-backed reminder scheduling and delivery.

Run with: pytest tests/test_reminders.py -v
"""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from scheduling.models import ReminderTask
from scheduling.notifications.senders import DefaultNotificationSender
from scheduling.reminders.scheduler import DatabaseTaskScheduler, send_due_reminders

pytestmark = pytest.mark.django_db

EVENT_ID = "3f2b8c1e-5d4a-4e7b-9c1d-2a6f8e0b7c35"


def _event_url(event_id):
    return f"https://schedule.example.com/e/{event_id}"


class FailingSender(DefaultNotificationSender):
    def send_plain_email(self, to_email, subject, body, content_type="text/plain"):
        raise ConnectionError("smtp down")


class TestDatabaseTaskScheduler:
    def test_schedules_one_task_per_delay(self):
        scheduler = DatabaseTaskScheduler([24, 72])

        handles = scheduler.schedule_reminder("a@example.com", "Olive", "Team sync", EVENT_ID)

        tasks = list(ReminderTask.objects.order_by("send_at"))
        assert handles == [str(task.id) for task in tasks]
        assert tasks[1].send_at - tasks[0].send_at == timedelta(hours=48)
        assert {task.email for task in tasks} == {"a@example.com"}

    def test_cancel_removes_unsent_task(self):
        scheduler = DatabaseTaskScheduler([24, 72])
        first, second = scheduler.schedule_reminder("a@example.com", "Olive", "Team sync", EVENT_ID)

        scheduler.cancel_reminder(first)
        scheduler.cancel_reminder(first)

        assert [str(pk) for pk in ReminderTask.objects.values_list("pk", flat=True)] == [second]

    def test_cancel_keeps_sent_task(self):
        scheduler = DatabaseTaskScheduler([24])
        [handle] = scheduler.schedule_reminder("a@example.com", "Olive", "Team sync", EVENT_ID)
        ReminderTask.objects.update(sent_at=timezone.now())

        scheduler.cancel_reminder(handle)

        assert ReminderTask.objects.count() == 1


class TestSendDueReminders:
    def _task(self, hours_ago):
        return ReminderTask.objects.create(
            email="a@example.com",
            owner_name="Olive",
            event_name="Team sync",
            event_id=EVENT_ID,
            send_at=timezone.now() - timedelta(hours=hours_ago),
        )

    def test_sends_only_due_tasks(self, scheduling_settings, mailoutbox):
        due = self._task(hours_ago=1)
        later = self._task(hours_ago=-5)
        sender = DefaultNotificationSender(scheduling_settings)

        assert send_due_reminders(sender, _event_url) == 1

        [message] = mailoutbox
        assert message.to == ["a@example.com"]
        assert message.subject == 'Reminder: add your availability for "Team sync"'
        assert "Olive is still waiting" in message.body
        assert _event_url(EVENT_ID) in message.body
        due.refresh_from_db()
        later.refresh_from_db()
        assert due.sent_at is not None
        assert later.sent_at is None

    def test_sent_tasks_are_not_sent_twice(self, scheduling_settings, mailoutbox):
        self._task(hours_ago=1)
        sender = DefaultNotificationSender(scheduling_settings)

        send_due_reminders(sender, _event_url)
        assert send_due_reminders(sender, _event_url) == 0
        assert len(mailoutbox) == 1

    def test_failed_delivery_stays_unsent(self, scheduling_settings, caplog):
        task = self._task(hours_ago=1)

        assert send_due_reminders(FailingSender(scheduling_settings), _event_url) == 0

        task.refresh_from_db()
        assert task.sent_at is None
        assert "Failed to send reminder" in caplog.text


class TestSendDueRemindersCommand:
    def test_reports_count(self, mailoutbox):
        ReminderTask.objects.create(
            email="a@example.com",
            owner_name="Olive",
            event_name="Team sync",
            event_id=EVENT_ID,
            send_at=timezone.now() - timedelta(minutes=5),
        )
        out = StringIO()

        call_command("send_due_reminders", stdout=out)

        assert "Sent 1 reminder(s)" in out.getvalue()
        assert len(mailoutbox) == 1
