"""Reminder scheduling stored in the database.

Each scheduled reminder is a ReminderTask row and its handle is the row's
UUID. ``manage.py send_due_reminders`` delivers the rows whose time has come.
"""

import logging
from datetime import timedelta
from typing import Sequence

from django.db import transaction
from django.utils import timezone

from scheduling.models import ReminderTask
from scheduling.notifications.interfaces import NotificationSender
from scheduling.reminders.interfaces import TaskScheduler

logger = logging.getLogger(__name__)

REMINDER_BODY = """<p>Hi!</p>

<p>{owner_name} is still waiting on your availability for "{event_name}".<br>
<a href="{event_url}">Click here to add your availability</a></p>

<p>Best,<br>
The scheduling team</p>"""


class DatabaseTaskScheduler(TaskScheduler):
    """Creates one ReminderTask per configured delay."""

    def __init__(self, delays_hours: Sequence[int]) -> None:
        self._delays = [timedelta(hours=hours) for hours in delays_hours]

    def schedule_reminder(
        self, email: str, owner_name: str, event_name: str, event_id: str
    ) -> list[str]:
        now = timezone.now()
        tasks = ReminderTask.objects.bulk_create(
            ReminderTask(
                email=email,
                owner_name=owner_name,
                event_name=event_name,
                event_id=event_id,
                send_at=now + delay,
            )
            for delay in self._delays
        )
        logger.info("Scheduled %d reminders for %s on event %s", len(tasks), email, event_id)
        return [str(task.id) for task in tasks]

    def cancel_reminder(self, handle: str) -> None:
        deleted, _ = ReminderTask.objects.filter(pk=handle, sent_at__isnull=True).delete()
        if not deleted:
            logger.debug("Reminder %s already sent or cancelled", handle)


def send_due_reminders(sender: NotificationSender, event_url, now=None) -> int:
    """Send every unsent reminder due at ``now``. Returns how many were sent.

    ``event_url`` maps an event id to the link put in the email. A reminder
    whose delivery fails stays unsent and is picked up by the next run.
    """
    now = now or timezone.now()
    sent = 0
    due = ReminderTask.objects.filter(sent_at__isnull=True, send_at__lte=now)
    for task in list(due):
        with transaction.atomic():
            # Claim the row first so two overlapping runs don't both send it.
            claimed = ReminderTask.objects.filter(pk=task.pk, sent_at__isnull=True).update(
                sent_at=now
            )
            if not claimed:
                continue
            try:
                sender.send_plain_email(
                    task.email,
                    f'Reminder: add your availability for "{task.event_name}"',
                    REMINDER_BODY.format(
                        owner_name=task.owner_name,
                        event_name=task.event_name,
                        event_url=event_url(task.event_id),
                    ),
                    "text/html",
                )
            except Exception:
                logger.exception("Failed to send reminder %s to %s", task.pk, task.email)
                transaction.set_rollback(True)
                continue
        sent += 1
    return sent
