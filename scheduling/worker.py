"""arq worker for notification delivery and the reminder sweep.

Run with: arq scheduling.worker.WorkerSettings
"""

import logging
import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
django.setup()

from arq.cron import cron  # noqa: E402
from asgiref.sync import sync_to_async  # noqa: E402

from scheduling.conf import get_scheduling_settings  # noqa: E402
from scheduling.notifications.intents import from_payload  # noqa: E402
from scheduling.notifications.senders import DefaultNotificationSender  # noqa: E402
from scheduling.reminders.scheduler import send_due_reminders  # noqa: E402

logger = logging.getLogger(__name__)


async def startup(ctx) -> None:
    settings = get_scheduling_settings()
    ctx["settings"] = settings
    ctx["sender"] = DefaultNotificationSender(settings)


async def deliver_notification(ctx, kind: str, fields: dict) -> None:
    """Deliver one queued notification intent."""
    intent = from_payload(kind, fields)
    try:
        await sync_to_async(intent.deliver, thread_sensitive=False)(ctx["sender"])
    except Exception:
        logger.exception("Failed to deliver %s to %s", kind, intent.recipient)
        raise
    logger.info("Delivered %s to %s", kind, intent.recipient)


async def send_due_reminders_task(ctx) -> int:
    """Send every reminder whose time has come."""
    sent = await sync_to_async(send_due_reminders)(ctx["sender"], ctx["settings"].event_url)
    if sent:
        logger.info("Sent %d due reminder(s)", sent)
    return sent


class WorkerSettings:
    functions = [deliver_notification]
    cron_jobs = [
        cron(send_due_reminders_task, minute=set(range(0, 60, 5)), run_at_startup=True),
    ]
    on_startup = startup
    redis_settings = get_scheduling_settings().redis_settings()
    max_jobs = int(os.getenv("ARQ_MAX_JOBS", "10"))
    job_timeout = int(os.getenv("ARQ_JOB_TIMEOUT", "60"))
    keep_result = int(os.getenv("ARQ_KEEP_RESULT", "3600"))
