from functools import lru_cache

from scheduling.conf import get_scheduling_settings
from scheduling.notifications.queue import NotificationQueue
from scheduling.reminders.scheduler import DatabaseTaskScheduler
from scheduling.services.event_service import EventService
from scheduling.stores.django_store import DjangoEventStore, DjangoUserDirectory


@lru_cache(maxsize=1)
def get_event_service() -> EventService:
    settings = get_scheduling_settings()
    return EventService(
        store=DjangoEventStore(write_retries=settings.response_write_retries),
        users=DjangoUserDirectory(),
        scheduler=DatabaseTaskScheduler(settings.reminder_delays_hours),
        notifications=NotificationQueue(settings.redis_settings()),
        settings=settings,
    )
