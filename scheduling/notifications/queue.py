"""Fire-and-forget delivery of notification intents through arq.

Enqueueing pushes the intent's fields to Redis and returns; the arq worker
in ``scheduling.worker`` delivers them. Enqueueing never raises: a failure
to reach Redis is logged and the notification is dropped.
"""

import logging

from arq import create_pool
from arq.connections import RedisSettings
from asgiref.sync import async_to_sync

from scheduling.notifications.intents import NotificationIntent, to_payload

logger = logging.getLogger(__name__)

DELIVER_JOB = "deliver_notification"


class NotificationQueue:
    """Hands intents to the arq worker."""

    def __init__(self, redis_settings: RedisSettings) -> None:
        self._redis_settings = redis_settings

    def enqueue(self, intent: NotificationIntent) -> None:
        kind, fields = to_payload(intent)
        try:
            job_id = async_to_sync(self._push)(kind, fields)
        except Exception:
            logger.exception("Failed to queue %s for %s", kind, intent.recipient)
            return
        logger.info("Queued %s for %s (job %s)", kind, intent.recipient, job_id)

    async def _push(self, kind: str, fields: dict) -> str | None:
        pool = await create_pool(self._redis_settings)
        try:
            job = await pool.enqueue_job(DELIVER_JOB, kind, fields)
        finally:
            await pool.aclose()
        return job.job_id if job is not None else None
