from dataclasses import dataclass

from arq.connections import RedisSettings
from django.conf import settings

DEFAULTS = {
    "BASE_URL": "http://localhost:8080",
    "DEFAULT_OWNER_NAME": "Somebody",
    "REMINDER_DELAYS_HOURS": (24, 72, 168),
    "EVERYONE_RESPONDED_TEMPLATE_ID": 8,
    "GROUP_INVITE_TEMPLATE_ID": 9,
    "LISTMONK_URL": None,
    "LISTMONK_USERNAME": None,
    "LISTMONK_PASSWORD": None,
    "CHAT_WEBHOOK_URL": None,
    "REDIS_URL": "redis://localhost:6379",
    "RESPONSE_WRITE_RETRIES": 3,
    "HTTP_TIMEOUT_SECONDS": 10.0,
}


@dataclass(frozen=True)
class SchedulingSettings:
    base_url: str
    default_owner_name: str
    reminder_delays_hours: tuple[int, ...]
    everyone_responded_template_id: int
    group_invite_template_id: int
    listmonk_url: str | None
    listmonk_username: str | None
    listmonk_password: str | None
    chat_webhook_url: str | None
    redis_url: str
    response_write_retries: int
    http_timeout_seconds: float

    def event_url(self, event_id: str) -> str:
        return f"{self.base_url.rstrip('/')}/e/{event_id}"

    def group_url(self, event_id: str) -> str:
        return f"{self.base_url.rstrip('/')}/g/{event_id}"

    def redis_settings(self) -> RedisSettings:
        """Connection settings for the arq notification queue."""
        return RedisSettings.from_dsn(self.redis_url)


def get_scheduling_settings() -> SchedulingSettings:
    """Read the SCHEDULING settings dict, falling back to DEFAULTS."""
    values = {**DEFAULTS, **getattr(settings, "SCHEDULING", {})}
    return SchedulingSettings(
        base_url=values["BASE_URL"],
        default_owner_name=values["DEFAULT_OWNER_NAME"],
        reminder_delays_hours=tuple(int(h) for h in values["REMINDER_DELAYS_HOURS"]),
        everyone_responded_template_id=int(values["EVERYONE_RESPONDED_TEMPLATE_ID"]),
        group_invite_template_id=int(values["GROUP_INVITE_TEMPLATE_ID"]),
        listmonk_url=values["LISTMONK_URL"],
        listmonk_username=values["LISTMONK_USERNAME"],
        listmonk_password=values["LISTMONK_PASSWORD"],
        chat_webhook_url=values["CHAT_WEBHOOK_URL"],
        redis_url=values["REDIS_URL"],
        response_write_retries=int(values["RESPONSE_WRITE_RETRIES"]),
        http_timeout_seconds=float(values["HTTP_TIMEOUT_SECONDS"]),
    )
