"""Notification sender backed by listmonk, Django mail and a chat webhook."""

import logging
from typing import Any, Mapping

import httpx
from django.core.mail import EmailMessage

from scheduling.conf import SchedulingSettings
from scheduling.notifications.interfaces import NotificationSender

logger = logging.getLogger(__name__)


class DefaultNotificationSender(NotificationSender):
    """Templated mail goes through listmonk's transactional API, plain mail
    through Django's configured email backend, chat through an incoming
    webhook. Unconfigured HTTP channels are skipped with a warning.
    """

    def __init__(self, settings: SchedulingSettings, client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._client = client or httpx.Client(timeout=settings.http_timeout_seconds)

    def send_templated_email(
        self, to_email: str, template_id: int, variables: Mapping[str, Any]
    ) -> None:
        if not self._settings.listmonk_url:
            logger.warning("LISTMONK_URL not set, dropping template %s to %s", template_id, to_email)
            return

        auth = None
        if self._settings.listmonk_username:
            auth = (self._settings.listmonk_username, self._settings.listmonk_password or "")

        response = self._client.post(
            f"{self._settings.listmonk_url.rstrip('/')}/api/tx",
            json={
                "subscriber_email": to_email,
                "template_id": template_id,
                "data": dict(variables),
                "content_type": "html",
            },
            auth=auth,
        )
        response.raise_for_status()
        logger.info("Sent template %s to %s", template_id, to_email)

    def send_plain_email(
        self, to_email: str, subject: str, body: str, content_type: str = "text/plain"
    ) -> None:
        message = EmailMessage(subject=subject, body=body, to=[to_email])
        if content_type == "text/html":
            message.content_subtype = "html"
        message.send()
        logger.info("Sent email %r to %s", subject, to_email)

    def post_chat_message(self, text: str) -> None:
        if not self._settings.chat_webhook_url:
            logger.debug("CHAT_WEBHOOK_URL not set, skipping chat message")
            return
        response = self._client.post(self._settings.chat_webhook_url, json={"text": text})
        response.raise_for_status()
