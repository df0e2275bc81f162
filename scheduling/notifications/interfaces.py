"""Outbound notification channel interface."""

from abc import ABC, abstractmethod
from typing import Any, Mapping


class NotificationSender(ABC):
    """Delivers notifications. Implementations may block; callers queue them."""

    @abstractmethod
    def send_templated_email(
        self, to_email: str, template_id: int, variables: Mapping[str, Any]
    ) -> None:
        ...

    @abstractmethod
    def send_plain_email(
        self, to_email: str, subject: str, body: str, content_type: str = "text/plain"
    ) -> None:
        ...

    @abstractmethod
    def post_chat_message(self, text: str) -> None:
        ...
