"""Notification intents.

An intent carries everything needed to deliver one notification, so it can
be handed to a background worker without touching the database again.
"""

from dataclasses import asdict, dataclass
from typing import Any

from scheduling.notifications.interfaces import NotificationSender

RESPONDENT_NOTICE_BODY = """<p>Hi {owner_name},</p>

<p>{respondent_name} just responded to your event named "{event_name}"!<br>
<a href="{event_url}">Click here to view the event</a></p>

<p>Best,<br>
The scheduling team</p>"""


@dataclass(frozen=True)
class RespondentNotice:
    """Tell the owner that someone responded for the first time."""

    owner_email: str
    owner_name: str
    respondent_name: str
    event_name: str
    event_url: str

    @property
    def recipient(self) -> str:
        return self.owner_email

    def deliver(self, sender: NotificationSender) -> None:
        sender.send_plain_email(
            self.owner_email,
            f'Someone just responded to your event - "{self.event_name}"!',
            RESPONDENT_NOTICE_BODY.format(
                owner_name=self.owner_name,
                respondent_name=self.respondent_name,
                event_name=self.event_name,
                event_url=self.event_url,
            ),
            "text/html",
        )


@dataclass(frozen=True)
class EveryoneRespondedNotice:
    """Tell the owner that every remindee has responded."""

    owner_email: str
    event_name: str
    event_url: str
    template_id: int

    @property
    def recipient(self) -> str:
        return self.owner_email

    def deliver(self, sender: NotificationSender) -> None:
        sender.send_templated_email(
            self.owner_email,
            self.template_id,
            {"eventName": self.event_name, "eventUrl": self.event_url},
        )


@dataclass(frozen=True)
class GroupInvite:
    """Invite an attendee to an availability group."""

    email: str
    owner_name: str
    group_name: str
    group_url: str
    template_id: int

    @property
    def recipient(self) -> str:
        return self.email

    def deliver(self, sender: NotificationSender) -> None:
        sender.send_templated_email(
            self.email,
            self.template_id,
            {
                "ownerName": self.owner_name,
                "groupName": self.group_name,
                "groupUrl": self.group_url,
            },
        )


@dataclass(frozen=True)
class EventCreatedNotice:
    """Announce a new event on the team chat channel."""

    event_id: str
    event_name: str
    event_type: str
    creator: str
    event_url: str

    @property
    def recipient(self) -> str:
        return "chat"

    def deliver(self, sender: NotificationSender) -> None:
        sender.post_chat_message(
            f"New {self.event_type} event created by {self.creator}: "
            f"<{self.event_url}|{self.event_name}> ({self.event_id})"
        )


NotificationIntent = RespondentNotice | EveryoneRespondedNotice | GroupInvite | EventCreatedNotice

INTENT_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (RespondentNotice, EveryoneRespondedNotice, GroupInvite, EventCreatedNotice)
}


def to_payload(intent: NotificationIntent) -> tuple[str, dict[str, Any]]:
    """Split an intent into its type name and plain fields for the job queue."""
    return type(intent).__name__, asdict(intent)


def from_payload(kind: str, fields: dict[str, Any]) -> NotificationIntent:
    try:
        intent_type = INTENT_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown notification intent: {kind}") from None
    return intent_type(**fields)
