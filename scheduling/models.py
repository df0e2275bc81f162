"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.

Responses, remindees and attendees are rows of their own rather than
embedded lists, so every participant-level write is a single-row update.
"""

import uuid

from django.conf import settings
from django.db import models


class Event(models.Model):
    """Persistence model for events."""

    class EventType(models.TextChoices):
        SPECIFIC_DATES = "specific_dates", "Specific dates"
        DOW = "dow", "Days of the week"
        GROUP = "group", "Availability group"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="scheduling_events",
        blank=True,
        null=True,
    )
    name = models.CharField(max_length=255)
    duration_minutes = models.PositiveIntegerField()
    type = models.CharField(max_length=20, choices=EventType.choices)
    dates = models.JSONField(default=list)
    notifications_enabled = models.BooleanField(default=False)
    everyone_responded_notified_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "-created_at"], name="scheduling_event_owner_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Response(models.Model):
    """Persistence model for one participant's availability."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="responses")
    participant_key = models.CharField(max_length=255)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="scheduling_responses",
        blank=True,
        null=True,
    )
    guest_name = models.CharField(max_length=255, blank=True, null=True)
    availability = models.JSONField(default=list)
    use_calendar_availability = models.BooleanField(blank=True, null=True)
    enabled_calendars = models.JSONField(blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "participant_key"], name="unique_response_per_participant"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.event.name} - {self.participant_key}"


class Remindee(models.Model):
    """Persistence model for a remindee contact."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="remindees")
    email = models.EmailField()
    task_refs = models.JSONField(default=list)
    responded = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["event", "email"], name="unique_remindee_email"),
        ]

    def __str__(self) -> str:
        return f"{self.event.name} - {self.email}"


class Attendee(models.Model):
    """Persistence model for an availability group attendee."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="attendees")
    email = models.EmailField()
    declined = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["event", "email"], name="unique_attendee_email"),
        ]

    def __str__(self) -> str:
        return f"{self.event.name} - {self.email}"


class ReminderTask(models.Model):
    """A reminder email waiting to be sent to a remindee.

    Not tied to Event by a foreign key: handles copied onto a duplicated
    event still point at the original event's reminders.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField()
    owner_name = models.CharField(max_length=255)
    event_name = models.CharField(max_length=255)
    event_id = models.CharField(max_length=36)
    send_at = models.DateTimeField()
    sent_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["send_at"]
        indexes = [
            models.Index(fields=["sent_at", "send_at"], name="scheduling_reminder_due_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.email} - {self.send_at}"
