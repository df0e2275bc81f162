from django.core.management.base import BaseCommand

from scheduling.conf import get_scheduling_settings
from scheduling.notifications.senders import DefaultNotificationSender
from scheduling.reminders.scheduler import send_due_reminders


class Command(BaseCommand):
    help = "Send reminder emails whose scheduled time has passed."

    def handle(self, *args, **options):
        settings = get_scheduling_settings()
        sender = DefaultNotificationSender(settings)
        sent = send_due_reminders(sender, settings.event_url)
        self.stdout.write(self.style.SUCCESS(f"Sent {sent} reminder(s)"))
