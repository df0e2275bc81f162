from django.contrib import admin

from scheduling.models import Attendee, Event, Remindee, ReminderTask, Response


class ResponseInline(admin.TabularInline):
    model = Response
    extra = 0
    fields = ["participant_key", "user", "guest_name", "updated_at"]
    readonly_fields = ["updated_at"]


class RemindeeInline(admin.TabularInline):
    model = Remindee
    extra = 0


class AttendeeInline(admin.TabularInline):
    model = Attendee
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "type", "owner", "created_at"]
    list_filter = ["type"]
    search_fields = ["name", "owner__email"]
    inlines = [ResponseInline, RemindeeInline, AttendeeInline]


@admin.register(ReminderTask)
class ReminderTaskAdmin(admin.ModelAdmin):
    list_display = ["email", "event_name", "send_at", "sent_at"]
    list_filter = ["sent_at"]
    search_fields = ["email", "event_id"]
