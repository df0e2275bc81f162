from django.urls import path

from scheduling.handlers import (
    DeclineInviteView,
    DuplicateEventView,
    EventDetailView,
    EventListView,
    EventResponseView,
    RemindeeRespondedView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/response",
        EventResponseView.as_view(),
        name="event-response",
    ),
    path(
        "events/<str:event_id>/responded",
        RemindeeRespondedView.as_view(),
        name="remindee-responded",
    ),
    path(
        "events/<str:event_id>/decline",
        DeclineInviteView.as_view(),
        name="decline-invite",
    ),
    path(
        "events/<str:event_id>/duplicate",
        DuplicateEventView.as_view(),
        name="duplicate-event",
    ),
]
