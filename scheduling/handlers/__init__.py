from scheduling.handlers.views import (
    DeclineInviteView,
    DuplicateEventView,
    EventDetailView,
    EventListView,
    EventResponseView,
    RemindeeRespondedView,
)

__all__ = [
    "DeclineInviteView",
    "DuplicateEventView",
    "EventDetailView",
    "EventListView",
    "EventResponseView",
    "RemindeeRespondedView",
]
