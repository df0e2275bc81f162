"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain error mapping to handlers.exceptions
- Never contain business logic
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from scheduling.domain import Actor
from scheduling.handlers.serializers import (
    DeleteResponsePayloadSerializer,
    DuplicateEventPayloadSerializer,
    EventPayloadSerializer,
    EventSerializer,
    RemindeeRespondedPayloadSerializer,
    ResponsePayloadSerializer,
)
from scheduling.services.factory import get_event_service


def _actor(request: Request) -> Actor:
    user = request.user
    if user is None or not user.is_authenticated:
        return Actor()
    return Actor(user_id=str(user.pk), email=user.email or None)


class EventListView(APIView):
    """Handler for POST /api/events"""

    def post(self, request: Request) -> Response:
        payload = EventPayloadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        event = get_event_service().create_event(_actor(request), payload.to_draft())
        return Response({"event_id": str(event.id)}, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET, PUT and DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        details = get_event_service().get_event(event_id)
        serializer = EventSerializer(details.event, context={"participants": details.participants})
        return Response(serializer.data)

    def put(self, request: Request, event_id: str) -> Response:
        payload = EventPayloadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        get_event_service().edit_event(_actor(request), event_id, payload.to_draft())
        return Response(status=status.HTTP_200_OK)

    def delete(self, request: Request, event_id: str) -> Response:
        get_event_service().delete_event(_actor(request), event_id)
        return Response(status=status.HTTP_200_OK)


class EventResponseView(APIView):
    """Handler for POST and DELETE /api/events/{event_id}/response"""

    def post(self, request: Request, event_id: str) -> Response:
        payload = ResponsePayloadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        get_event_service().submit_response(_actor(request), event_id, payload.to_submission())
        return Response({})

    def delete(self, request: Request, event_id: str) -> Response:
        payload = DeleteResponsePayloadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        get_event_service().delete_response(_actor(request), event_id, payload.to_deletion())
        return Response({})


class RemindeeRespondedView(APIView):
    """Handler for POST /api/events/{event_id}/responded"""

    def post(self, request: Request, event_id: str) -> Response:
        payload = RemindeeRespondedPayloadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        get_event_service().mark_remindee_responded(event_id, payload.validated_data["email"])
        return Response({})


class DeclineInviteView(APIView):
    """Handler for POST /api/events/{event_id}/decline"""

    def post(self, request: Request, event_id: str) -> Response:
        get_event_service().decline_invite(_actor(request), event_id)
        return Response({})


class DuplicateEventView(APIView):
    """Handler for POST /api/events/{event_id}/duplicate"""

    def post(self, request: Request, event_id: str) -> Response:
        payload = DuplicateEventPayloadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        event = get_event_service().duplicate_event(
            _actor(request),
            event_id,
            payload.validated_data["event_name"],
            payload.validated_data["copy_availability"],
        )
        return Response({"event_id": str(event.id)}, status=status.HTTP_201_CREATED)
