"""Serializers for request payloads and for domain models in API responses."""

from rest_framework import serializers

from scheduling.domain import EventType
from scheduling.services.commands import EventDraft, ResponseDeletion, ResponseSubmission


class EventPayloadSerializer(serializers.Serializer):
    """Body of create and edit requests."""

    name = serializers.CharField(max_length=255)
    duration_minutes = serializers.IntegerField(min_value=0)
    dates = serializers.ListField(child=serializers.DateTimeField())
    type = serializers.ChoiceField(choices=[t.value for t in EventType])
    notifications_enabled = serializers.BooleanField(required=False, default=False)
    remindees = serializers.ListField(
        child=serializers.EmailField(), required=False, default=list
    )
    attendees = serializers.ListField(
        child=serializers.EmailField(), required=False, default=list
    )

    def to_draft(self) -> EventDraft:
        data = self.validated_data
        return EventDraft(
            name=data["name"],
            duration_minutes=data["duration_minutes"],
            dates=tuple(data["dates"]),
            type=EventType(data["type"]),
            notifications_enabled=data["notifications_enabled"],
            remindees=tuple(data["remindees"]),
            attendees=tuple(data["attendees"]),
        )


class ResponsePayloadSerializer(serializers.Serializer):
    availability = serializers.ListField(child=serializers.DateTimeField())
    guest = serializers.BooleanField()
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    use_calendar_availability = serializers.BooleanField(
        required=False, allow_null=True, default=None
    )
    enabled_calendars = serializers.ListField(
        child=serializers.DictField(), required=False, allow_null=True, default=None
    )

    def validate(self, attrs):
        if attrs["guest"] and not attrs["name"].strip():
            raise serializers.ValidationError({"name": "Guests must give a name."})
        return attrs

    def to_submission(self) -> ResponseSubmission:
        data = self.validated_data
        calendars = data["enabled_calendars"]
        return ResponseSubmission(
            availability=tuple(data["availability"]),
            guest=data["guest"],
            name=data["name"].strip(),
            use_calendar_availability=data["use_calendar_availability"],
            enabled_calendars=tuple(calendars) if calendars is not None else None,
        )


class DeleteResponsePayloadSerializer(serializers.Serializer):
    guest = serializers.BooleanField()
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    user_id = serializers.CharField(required=False, allow_blank=True, default="")

    def to_deletion(self) -> ResponseDeletion:
        data = self.validated_data
        return ResponseDeletion(
            guest=data["guest"], name=data["name"].strip(), user_id=data["user_id"]
        )


class RemindeeRespondedPayloadSerializer(serializers.Serializer):
    email = serializers.EmailField()


class DuplicateEventPayloadSerializer(serializers.Serializer):
    event_name = serializers.CharField(max_length=255)
    copy_availability = serializers.BooleanField()


class ResponseSerializer(serializers.Serializer):
    """Serializer for Response domain model.

    Expects the respondent's UserSummary, if any, as ``user`` in the context.
    """

    user_id = serializers.CharField(allow_null=True)
    guest_name = serializers.CharField(allow_null=True)
    availability = serializers.ListField(child=serializers.DateTimeField())
    use_calendar_availability = serializers.BooleanField(allow_null=True)
    enabled_calendars = serializers.ListField(child=serializers.DictField(), allow_null=True)
    user = serializers.SerializerMethodField()

    def get_user(self, response):
        user = self.context.get("user")
        if user is None:
            return {"first_name": response.guest_name or response.participant_key, "last_name": ""}
        return {"first_name": user.first_name, "last_name": user.last_name}


class RemindeeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    responded = serializers.BooleanField()


class AttendeeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    declined = serializers.BooleanField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model.

    Expects respondents' UserSummary objects as ``participants`` in the
    context, keyed like ``Event.responses``.
    """

    id = serializers.UUIDField(source="id.value")
    owner_id = serializers.CharField(allow_null=True)
    name = serializers.CharField()
    duration_minutes = serializers.IntegerField()
    type = serializers.CharField(source="type.value")
    dates = serializers.ListField(child=serializers.DateTimeField())
    notifications_enabled = serializers.BooleanField()
    responses = serializers.SerializerMethodField()
    remindees = RemindeeSerializer(many=True)
    attendees = AttendeeSerializer(many=True)

    def get_responses(self, event):
        participants = self.context.get("participants", {})
        return {
            key: ResponseSerializer(response, context={"user": participants.get(key)}).data
            for key, response in event.responses.items()
        }
