"""Single-key merges over an event's response map.

These mirror the targeted writes the store performs: each call touches
exactly one participant key, so merges for different keys commute.
"""

from dataclasses import replace

from scheduling.domain.models import Event, Response


def merge_response(event: Event, participant_key: str, response: Response) -> Event:
    """Set ``responses[participant_key]``, replacing any earlier entry whole."""
    if response.participant_key != participant_key:
        response = replace(response, participant_key=participant_key)
    responses = dict(event.responses)
    responses[participant_key] = response
    return replace(event, responses=responses)


def delete_response(event: Event, participant_key: str) -> Event:
    """Remove one key. A missing key leaves the event unchanged."""
    if participant_key not in event.responses:
        return event
    responses = {k: v for k, v in event.responses.items() if k != participant_key}
    return replace(event, responses=responses)
