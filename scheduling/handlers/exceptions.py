"""Map domain errors to HTTP responses without leaking internal details."""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from scheduling.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REMINDEE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ATTENDEE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_GROUP: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_SIGNED_IN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_EVENT_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCode.PERSISTENCE_CONFLICT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER that knows about DomainError."""
    if isinstance(exc, DomainError):
        code = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
        if code >= 500:
            logger.warning("Request failed with %s", exc)
        return Response({"error": exc.code.value, "message": exc.message}, status=code)
    return exception_handler(exc, context)
