import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.tasks.exceptions import (
    ActorNotPermitted,
    InvalidTransition,
    TaskNotFound,
    TaskValidationError,
)

logger = logging.getLogger(__name__)


def _workflow_response(exc):
    if isinstance(exc, TaskValidationError):
        return Response(
            {"detail": str(exc), "errors": {f: [m] for f, m in exc.errors.items()}},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, InvalidTransition):
        return Response(
            {
                "detail": str(exc),
                "currentStatus": exc.current,
                "requestedStatus": exc.requested,
                "allowed": exc.allowed,
            },
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, ActorNotPermitted):
        return Response(
            {"detail": str(exc), "actor": exc.actor, "requiredActor": exc.required},
            status=status.HTTP_403_FORBIDDEN,
        )
    if isinstance(exc, TaskNotFound):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    return None


def api_exception_handler(exc, context):
    """
    DRF exception handler that turns workflow errors into API responses.

    Request validation errors are wrapped as ``{"detail", "errors"}`` so every
    400 from the API has the same shape.
    """
    response = _workflow_response(exc)
    if response is not None:
        view = context.get("view")
        logger.info(
            "%s on %s: %s", type(exc).__name__, view.__class__.__name__ if view else "?", exc
        )
        return response

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, ValidationError) and isinstance(response.data, dict):
        response.data = {"detail": "Invalid input.", "errors": response.data}
    return response
