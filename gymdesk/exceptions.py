# gymdesk/exceptions.py
"""
API error boundary.

Every failure that leaves a view is turned into ``{"error": <message>}`` with a
conventional status code:

  NotAuthenticated / AuthenticationFailed -> 401
  PermissionDenied                        -> 403 (401 with GYMDESK_COLLAPSE_AUTH_ERRORS)
  ValidationError                         -> 422 (+ "fields")
  Http404 / ObjectDoesNotExist            -> 404
  Conflict / ProtectedError               -> 409
  anything else                           -> 500, details logged only
"""
import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"
    default_code = "conflict"


class UnprocessableEntity(exceptions.APIException):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid data"
    default_code = "invalid"


def _first_error(errors) -> str:
    first = errors
    while isinstance(first, dict) and first:
        first = next(iter(first.values()))
    while isinstance(first, (list, tuple)) and first:
        first = first[0]
        if isinstance(first, dict) and first:
            first = next(iter(first.values()))
    return str(first) if first else "Invalid data"


def _error(message, code, **extra):
    body = {"error": str(message)}
    body.update(extra)
    return Response(body, status=code)


def api_exception_handler(exc, context):
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "?"

    if isinstance(exc, exceptions.ValidationError):
        return _error(
            _first_error(exc.detail),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            fields=exc.detail,
        )

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response = _error("Unauthenticated", status.HTTP_401_UNAUTHORIZED)
        auth_header = getattr(exc, "auth_header", None)
        if auth_header:
            response["WWW-Authenticate"] = auth_header
        return response

    if isinstance(exc, exceptions.PermissionDenied):
        code = (
            status.HTTP_401_UNAUTHORIZED
            if getattr(settings, "GYMDESK_COLLAPSE_AUTH_ERRORS", False)
            else status.HTTP_403_FORBIDDEN
        )
        return _error("Unauthorized", code)

    if isinstance(exc, (Http404, exceptions.NotFound, ObjectDoesNotExist)):
        return _error("Not found", status.HTTP_404_NOT_FOUND)

    if isinstance(exc, ProtectedError):
        logger.info("Delete blocked by related rows in %s: %s", view_name, exc)
        return _error("Cannot delete: other records still reference it", status.HTTP_409_CONFLICT)

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get("detail", response.data) if isinstance(response.data, dict) else response.data
        response.data = {"error": _first_error(detail) if not isinstance(detail, str) else detail}
        return response

    logger.exception("Unhandled error in %s", view_name)
    return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
