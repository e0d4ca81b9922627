"""
DRF exception handler for domain errors.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Domain exceptions from
core.exceptions keep their own status code and body shape; DRF's own
exceptions (serializer validation, authentication) go through DRF's default
handler; anything else is logged and turned into a 500.

Response shape for domain errors:
    {"error": "...", "error_code": "...", "details": {...}}
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Render exceptions raised inside DRF views.

    Args:
        exc: The raised exception
        context: DRF handler context (view, request, args, kwargs)

    Returns:
        Response for the client
    """
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, BaseApplicationError):
        logger.warning(f"{view_name}: {exc}")
        return Response(exc.to_dict(), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        return response

    logger.error(f"Unhandled exception in {view_name}: {exc}", exc_info=True)
    return Response(
        {
            "error": "A server error occurred.",
            "error_code": "INTERNAL_ERROR",
        },
        status=500,
    )
