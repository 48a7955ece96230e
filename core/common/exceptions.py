import logging

from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Wraps DRF errors in the {"error": {...}} envelope used across the API.
    Anything DRF does not know about becomes a 500 carrying the exception
    text in `details`.
    """
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            response.data = {
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Invalid request data",
                    "details": response.data,
                }
            }
            return response

        code = str(getattr(exc, "default_code", "error")).upper()
        detail = getattr(exc, "detail", None)
        response.data = {"error": {"code": code, "message": str(detail or exc)}}
        return response

    view = context.get("view")
    logger.exception("Unhandled error in %s", type(view).__name__ if view else "request")
    set_rollback()
    return Response(
        {
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "Request failed",
                "details": str(exc),
            }
        },
        status=500,
    )
