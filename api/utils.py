from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from .models import Response


def envelope_response(response: Response) -> JSONResponse:
    """Render a service envelope with its own status as the HTTP status code."""

    return JSONResponse(
        status_code=response.status,
        content=response.model_dump(mode="json", exclude_none=True),
    )


def error_response(status_code: int, message: Any) -> JSONResponse:
    """Render a bare error envelope, e.g. from an exception handler."""

    return JSONResponse(
        status_code=status_code,
        content={"status": status_code, "message": str(message)},
    )


def missing_fields_response(message: str) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, message)
