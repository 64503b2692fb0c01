"""Adapters from FastAPI request parsing failures to request error kinds."""

from typing import Any, Sequence

from fastapi import Header, Request
from fastapi.exceptions import RequestValidationError

from microservices_common.core.exceptions import (
    MalformedBodyError,
    MissingParameterError,
    RequestBindingError,
    RequestError,
    TypeMismatchError,
    UnsupportedMediaTypeError,
)

JSON_MEDIA_TYPE = "application/json"


def describe_errors(errors: Sequence[dict[str, Any]]) -> str:
    """Render validation errors as ``location: message`` pairs."""
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', '')}" if location else str(error.get("msg", "")))
    return "; ".join(parts)


def classify_validation_error(exc: RequestValidationError) -> RequestError:
    """Map a FastAPI validation failure onto the request error it stands for.

    Only the first reported error decides the kind; the detail text lists
    all of them. A missing header or cookie is a binding error, while a
    header or cookie that fails conversion is a type mismatch like any
    other parameter. The original validation error is kept as ``__cause__``.
    """
    errors = list(exc.errors())
    first = errors[0] if errors else {}
    loc = tuple(first.get("loc", ()))
    source = loc[0] if loc else None
    detail = describe_errors(errors) or None

    if source == "body":
        error: RequestError = MalformedBodyError(detail)
    elif first.get("type") == "missing":
        if source in ("header", "cookie"):
            name = loc[1] if len(loc) > 1 else ""
            error = RequestBindingError(f"Missing request {source} '{name}' for method parameter")
        else:
            error = MissingParameterError(detail)
    else:
        error = TypeMismatchError(detail)

    error.__cause__ = exc
    return error


def is_json_media_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE or media_type.endswith("+json")


def _has_body(request: Request) -> bool:
    if "transfer-encoding" in request.headers:
        return True
    content_length = request.headers.get("content-length")
    if not content_length:
        return False
    try:
        return int(content_length) > 0
    except ValueError:
        # Unparseable length: judge the request by its content type.
        return True


async def require_json_body(request: Request) -> None:
    """Reject requests whose body is not declared as JSON."""
    if not _has_body(request):
        return
    content_type = request.headers.get("content-type", "")
    if not is_json_media_type(content_type):
        raise UnsupportedMediaTypeError(f"Content type '{content_type}' not supported")


async def session_id(sessionid: str = Header()) -> str:
    """Required ``sessionid`` header; when absent the request is answered with 401."""
    return sessionid
