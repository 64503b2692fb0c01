"""Translation of raised exceptions into HTTP error responses."""

import json
import logging
import traceback
from http import HTTPStatus

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from microservices_common.core.exceptions import (
    ClientException,
    MalformedBodyError,
    MissingParameterError,
    RequestBindingError,
    RequestError,
    TypeMismatchError,
    UnsupportedMediaTypeError,
)
from microservices_common.shared.schemas import ErrorResource

SESSION_ID_MARKERS = ("sessionid", "sessionID")


def reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


class ErrorTranslator:
    """Turns any exception raised while serving a request into an ``ErrorResource``.

    The translator holds no mutable state: the result depends only on the
    exception and on ``hide_exceptions``, which decides whether the formatted
    traceback is copied into the response body. Server-side logs always
    carry the full traceback.
    """

    def __init__(self, logger: logging.Logger | None = None, hide_exceptions: bool = True):
        self.log = logger or logging.getLogger(__name__)
        self.hide_exceptions = hide_exceptions

    def translate(self, exc: Exception) -> ErrorResource:
        """Classify ``exc`` and build its error body.

        Raises:
            ClientException: when ``exc`` is a client exception that declares
                no status code. It is re-raised unchanged.
        """
        if isinstance(exc, ClientException):
            return self.client_error(exc)
        if isinstance(exc, MalformedBodyError):
            return self._request_error(status.HTTP_400_BAD_REQUEST, "ill formed body", exc)
        if isinstance(exc, TypeMismatchError):
            return self._request_error(status.HTTP_400_BAD_REQUEST, "wrong type parameter", exc)
        if isinstance(exc, MissingParameterError):
            return self._request_error(status.HTTP_400_BAD_REQUEST, "missing parameter", exc)
        if isinstance(exc, UnsupportedMediaTypeError):
            return self._request_error(
                status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                "body does not have a correct value",
                exc,
                with_detail=False,
            )
        if isinstance(exc, RequestBindingError) and _mentions_session_id(exc):
            return self._build(status.HTTP_401_UNAUTHORIZED, reason_phrase(status.HTTP_401_UNAUTHORIZED), exc)
        if isinstance(exc, StarletteHTTPException):
            return self.http_error(exc)
        return self.server_error(exc)

    def client_error(self, exc: ClientException) -> ErrorResource:
        message = str(exc)
        self.log.warning("Exception: %s", message, exc_info=exc)
        if exc.status_code is None:
            raise exc
        return self._build(exc.status_code, message, exc)

    def http_error(self, exc: StarletteHTTPException) -> ErrorResource:
        if isinstance(exc.detail, str):
            message = exc.detail or reason_phrase(exc.status_code)
        elif exc.detail is None:
            message = reason_phrase(exc.status_code)
        else:
            # Structured detail is kept as JSON text.
            message = json.dumps(jsonable_encoder(exc.detail))
        self.log.info("HTTP exception %s: %s", exc.status_code, message)
        return self._build(exc.status_code, message, exc)

    def server_error(self, exc: Exception) -> ErrorResource:
        self.log.error("Server exception: %s", exc, exc_info=exc)
        return self._build(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            reason_phrase(status.HTTP_500_INTERNAL_SERVER_ERROR),
            exc,
        )

    def to_response(self, exc: Exception) -> JSONResponse:
        return self.render(self.translate(exc), exc)

    def server_error_response(self, exc: Exception) -> JSONResponse:
        return self.render(self.server_error(exc), exc)

    @staticmethod
    def render(resource: ErrorResource, exc: Exception) -> JSONResponse:
        headers = getattr(exc, "headers", None) if isinstance(exc, StarletteHTTPException) else None
        return JSONResponse(
            resource.model_dump(by_alias=True),
            status_code=resource.status,
            headers=headers,
        )

    def stack_trace(self, exc: BaseException) -> str | None:
        if self.hide_exceptions:
            return None
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    def _request_error(
        self,
        status_code: int,
        classification: str,
        exc: RequestError,
        with_detail: bool = True,
    ) -> ErrorResource:
        if with_detail and exc.detail:
            classification = f"{classification}: {exc.detail}"
        message = f"{reason_phrase(status_code)}, {classification}"
        self.log.info("%s caught: %s", type(exc).__name__, message, exc_info=exc)
        return self._build(status_code, message, exc)

    def _build(self, status_code: int, message: str, exc: Exception) -> ErrorResource:
        return ErrorResource(status=status_code, message=message, stack_trace=self.stack_trace(exc))


def _mentions_session_id(exc: Exception) -> bool:
    text = str(exc)
    return any(marker in text for marker in SESSION_ID_MARKERS)
