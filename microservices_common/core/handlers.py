"""Registration of the error translator on a FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from microservices_common.core.binding import classify_validation_error
from microservices_common.core.config import settings
from microservices_common.core.error_translator import ErrorTranslator
from microservices_common.core.exceptions import ClientException, RequestError


class ServerErrorResourceMiddleware(BaseHTTPMiddleware):
    """Renders unhandled exceptions as a 500 ErrorResource.

    Runs inside Starlette's own server-error layer, so the JSON body is sent
    even when the application is in debug mode.
    """

    def __init__(self, app, translator: ErrorTranslator):
        super().__init__(app)
        self.translator = translator

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self.translator.server_error_response(exc)


def register_exception_handlers(
    app: FastAPI,
    *,
    logger: logging.Logger | None = None,
    hide_exceptions: bool | None = None,
) -> ErrorTranslator:
    """Attach shared exception handlers to the FastAPI app.

    ``hide_exceptions`` defaults to the process-wide setting. The translator
    is returned and also kept on ``app.state.error_translator``.
    """
    if hide_exceptions is None:
        hide_exceptions = settings.hide_exceptions
    translator = ErrorTranslator(logger=logger, hide_exceptions=hide_exceptions)
    app.state.error_translator = translator
    app.add_middleware(ServerErrorResourceMiddleware, translator=translator)

    @app.exception_handler(ClientException)
    async def _client_error_handler(_: Request, exc: ClientException):
        # Raises again when the exception declares no status.
        return translator.to_response(exc)

    @app.exception_handler(RequestError)
    async def _request_error_handler(_: Request, exc: RequestError):
        return translator.to_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(_: Request, exc: RequestValidationError):
        return translator.to_response(classify_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(_: Request, exc: StarletteHTTPException):
        return translator.to_response(exc)

    @app.exception_handler(Exception)
    async def _server_error_handler(_: Request, exc: Exception):
        return translator.server_error_response(exc)

    return translator
