"""Exception kinds understood by the error translator."""

from fastapi import status


class ClientException(Exception):
    """Raised for failures caused by the client.

    Subclasses declare the HTTP status through ``status_code``; a single
    instance may override it at construction time. The base class declares
    none, so raising it bare is a classification error.
    """

    status_code: int | None = None

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(*([message] if message is not None else []))


class BadRequestException(ClientException):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(ClientException):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(ClientException):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(ClientException):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(ClientException):
    status_code = status.HTTP_409_CONFLICT


class RequestError(Exception):
    """Base class for failures while parsing or binding the incoming request."""

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(*([detail] if detail is not None else []))


class MalformedBodyError(RequestError):
    """The request body could not be parsed."""


class UnsupportedMediaTypeError(RequestError):
    """The request body has a content type the endpoint does not accept."""


class TypeMismatchError(RequestError):
    """A parameter value does not convert to its declared type."""


class RequestBindingError(RequestError):
    """A request header, cookie or parameter could not be bound."""


class MissingParameterError(RequestBindingError):
    """A required query or path parameter is absent."""
