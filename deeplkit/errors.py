"""Errors raised for unsuccessful API responses."""

from __future__ import annotations

from http import HTTPStatus
from typing import Optional

QUOTA_EXCEEDED = 456


def _status_text(status_code: int) -> str:
    if status_code == QUOTA_EXCEEDED:
        return "Quota exceeded. The character limit has been reached."
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


class HTTPError(Exception):
    """An API response with an unexpected status code."""

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        self.status_code = status_code
        if message is None:
            message = f"{status_code} - {_status_text(status_code)}"
        super().__init__(message)


class TooManyRequestsError(HTTPError):
    """The server asked for fewer requests; worth retrying."""

    def __init__(self, status_code: int = HTTPStatus.TOO_MANY_REQUESTS) -> None:
        super().__init__(int(status_code))


class InternalServerError(HTTPError):
    """The server failed with a 5xx status; worth retrying."""

    def __init__(self, status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR) -> None:
        code = int(HTTPStatus.INTERNAL_SERVER_ERROR)
        super().__init__(int(status_code), f"{code} - {_status_text(code)}")


def http_error(status_code: int) -> HTTPError:
    """Return the error describing an unexpected status code."""
    return HTTPError(status_code)


def retriable_http_error(status_code: int) -> Optional[HTTPError]:
    """Return a retriable error for the status code, or ``None``."""
    if status_code == HTTPStatus.TOO_MANY_REQUESTS:
        return TooManyRequestsError(status_code)
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return InternalServerError(status_code)
    return None


def is_retriable(error: BaseException) -> bool:
    """Tell whether a request that failed with ``error`` may be retried."""
    return isinstance(error, (TooManyRequestsError, InternalServerError))