# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx

from .decode import response_bytes


class TypedHttpError(Exception):
    """Base class for errors raised by typedhttp itself."""


class HttpError(TypedHttpError):
    """Structured error for a non-2xx response.

    Carries the exact status code, reason phrase, raw body bytes and response
    headers observed on the wire so callers can inspect them after the fact.
    """

    def __init__(
        self,
        status_code: int,
        status: str,
        body: bytes = b"",
        headers: httpx.Headers | None = None,
    ) -> None:
        super().__init__(status_code, status)
        self.status_code = status_code
        self.status = status
        self.body = body
        self.headers = headers if headers is not None else httpx.Headers()

    def __str__(self) -> str:
        return f"http {self.status_code} {self.status}"

    @classmethod
    def from_response(cls, response: httpx.Response | None) -> HttpError:
        if response is None:
            return cls(0, "missing response")
        return cls(
            response.status_code,
            response.reason_phrase,
            response_bytes(response),
            httpx.Headers(response.headers),
        )


class UnsupportedMethodError(TypedHttpError, ValueError):
    """The requested verb is outside the supported set; raised before any I/O."""

    def __init__(self, method: str) -> None:
        super().__init__(f"unsupported method {method}")
        self.method = method


class MissingRequestError(TypedHttpError, ValueError):
    """The low-level execute() escape hatch was called without a request."""

    def __init__(self) -> None:
        super().__init__("request is required")


class RequestCancelledError(TypedHttpError):
    """The call context was cancelled before or during I/O."""


class DeadlineExceededError(TypedHttpError, TimeoutError):
    """The call context deadline passed before or during I/O."""


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map Python/httpx/typedhttp exceptions to ErrorCategory.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, (DeadlineExceededError, httpx.TimeoutException)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, RequestCancelledError):
        return ErrorCategory.CANCELLED

    if isinstance(exc, (HttpError, httpx.HTTPStatusError)):
        return ErrorCategory.HTTP_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        cause = exc.__cause__ or exc.__context__
        if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT

    return ErrorCategory.UNKNOWN_ERROR


__all__ = [
    "DeadlineExceededError",
    "ErrorCategory",
    "HttpError",
    "MissingRequestError",
    "RequestCancelledError",
    "TypedHttpError",
    "UnsupportedMethodError",
    "categorize_exception",
]
