# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured errors raised by the request execution engine.

HTTP status codes are never turned into errors here: a 404 or a 503 is a normal
:class:`~azd_rest.models.response.Response`. The errors below describe failures to
build, send, or read a request.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

from ._error_codes import (
    AUTH_TOKEN_ACQUISITION_FAILED,
    REDIRECT_LIMIT_EXCEEDED,
    RESPONSE_SIZE_EXCEEDED,
    TRANSPORT_OTHER,
    TRANSPORT_RETRIES_EXHAUSTED,
)


class RestError(Exception):
    """Base structured error for the azd rest engine."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class RequestConstructionError(RestError):
    """The method, URL, headers or body could not be turned into a request."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="request_construction_error", subcode=subcode, details=details)


class AuthenticationError(RestError):
    """A bearer token could not be acquired for the request scope."""

    def __init__(
        self,
        message: str,
        *,
        scope: Optional[str] = None,
        subcode: Optional[str] = AUTH_TOKEN_ACQUISITION_FAILED,
    ):
        details = {"scope": scope} if scope else None
        super().__init__(message, code="authentication_error", subcode=subcode, details=details)
        self.scope = scope


class TransportError(RestError):
    """Network-level failure: nothing usable came back from the server."""

    def __init__(
        self,
        message: str,
        *,
        method: Optional[str] = None,
        url: Optional[str] = None,
        subcode: Optional[str] = TRANSPORT_OTHER,
        is_transient: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if method is not None:
            d["method"] = method
        if url is not None:
            d["url"] = url
        super().__init__(
            message,
            code="transport_error",
            subcode=subcode,
            details=d,
            source="network",
            is_transient=is_transient,
        )


class RetriesExhausted(TransportError):
    """Every allowed attempt ended in a retryable transport error.

    The final :class:`TransportError` is kept as :attr:`last_error` and chained as
    ``__cause__``.
    """

    def __init__(self, last_error: TransportError, *, attempts: int) -> None:
        super().__init__(
            f"Request failed after {attempts} attempts: {last_error.message}",
            method=last_error.details.get("method"),
            url=last_error.details.get("url"),
            subcode=TRANSPORT_RETRIES_EXHAUSTED,
            is_transient=True,
            details={"attempts": attempts, "last_subcode": last_error.subcode},
        )
        self.last_error = last_error
        self.attempts = attempts
        self.__cause__ = last_error


class TooManyRedirects(RestError):
    def __init__(self, max_redirects: int, *, url: Optional[str] = None) -> None:
        super().__init__(
            f"Stopped after {max_redirects} redirects",
            code="redirect_error",
            subcode=REDIRECT_LIMIT_EXCEEDED,
            details={"max_redirects": max_redirects, "url": url},
        )
        self.max_redirects = max_redirects


class ResponseTooLarge(RestError):
    def __init__(self, limit: int, *, received: Optional[int] = None, declared: Optional[int] = None) -> None:
        size = declared if declared is not None else received
        message = f"Response body exceeds maximum size of {limit} bytes"
        if size is not None:
            message = f"{message} ({'declared' if declared is not None else 'received'} {size} bytes)"
        super().__init__(
            message,
            code="response_error",
            subcode=RESPONSE_SIZE_EXCEEDED,
            details={"limit": limit, "received": received, "declared": declared},
        )
        self.limit = limit


class RequestCancelled(RestError):
    """The caller cancelled the logical call."""

    def __init__(self, message: str = "Request cancelled", *, subcode: Optional[str] = None) -> None:
        super().__init__(message, code="cancelled", subcode=subcode)


__all__ = [
    "RestError",
    "RequestConstructionError",
    "AuthenticationError",
    "TransportError",
    "RetriesExhausted",
    "TooManyRedirects",
    "ResponseTooLarge",
    "RequestCancelled",
]
