# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Retrying HTTP dispatch with redirect handling and bounded body reads.

This module provides :class:`~azd_rest.core._http._HttpClient`, which sends one
prepared request through the shared session, retries 5xx responses and retryable
network errors with exponential backoff, follows redirects hop by hop under a
:class:`~azd_rest.core._redirect.RedirectPolicy`, and reads the final body into
memory without ever exceeding the configured size ceiling.
"""

from __future__ import annotations

import socket
import time
from typing import Optional, Union

import requests
from requests.structures import CaseInsensitiveDict

from ..common.constants import (
    DEFAULT_MAX_RESPONSE_SIZE,
    DEFAULT_RETRY,
    HEADER_CONTENT_LENGTH,
    READ_CHUNK_SIZE,
)
from ..data._body import RequestBody
from ..models.response import Response
from ._error_codes import (
    CANCELLED_BEFORE_DISPATCH,
    CANCELLED_DURING_BACKOFF,
    CANCELLED_DURING_READ,
    TRANSPORT_CONNECTION,
    TRANSPORT_OTHER,
    TRANSPORT_TIMEOUT,
)
from ._redirect import RedirectPolicy
from ._transport import send_settings
from .cancellation import CancellationToken
from .errors import RequestCancelled, ResponseTooLarge, RetriesExhausted, TransportError
from .telemetry import NoOpTelemetryManager, TelemetryManager

_RETRYABLE_MESSAGES = (
    "timeout",
    "connection refused",
    "connection reset",
    "no such host",
    "network is unreachable",
    "deadline exceeded",
    "temporary failure in name resolution",
    "name or service not known",
    "i/o timeout",
)

_BODILESS_STATUSES = (204, 304)

_RETRYABLE_TYPES = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    socket.timeout,
    socket.gaierror,
    ConnectionError,
    TimeoutError,
)


def is_retryable_error(error: Optional[BaseException]) -> bool:
    """
    Decide whether a network-level error is worth another attempt.

    Timeouts, refused or reset connections, DNS failures and unreachable networks
    are retryable. TLS failures only are when their message names one of those
    conditions. Anything else is classified by its message text.

    :param error: The exception raised while sending, or ``None``.
    :return: ``True`` if the call should be retried.
    :rtype: bool
    """
    if error is None:
        return False
    if isinstance(error, TransportError):
        return error.is_transient
    if not isinstance(error, requests.exceptions.SSLError) and isinstance(error, _RETRYABLE_TYPES):
        return True
    text = str(error).lower()
    return any(marker in text for marker in _RETRYABLE_MESSAGES)


def _transport_error(exc: BaseException, request: requests.PreparedRequest) -> TransportError:
    if isinstance(exc, requests.exceptions.Timeout):
        subcode = TRANSPORT_TIMEOUT
    elif isinstance(exc, requests.exceptions.ConnectionError) and not isinstance(exc, requests.exceptions.SSLError):
        subcode = TRANSPORT_CONNECTION
    else:
        subcode = TRANSPORT_OTHER
    error = TransportError(
        f"{request.method} {request.url} failed: {exc}",
        method=request.method,
        url=request.url,
        subcode=subcode,
        is_transient=is_retryable_error(exc),
    )
    error.__cause__ = exc
    return error


def _has_body(resp: requests.Response) -> bool:
    method = resp.request.method if resp.request is not None else None
    return method != "HEAD" and resp.status_code not in _BODILESS_STATUSES and resp.status_code >= 200


def _collect_headers(resp: requests.Response) -> CaseInsensitiveDict:
    headers: CaseInsensitiveDict = CaseInsensitiveDict()
    raw_headers = getattr(resp.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        for name in raw_headers.keys():
            headers[name] = list(raw_headers.getlist(name))
    else:
        for name, value in resp.headers.items():
            headers[name] = [value]
    return headers


class _HttpClient:
    """
    Sends prepared requests with retry, redirect and size-limit handling.

    This class is internal and not part of the public API.

    :param session: Pooled session shared across calls.
    :type session: :class:`requests.Session`
    :param telemetry: Manager that receives request, retry and redirect events.
    :param base_delay: Delay in seconds before the first retry; doubled for each
        subsequent retry. Default is 1.0.
    :type base_delay: :class:`float`
    """

    def __init__(
        self,
        session: requests.Session,
        telemetry: Optional[Union[TelemetryManager, NoOpTelemetryManager]] = None,
        base_delay: float = 1.0,
    ) -> None:
        self._session = session
        self._telemetry = telemetry or NoOpTelemetryManager()
        self.base_delay = base_delay

    def _request(
        self,
        request: requests.PreparedRequest,
        *,
        body: Optional[RequestBody] = None,
        timeout: Optional[float] = None,
        insecure: bool = False,
        redirect: Optional[RedirectPolicy] = None,
        max_retries: int = DEFAULT_RETRY,
        max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE,
        cancellation: Optional[CancellationToken] = None,
    ) -> Response:
        """
        Execute a prepared request and return the fully read response.

        A response with status >= 500 is retried while attempts remain; when they run
        out, the last 5xx response is returned. A 4xx response is returned at once.
        Retryable network errors are retried the same way. Backoff before retry
        ``n`` is ``base_delay * 2 ** (n - 1)`` and ends early on cancellation.

        :param request: The request of the first attempt.
        :param body: The classified body; a non-replayable body disables retries.
        :param timeout: Seconds per hop for connect and each read; ``None`` for no limit.
        :param insecure: Skip TLS certificate verification.
        :param redirect: Redirect policy; defaults to following up to 10 hops.
        :param max_retries: Attempts after the first.
        :param max_response_size: Body ceiling in bytes.
        :param cancellation: Token observed before each dispatch, between body
            chunks and during backoff.
        :return: The final response.
        :rtype: ~azd_rest.models.response.Response
        :raises ~azd_rest.core.errors.TransportError: On a non-retryable network error,
            or any network error when no retries are allowed.
        :raises ~azd_rest.core.errors.RetriesExhausted: When every attempt ended in a
            retryable network error.
        :raises ~azd_rest.core.errors.TooManyRedirects: When the redirect limit is hit.
        :raises ~azd_rest.core.errors.ResponseTooLarge: When the body exceeds the ceiling.
        :raises ~azd_rest.core.errors.RequestCancelled: When ``cancellation`` fires.
        """
        redirect = redirect or RedirectPolicy()
        cancellation = cancellation or CancellationToken()
        if body is not None and not body.replayable:
            max_retries = 0
        max_retries = max(max_retries, 0)

        start = time.monotonic()
        for attempt in range(max_retries + 1):
            if attempt > 0:
                delay = self.base_delay * (2 ** (attempt - 1))
                if cancellation.wait(delay):
                    raise RequestCancelled(subcode=CANCELLED_DURING_BACKOFF)
                if body is not None:
                    body.rewind()

            cancellation.raise_if_cancelled(CANCELLED_BEFORE_DISPATCH)
            try:
                resp = self._send(request.copy(), timeout, insecure, redirect, max_response_size, cancellation)
            except (requests.exceptions.RequestException, OSError) as exc:
                error = _transport_error(exc, request)
                if error.is_transient and attempt < max_retries:
                    self._telemetry.record_retry(request.method, request.url, attempt + 1, self._next_delay(attempt), str(exc))
                    continue
                if error.is_transient and max_retries > 0:
                    raise RetriesExhausted(error, attempts=attempt + 1)
                raise error

            if resp.status_code >= 500 and attempt < max_retries:
                resp.close()
                self._telemetry.record_retry(
                    request.method, request.url, attempt + 1, self._next_delay(attempt), f"HTTP {resp.status_code}"
                )
                continue

            try:
                cancellation.raise_if_cancelled(CANCELLED_DURING_READ)
                data = self._read_body(resp, max_response_size, cancellation)
            finally:
                resp.close()

            duration = time.monotonic() - start
            self._telemetry.record_response(request.method, resp.url, resp.status_code, duration)
            return Response(
                status_code=resp.status_code,
                status=f"{resp.status_code} {resp.reason or ''}".strip(),
                headers=_collect_headers(resp),
                body=data,
                duration=duration,
                url=resp.url or request.url,
            )

    def _next_delay(self, attempt: int) -> float:
        return self.base_delay * (2**attempt)

    def _send(
        self,
        request: requests.PreparedRequest,
        timeout: Optional[float],
        insecure: bool,
        redirect: RedirectPolicy,
        limit: int,
        cancellation: CancellationToken,
    ) -> requests.Response:
        self._telemetry.record_request(request.method, request.url, request.headers)
        resp = self._session.send(
            request,
            timeout=timeout,
            allow_redirects=False,
            **send_settings(self._session, request.url, insecure=insecure),
        )
        hops = 0
        while True:
            try:
                if not redirect.should_follow(resp, hops):
                    return resp
                # Redirect bodies count against the same ceiling.
                self._read_body(resp, limit, cancellation)
                next_request = redirect.next_request(self._session, resp)
            except Exception:
                resp.close()
                raise
            resp.close()
            hops += 1
            self._telemetry.record_redirect(resp.url, next_request.url, hops)
            cancellation.raise_if_cancelled(CANCELLED_BEFORE_DISPATCH)
            resp = self._session.send(
                next_request,
                timeout=timeout,
                allow_redirects=False,
                **send_settings(self._session, next_request.url, insecure=insecure),
            )

    def _read_body(
        self,
        resp: requests.Response,
        limit: int,
        cancellation: CancellationToken,
    ) -> bytes:
        declared = resp.headers.get(HEADER_CONTENT_LENGTH) if _has_body(resp) else None
        if declared is not None:
            try:
                declared_size = int(declared)
            except ValueError:
                declared_size = None
            if declared_size is not None and declared_size > limit:
                raise ResponseTooLarge(limit, declared=declared_size)

        chunks = []
        received = 0
        try:
            for chunk in resp.iter_content(chunk_size=READ_CHUNK_SIZE):
                cancellation.raise_if_cancelled(CANCELLED_DURING_READ)
                received += len(chunk)
                if received > limit:
                    raise ResponseTooLarge(limit, received=received)
                chunks.append(chunk)
        except (requests.exceptions.RequestException, OSError) as exc:
            raise TransportError(
                f"failed to read response body: {exc}",
                method=resp.request.method if resp.request is not None else None,
                url=resp.url,
            ) from exc
        return b"".join(chunks)


__all__ = ["is_retryable_error"]
