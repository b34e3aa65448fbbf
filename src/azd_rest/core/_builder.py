# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Turns :class:`~azd_rest.models.options.RequestOptions` into a prepared request.
"""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import urlsplit

import requests

from ..common.constants import (
    ALLOWED_METHODS,
    ALLOWED_SCHEMES,
    HEADER_AUTHORIZATION,
    HEADER_USER_AGENT,
)
from ..data._body import RequestBody, prepare_body
from ._error_codes import (
    AUTH_EMPTY_TOKEN,
    VALIDATION_INVALID_HEADER,
    VALIDATION_INVALID_METHOD,
    VALIDATION_INVALID_URL,
)
from .auth import TokenProvider
from .errors import AuthenticationError, RequestConstructionError


def validate_method(method: str) -> str:
    normalized = (method or "").upper()
    if normalized not in ALLOWED_METHODS:
        raise RequestConstructionError(
            f"invalid HTTP method: {method}",
            subcode=VALIDATION_INVALID_METHOD,
            details={"allowed": sorted(ALLOWED_METHODS)},
        )
    return normalized


def validate_url(url: str) -> str:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise RequestConstructionError(
            f"invalid URL: {exc}", subcode=VALIDATION_INVALID_URL, details={"url": url}
        ) from exc
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.netloc:
        raise RequestConstructionError(
            f"invalid URL: {url} (expected an absolute http or https URL)",
            subcode=VALIDATION_INVALID_URL,
            details={"url": url},
        )
    return url


def _bearer_token(token_provider: TokenProvider, scope: str) -> str:
    try:
        token = token_provider.get_token(scope)
    except Exception as exc:
        raise AuthenticationError(f"failed to get token for scope {scope}: {exc}", scope=scope) from exc
    if not token:
        raise AuthenticationError(
            f"token provider returned an empty token for scope {scope}",
            scope=scope,
            subcode=AUTH_EMPTY_TOKEN,
        )
    return token


def build_request(
    session: requests.Session,
    options,
    *,
    token_provider: Optional[TokenProvider],
    user_agent: str,
    url: Optional[str] = None,
    include_body: bool = True,
) -> Tuple[requests.PreparedRequest, Optional[RequestBody]]:
    """
    Build the prepared request for one logical call, or for one pagination page.

    Headers are applied in order: caller headers, then ``Authorization: Bearer``
    (only when auth is not skipped and both a scope and a token provider are
    present, overwriting a caller value), then ``User-Agent`` if the caller set none.

    :param session: Session whose defaults are merged into the request.
    :param options: The call description.
    :type options: ~azd_rest.models.options.RequestOptions
    :param token_provider: Token source for the bearer header.
    :param user_agent: Fallback ``User-Agent``.
    :param url: Overrides ``options.url``; used for next-page requests.
    :param include_body: ``False`` for next-page requests, which never carry a body.
    :return: The prepared request and the classified body, if any.
    :raises ~azd_rest.core.errors.RequestConstructionError: On an unsupported method,
        a non-http(s) URL, invalid headers or an unreadable body.
    :raises ~azd_rest.core.errors.AuthenticationError: If the token cannot be acquired.
    """
    method = validate_method(options.method)
    target = validate_url(url or options.url)

    headers = dict(options.headers or {})

    if not options.skip_auth and options.scope and token_provider is not None:
        for name in [n for n in headers if n.lower() == HEADER_AUTHORIZATION.lower()]:
            del headers[name]
        headers[HEADER_AUTHORIZATION] = f"Bearer {_bearer_token(token_provider, options.scope)}"

    if not any(name.lower() == HEADER_USER_AGENT.lower() for name in headers):
        headers[HEADER_USER_AGENT] = user_agent

    body = prepare_body(options.body) if include_body else None

    try:
        prepared = session.prepare_request(
            requests.Request(
                method=method,
                url=target,
                headers=headers,
                data=body.payload() if body is not None else None,
            )
        )
    except requests.exceptions.InvalidHeader as exc:
        raise RequestConstructionError(
            f"invalid header: {exc}", subcode=VALIDATION_INVALID_HEADER
        ) from exc
    except (requests.exceptions.RequestException, ValueError) as exc:
        raise RequestConstructionError(
            f"failed to create request: {exc}",
            subcode=VALIDATION_INVALID_URL,
            details={"url": target},
        ) from exc

    return prepared, body


__all__ = ["build_request", "validate_method", "validate_url"]
