# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Masking of credentials in header values before they are displayed or logged.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple, Union

from ..common.constants import REDACTED, SENSITIVE_HEADERS

_VISIBLE_CHARS = 6


def redact_token(value: str) -> str:
    """
    Mask a secret, keeping its first and last six characters.

    :param value: The secret value.
    :type value: str
    :return: ``value[:6] + "..." + value[-6:]`` when ``value`` is longer than twelve
        characters, otherwise ``"***REDACTED***"``.
    :rtype: str
    """
    if len(value) > 2 * _VISIBLE_CHARS:
        return f"{value[:_VISIBLE_CHARS]}...{value[-_VISIBLE_CHARS:]}"
    return REDACTED


def redact_sensitive_header(name: str, value: str) -> str:
    """
    Return the display form of a header value.

    ``Authorization`` keeps the ``Bearer`` scheme and masks the token; any other
    authorization scheme is fully masked. The headers in
    :data:`~azd_rest.common.constants.SENSITIVE_HEADERS` are masked with
    :func:`redact_token`. All other headers are returned unchanged.

    :param name: Header name, matched case-insensitively.
    :type name: str
    :param value: Header value.
    :type value: str
    :rtype: str
    """
    lowered = name.lower()
    if lowered == "authorization":
        scheme, sep, token = value.strip().partition(" ")
        if sep and scheme.lower() == "bearer":
            return f"Bearer {redact_token(token.strip())}"
        return REDACTED
    if lowered in SENSITIVE_HEADERS:
        return redact_token(value)
    return value


def redact_headers(
    headers: Union[Mapping[str, Union[str, Iterable[str]]], Iterable[Tuple[str, str]]],
) -> Dict[str, str]:
    """Redact a header mapping (or multimap of value lists) for logging."""
    items = headers.items() if isinstance(headers, Mapping) else headers
    redacted: Dict[str, str] = {}
    for name, value in items:
        values = [value] if isinstance(value, str) else list(value)
        redacted[name] = ", ".join(redact_sensitive_header(name, v) for v in values)
    return redacted


__all__ = ["redact_token", "redact_sensitive_header", "redact_headers"]
