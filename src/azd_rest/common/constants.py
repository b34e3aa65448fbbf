# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Defaults and well-known names used by the request execution engine.
"""

VERSION = "0.1.0"

USER_AGENT = f"azd-rest/{VERSION} (azd extension)"
"""Sent on every request unless the caller supplies its own ``User-Agent``."""

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})
ALLOWED_SCHEMES = frozenset({"http", "https"})

# Call defaults
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY = 3
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_MAX_RESPONSE_SIZE = 100 * 1024 * 1024
DEFAULT_FORMAT = "auto"

MAX_BUFFERED_BODY_SIZE = 10 * 1024 * 1024
"""One-shot request streams up to this size are buffered so they can be replayed on retry."""

MAX_PAGES = 1000
"""Hard ceiling on pages fetched by a single paginated call."""

READ_CHUNK_SIZE = 64 * 1024

# Pagination
VALUE_FIELD = "value"
NEXT_LINK_FIELDS = ("nextLink", "@odata.nextLink", "@odata.next")
"""Body fields carrying the next page URL, in precedence order."""

# Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_LINK = "Link"

REDACTED = "***REDACTED***"
SENSITIVE_HEADERS = frozenset({"x-api-key", "x-auth-token", "cookie", "set-cookie", "x-csrf-token"})
"""Header names (lower case) whose values are masked in addition to ``Authorization``."""
