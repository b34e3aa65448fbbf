# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
The response returned by :meth:`~azd_rest.client.RestClient.execute`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List

from requests.structures import CaseInsensitiveDict


def _empty_headers() -> CaseInsensitiveDict:
    return CaseInsensitiveDict()


@dataclass(frozen=True)
class Response:
    """
    Result of one logical call.

    :param status_code: Numeric HTTP status of the final response.
    :type status_code: int
    :param status: Status line text, for example ``"200 OK"``.
    :type status: str
    :param headers: Case-insensitive multimap of header name to the list of its values.
    :type headers: ~requests.structures.CaseInsensitiveDict
    :param body: Raw body bytes, never longer than the call's ``max_response_size``.
        For a paginated call this is the merged document.
    :type body: bytes
    :param duration: Seconds from first dispatch to the end of the body read,
        including retries and redirects but not pagination.
    :type duration: float
    :param url: URL of the final response after redirects.
    :type url: str
    """

    status_code: int
    status: str
    headers: CaseInsensitiveDict = field(default_factory=_empty_headers)
    body: bytes = b""
    duration: float = 0.0
    url: str = ""

    def header(self, name: str, default: str = "") -> str:
        """Return the first value of header ``name``."""
        values = self.header_values(name)
        return values[0] if values else default

    def header_values(self, name: str) -> List[str]:
        values = self.headers.get(name)
        if values is None:
            return []
        if isinstance(values, str):
            return [values]
        return list(values)

    @property
    def content_type(self) -> str:
        return self.header("Content-Type")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)
