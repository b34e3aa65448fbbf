# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Rendering of a :class:`~azd_rest.models.response.Response` for display.

:class:`Formatter` is a pure function of the response, the verbosity and the
requested :class:`OutputFormat`; the ``write_*`` helpers put the result on stdout
or into a file readable only by the current user.
"""

from __future__ import annotations

import codecs
import json
import os
import sys
from enum import Enum
from typing import List, Optional, Union

from ..common.constants import HEADER_CONTENT_TYPE
from ..models.response import Response
from .redaction import redact_sensitive_header

_SNIFF_SIZE = 8192

_TEXT_MARKERS = ("json", "xml", "javascript", "x-www-form-urlencoded", "yaml", "csv", "html")
_BINARY_MARKERS = (
    "image/",
    "audio/",
    "video/",
    "font/",
    "application/octet-stream",
    "application/zip",
    "application/gzip",
    "application/x-tar",
    "application/pdf",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats",
)


class OutputFormat(str, Enum):
    """How a response body is rendered."""

    AUTO = "auto"
    JSON = "json"
    RAW = "raw"


def is_json(data: Union[bytes, str]) -> bool:
    """Return ``True`` when ``data`` is one complete JSON document."""
    if not data:
        return False
    try:
        json.loads(data)
    except ValueError:
        return False
    return True


def is_binary_content(body: bytes, content_type: str = "") -> bool:
    """
    Decide whether a body must be written as raw bytes.

    The ``Content-Type`` decides when it names a known textual or binary type.
    Otherwise the first 8 KB of the body are inspected: a NUL byte or invalid
    UTF-8 means binary.

    :param body: Response body.
    :param content_type: Value of the ``Content-Type`` header, possibly empty.
    :rtype: bool
    """
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type:
        if media_type.startswith("text/") or any(marker in media_type for marker in _TEXT_MARKERS):
            return False
        if any(media_type.startswith(marker) for marker in _BINARY_MARKERS):
            return True

    sample = body[:_SNIFF_SIZE]
    if b"\x00" in sample:
        return True
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        # A multi-byte character cut at the sample boundary is not an error.
        decoder.decode(sample, final=len(body) <= _SNIFF_SIZE)
    except UnicodeDecodeError:
        return True
    return False


def _format_duration(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.2f}s"
    return f"{seconds * 1000:.0f}ms"


class Formatter:
    """
    Formats responses for terminal or file output.

    :param verbose: Prepend the status line, duration and redacted headers.
    :type verbose: bool
    :param format: ``"auto"``, ``"json"`` or ``"raw"``.
    :type format: str or ~azd_rest.formatting.formatter.OutputFormat
    :raises ValueError: If ``format`` is not a known output format.
    """

    def __init__(self, verbose: bool = False, format: Union[str, OutputFormat] = OutputFormat.AUTO) -> None:
        self.verbose = verbose
        if not isinstance(format, OutputFormat):
            try:
                format = OutputFormat((format or OutputFormat.AUTO.value).lower())
            except ValueError:
                raise ValueError(f"unknown output format {format!r}; expected auto, json or raw") from None
        self.output_format = format

    def format(self, response: Response) -> str:
        """
        Render ``response`` as text.

        ``json`` pretty-prints the body, falling back to the raw text when it does not
        parse. ``raw`` returns the body text unchanged. ``auto`` behaves like ``json``
        when the ``Content-Type`` contains ``application/json`` and like ``raw``
        otherwise.
        """
        body = self._format_body(response)
        if not self.verbose:
            return body

        lines: List[str] = [f"< {response.status}", f"Duration: {_format_duration(response.duration)}"]
        lines.append("Response Headers:")
        for name in sorted(response.headers.keys(), key=str.lower):
            for value in response.header_values(name):
                lines.append(f"  {name}: {redact_sensitive_header(name, value)}")
        lines.append("")
        lines.append(body)
        return "\n".join(lines)

    def _format_body(self, response: Response) -> str:
        if not response.body:
            return ""
        if self.output_format is OutputFormat.JSON:
            return self.format_json(response.body)
        if self.output_format is OutputFormat.AUTO and "application/json" in response.header(HEADER_CONTENT_TYPE).lower():
            return self.format_json(response.body)
        return response.text

    def format_json(self, body: Union[bytes, str]) -> str:
        """Pretty-print JSON with two-space indentation, or return the text as-is."""
        text = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body
        try:
            data = json.loads(text)
        except ValueError:
            return text
        return json.dumps(data, indent=2, ensure_ascii=False)

    def write_output(self, text: str, path: Optional[str] = None) -> None:
        """Write ``text`` to stdout, or to ``path`` with owner-only permissions."""
        if not path:
            sys.stdout.write(text)
            if text and not text.endswith("\n"):
                sys.stdout.write("\n")
            sys.stdout.flush()
            return
        self.write_raw_output(text.encode("utf-8"), path)

    def write_raw_output(self, data: bytes, path: Optional[str] = None) -> None:
        """Write ``data`` unmodified to stdout, or to ``path`` with owner-only permissions."""
        if not path:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
            return
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(path, 0o600)


__all__ = ["Formatter", "OutputFormat", "is_json", "is_binary_content"]
