# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Output formatting and header redaction.
"""

from .formatter import Formatter, OutputFormat, is_binary_content, is_json
from .redaction import redact_headers, redact_sensitive_header, redact_token

__all__ = [
    "Formatter",
    "OutputFormat",
    "is_json",
    "is_binary_content",
    "redact_token",
    "redact_sensitive_header",
    "redact_headers",
]
