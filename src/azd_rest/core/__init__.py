# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure of the execution engine.

This module contains authentication, configuration, cancellation, the HTTP
dispatch path, and the structured error types raised by
:meth:`~azd_rest.client.RestClient.execute`.
"""

from .errors import (
    AuthenticationError,
    RequestCancelled,
    RequestConstructionError,
    ResponseTooLarge,
    RestError,
    RetriesExhausted,
    TooManyRedirects,
    TransportError,
)

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
