# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Logging for the request execution engine.

Records are only emitted when :class:`~azd_rest.core.config.LoggingConfig` enables
them; otherwise :func:`create_telemetry_manager` hands back a no-op manager.
Header values always pass through the redactor before they reach a record.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from ..formatting.redaction import redact_headers
from .config import LoggingConfig


class TelemetryManager:
    """Emits log records for calls, retries, redirects and pagination.

    This class is internal and not part of the public API.
    """

    def __init__(self, config: Optional[LoggingConfig] = None) -> None:
        self._config = config or LoggingConfig(enable_logging=True)
        self._logger = logging.getLogger(self._config.logger_name)
        self._logger.setLevel(getattr(logging, self._config.log_level.upper(), logging.WARNING))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def record_request(self, method: str, url: str, headers: Mapping[str, str]) -> None:
        self._logger.debug(
            "> %s %s",
            method,
            url,
            extra={"request_headers": redact_headers(headers)},
        )

    def record_retry(self, method: str, url: str, attempt: int, delay: float, reason: str) -> None:
        self._logger.debug(
            "retrying %s %s (attempt %d) in %.1fs: %s",
            method,
            url,
            attempt + 1,
            delay,
            reason,
        )

    def record_redirect(self, from_url: str, to_url: str, hop: int) -> None:
        self._logger.debug("redirect %d: %s -> %s", hop, from_url, to_url)

    def record_page(self, url: str, page_number: int, item_count: int) -> None:
        self._logger.debug("page %d from %s: %d items", page_number, url, item_count)

    def record_pagination_failure(self, url: str, error: Any) -> None:
        self._logger.warning("pagination stopped at %s: %s", url, error)

    def record_response(self, method: str, url: str, status_code: int, duration: float) -> None:
        level = logging.WARNING if status_code >= 400 else logging.DEBUG
        self._logger.log(level, "%s %s %d %.1fms", method, url, status_code, duration * 1000)


class NoOpTelemetryManager:
    """No-op manager used when logging is disabled."""

    def record_request(self, *args: Any, **kwargs: Any) -> None:
        pass

    def record_retry(self, *args: Any, **kwargs: Any) -> None:
        pass

    def record_redirect(self, *args: Any, **kwargs: Any) -> None:
        pass

    def record_page(self, *args: Any, **kwargs: Any) -> None:
        pass

    def record_pagination_failure(self, *args: Any, **kwargs: Any) -> None:
        pass

    def record_response(self, *args: Any, **kwargs: Any) -> None:
        pass


def create_telemetry_manager(
    config: Optional[LoggingConfig],
) -> Union[TelemetryManager, NoOpTelemetryManager]:
    """Factory to create the appropriate manager."""
    if config is None or not config.enable_logging:
        return NoOpTelemetryManager()
    return TelemetryManager(config)


__all__ = [
    "TelemetryManager",
    "NoOpTelemetryManager",
    "create_telemetry_manager",
]
