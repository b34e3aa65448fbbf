# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..common.constants import (
    DEFAULT_FORMAT,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_MAX_RESPONSE_SIZE,
    DEFAULT_RETRY,
    DEFAULT_TIMEOUT,
    USER_AGENT,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging settings for the execution engine.

    Logging is opt-in. When enabled, each completed call is logged at DEBUG
    (WARNING for status >= 400) together with retry, redirect and pagination events.

    :param enable_logging: Turn on the engine's log records.
    :type enable_logging: bool
    :param log_level: Level name applied to the engine logger (default: ``"WARNING"``).
    :type log_level: str
    :param logger_name: Name of the logger records are emitted on.
    :type logger_name: str
    """

    enable_logging: bool = False
    log_level: str = "WARNING"
    logger_name: str = "azd_rest"


@dataclass(frozen=True)
class RestConfig:
    """
    Client-level defaults for :class:`~azd_rest.client.RestClient`.

    Values set on an individual :class:`~azd_rest.models.options.RequestOptions`
    take precedence over these.

    :param timeout: Per-request timeout in seconds (default: 30). ``0`` or less disables it.
    :type timeout: float
    :param retry: Retries after the first attempt for transient failures (default: 3).
    :type retry: int
    :param follow_redirects: Whether 3xx responses are followed (default: True).
    :type follow_redirects: bool
    :param max_redirects: Maximum redirect hops per attempt (default: 10).
    :type max_redirects: int
    :param max_response_size: Ceiling in bytes for a response body (default: 100 MB).
    :type max_response_size: int
    :param insecure: Skip TLS certificate verification (default: False).
    :type insecure: bool
    :param format: Output format used by the formatter: ``auto``, ``json`` or ``raw``.
    :type format: str
    :param user_agent: ``User-Agent`` sent when the caller does not set one.
    :type user_agent: str
    :param logging: Logging settings.
    :type logging: ~azd_rest.core.config.LoggingConfig
    """

    timeout: float = DEFAULT_TIMEOUT
    retry: int = DEFAULT_RETRY
    follow_redirects: bool = True
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE
    insecure: bool = False
    format: str = DEFAULT_FORMAT
    user_agent: str = USER_AGENT
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RestConfig":
        """
        Create a configuration from ``AZD_REST_*`` environment variables.

        Recognised variables: ``AZD_REST_TIMEOUT``, ``AZD_REST_RETRY``,
        ``AZD_REST_MAX_REDIRECTS``, ``AZD_REST_MAX_RESPONSE_SIZE``,
        ``AZD_REST_INSECURE`` and ``AZD_REST_LOG_LEVEL``. Unset variables keep
        their defaults.

        :param environ: Mapping to read instead of :data:`os.environ`.
        :return: Configuration instance.
        :rtype: ~azd_rest.core.config.RestConfig
        :raises ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        def _number(name: str, default, kind):
            raw = env.get(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return kind(raw.strip())
            except ValueError:
                raise ValueError(f"{name} must be a {kind.__name__}, got {raw!r}") from None

        log_level = env.get("AZD_REST_LOG_LEVEL")
        logging_config = LoggingConfig()
        if log_level:
            logging_config = LoggingConfig(enable_logging=True, log_level=log_level.strip().upper())

        return cls(
            timeout=_number("AZD_REST_TIMEOUT", DEFAULT_TIMEOUT, float),
            retry=_number("AZD_REST_RETRY", DEFAULT_RETRY, int),
            max_redirects=_number("AZD_REST_MAX_REDIRECTS", DEFAULT_MAX_REDIRECTS, int),
            max_response_size=_number("AZD_REST_MAX_RESPONSE_SIZE", DEFAULT_MAX_RESPONSE_SIZE, int),
            insecure=(env.get("AZD_REST_INSECURE", "").strip().lower() in _TRUE_VALUES),
            logging=logging_config,
        )
