# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Optional

import requests

from .common.constants import DEFAULT_MAX_RESPONSE_SIZE, DEFAULT_RETRY
from .core._builder import build_request
from .core._http import _HttpClient
from .core._redirect import RedirectPolicy
from .core._transport import build_session
from .core.auth import TokenProvider
from .core.cancellation import CancellationToken
from .core.config import RestConfig
from .core.telemetry import create_telemetry_manager
from .data._pagination import merge_pages
from .formatting.formatter import Formatter, is_binary_content
from .models.options import RequestOptions
from .models.response import Response


def _resolve_retry(value: Optional[int], default: int) -> int:
    retry = default if value is None else value
    if retry == 0:
        return DEFAULT_RETRY
    return max(retry, 0)


def _resolve_timeout(value: Optional[float], default: Optional[float]) -> Optional[float]:
    timeout = default if value is None else value
    if timeout is None or timeout <= 0:
        return None
    return timeout


def _resolve_size(value: Optional[int], default: int) -> int:
    size = default if value is None else value
    return size if size and size > 0 else DEFAULT_MAX_RESPONSE_SIZE


class RestClient:
    """
    Executes authenticated REST calls against Azure and arbitrary HTTP endpoints.

    One :meth:`execute` call is one logical call: the request is built from a
    :class:`~azd_rest.models.options.RequestOptions`, sent with retry on 5xx and
    transient network errors, redirected hop by hop, read under a size ceiling and,
    when asked, paginated into a single merged document. HTTP error statuses are
    returned as normal responses; only failures to build, send or read raise.

    **Context Manager Support (Recommended)**::

        with RestClient() as client:
            response = client.execute(
                RequestOptions.for_url("GET", "https://management.azure.com/subscriptions?api-version=2020-01-01")
            )
            client.render(response)

    :param token_provider: Default token source for calls that do not bring their own.
    :type token_provider: ~azd_rest.core.auth.TokenProvider or None
    :param config: Client defaults. If not provided, they are loaded from
        :meth:`~azd_rest.core.config.RestConfig.from_env`.
    :type config: ~azd_rest.core.config.RestConfig or None
    :param session: Session to send through. A session passed in is never closed
        by the client.
    :type session: :class:`requests.Session` or None
    """

    def __init__(
        self,
        token_provider: Optional[TokenProvider] = None,
        config: Optional[RestConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token_provider = token_provider
        self._config = config or RestConfig.from_env()
        self._telemetry = create_telemetry_manager(self._config.logging)
        self._session: Optional[requests.Session] = session
        self._owns_session: bool = False
        self._http: Optional[_HttpClient] = None

    def __enter__(self) -> "RestClient":
        self._get_http()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the pooled connections. Safe to call multiple times."""
        self._http = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    @property
    def config(self) -> RestConfig:
        return self._config

    def _get_http(self) -> _HttpClient:
        if self._http is None:
            if self._session is None:
                self._session = build_session()
                self._owns_session = True
            self._http = _HttpClient(self._session, self._telemetry)
        return self._http

    def execute(self, options: RequestOptions) -> Response:
        """
        Execute one logical call.

        :param options: What to send and how.
        :type options: ~azd_rest.models.options.RequestOptions
        :return: The final response. With ``paginate`` set and a 2xx JSON first page,
            its body is the merged document.
        :rtype: ~azd_rest.models.response.Response
        :raises ~azd_rest.core.errors.RequestConstructionError: If the method, URL,
            headers or body are invalid.
        :raises ~azd_rest.core.errors.AuthenticationError: If a token cannot be acquired.
        :raises ~azd_rest.core.errors.TransportError: On a network failure that is not
            retried, or ``RetriesExhausted`` when every attempt failed.
        :raises ~azd_rest.core.errors.TooManyRedirects: When the redirect limit is hit.
        :raises ~azd_rest.core.errors.ResponseTooLarge: When the body exceeds the ceiling.
        :raises ~azd_rest.core.errors.RequestCancelled: When the call's cancellation
            token fires.
        """
        http = self._get_http()
        cfg = self._config
        token_provider = options.token_provider or self.token_provider
        cancellation = options.cancellation or CancellationToken()

        follow = cfg.follow_redirects if options.follow_redirects is None else options.follow_redirects
        settings = dict(
            timeout=_resolve_timeout(options.timeout, cfg.timeout),
            insecure=cfg.insecure if options.insecure is None else options.insecure,
            redirect=RedirectPolicy(follow, options.max_redirects or cfg.max_redirects),
            max_retries=_resolve_retry(options.retry, cfg.retry),
            max_response_size=_resolve_size(options.max_response_size, cfg.max_response_size),
            cancellation=cancellation,
        )

        request, body = build_request(
            self._session,
            options,
            token_provider=token_provider,
            user_agent=cfg.user_agent,
        )
        response = http._request(request, body=body, **settings)

        if not options.paginate:
            return response

        def fetch_page(url: str) -> Response:
            page_request, _ = build_request(
                self._session,
                options,
                token_provider=token_provider,
                user_agent=cfg.user_agent,
                url=url,
                include_body=False,
            )
            return http._request(page_request, **settings)

        return merge_pages(response, fetch_page, base_url=options.url, telemetry=self._telemetry)

    def render(self, response: Response, options: Optional[RequestOptions] = None) -> None:
        """
        Write ``response`` the way the ``azd rest`` commands do.

        Binary responses, or any response when ``options.binary`` is set, are written
        as raw bytes. Everything else goes through :class:`~azd_rest.formatting.formatter.Formatter`.
        Output goes to ``options.output_file`` when set, otherwise to stdout.
        """
        verbose = options.verbose if options is not None else False
        output_format = (options.format if options is not None else None) or self._config.format
        output_file = options.output_file if options is not None else None
        binary = options.binary if options is not None else False

        formatter = Formatter(verbose, output_format)
        if binary or is_binary_content(response.body, response.content_type):
            formatter.write_raw_output(response.body, output_file)
            return
        formatter.write_output(formatter.format(response), output_file)


__all__ = ["RestClient"]
