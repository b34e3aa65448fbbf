# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Declarative description of one logical call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import IO, Any, Iterable, Mapping, Optional, Union

from ..core._error_codes import VALIDATION_INVALID_HEADER, VALIDATION_UNREADABLE_BODY
from ..core.auth import AzureTokenProvider, TokenProvider
from ..core.cancellation import CancellationToken
from ..core.errors import RequestConstructionError
from ..core.scope import detect_scope, is_azure_host, should_skip_auth

logger = logging.getLogger(__name__)

BodySource = Union[bytes, bytearray, str, IO[Any]]


def parse_header_lines(lines: Iterable[str]) -> dict[str, str]:
    """
    Parse ``Key: Value`` strings into a header mapping.

    :raises ~azd_rest.core.errors.RequestConstructionError: If a line has no colon
        or an empty name.
    """
    headers: dict[str, str] = {}
    for line in lines:
        name, sep, value = line.partition(":")
        name = name.strip()
        if not sep or not name:
            raise RequestConstructionError(
                f"invalid header format: {line} (expected Key:Value)",
                subcode=VALIDATION_INVALID_HEADER,
            )
        headers[name] = value.strip()
    return headers


@dataclass(frozen=True)
class RequestOptions:
    """
    Input to :meth:`~azd_rest.client.RestClient.execute`.

    Fields left as ``None`` take the client's :class:`~azd_rest.core.config.RestConfig`
    value.

    :param method: One of GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS (any case).
    :param url: Absolute ``http`` or ``https`` URL.
    :param headers: Caller headers, sent with their original casing.
    :param body: Optional payload: bytes, text (sent as UTF-8), or a readable
        file-like object. Seekable binary handles are replayed on retry.
    :param scope: OAuth scope for the bearer token.
    :param skip_auth: Never attach a bearer token.
    :param verbose: Include status, timing and headers in formatted output.
    :param timeout: Seconds per request; ``0`` or less disables the timeout.
    :param insecure: Skip TLS certificate verification.
    :param follow_redirects: Follow 3xx responses.
    :param max_redirects: Maximum redirect hops; ``0`` or less means the default (10).
    :param output_file: Where :meth:`~azd_rest.client.RestClient.render` writes; stdout when unset.
    :param format: ``auto``, ``json`` or ``raw``.
    :param binary: Write the body as raw bytes without formatting.
    :param retry: Retries for transient failures; ``None`` or ``0`` means the default (3),
        a negative value disables retries.
    :param max_response_size: Body ceiling in bytes; ``0`` or less means the default (100 MB).
    :param paginate: Follow next-page links and merge the ``value`` arrays.
    :param token_provider: Token source; falls back to the client's provider.
    :param cancellation: Token observed during dispatch, body read and backoff.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[BodySource] = None
    scope: str = ""
    skip_auth: bool = False
    verbose: bool = False
    timeout: Optional[float] = None
    insecure: Optional[bool] = None
    follow_redirects: Optional[bool] = None
    max_redirects: Optional[int] = None
    output_file: Optional[str] = None
    format: Optional[str] = None
    binary: bool = False
    retry: Optional[int] = None
    max_response_size: Optional[int] = None
    paginate: bool = False
    token_provider: Optional[TokenProvider] = None
    cancellation: Optional[CancellationToken] = None
    owns_body: bool = field(default=False, repr=False, compare=False)

    @classmethod
    def for_url(
        cls,
        method: str,
        url: str,
        *,
        header_lines: Iterable[str] = (),
        data: Optional[str] = None,
        data_file: Optional[str] = None,
        scope: str = "",
        no_auth: bool = False,
        token_provider: Optional[TokenProvider] = None,
        **kwargs: Any,
    ) -> "RequestOptions":
        """
        Build options the way the ``azd rest`` commands do.

        Parses ``Key: Value`` header strings, opens ``data_file`` (an ``@path``
        shorthand is accepted) or encodes ``data``, detects the scope when none is
        given, and creates an :class:`~azd_rest.core.auth.AzureTokenProvider` when
        authentication is needed and no provider was passed.

        A file opened here is owned by the options; release it with :meth:`close`
        or by using the options as a context manager.

        Example::

            with RequestOptions.for_url(
                "GET",
                "https://management.azure.com/subscriptions?api-version=2020-01-01",
                paginate=True,
            ) as options:
                response = client.execute(options)
        """
        headers = parse_header_lines(header_lines)

        body: Optional[BodySource] = None
        owns_body = False
        if data_file:
            path = data_file[1:] if data_file.startswith("@") else data_file
            try:
                body = open(path, "rb")
            except OSError as exc:
                raise RequestConstructionError(
                    f"failed to open data file: {exc}",
                    subcode=VALIDATION_UNREADABLE_BODY,
                    details={"path": path},
                ) from exc
            owns_body = True
        elif data:
            body = data

        try:
            if not scope and not no_auth:
                scope = detect_scope(url)
                if not scope and is_azure_host(url):
                    logger.warning(
                        "Azure host detected but no scope found. Pass a scope or disable "
                        "authentication for %s",
                        url,
                    )

            skip_auth = should_skip_auth(url, headers, no_auth)
            if not skip_auth and token_provider is None and scope:
                token_provider = AzureTokenProvider()
        except Exception:
            if owns_body:
                body.close()
            raise

        return cls(
            method=method,
            url=url,
            headers=headers,
            body=body,
            scope=scope,
            skip_auth=skip_auth,
            token_provider=token_provider,
            owns_body=owns_body,
            **kwargs,
        )

    def close(self) -> None:
        if self.owns_body and self.body is not None and hasattr(self.body, "close"):
            self.body.close()

    def __enter__(self) -> "RequestOptions":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
