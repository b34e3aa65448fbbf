# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Token providers consumed by the request builder.

The engine only depends on the :class:`TokenProvider` protocol. Azure Identity
backs the default implementation; :class:`StaticTokenProvider` serves fixed tokens.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from azure.core.credentials import TokenCredential


@runtime_checkable
class TokenProvider(Protocol):
    """Returns a bearer token for an OAuth scope, raising on failure."""

    def get_token(self, scope: str) -> str:
        ...


class AzureTokenProvider:
    """Azure Identity-based token provider.

    :param credential: Credential used to acquire tokens. Defaults to
        :class:`azure.identity.DefaultAzureCredential`.
    :type credential: ~azure.core.credentials.TokenCredential or None
    :raises TypeError: If ``credential`` does not implement ``TokenCredential``.
    """

    def __init__(self, credential: Optional[TokenCredential] = None) -> None:
        if credential is None:
            from azure.identity import DefaultAzureCredential

            credential = DefaultAzureCredential()
        if not isinstance(credential, TokenCredential):
            raise TypeError("credential must implement azure.core.credentials.TokenCredential.")
        self.credential: TokenCredential = credential

    def get_token(self, scope: str) -> str:
        """Acquire an access token for the given scope using Azure Identity."""
        return self.credential.get_token(scope).token


class StaticTokenProvider:
    """Serves a fixed token, or raises a fixed error, and records requested scopes."""

    def __init__(self, token: str = "", error: Optional[Exception] = None) -> None:
        self.token = token
        self.error = error
        self.requested_scopes: List[str] = []

    def get_token(self, scope: str) -> str:
        self.requested_scopes.append(scope)
        if self.error is not None:
            raise self.error
        return self.token


__all__ = ["TokenProvider", "AzureTokenProvider", "StaticTokenProvider"]
