# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
OAuth scope detection for Azure service endpoints.
"""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlsplit

from ._error_codes import VALIDATION_INVALID_URL
from .errors import RequestConstructionError

_DEVOPS_SCOPE = "499b84ac-1321-427f-aa17-267ca6975798/.default"

_EXACT_HOSTS = {
    "management.azure.com": "https://management.azure.com/.default",
    "graph.microsoft.com": "https://graph.microsoft.com/.default",
    "api.loganalytics.io": "https://api.loganalytics.io/.default",
    "dev.azure.com": _DEVOPS_SCOPE,
}

_HOST_SUFFIXES = (
    (".vault.azure.net", "https://vault.azure.net/.default"),
    (".blob.core.windows.net", "https://storage.azure.com/.default"),
    (".queue.core.windows.net", "https://storage.azure.com/.default"),
    (".table.core.windows.net", "https://storage.azure.com/.default"),
    (".file.core.windows.net", "https://storage.azure.com/.default"),
    (".dfs.core.windows.net", "https://storage.azure.com/.default"),
    (".azurecr.io", "https://containerregistry.azure.net/.default"),
    (".documents.azure.com", "https://cosmos.azure.com/.default"),
    (".azconfig.io", "https://azconfig.io/.default"),
    (".batch.azure.com", "https://batch.core.windows.net/.default"),
    (".postgres.database.azure.com", "https://ossrdbms-aad.database.windows.net/.default"),
    (".mysql.database.azure.com", "https://ossrdbms-aad.database.windows.net/.default"),
    (".mariadb.database.azure.com", "https://ossrdbms-aad.database.windows.net/.default"),
    (".database.windows.net", "https://database.windows.net/.default"),
    (".dev.azuresynapse.net", "https://dev.azuresynapse.net/.default"),
    (".azuredatalakestore.net", "https://datalake.azure.net/.default"),
    (".media.azure.net", "https://rest.media.azure.net/.default"),
)

_AZURE_HOST_PATTERNS = (
    ".azure.com",
    ".azure.net",
    ".windows.net",
    ".azurecr.io",
    ".azconfig.io",
    "management.azure.com",
    "graph.microsoft.com",
    "dev.azure.com",
    ".visualstudio.com",
    ".azuredatalakestore.net",
)


def _hostname(url: str) -> Optional[str]:
    try:
        parts = urlsplit(url)
        return (parts.hostname or "").lower()
    except ValueError:
        return None


def detect_scope(url: str) -> str:
    """
    Map a URL to the Azure OAuth scope of the service it addresses.

    :param url: Request URL.
    :type url: str
    :return: The ``.default`` scope for the service, or ``""`` when the host is not
        a recognised Azure endpoint.
    :rtype: str
    :raises ~azd_rest.core.errors.RequestConstructionError: If ``url`` cannot be parsed.
    """
    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
    except ValueError as exc:
        raise RequestConstructionError(
            f"failed to parse URL: {exc}",
            subcode=VALIDATION_INVALID_URL,
            details={"url": url},
        ) from exc
    if not host:
        return ""

    if host in _EXACT_HOSTS:
        return _EXACT_HOSTS[host]
    if host.endswith(".visualstudio.com"):
        return _DEVOPS_SCOPE
    if host.endswith(".kusto.windows.net"):
        return f"https://{host}/.default"
    if host.endswith(".servicebus.windows.net"):
        # Queues belong to Service Bus; everything else on the namespace is Event Hubs.
        if "/queue" in parts.path:
            return "https://servicebus.azure.net/.default"
        return "https://eventhubs.azure.net/.default"
    for suffix, scope in _HOST_SUFFIXES:
        if host.endswith(suffix):
            return scope
    return ""


def is_azure_host(url: str) -> bool:
    """Return ``True`` when the URL's host looks like an Azure service endpoint."""
    host = _hostname(url)
    if not host:
        return False
    for pattern in _AZURE_HOST_PATTERNS:
        if pattern in host or host == pattern.lstrip("."):
            return True
    return False


def should_skip_auth(url: str, headers: Optional[Mapping[str, str]], no_auth: bool) -> bool:
    """
    Decide whether the builder should leave out the bearer token.

    Authentication is skipped when explicitly disabled, or when the caller already
    supplies an ``Authorization`` header of its own.
    """
    if no_auth:
        return True
    return any(name.lower() == "authorization" for name in (headers or {}))


__all__ = ["detect_scope", "is_azure_host", "should_skip_auth"]
