# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from azd_rest.core._error_codes import VALIDATION_INVALID_URL
from azd_rest.core.errors import RequestConstructionError
from azd_rest.core.scope import detect_scope, is_azure_host, should_skip_auth


@pytest.mark.parametrize(
    "url, scope",
    [
        ("https://management.azure.com/subscriptions", "https://management.azure.com/.default"),
        ("https://graph.microsoft.com/v1.0/me", "https://graph.microsoft.com/.default"),
        ("https://myvault.vault.azure.net/secrets/x", "https://vault.azure.net/.default"),
        ("https://acct.blob.core.windows.net/c/b", "https://storage.azure.com/.default"),
        ("https://acct.dfs.core.windows.net/fs", "https://storage.azure.com/.default"),
        ("https://reg.azurecr.io/v2/", "https://containerregistry.azure.net/.default"),
        ("https://db.documents.azure.com/dbs", "https://cosmos.azure.com/.default"),
        ("https://cfg.azconfig.io/kv", "https://azconfig.io/.default"),
        ("https://api.loganalytics.io/v1/workspaces", "https://api.loganalytics.io/.default"),
        ("https://dev.azure.com/org/_apis/projects", "499b84ac-1321-427f-aa17-267ca6975798/.default"),
        ("https://org.visualstudio.com/_apis", "499b84ac-1321-427f-aa17-267ca6975798/.default"),
        ("https://help.kusto.windows.net/v1/rest/query", "https://help.kusto.windows.net/.default"),
        ("https://ns.servicebus.windows.net/queue1/messages", "https://servicebus.azure.net/.default"),
        ("https://ns.servicebus.windows.net/hub/messages", "https://eventhubs.azure.net/.default"),
        ("https://srv.database.windows.net", "https://database.windows.net/.default"),
        ("https://MANAGEMENT.AZURE.COM/subscriptions", "https://management.azure.com/.default"),
        ("https://api.github.com/user", ""),
        ("http://127.0.0.1:8080/", ""),
    ],
)
def test_detect_scope(url, scope):
    assert detect_scope(url) == scope


def test_detect_scope_rejects_malformed_url():
    with pytest.raises(RequestConstructionError) as exc_info:
        detect_scope("http://[::1")
    assert exc_info.value.subcode == VALIDATION_INVALID_URL


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://management.azure.com/", True),
        ("https://something.azure.net/", True),
        ("https://custom.windows.net/", True),
        ("https://example.com/", False),
        ("not a url", False),
    ],
)
def test_is_azure_host(url, expected):
    assert is_azure_host(url) is expected


class TestShouldSkipAuth:
    def test_no_auth_flag(self):
        assert should_skip_auth("https://management.azure.com/", {}, True) is True

    def test_caller_authorization_header(self):
        assert should_skip_auth("https://management.azure.com/", {"authorization": "Basic x"}, False) is True

    def test_auth_needed(self):
        assert should_skip_auth("https://management.azure.com/", {"Accept": "*/*"}, False) is False
        assert should_skip_auth("https://management.azure.com/", None, False) is False
