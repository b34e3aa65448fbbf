# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import logging
from unittest.mock import patch

import pytest

from azd_rest.core._error_codes import VALIDATION_INVALID_HEADER, VALIDATION_UNREADABLE_BODY
from azd_rest.core.auth import StaticTokenProvider
from azd_rest.core.errors import RequestConstructionError
from azd_rest.models.options import RequestOptions, parse_header_lines


class TestParseHeaderLines:
    def test_parses_and_trims(self):
        assert parse_header_lines(["Accept: application/json", "X-Custom:value", "X-Url: http://a:b"]) == {
            "Accept": "application/json",
            "X-Custom": "value",
            "X-Url": "http://a:b",
        }

    @pytest.mark.parametrize("line", ["no-colon", ": value", "   : value"])
    def test_invalid(self, line):
        with pytest.raises(RequestConstructionError) as exc_info:
            parse_header_lines([line])
        assert exc_info.value.subcode == VALIDATION_INVALID_HEADER


class TestRequestOptions:
    def test_defaults_defer_to_client_config(self):
        options = RequestOptions(method="GET", url="https://example.test")
        assert options.timeout is None
        assert options.retry is None
        assert options.follow_redirects is None
        assert options.max_redirects is None
        assert options.max_response_size is None
        assert options.insecure is None
        assert options.paginate is False

    def test_immutability(self):
        options = RequestOptions(method="GET", url="https://example.test")
        with pytest.raises(AttributeError):
            options.url = "https://other.test"


class TestForUrl:
    def test_detects_scope_and_uses_given_provider(self):
        provider = StaticTokenProvider("t")
        options = RequestOptions.for_url(
            "GET", "https://management.azure.com/subscriptions", token_provider=provider
        )

        assert options.scope == "https://management.azure.com/.default"
        assert options.skip_auth is False
        assert options.token_provider is provider

    @patch("azd_rest.models.options.AzureTokenProvider")
    def test_creates_azure_provider_when_needed(self, mock_provider):
        options = RequestOptions.for_url("GET", "https://graph.microsoft.com/v1.0/me")

        mock_provider.assert_called_once_with()
        assert options.token_provider is mock_provider.return_value

    @patch("azd_rest.models.options.AzureTokenProvider")
    def test_no_provider_for_unknown_host(self, mock_provider):
        options = RequestOptions.for_url("GET", "https://api.github.com/user")

        assert options.scope == ""
        assert options.token_provider is None
        mock_provider.assert_not_called()

    @patch("azd_rest.models.options.AzureTokenProvider")
    def test_no_auth(self, mock_provider):
        options = RequestOptions.for_url("GET", "https://management.azure.com/", no_auth=True)

        assert options.skip_auth is True
        assert options.scope == ""
        mock_provider.assert_not_called()

    @patch("azd_rest.models.options.AzureTokenProvider")
    def test_caller_authorization_skips_auth(self, mock_provider):
        options = RequestOptions.for_url(
            "GET", "https://management.azure.com/", header_lines=["Authorization: Bearer mine"]
        )

        assert options.skip_auth is True
        assert options.headers == {"Authorization": "Bearer mine"}
        mock_provider.assert_not_called()

    def test_explicit_scope_kept(self):
        options = RequestOptions.for_url(
            "GET",
            "https://management.azure.com/",
            scope="api://custom/.default",
            token_provider=StaticTokenProvider("t"),
        )
        assert options.scope == "api://custom/.default"

    @patch("azd_rest.models.options.AzureTokenProvider")
    def test_warns_for_azure_host_without_scope(self, mock_provider, caplog):
        with caplog.at_level(logging.WARNING, logger="azd_rest.models.options"):
            options = RequestOptions.for_url("GET", "https://unknown.azure.net/thing")

        assert options.scope == ""
        assert "no scope found" in caplog.text

    def test_data_string(self):
        options = RequestOptions.for_url("POST", "https://example.test", data='{"a":1}')
        assert options.body == '{"a":1}'
        assert options.owns_body is False

    @pytest.mark.parametrize("prefix", ["", "@"])
    def test_data_file(self, tmp_path, prefix):
        path = tmp_path / "body.json"
        path.write_bytes(b'{"a":1}')

        with RequestOptions.for_url("PUT", "https://example.test", data_file=f"{prefix}{path}") as options:
            assert options.owns_body is True
            assert options.body.read() == b'{"a":1}'
        assert options.body.closed

    def test_missing_data_file(self, tmp_path):
        with pytest.raises(RequestConstructionError) as exc_info:
            RequestOptions.for_url("POST", "https://example.test", data_file=str(tmp_path / "missing.json"))
        assert exc_info.value.subcode == VALIDATION_UNREADABLE_BODY

    def test_extra_fields_pass_through(self):
        options = RequestOptions.for_url(
            "GET", "https://example.test", paginate=True, retry=5, timeout=2.0, verbose=True
        )
        assert options.paginate is True
        assert options.retry == 5
        assert options.timeout == 2.0
        assert options.verbose is True

    def test_close_without_owned_body_is_noop(self):
        options = RequestOptions(method="GET", url="https://example.test")
        options.close()
