# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest
from requests.structures import CaseInsensitiveDict

from azd_rest.models.response import Response


def test_header_lookup_is_case_insensitive():
    response = Response(
        status_code=200,
        status="200 OK",
        headers=CaseInsensitiveDict({"Set-Cookie": ["a=1", "b=2"], "Content-Type": ["application/json"]}),
        body=b'{"ok":true}',
    )

    assert response.header("set-cookie") == "a=1"
    assert response.header_values("SET-COOKIE") == ["a=1", "b=2"]
    assert response.content_type == "application/json"
    assert response.header("Missing", "default") == "default"
    assert response.header_values("Missing") == []
    assert response.json() == {"ok": True}


def test_single_string_header_value():
    response = Response(status_code=200, status="200 OK", headers=CaseInsensitiveDict({"ETag": "abc"}))
    assert response.header("etag") == "abc"
    assert response.header_values("etag") == ["abc"]


def test_text_replaces_invalid_utf8():
    response = Response(status_code=200, status="200 OK", body=b"ok \xff")
    assert response.text == "ok �"


def test_defaults_and_immutability():
    response = Response(status_code=204, status="204 No Content")
    assert response.body == b""
    assert len(response.headers) == 0
    with pytest.raises(AttributeError):
        response.body = b"x"
