# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures for the azd rest engine tests.

Integration-style tests run against a local threaded HTTP server whose routes
are plain callables, so each test states exactly what the server answers.
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from azd_rest.core.cancellation import CancellationToken
from azd_rest.core.config import RestConfig


class _Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        if self.headers.get("Transfer-Encoding", "").lower() == "chunked":
            body = self._read_chunked()
        record = {
            "method": self.command,
            "path": self.path,
            "headers": dict(self.headers.items()),
            "body": body,
        }
        self.server.requests.append(record)

        route = self.server.routes.get(self.path.split("?", 1)[0])
        if route is None:
            status, headers, payload = 404, {}, b"not found"
        else:
            status, headers, payload = route(record)

        self.send_response(status)
        items = headers.items() if isinstance(headers, dict) else headers
        for name, value in items:
            self.send_header(name, value)
        if isinstance(payload, list):
            self.send_header("Transfer-Encoding", "chunked")
            self.end_headers()
            for chunk in payload:
                self.wfile.write(b"%x\r\n%s\r\n" % (len(chunk), chunk))
            self.wfile.write(b"0\r\n\r\n")
        else:
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(payload)

    def _read_chunked(self):
        data = b""
        while True:
            size = int(self.rfile.readline().strip() or b"0", 16)
            if size == 0:
                self.rfile.readline()
                return data
            data += self.rfile.read(size)
            self.rfile.readline()

    do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = do_HEAD = do_OPTIONS = _handle


class LocalServer:
    """Handle returned by the ``http_server`` fixture."""

    def __init__(self, server):
        self._server = server
        self.routes = server.routes
        self.requests = server.requests

    def url(self, path="/"):
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}{path}"

    def route(self, path, status=200, headers=None, body=b""):
        """Register a route that always answers the same way."""
        self.routes[path] = lambda record: (status, headers or {}, body)

    def sequence(self, path, responses):
        """Register a route that answers with ``responses`` in turn, repeating the last."""
        remaining = list(responses)

        def respond(record):
            return remaining.pop(0) if len(remaining) > 1 else remaining[0]

        self.routes[path] = respond

    def hits(self, path):
        return [r for r in self.requests if r["path"].split("?", 1)[0] == path]


@pytest.fixture
def http_server():
    """Threaded local HTTP server on a free port."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.daemon_threads = True
    server.routes = {}
    server.requests = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield LocalServer(server)
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture(autouse=True)
def no_proxy_for_localhost(monkeypatch):
    """Keep proxy environment variables from capturing local test traffic."""
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy", "ALL_PROXY", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")


@pytest.fixture
def no_backoff(monkeypatch):
    """Make retry backoff return immediately while still honouring cancellation."""
    waits = []

    def wait(self, timeout):
        waits.append(timeout)
        return self.is_cancelled()

    monkeypatch.setattr(CancellationToken, "wait", wait)
    return waits


@pytest.fixture
def test_config():
    """Client configuration with safe defaults for tests."""
    return RestConfig(timeout=5.0)
