# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Cooperative cancellation for a logical call.

A :class:`CancellationToken` is handed to :meth:`~azd_rest.client.RestClient.execute`
through :class:`~azd_rest.models.options.RequestOptions`. The engine checks it before
every dispatch, between body chunks, and waits on it during retry backoff, so a
``cancel()`` from another thread (for example a Ctrl+C handler) ends the call
promptly with :class:`~azd_rest.core.errors.RequestCancelled`.
"""

from __future__ import annotations

import threading
from typing import Optional

from .errors import RequestCancelled


class CancellationToken:
    """Thread-safe cancellation signal.

    Example::

        token = CancellationToken()
        options = RequestOptions(method="GET", url=url, cancellation=token)
        # from another thread
        token.cancel()
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Block for up to ``timeout`` seconds; return ``True`` if cancelled meanwhile."""
        if timeout <= 0:
            return self._event.is_set()
        return self._event.wait(timeout)

    def raise_if_cancelled(self, subcode: Optional[str] = None) -> None:
        if self._event.is_set():
            raise RequestCancelled(subcode=subcode)
