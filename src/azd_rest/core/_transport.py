# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Connection layer shared by every call of a :class:`~azd_rest.client.RestClient`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests


def build_session() -> requests.Session:
    """
    Create the pooled session used for all calls.

    Proxy settings come from the standard ``HTTP_PROXY``/``HTTPS_PROXY``/``NO_PROXY``
    environment variables. Redirects are never followed by the session itself; the
    redirect policy drives each hop.
    """
    session = requests.Session()
    session.trust_env = True
    return session


def send_settings(
    session: requests.Session,
    url: str,
    *,
    insecure: bool,
) -> Dict[str, Any]:
    """
    Per-hop keyword arguments for :meth:`requests.Session.send`.

    Proxies, CA bundle and client certificate are resolved from the environment for
    ``url``. Certificate verification is turned off only when ``insecure`` is set.
    """
    verify: Optional[bool] = False if insecure else None
    settings = session.merge_environment_settings(url, {}, True, verify, None)
    if insecure:
        settings["verify"] = False
    return settings


__all__ = ["build_session", "send_settings"]
