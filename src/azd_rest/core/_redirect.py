# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Redirect policy applied to every attempt.

The session never follows redirects on its own. After each response the policy
decides whether to take another hop, and if so derives the next request with
:meth:`requests.Session.resolve_redirects` (so method rewriting on 301/302/303,
``Authorization`` stripping across hosts and body rewinding behave the way
requests defines them).
"""

from __future__ import annotations

from typing import Optional

import requests

from ..common.constants import DEFAULT_MAX_REDIRECTS
from .errors import TooManyRedirects


class RedirectPolicy:
    """
    :param follow: Follow 3xx responses; when ``False`` the 3xx response is returned as-is.
    :type follow: bool
    :param max_redirects: Hops allowed per attempt; ``None`` or ``0`` or less means 10.
    :type max_redirects: int or None
    """

    def __init__(self, follow: bool = True, max_redirects: Optional[int] = None) -> None:
        self.follow = follow
        self.max_redirects = max_redirects if max_redirects and max_redirects > 0 else DEFAULT_MAX_REDIRECTS

    def should_follow(self, response: requests.Response, hops: int) -> bool:
        """
        Return ``True`` when ``response`` is a redirect that must be followed.

        :param hops: Redirects already followed in this attempt.
        :raises ~azd_rest.core.errors.TooManyRedirects: If ``response`` is a redirect
            and ``hops`` has reached :attr:`max_redirects`.
        """
        if not self.follow or not response.is_redirect:
            return False
        if hops >= self.max_redirects:
            raise TooManyRedirects(self.max_redirects, url=response.url)
        return True

    def next_request(self, session: requests.Session, response: requests.Response) -> requests.PreparedRequest:
        """Derive the request for the hop that ``response`` points to."""
        return next(session.resolve_redirects(response, response.request, yield_requests=True))


__all__ = ["RedirectPolicy"]
