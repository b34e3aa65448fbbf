# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Following next-page links and merging the pages into one document.

Azure list APIs return ``{"value": [...], "nextLink": "..."}``; Microsoft Graph and
other OData services use ``@odata.nextLink``; generic APIs advertise the next page
in an RFC 5988 ``Link`` header. :func:`find_next_link` understands all three and
:func:`merge_pages` drives the loop.
"""

from __future__ import annotations

import copy
import dataclasses
import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from urllib.parse import urljoin

import requests

from ..common.constants import HEADER_LINK, MAX_PAGES, NEXT_LINK_FIELDS, VALUE_FIELD
from ..core.errors import RequestCancelled, RestError
from ..core.telemetry import NoOpTelemetryManager, TelemetryManager
from ..models.response import Response

FetchPage = Callable[[str], Response]
"""Fetches one page by absolute URL; supplied by the client so pages share the retry path."""


def _link_header_next(headers: Mapping[str, Any]) -> Optional[str]:
    values = headers.get(HEADER_LINK) if headers is not None else None
    if not values:
        return None
    if isinstance(values, str):
        values = [values]
    for value in values:
        for link in requests.utils.parse_header_links(value):
            rels = " ".join(v for k, v in link.items() if k.lower() == "rel").lower().split()
            if "next" in rels and link.get("url"):
                return link["url"]
    return None


def find_next_link(document: Any, headers: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    """
    Return the next page URL advertised by a page, or ``None``.

    Body fields are checked first, in order ``nextLink``, ``@odata.nextLink``,
    ``@odata.next``; the first non-empty string wins. Otherwise the ``Link`` header
    entry whose ``rel`` includes ``next`` is used.

    :param document: Decoded JSON body of the page.
    :param headers: Response headers, name to value or to list of values.
    :rtype: str or None
    """
    if isinstance(document, dict):
        for name in NEXT_LINK_FIELDS:
            value = document.get(name)
            if isinstance(value, str) and value:
                return value
    return _link_header_next(headers)


def _page_items(document: Dict[str, Any], *, whole_object: bool) -> List[Any]:
    value = document.get(VALUE_FIELD)
    if isinstance(value, list):
        return list(value)
    return [document] if whole_object else []


def _decode(body: bytes) -> Union[Dict[str, Any], None]:
    try:
        document = json.loads(body)
    except ValueError:
        return None
    return document if isinstance(document, dict) else None


def merge_pages(
    first: Response,
    fetch_page: FetchPage,
    *,
    base_url: Optional[str] = None,
    telemetry: Optional[Union[TelemetryManager, NoOpTelemetryManager]] = None,
    max_pages: int = MAX_PAGES,
) -> Response:
    """
    Follow next-page links from ``first`` and merge every page's items.

    Items are taken from each page's ``value`` array. A first page without one counts
    as a single item; later pages without one contribute nothing. The result is a copy
    of the first document whose ``value`` holds all items in page order and whose
    next-link fields are removed; status, headers and duration stay those of ``first``.

    The original response is returned unchanged when its status is not 2xx, its body
    is not a JSON object, no next page was followed, or no items were collected.

    A page that fails (non-2xx status, network error, unparseable body) ends the loop
    and the pages merged so far are returned. Cancellation propagates.

    :param first: Fully read first response.
    :param fetch_page: Re-sends the call's method, without a body, to a page URL through
        the normal retry path.
    :param base_url: URL relative next links resolve against; defaults to the URL of
        ``first``.
    :param telemetry: Receives page and failure events.
    :param max_pages: Ceiling on the total number of pages, first page included.
    :rtype: ~azd_rest.models.response.Response
    """
    telemetry = telemetry or NoOpTelemetryManager()
    if not 200 <= first.status_code < 300:
        return first

    document = _decode(first.body)
    if document is None:
        return first

    items = _page_items(document, whole_object=True)
    base_url = base_url or first.url
    next_link = find_next_link(document, first.headers)
    pages = 1

    while next_link and pages < max_pages:
        url = urljoin(base_url, next_link)
        try:
            page = fetch_page(url)
        except RequestCancelled:
            raise
        except RestError as exc:
            telemetry.record_pagination_failure(url, exc)
            break
        if not 200 <= page.status_code < 300:
            telemetry.record_pagination_failure(url, f"HTTP {page.status}")
            break
        page_document = _decode(page.body)
        if page_document is None:
            telemetry.record_pagination_failure(url, "page body is not a JSON object")
            break

        pages += 1
        page_items = _page_items(page_document, whole_object=False)
        telemetry.record_page(url, pages, len(page_items))
        items.extend(page_items)
        next_link = find_next_link(page_document, page.headers)

    if pages == 1 or not items:
        return first

    merged = copy.copy(document)
    merged[VALUE_FIELD] = items
    for name in NEXT_LINK_FIELDS:
        merged.pop(name, None)
    body = json.dumps(merged, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return dataclasses.replace(first, body=body)


__all__ = ["find_next_link", "merge_pages"]
