# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
REST request execution engine for the ``azd rest`` extension.

Example::

    from azd_rest import RestClient, RequestOptions

    with RestClient() as client:
        with RequestOptions.for_url(
            "GET",
            "https://management.azure.com/subscriptions?api-version=2020-01-01",
            paginate=True,
        ) as options:
            response = client.execute(options)
        client.render(response, options)
"""

from .client import RestClient
from .common.constants import VERSION as __version__
from .core.config import LoggingConfig, RestConfig
from .models.options import RequestOptions
from .models.response import Response

__all__ = [
    "RestClient",
    "RestConfig",
    "LoggingConfig",
    "RequestOptions",
    "Response",
    "__version__",
]
