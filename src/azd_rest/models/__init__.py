# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the execution engine.

- :class:`~azd_rest.models.options.RequestOptions`: what one logical call sends.
- :class:`~azd_rest.models.response.Response`: what it returns.

Import the models from their modules; this package does not re-export them.
"""

__all__ = []
