# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request body handling and pagination for the execution engine.
"""

__all__ = []
