# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Common constants for the azd rest engine.

This module contains shared defaults and header names used across the package.
"""

__all__ = []
