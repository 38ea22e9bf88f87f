# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-TreePath - Dotted path access to nested mappings.

A lightweight, zero-dependency library to read, write and reshape
tree-shaped data (mappings of mappings, lists and scalars) using
dotted paths such as 'config.database.host'.
"""

__version__ = "0.1.0"

from .engine import (
    exclude,
    extend,
    fetch,
    flatten,
    iter_flat,
    normalize,
    ping,
    touch,
)
from .exceptions import PathSyntaxError, PathTooDeepError, TreePathError
from .path import DEFAULT_MAX_DEPTH, join_path, split_path
from .tree import DotTree

__all__ = [
    # Engine
    "fetch",
    "ping",
    "extend",
    "touch",
    "exclude",
    "normalize",
    "flatten",
    "iter_flat",
    # Paths
    "split_path",
    "join_path",
    "DEFAULT_MAX_DEPTH",
    # Object facade
    "DotTree",
    # Exceptions
    "TreePathError",
    "PathTooDeepError",
    "PathSyntaxError",
]
