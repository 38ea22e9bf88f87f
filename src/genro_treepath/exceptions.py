# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreePath exceptions."""

from __future__ import annotations


class TreePathError(Exception):
    """Base exception for TreePath errors."""

    pass


class PathTooDeepError(TreePathError, ValueError):
    """Raised when a path has more segments than the allowed depth."""

    def __init__(self, path: str, depth: int, max_depth: int) -> None:
        self.path = path
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Path has {depth} segments, maximum allowed is {max_depth}"
        )


class PathSyntaxError(TreePathError, ValueError):
    """Raised when a path or key cannot be expressed in dotted syntax."""

    pass
