# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path tokenization.

A path is a string of segments separated by dots. Leading, trailing or
doubled dots produce empty segments, which are meaningful:

    - 'a.b'   -> ['a', 'b']
    - 'a.'    -> ['a', '']      (trailing dot: "this node" / list append)
    - '.a'    -> ['', 'a']
    - 'a..b'  -> ['a', '', 'b']

There is no escaping syntax: a key containing a dot cannot be addressed
as a single segment.
"""

from __future__ import annotations

from .exceptions import PathSyntaxError, PathTooDeepError

SEPARATOR = '.'

#: Default bound on the number of segments a path may have.
DEFAULT_MAX_DEPTH = 256


def split_path(path: str) -> list[str]:
    """Split a path into its segments.

    The number of segments is always the number of dots plus one.

    Args:
        path: Dotted path string.

    Returns:
        List of segments, empty strings included.

    Raises:
        PathSyntaxError: If path is not a string.

    Example:
        >>> split_path('a.b.')
        ['a', 'b', '']
    """
    if not isinstance(path, str):
        raise PathSyntaxError(
            f"path must be a string, not {type(path).__name__}"
        )
    return path.split(SEPARATOR)


def join_path(prefix: str, label: str) -> str:
    """Append a label to a dotted prefix ('' prefix means root)."""
    return f"{prefix}{SEPARATOR}{label}" if prefix else label


def is_blank(segment: str) -> bool:
    """True if segment is empty or whitespace only."""
    return not segment.strip()


def tokenize(path: str, max_depth: int = DEFAULT_MAX_DEPTH) -> list[str]:
    """Split a path and check it against the depth bound.

    Args:
        path: Dotted path string.
        max_depth: Maximum number of segments allowed.

    Returns:
        List of segments.

    Raises:
        PathTooDeepError: If the path has more than max_depth segments.
    """
    segments = split_path(path)
    if len(segments) > max_depth:
        raise PathTooDeepError(path, len(segments), max_depth)
    return segments
