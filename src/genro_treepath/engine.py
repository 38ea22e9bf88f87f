# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path-addressable tree engine.

This module provides pure functions working on plain nested containers
(mappings of string keys to scalars, lists or further mappings) addressed
by dotted paths:

    - fetch(tree, path, default): read a value
    - ping(tree, path): check a path for existence
    - extend(tree, path, value): write a value
    - touch(tree, path): make sure a path holds a mapping
    - exclude(tree, path): remove a value
    - normalize(tree): explode dotted keys into nested mappings
    - flatten(tree): the inverse of normalize

Input trees are never modified. Write operations return a new root,
copying the mappings along the addressed path and sharing every other
subtree with the input.

Type conflicts never raise:
    - fetch returns the default when it has to descend through a non-mapping
    - exclude leaves the tree unchanged
    - extend replaces the non-mapping with a fresh mapping

Example:
    >>> tree = extend({}, 'config.database.host', 'localhost')
    >>> tree
    {'config': {'database': {'host': 'localhost'}}}
    >>> fetch(tree, 'config.database.port', 5432)
    5432
    >>> normalize({'a.b': 1, 'a.c': 2})
    {'a': {'b': 1, 'c': 2}}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterator

from .exceptions import PathSyntaxError
from .path import DEFAULT_MAX_DEPTH, SEPARATOR, is_blank, join_path, tokenize

logger = logging.getLogger(__name__)


# ==================== Read ====================

def fetch(
    tree: Any,
    path: str,
    default: Any = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Get the value at the given path.

    A blank final segment addresses the node reached so far, so
    'items.' returns the value of 'items' whatever its type.

    Args:
        tree: The tree to read.
        path: Dotted path. The empty path returns the whole tree.
        default: Returned when the path cannot be resolved.
        max_depth: Maximum number of path segments.

    Returns:
        The value at path, or default.

    Example:
        >>> fetch({'a': {'b': 2}}, 'a.b', 0)
        2
        >>> fetch({'a': {'b': 2}}, 'a.x', 0)
        0
    """
    if path == '':
        return tree
    return _capture(tree, tokenize(path, max_depth), default)


def _capture(inbound: Any, stack: list[str], default: Any) -> Any:
    current, *rest = stack

    if is_blank(current) and not rest:
        return inbound

    if not isinstance(inbound, Mapping) or current not in inbound:
        return default

    if rest:
        return _capture(inbound[current], rest, default)
    return inbound[current]


def ping(
    tree: Any,
    path: str,
    *,
    strict: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """Check whether a path is present in the tree.

    Args:
        tree: The tree to inspect.
        path: Dotted path. The empty path is never present.
        strict: If True (default), the final segment must be a key of the
            mapping reached. If False, only the segments before the last
            one are checked: reaching the final position is enough.
        max_depth: Maximum number of path segments.

    Returns:
        True if the path is present, False otherwise.

    Example:
        >>> ping({'a': {'b': 1}}, 'a.b')
        True
        >>> ping({'a': {'b': 1}}, 'a.x')
        False
        >>> ping({'a': {'b': 1}}, 'a.x', strict=False)
        True
    """
    if path == '':
        return False
    return _ping(tree, tokenize(path, max_depth), strict)


def _ping(inbound: Any, stack: list[str], strict: bool) -> bool:
    current, *rest = stack

    if not rest:
        if not strict or is_blank(current):
            return True
        return isinstance(inbound, Mapping) and current in inbound

    if isinstance(inbound, Mapping) and current in inbound:
        return _ping(inbound[current], rest, strict)
    return False


# ==================== Write ====================

def extend(
    tree: Any,
    path: str,
    value: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Set a value at the given path, creating intermediate mappings.

    The final segment decides how the value is stored:
        - named segment ('a.b'): value is set under that key.
        - blank segment ('a.'): value is appended. A list gets a new
          element, an empty or missing position becomes a one-item list,
          a non-empty mapping gets the value under the next free integer
          key (as a string).

    Mapping and list values are normalized before they are stored.

    Intermediate positions holding anything but a mapping are replaced
    with a fresh mapping.

    Args:
        tree: The tree to update (left untouched).
        path: Dotted path.
        value: The value to store.
        max_depth: Maximum number of path segments.

    Returns:
        A new tree with the value set.

    Example:
        >>> extend({}, 'a.b', 5)
        {'a': {'b': 5}}
        >>> extend({'items': [1, 2]}, 'items.', 3)
        {'items': [1, 2, 3]}
    """
    return _implant(tree, tokenize(path, max_depth), value, max_depth)


def touch(
    tree: Any,
    path: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Make sure the given path holds a mapping.

    Equivalent to extend(tree, path, {}).

    Example:
        >>> touch({}, 'a.b')
        {'a': {'b': {}}}
    """
    return extend(tree, path, {}, max_depth=max_depth)


def _implant(data: Any, stack: list[str], value: Any, max_depth: int) -> Any:
    current, *rest = stack

    if is_blank(current) and not rest:
        return _append(data, value, max_depth)

    if isinstance(data, Mapping):
        node = dict(data)
    else:
        if data is not None:
            logger.debug("Replacing %s with a mapping at '%s'", type(data).__name__, current)
        node = {}

    if not rest:
        node[current] = normalize(value, max_depth=max_depth)
        return node

    if current in node:
        existing = node[current]
        if not _is_traversable(existing, rest):
            logger.debug(
                "Overwriting %s at '%s' with a mapping", type(existing).__name__, current
            )
            existing = {}
        node[current] = _implant(existing, rest, value, max_depth)
    else:
        node[current] = _implant({}, rest, value, max_depth)
    return node


def _is_traversable(existing: Any, rest: list[str]) -> bool:
    """True if extend can descend into existing with the remaining stack."""
    if isinstance(existing, Mapping):
        return True
    # a list survives only when the rest of the path appends to it
    return isinstance(existing, list) and len(rest) == 1 and is_blank(rest[0])


def _append(data: Any, value: Any, max_depth: int) -> Any:
    value = normalize(value, max_depth=max_depth)

    if isinstance(data, list):
        return [*data, value]

    if isinstance(data, Mapping) and data:
        node = dict(data)
        index = _next_index(node)
        logger.debug("Appending to a mapping under key '%s'", index)
        node[index] = value
        return node

    return [value]


def _next_index(node: dict[Any, Any]) -> str:
    """Next free integer key of a mapping, as a string."""
    indexes = [int(k) for k in node if isinstance(k, str) and k.isdecimal()]
    return str(max(indexes) + 1 if indexes else 0)


def exclude(
    tree: Any,
    path: str,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Remove the value at the given path.

    Missing keys and positions that cannot be descended into are ignored,
    so excluding an absent path is a no-op.

    Args:
        tree: The tree to update (left untouched).
        path: Dotted path.
        max_depth: Maximum number of path segments.

    Returns:
        A new tree without the value, or tree itself if it is not a
        mapping.

    Example:
        >>> exclude({'a': {'b': 5, 'c': 6}}, 'a.b')
        {'a': {'c': 6}}
    """
    stack = tokenize(path, max_depth)
    if not isinstance(tree, Mapping):
        return tree
    return _destroy(tree, stack)


def _destroy(data: Mapping[Any, Any], stack: list[str]) -> dict[Any, Any]:
    current, *rest = stack
    node = dict(data)

    if current in node:
        if not rest:
            del node[current]
        elif isinstance(node[current], Mapping):
            node[current] = _destroy(node[current], rest)
    return node


# ==================== Normalization ====================

def normalize(tree: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Explode dotted keys into nested mappings, recursively.

    Keys are processed in order. A dotted key is written with extend()
    into the result built so far, so it merges with mappings created by
    earlier keys and is overwritten by later ones. Other keys keep their
    position and get their value normalized.

    Lists are rebuilt with every element normalized. Other non-mapping
    values are returned unchanged.

    Args:
        tree: The tree to normalize.
        max_depth: Maximum number of segments of a dotted key.

    Returns:
        A new tree without dotted keys.

    Example:
        >>> normalize({'a.b.c': 1})
        {'a': {'b': {'c': 1}}}
        >>> normalize({'x': 0, 'a.b': 1, 'a': {'c': 2}})
        {'x': 0, 'a': {'c': 2}}
    """
    if isinstance(tree, list):
        return [normalize(v, max_depth=max_depth) for v in tree]
    if not isinstance(tree, Mapping):
        return tree

    outbound: dict[Any, Any] = {}
    for key, value in tree.items():
        if isinstance(key, str) and SEPARATOR in key:
            logger.debug("Exploding dotted key '%s'", key)
            outbound = extend(outbound, key, value, max_depth=max_depth)
            continue
        outbound[key] = normalize(value, max_depth=max_depth)
    return outbound


def iter_flat(tree: Mapping[str, Any], prefix: str = '') -> Iterator[tuple[str, Any]]:
    """Yield (path, leaf) pairs depth-first in insertion order.

    Leaves are non-mapping values and empty mappings.

    Args:
        tree: The mapping to walk.
        prefix: Path prepended to every yielded path.

    Raises:
        PathSyntaxError: If a key is not a string, is blank or contains
            a dot, since it could not be addressed by the yielded path.

    Example:
        >>> list(iter_flat({'a': {'b': 1, 'c': []}}))
        [('a.b', 1), ('a.c', [])]
    """
    for key, value in tree.items():
        if not isinstance(key, str) or is_blank(key) or SEPARATOR in key:
            raise PathSyntaxError(f"Key {key!r} cannot be used as a path segment")
        path = join_path(prefix, key)
        if isinstance(value, Mapping) and value:
            yield from iter_flat(value, path)
        else:
            yield path, value


def flatten(tree: Mapping[str, Any]) -> dict[str, Any]:
    """Return a flat mapping of dotted paths to leaves.

    normalize(flatten(tree)) gives back tree.

    Raises:
        TypeError: If tree is not a mapping.

    Example:
        >>> flatten({'a': {'b': 1}, 'c': 2})
        {'a.b': 1, 'c': 2}
    """
    if not isinstance(tree, Mapping):
        raise TypeError(f"tree must be a mapping, not {type(tree).__name__}")
    return dict(iter_flat(tree))
