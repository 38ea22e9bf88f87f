# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DotTree - An immutable object facade over a nested mapping.

This module provides the DotTree class, wrapping a plain nested mapping
and exposing the engine functions as methods. A DotTree never changes:
every write method returns a new DotTree sharing the untouched subtrees
with the original one.

Path Syntax:
    - Dotted paths: 'parent.child.grandchild'
    - Trailing dot: 'parent.items.' (append to the list at 'parent.items')

Example:
    Basic usage::

        tree = DotTree({'config.database.host': 'localhost'})
        tree = tree.set_item('config.database.port', 5432)

        print(tree['config.database.host'])  # 'localhost'
        print('config.database' in tree)     # True

        tree = tree.del_item('config.database.port')
        print(tree.flatten())  # {'config.database.host': 'localhost'}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator

from .engine import exclude, extend, fetch, iter_flat, normalize, ping, touch
from .exceptions import PathSyntaxError
from .path import DEFAULT_MAX_DEPTH, is_blank

_MISSING = object()


class DotTree:
    """A nested mapping addressed by dotted paths.

    DotTree provides:
    - get_item(path) / tree[path]: Get values
    - path in tree: Check paths for existence
    - set_item(path, value), touch(path), del_item(path), pop(path),
      update(other): Derive new trees
    - walk() / flatten(): Extract (path, leaf) pairs

    Attributes:
        max_depth: Maximum number of segments accepted in a path.
        strict: If False, membership tests do not check the final
            segment of the path.

    Example:
        >>> tree = DotTree({'a': {'b': 1}})
        >>> tree.set_item('a.c', 2)['a']
        {'b': 1, 'c': 2}
    """

    __slots__ = ('_data', 'max_depth', 'strict', '_normalize')

    def __init__(
        self,
        source: Mapping[str, Any] | DotTree | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        strict: bool = True,
        normalize: bool = True,
    ) -> None:
        """Initialize a DotTree.

        Args:
            source: Optional initial data. Can be:
                - Mapping: Nested mapping, dotted keys are exploded
                  unless normalize is False
                - DotTree: Share the data of another DotTree
            max_depth: Maximum number of segments accepted in a path.
            strict: Membership mode, see ping().
            normalize: If True (default), dotted keys of a mapping source
                are exploded into nested mappings on load.

        Raises:
            TypeError: If source is not a Mapping, DotTree or None.

        Example:
            >>> DotTree({'a.b': 1})
            DotTree({'a': {'b': 1}})
            >>> DotTree({'a.b': 1}, normalize=False)
            DotTree({'a.b': 1})
        """
        self.max_depth = max_depth
        self.strict = strict
        self._normalize = normalize
        self._data: dict[str, Any] = {}

        if source is not None:
            self._load_source(source)

    def _load_source(self, source: Mapping[str, Any] | DotTree) -> None:
        """Load data from source into this DotTree.

        Raises:
            TypeError: If source is not a Mapping or DotTree.
        """
        if isinstance(source, DotTree):
            self._data = source._data
        elif isinstance(source, Mapping):
            if self._normalize:
                self._data = normalize(source, max_depth=self.max_depth)
            else:
                self._data = dict(source)
        else:
            raise TypeError(
                f"source must be a Mapping or DotTree, not {type(source).__name__}"
            )

    def _spawn(self, data: dict[str, Any]) -> DotTree:
        """Return a DotTree with the same settings wrapping data."""
        tree = type(self).__new__(type(self))
        tree._data = data
        tree.max_depth = self.max_depth
        tree.strict = self.strict
        tree._normalize = self._normalize
        return tree

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def __len__(self) -> int:
        """Return the number of top level keys."""
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        """Iterate over top level keys in insertion order."""
        return iter(self._data)

    def __contains__(self, path: str) -> bool:
        """Check if a path exists.

        Args:
            path: Dotted path to check.

        Returns:
            True if the path exists, False otherwise.
        """
        return ping(self._data, path, strict=self.strict, max_depth=self.max_depth)

    def __getitem__(self, path: str) -> Any:
        """Get value by path.

        Raises:
            KeyError: If path not found.

        Example:
            >>> DotTree({'a': {'b': 1}})['a.b']
            1
        """
        value = self.get_item(path, _MISSING) if path else _MISSING
        if value is _MISSING:
            raise KeyError(f"Path '{path}' not found")
        return value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DotTree):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    # ==================== Core API ====================

    @property
    def data(self) -> dict[str, Any]:
        """The wrapped mapping. Do not modify it, use as_dict() for a copy."""
        return self._data

    def get_item(self, path: str, default: Any = None) -> Any:
        """Get the value at the given path.

        Args:
            path: Dotted path. The empty path returns the whole data.
            default: Default value if path not found.

        Returns:
            The value at the path, or default.
        """
        return fetch(self._data, path, default, max_depth=self.max_depth)

    def set_item(self, path: str, value: Any) -> DotTree:
        """Return a new tree with value set at path.

        Intermediate mappings are created as needed. A trailing dot
        appends the value to the list at the path.

        Raises:
            PathSyntaxError: If path is a single blank segment, which
                would turn the root into a list.

        Example:
            >>> DotTree().set_item('a.b', 5)
            DotTree({'a': {'b': 5}})
        """
        self._check_not_root(path)
        return self._spawn(extend(self._data, path, value, max_depth=self.max_depth))

    def touch(self, path: str) -> DotTree:
        """Return a new tree where path holds a mapping."""
        self._check_not_root(path)
        return self._spawn(touch(self._data, path, max_depth=self.max_depth))

    def del_item(self, path: str) -> DotTree:
        """Return a new tree without the value at path.

        Deleting an absent path gives an equal tree.
        """
        return self._spawn(exclude(self._data, path, max_depth=self.max_depth))

    def pop(self, path: str, default: Any = None) -> tuple[Any, DotTree]:
        """Remove the value at path.

        Args:
            path: Dotted path to the value.
            default: Value returned if path not found.

        Returns:
            Tuple of (removed value or default, new tree).
        """
        value = self.get_item(path, default) if path in self else default
        return value, self.del_item(path)

    def update(
        self,
        other: Mapping[str, Any] | DotTree,
        ignore_none: bool = False,
    ) -> DotTree:
        """Return a new tree with data from other merged in.

        For each key in other (normalized):
        - If both values are mappings: recursively merges them
        - Otherwise: the value from other replaces the current one

        Args:
            other: Source data (Mapping or DotTree).
            ignore_none: If True, None values of other are skipped.

        Raises:
            TypeError: If other is not a Mapping or DotTree.

        Example:
            >>> tree = DotTree({'config': {'a': 1, 'b': 2}})
            >>> tree.update({'config.b': 3, 'config.c': 4})['config']
            {'a': 1, 'b': 3, 'c': 4}
        """
        if isinstance(other, DotTree):
            other_data = other._data
        elif isinstance(other, Mapping):
            other_data = normalize(other, max_depth=self.max_depth)
        else:
            raise TypeError(
                f"other must be a Mapping or DotTree, not {type(other).__name__}"
            )
        return self._spawn(_merge(self._data, other_data, ignore_none))

    def _check_not_root(self, path: str) -> None:
        if isinstance(path, str) and '.' not in path and is_blank(path):
            raise PathSyntaxError("Cannot append to the root of a DotTree")

    # ==================== Iteration ====================

    def keys(self) -> list[str]:
        """Return list of top level keys in insertion order."""
        return list(self._data.keys())

    def values(self) -> list[Any]:
        """Return list of top level values in insertion order."""
        return list(self._data.values())

    def items(self) -> list[tuple[str, Any]]:
        """Return list of top level (key, value) pairs in insertion order."""
        return list(self._data.items())

    def walk(self) -> Iterator[tuple[str, Any]]:
        """Yield (path, leaf) pairs depth-first.

        Example:
            >>> for path, value in DotTree({'a': {'b': 1}}).walk():
            ...     print(path, value)
            a.b 1
        """
        return iter_flat(self._data)

    def flatten(self) -> dict[str, Any]:
        """Return a flat dict of dotted paths to leaves."""
        return dict(self.walk())

    # ==================== Conversion ====================

    def as_dict(self) -> dict[str, Any]:
        """Convert to a plain dict, copying every mapping and list."""
        return _copy_tree(self._data)


def _merge(
    base: Mapping[str, Any],
    other: Mapping[str, Any],
    ignore_none: bool,
) -> dict[str, Any]:
    node = dict(base)
    for key, value in other.items():
        current = node.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            node[key] = _merge(current, value, ignore_none)
        elif not ignore_none or value is not None:
            node[key] = value
    return node


def _copy_tree(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _copy_tree(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy_tree(v) for v in value]
    return value
