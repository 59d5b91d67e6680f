"""Flat key-value storage kept consistent by a tree of its key paths."""

from __future__ import annotations

from dataclasses import dataclass, field

from springkit.conf.storage.path import Path, PathType, join_path, split_path


@dataclass
class _TreeNode:
    type: PathType
    data: dict[str, _TreeNode | None] = field(default_factory=dict)


def _conflict(path: str) -> ValueError:
    return ValueError(f"property conflict at path {path}")


class Storage:
    """Stores properties by full key and rejects keys whose structure conflicts.

    A key may not be both a value and a parent of other keys, nor both a map
    and a list.
    """

    def __init__(self) -> None:
        self._root: _TreeNode | None = None
        self._data: dict[str, str] = {}

    def raw_data(self) -> dict[str, str]:
        """Return the underlying flat mapping (not a copy)."""
        return self._data

    def sub_keys(self, key: str) -> list[str]:
        """Return the sorted immediate children of ``key``.

        An empty key means the root. Raises ValueError on an invalid key or
        when the key names a value or a node of another kind.
        """
        path: list[Path] = split_path(key) if key else []
        if self._root is None:
            return []

        node: _TreeNode | None = self._root
        for i, segment in enumerate(path):
            if node is None or segment.type is not node.type:
                raise _conflict(join_path(path[: i + 1]))
            if segment.elem not in node.data:
                return []
            node = node.data[segment.elem]

        if node is None:
            raise _conflict(key)
        return sorted(node.data)

    def has(self, key: str) -> bool:
        """Tell whether ``key`` is a stored value or a path to one."""
        if not key or self._root is None:
            return False
        if key in self._data:
            return True
        try:
            path = split_path(key)
        except ValueError:
            return False

        node: _TreeNode | None = self._root
        for segment in path:
            if node is None or segment.type is not node.type:
                return False
            if segment.elem not in node.data:
                return False
            node = node.data[segment.elem]
        return True

    def set(self, key: str, val: str) -> None:
        """Store ``val`` under ``key``, extending the path tree.

        Raises ValueError for an empty or invalid key or a structural conflict.
        """
        if not key:
            raise ValueError("key is empty")
        path = split_path(key)

        if self._root is None:
            self._root = _TreeNode(path[0].type)

        node: _TreeNode | None = self._root
        for i, segment in enumerate(path):
            if node is None or segment.type is not node.type:
                raise _conflict(join_path(path[: i + 1]))
            if segment.elem in node.data:
                child = node.data[segment.elem]
            else:
                child = _TreeNode(path[i + 1].type) if i < len(path) - 1 else None
                node.data[segment.elem] = child
            node = child

        if node is not None:
            raise _conflict(key)
        self._data[key] = val