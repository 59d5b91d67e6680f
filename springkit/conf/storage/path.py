"""Hierarchical property paths such as ``users[0].profile.age``."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

_MAX_INDEX = 2**64


class PathType(Enum):
    """Kind of a single path segment."""

    KEY = 0
    INDEX = 1


@dataclass(frozen=True)
class Path:
    """One segment of a path: a map key or a list index."""

    type: PathType
    elem: str


def join_path(path: Iterable[Path]) -> str:
    """Build the string form of a path: keys joined by '.', indices as '[i]'."""
    parts: list[str] = []
    for position, segment in enumerate(path):
        if segment.type is PathType.KEY:
            if position > 0:
                parts.append(".")
            parts.append(segment.elem)
        else:
            parts.append(f"[{segment.elem}]")
    return "".join(parts)


def _is_index(text: str) -> bool:
    return text.isascii() and text.isdigit() and int(text) < _MAX_INDEX


def split_path(key: str) -> list[Path]:
    """Parse a key such as ``a.b[0].c`` into its segments.

    Raises ValueError when the key is not a valid path.
    """

    def invalid() -> ValueError:
        return ValueError(f"invalid key '{key}'")

    if not key:
        raise invalid()

    path: list[Path] = []
    last_pos = 0
    last_char = ""
    open_bracket = False

    for i, c in enumerate(key):
        if c == " ":
            raise invalid()
        if c == ".":
            if open_bracket or last_char == ".":
                raise invalid()
            if last_char != "]":
                path.append(Path(PathType.KEY, key[last_pos:i]))
            last_pos = i + 1
            last_char = c
        elif c == "[":
            if open_bracket or last_char == ".":
                raise invalid()
            if i > 0 and last_char != "]":
                path.append(Path(PathType.KEY, key[last_pos:i]))
            open_bracket = True
            last_pos = i + 1
            last_char = c
        elif c == "]":
            if not open_bracket:
                raise invalid()
            index = key[last_pos:i]
            if not _is_index(index):
                raise invalid()
            path.append(Path(PathType.INDEX, index))
            open_bracket = False
            last_pos = i + 1
            last_char = c
        else:
            if last_char == "]":
                raise invalid()
            last_char = c

    if open_bracket or last_char == ".":
        raise invalid()
    if last_char != "]":
        path.append(Path(PathType.KEY, key[last_pos:]))
    return path