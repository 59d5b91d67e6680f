"""Readers that turn configuration file contents into nested dictionaries."""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Iterator
from typing import Any

import yaml

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _YamlLoader(yaml.SafeLoader):
    """Safe loader that keeps dates and times as plain strings."""


_YamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _text(b: bytes | bytearray | str) -> str:
    if isinstance(b, (bytes, bytearray)):
        return bytes(b).decode("utf-8")
    return b


def _as_mapping(value: Any, fmt: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{fmt} document is not a mapping")
    return value


def read_json(b: bytes | str) -> dict[str, Any]:
    """Parse a JSON object."""
    return _as_mapping(json.loads(_text(b)), "json")


def read_toml(b: bytes | str) -> dict[str, Any]:
    """Parse a TOML document."""
    return tomllib.loads(_text(b))


def read_yaml(b: bytes | str) -> dict[str, Any]:
    """Parse a YAML mapping; dates and timestamps stay strings."""
    try:
        value = yaml.load(_text(b), Loader=_YamlLoader)
    except yaml.YAMLError as exc:
        raise ValueError(str(exc)) from exc
    return _as_mapping(value, "yaml")


_PROP_WHITESPACE = " \t\f"
_PROP_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_PROP_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|u|.|$)", re.DOTALL)


def _prop_unescape(text: str) -> str:
    def replace(match: re.Match[str]) -> str:
        escaped = match.group(1)
        if escaped == "u":
            raise ValueError(f"invalid unicode escape in {text!r}")
        if len(escaped) == 5:
            return chr(int(escaped[1:], 16))
        return _PROP_ESCAPES.get(escaped, escaped)

    return _PROP_ESCAPE_RE.sub(replace, text)


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[str]:
    pending: str | None = None
    for raw in re.split(r"\r\n|\r|\n", text):
        line = raw.lstrip(_PROP_WHITESPACE)
        if pending is None:
            if not line or line[0] in "#!":
                continue
            current = line
        else:
            current = pending + line
        if _continues(current):
            pending = current[:-1]
        else:
            pending = None
            yield current
    if pending is not None:
        yield pending


def _split_property(line: str) -> tuple[str, str]:
    end = 0
    length = len(line)
    while end < length:
        c = line[end]
        if c == "\\":
            end += 2
            continue
        if c in "=:" or c in _PROP_WHITESPACE:
            break
        end += 1
    end = min(end, length)
    key = line[:end]

    start = end
    while start < length and line[start] in _PROP_WHITESPACE:
        start += 1
    if start < length and line[start] in "=:":
        start += 1
    while start < length and line[start] in _PROP_WHITESPACE:
        start += 1
    return _prop_unescape(key), _prop_unescape(line[start:])


def read_properties(b: bytes | str) -> dict[str, Any]:
    """Parse a Java-style properties file into a flat dictionary.

    References such as ``${key}`` are left untouched.
    """
    result: dict[str, Any] = {}
    for line in _logical_lines(_text(b)):
        key, value = _split_property(line)
        result[key] = value
    return result