"""The start-up banner of the application."""

from __future__ import annotations

from dataclasses import dataclass

VERSION = "springkit@v1.2.0"

_COLOR_START = "\x1b[36m"
_COLOR_END = "\x1b[0m"

_DEFAULT_BANNER = r"""
  ___ ___ ___ ___ _  _  ___ _  _____ _____
 / __| _ \ _ \_ _| \| |/ __| |/ /_ _|_   _|
 \__ \  _/   /| || .` | (_ | ' < | |  | |
 |___/_| |_|_\___|_|\_|\___|_|\_\___| |_|
"""


@dataclass
class _BannerState:
    text: str


_STATE = _BannerState(_DEFAULT_BANNER)


def set_banner(banner: str) -> None:
    """Replace the application banner."""
    if not isinstance(banner, str):
        raise TypeError(f"banner must be a string, not {type(banner).__name__}")
    _STATE.text = banner


def render_banner(banner: str, version: str) -> str:
    """Colour each banner line and append ``version`` centred below it.

    An empty banner renders as an empty string.
    """
    if not banner:
        return ""
    parts: list[str] = []
    if not banner.startswith("\n"):
        parts.append("\n")
    lines = banner.split("\n")
    for line in lines:
        parts.append(f"{_COLOR_START}{line}{_COLOR_END}\n")
    if not banner.endswith("\n"):
        parts.append("\n")
    width = max(len(line) for line in lines)
    padding = max((width - len(version)) // 2, 0)
    parts.append(" " * padding)
    parts.append(version)
    return "".join(parts)


def print_banner() -> None:
    """Print the current banner with the version, if a banner is set."""
    text = render_banner(_STATE.text, VERSION)
    if text:
        print(text)