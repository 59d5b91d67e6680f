"""Configuration storage, file readers, validation expressions and application lifecycle primitives."""

__version__ = "0.1.0"