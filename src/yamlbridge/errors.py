"""Exceptions raised by yamlbridge conversions."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every yamlbridge failure."""


class ParseError(ConversionError):
    """Malformed YAML or JSON input."""


class UnsupportedKeyType(ConversionError):
    """A mapping key that has no JSON string form."""

    def __init__(self, key: object, value: object) -> None:
        self.key = key
        self.value = value
        super().__init__(
            f"Unsupported map key of type: {type(key).__name__}, "
            f"key: {key!r}, value: {value!r}"
        )


class EncodeError(ConversionError):
    """An encoder rejected a value."""


class DecodeError(ConversionError):
    """Structured decoding could not bind data to the declared type."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)
