# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Genro Highlight.

Every failure raised by the highlighting pipeline is a :class:`HighlightError`
carrying a ``kind`` tag and, when it wraps another failure, the original
exception as ``cause``. ``str(exc)`` renders the flattened, human-readable
chain while ``exc.cause`` keeps the original for programmatic inspection.

The bridge raises :class:`NotFound` when an entry point name is unknown.
"""

from __future__ import annotations

__all__ = [
    "HighlightError",
    "ValidationError",
    "InitializationError",
    "UnsupportedOptionError",
    "RenderError",
    "NotFound",
]


class HighlightError(Exception):
    """Base class for highlighting failures.

    Attributes:
        kind: Short tag identifying the failure family.
        message: Human-readable message (without the cause).
        cause: The wrapped exception, if any.
    """

    kind: str = "highlight"

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {_flatten(self.cause)}"

    def wrap(self, prefix: str) -> HighlightError:
        """Return a copy of this error with ``prefix`` prepended to its message."""
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.message = f"{prefix}: {self.message}"
        Exception.__init__(clone, clone.message)
        if self.cause is not None:
            clone.__cause__ = self.cause
        return clone


class ValidationError(HighlightError):
    """Raised when the input shape is wrong, before the engine is touched."""

    kind = "validation"


class InitializationError(HighlightError):
    """Raised when the engine cannot be loaded."""

    kind = "initialization"


class UnsupportedOptionError(HighlightError):
    """Raised when a language or theme is not offered by the engine.

    Attributes:
        option: Which option was rejected (``"language"`` or ``"theme"``).
        value: The rejected value.
    """

    kind = "unsupported_option"

    def __init__(self, option: str, value: str) -> None:
        self.option = option
        self.value = value
        super().__init__(f"unsupported {option}: {value}")


class RenderError(HighlightError):
    """Raised when the engine rejects a render call."""

    kind = "render"


class NotFound(Exception):
    """Raised when a requested bridge entry point does not exist.

    Attributes:
        selector: The selector in format "bridge_name:entry" or just "bridge_name".
    """

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"Entry '{selector}' not found")


def _flatten(exc: BaseException) -> str:
    text = str(exc)
    return text or exc.__class__.__name__
