# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Request and outcome models.

``HighlightRequest`` is immutable and keeps unknown fields as pass-through
rendering options. ``HighlightOutcome`` is the tagged result of one batch
item: either ``success=True`` with ``html`` or ``success=False`` with
``error``, never both.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr

__all__ = ["HighlightRequest", "HighlightOutcome"]


class HighlightRequest(BaseModel):
    """One highlight request.

    Fields other than ``code``, ``lang`` and ``theme`` are kept verbatim and
    forwarded to the engine as rendering options.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    code: StrictStr
    lang: str | None = None
    theme: str | None = None

    @property
    def options(self) -> dict[str, Any]:
        """Pass-through rendering options."""
        return dict(self.model_extra or {})


class HighlightOutcome(BaseModel):
    """Outcome of one batch item."""

    model_config = ConfigDict(frozen=True)

    success: bool
    html: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, html: str) -> HighlightOutcome:
        return cls(success=True, html=html)

    @classmethod
    def failed(cls, message: str) -> HighlightOutcome:
        return cls(success=False, error=message)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire shape: ``{success, html}`` or ``{success, error}``."""
        return self.model_dump(exclude_none=True)
