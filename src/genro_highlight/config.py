# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Settings for Genro Highlight.

Values come from keyword arguments, then ``GENRO_HIGHLIGHT_*`` environment
variables, then the defaults below.

Example::

    settings = HighlightSettings(default_theme="monokai")
    # or: GENRO_HIGHLIGHT_DEFAULT_THEME=monokai
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["HighlightSettings"]


class HighlightSettings(BaseSettings):
    """Runtime configuration for the highlighter and the content renderer."""

    model_config = SettingsConfigDict(env_prefix="GENRO_HIGHLIGHT_", extra="ignore")

    # Request defaults
    default_language: str = "javascript"
    default_theme: str = "nord"
    validate_options: bool = True

    # Content rendering
    enabled: bool = True
    double_render: bool = False
    theme: str | None = None
    light_theme: str = "xcode"
    dark_theme: str = "nord"
    light_code_class: str = "light"
    dark_code_class: str = "dark"

    # Render cache
    cache_enabled: bool = True
    cache_max_entries: int = Field(default=10_000, gt=0)
    cache_ttl_seconds: float = Field(default=24 * 3600, gt=0)

    @property
    def single_theme(self) -> str:
        """Theme used by the content renderer in single mode."""
        return self.theme or self.default_theme
