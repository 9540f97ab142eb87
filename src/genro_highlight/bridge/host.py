# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""HighlighterHost - entry points reachable by name from an embedding host.

Every entry point only forwards to the injected :class:`Highlighter`;
results and errors cross the boundary unchanged.

========================  =============================================
Entry name                Returns
========================  =============================================
``highlightCode``         markup string
``highlightCodeBatch``    ``{key: {"success", "html" | "error"}}``
``getSupportedLanguages`` sorted list of language IDs
``getSupportedThemes``    sorted list of theme IDs
``warmup``                None
``disposeHighlighter``    None
``renderContent``         HTML with highlighted ``pre > code`` blocks
========================  =============================================

Example::

    host = HighlighterHost(Highlighter(EngineLifecycleManager()))
    html = await host.api.call("highlightCode", "x = 1", {"lang": "python"})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from genro_highlight.core.content import ContentRenderer
from genro_highlight.core.highlighter import Highlighter

from .bridge import Bridge
from .decorators import expose
from .exposing import BridgeClass

__all__ = ["HighlighterHost"]


class HighlighterHost(BridgeClass):
    """Syntax highlighting entry points for an embedding host."""

    def __init__(self, highlighter: Highlighter | None = None, *, name: str = "highlighter") -> None:
        self.highlighter = highlighter or Highlighter()
        self.content = ContentRenderer(self.highlighter)
        self.api = Bridge(self, name=name, description="Syntax highlighting").plug(
            "logging", before=False
        )

    @expose(name="highlightCode")
    async def highlight_code(self, code: Any, options: Mapping[str, Any] | None = None) -> str:
        """Highlight one snippet. ``options`` holds ``lang``, ``theme`` and pass-through options.

        ``code`` must itself be a string; a request-shaped mapping is rejected.
        """
        return await self.highlighter.highlight(code, **dict(options or {}))

    @expose(name="highlightCodeBatch")
    async def highlight_code_batch(self, requests: Any) -> dict[str, dict[str, Any]]:
        """Highlight a mapping of independent requests; failures are reported per key."""
        outcomes = await self.highlighter.highlight_batch(requests)
        return {key: outcome.to_dict() for key, outcome in outcomes.items()}

    @expose(name="getSupportedLanguages")
    async def get_supported_languages(self) -> list[str]:
        return await self.highlighter.supported_languages()

    @expose(name="getSupportedThemes")
    async def get_supported_themes(self) -> list[str]:
        return await self.highlighter.supported_themes()

    @expose(name="warmup", logging_before=True)
    async def warmup(self) -> None:
        """Load the engine ahead of the first request."""
        await self.highlighter.warmup()

    @expose(name="disposeHighlighter")
    async def dispose_highlighter(self) -> None:
        """Release the engine; the next call loads it again."""
        await self.highlighter.dispose()

    @expose(name="renderContent")
    async def render_content(self, content: str) -> str:
        return await self.content.render(content)
