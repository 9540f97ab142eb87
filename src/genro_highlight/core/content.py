# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Highlight every code block of an HTML document.

:class:`ContentRenderer` finds ``pre > code`` blocks, reads their language
from ``language-xxx``/``lang-xxx`` classes and replaces each supported block
with the engine's markup. All blocks of a document go through a single
``highlight_batch`` call, and identical ``(code, lang, theme)`` triples are
rendered only once.

In double render mode every block is rendered twice, once per light/dark
theme, and each output is wrapped in a ``div`` carrying the configured class
so a stylesheet can pick one.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from genro_highlight.config import HighlightSettings

from .highlighter import Highlighter

__all__ = ["ContentRenderer", "extract_language"]

logger = logging.getLogger("genro_highlight")

_LANG_PREFIXES = ("language-", "lang-")


def extract_language(code: Tag, pre: Tag | None = None) -> str:
    """Return the language named by the block's classes, or an empty string."""
    for element in (code, pre):
        if element is None:
            continue
        for cls in element.get("class") or []:
            for prefix in _LANG_PREFIXES:
                if cls.startswith(prefix) and len(cls) > len(prefix):
                    return cls[len(prefix) :].lower()
    return ""


class ContentRenderer:
    """Rewrite HTML content with highlighted code blocks."""

    def __init__(self, highlighter: Highlighter, settings: HighlightSettings | None = None) -> None:
        self.highlighter = highlighter
        self.settings = settings or highlighter.settings

    def _themes(self) -> list[tuple[str, str | None]]:
        settings = self.settings
        if settings.double_render:
            return [
                (settings.light_theme, settings.light_code_class),
                (settings.dark_theme, settings.dark_code_class),
            ]
        return [(settings.single_theme, None)]

    async def render(self, content: str) -> str:
        """Return ``content`` with every supported code block highlighted."""
        if not self.settings.enabled:
            return content
        soup = BeautifulSoup(content, "html.parser")
        supported = set(await self.highlighter.supported_languages())

        blocks: list[tuple[Tag, str, str]] = []
        for code in soup.select("pre > code"):
            pre = code.parent
            lang = extract_language(code, pre)
            if not lang or lang not in supported:
                continue
            blocks.append((pre, code.get_text(), lang))
        if not blocks:
            return str(soup)

        themes = self._themes()
        keys: dict[tuple[str, str, str], str] = {}
        requests: dict[str, dict[str, str]] = {}
        for _pre, text, lang in blocks:
            for theme, _cls in themes:
                triple = (text, lang, theme)
                if triple not in keys:
                    key = keys[triple] = f"block-{len(keys)}"
                    requests[key] = {"code": text, "lang": lang, "theme": theme}
        duplicates = len(blocks) * len(themes) - len(requests)
        if duplicates:
            self.highlighter.metrics.record_deduplication(duplicates)
            logger.debug(
                "code blocks deduplicated: blocks=%d unique=%d saved=%d",
                len(blocks),
                len(requests),
                duplicates,
            )

        results = await self.highlighter.highlight_batch(requests)

        replaced = 0
        for pre, text, lang in blocks:
            outcomes = [(results[keys[(text, lang, theme)]], cls) for theme, cls in themes]
            failed = [outcome.error for outcome, _cls in outcomes if not outcome.success]
            if failed:
                logger.warning("code block (%s) left as is: %s", lang, failed[0])
                continue
            for outcome, cls in outcomes:
                wrapper = soup.new_tag("div", attrs={"class": cls} if cls else {})
                wrapper.append(BeautifulSoup(outcome.html or "", "html.parser"))
                pre.insert_before(wrapper)
            pre.decompose()
            replaced += 1
        logger.debug("code blocks replaced: %d", replaced)
        return str(soup)
