# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Highlight request handling and batch orchestration.

:class:`Highlighter` sits between callers and the engine lifecycle:

- ``highlight(request)`` validates one request, waits for the engine, applies
  defaults, checks the language and theme against the engine's supported sets,
  and renders. Every failure propagates as a :class:`HighlightError` prefixed
  with ``"highlight failed"``.
- ``highlight_batch(requests)`` ensures the engine once, then renders every
  item concurrently. Item failures become ``HighlightOutcome.failed`` for that
  key and never abort siblings. Only a malformed batch or a failed
  initialization rejects the whole call.

Renders run on worker threads (``asyncio.to_thread``) so a large batch does
not stall the event loop. Successful renders without extra options go through
the :class:`RenderCache`.

Example::

    highlighter = Highlighter(EngineLifecycleManager())
    html = await highlighter.highlight("x = 1", lang="python")
    results = await highlighter.highlight_batch({
        "a": {"code": "x = 1", "lang": "python"},
        "b": {"code": "SELECT 1", "lang": "sql"},
    })
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from genro_highlight.config import HighlightSettings
from genro_highlight.exceptions import (
    HighlightError,
    RenderError,
    UnsupportedOptionError,
    ValidationError,
)

from .cache import CacheMetrics, RenderCache
from .engine import Engine, ThemeInfo
from .lifecycle import EngineLifecycleManager
from .models import HighlightOutcome, HighlightRequest

__all__ = ["Highlighter"]

logger = logging.getLogger("genro_highlight")


class Highlighter:
    """Validate, default and render highlight requests.

    Args:
        lifecycle: Engine owner shared by every consumer. A fresh manager is
            created when omitted.
        settings: Defaults and policies. Loaded from the environment when omitted.
        cache: Render cache. Built from ``settings`` when omitted and caching is on.
        metrics: Cache/render counters.
    """

    def __init__(
        self,
        lifecycle: EngineLifecycleManager | None = None,
        settings: HighlightSettings | None = None,
        *,
        cache: RenderCache | None = None,
        metrics: CacheMetrics | None = None,
    ) -> None:
        self.lifecycle = lifecycle or EngineLifecycleManager()
        self.settings = settings or HighlightSettings()
        if cache is None and self.settings.cache_enabled:
            cache = RenderCache(self.settings.cache_max_entries, self.settings.cache_ttl_seconds)
        self.cache = cache
        self.metrics = metrics or CacheMetrics()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def highlight(self, request: Any, /, **options: Any) -> str:
        """Render one request to markup.

        Args:
            request: A :class:`HighlightRequest` or the code string itself.
                Anything else is taken as ``code`` and rejected.
            **options: ``lang``, ``theme`` and pass-through rendering options;
                they override fields of ``request``.

        Raises:
            ValidationError: ``code`` is not a string (engine untouched).
            InitializationError: The engine could not be loaded.
            UnsupportedOptionError: Language or theme not supported.
            RenderError: The engine rejected the render.
        """
        try:
            req = self._coerce(request, options)
            await self.lifecycle.ensure_ready()
            return await self._render(req)
        except HighlightError as exc:
            raise exc.wrap("highlight failed")

    async def highlight_batch(self, requests: Any) -> dict[str, HighlightOutcome]:
        """Render every request of a key -> request mapping concurrently.

        Returns:
            One :class:`HighlightOutcome` per input key.

        Raises:
            ValidationError: ``requests`` is missing or not a mapping.
            InitializationError: The shared engine could not be loaded.
        """
        if requests is None or not isinstance(requests, Mapping):
            raise ValidationError("highlight batch failed: requests must be a mapping")
        try:
            await self.lifecycle.ensure_ready()
        except HighlightError as exc:
            raise exc.wrap("highlight batch failed")

        keys = list(requests)
        started = time.perf_counter()
        outcomes = await asyncio.gather(*(self._batch_item(key, requests[key]) for key in keys))
        self.metrics.record_render((time.perf_counter() - started) * 1000)
        return dict(zip(keys, outcomes))

    async def supported_languages(self) -> list[str]:
        await self.lifecycle.ensure_ready()
        return sorted(self.lifecycle.engine.languages)

    async def supported_themes(self) -> list[str]:
        await self.lifecycle.ensure_ready()
        return sorted(self.lifecycle.engine.themes)

    async def theme_info(self) -> list[ThemeInfo]:
        await self.lifecycle.ensure_ready()
        return self.lifecycle.engine.theme_info()

    async def warmup(self) -> None:
        await self.lifecycle.warmup()

    async def dispose(self) -> None:
        await self.lifecycle.dispose()
        if self.cache is not None:
            self.cache.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _batch_item(self, key: str, raw: Any) -> HighlightOutcome:
        try:
            if isinstance(raw, HighlightRequest):
                req = raw
            elif isinstance(raw, Mapping):
                req = self._validate(dict(raw))
            else:
                raise ValidationError("invalid request format")
            html = await self._render(req)
        except HighlightError as exc:
            logger.debug("batch item %r failed: %s", key, exc)
            return HighlightOutcome.failed(str(exc))
        return HighlightOutcome.ok(html)

    def _coerce(self, request: Any, options: dict[str, Any]) -> HighlightRequest:
        if isinstance(request, HighlightRequest):
            if not options:
                return request
            data = request.model_dump()
            data.update(options)
        else:
            # the positional argument is always the code itself
            data = {**options, "code": request}
        return self._validate(data)

    def _validate(self, data: dict[str, Any]) -> HighlightRequest:
        if not isinstance(data.get("code"), str):
            raise ValidationError("code must be a string")
        try:
            return HighlightRequest.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("invalid highlight request", cause=exc) from exc

    def _resolve(self, engine: Engine, req: HighlightRequest) -> tuple[str, str]:
        lang = req.lang or self.settings.default_language
        theme = req.theme or self.settings.default_theme
        if self.settings.validate_options:
            if lang not in engine.languages:
                raise UnsupportedOptionError("language", lang)
            if theme not in engine.themes:
                raise UnsupportedOptionError("theme", theme)
        return lang, theme

    async def _render(self, req: HighlightRequest) -> str:
        engine = self.lifecycle.engine
        lang, theme = self._resolve(engine, req)
        options = req.options
        cache = self.cache if not options else None
        if cache is not None:
            cached = cache.get(req.code, lang, theme)
            if cached is not None:
                self.metrics.record_hit()
                return cached
            self.metrics.record_miss()
        try:
            html = await asyncio.to_thread(engine.render, req.code, lang, theme, **options)
        except HighlightError:
            raise
        except Exception as exc:
            raise RenderError(f"cannot render {lang!r} with {theme!r}", cause=exc) from exc
        if cache is not None:
            cache.put(req.code, lang, theme, html)
        return html
