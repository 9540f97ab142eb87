# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Render cache and metrics for Genro Highlight.

Highlighting is a pure function of ``(code, lang, theme)``, so results are
cached with two bounds:

- LRU: at most ``max_entries`` entries; the least recently used is evicted.
- TTL: each entry expires ``ttl`` seconds after it was stored, so theme or
  engine upgrades show up eventually.

Keys are ``sha256(code)`` hex followed by ``:lang:theme``. Renders run on
worker threads, so every mutation happens under a lock.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["RenderCache", "CacheMetrics", "MetricsSnapshot"]

logger = logging.getLogger("genro_highlight")


class RenderCache:
    """LRU + TTL cache of rendered markup.

    Args:
        max_entries: Upper bound on cached entries.
        ttl: Lifetime of an entry, in seconds.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        max_entries: int = 10_000,
        ttl: float = 24 * 3600,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        self._entries: OrderedDict[str, tuple[str, float]] = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def key(code: str, lang: str, theme: str) -> str:
        digest = hashlib.sha256(code.encode("utf-8")).hexdigest()
        return f"{digest}:{lang}:{theme}"

    def get(self, code: str, lang: str, theme: str) -> str | None:
        """Return cached markup, or None when missing or expired."""
        key = self.key(code, lang, theme)
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            html, expires_at = item
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return html

    def put(self, code: str, lang: str, theme: str, html: str) -> None:
        key = self.key(code, lang, theme)
        with self._lock:
            self._entries[key] = (html, self._clock() + self.ttl)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, code: str, lang: str, theme: str) -> None:
        with self._lock:
            self._entries.pop(self.key(code, lang, theme), None)

    def clear(self) -> None:
        with self._lock:
            size = len(self._entries)
            self._entries.clear()
        logger.info("render cache cleared, %d entries dropped", size)

    def remove_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, (_html, expires_at) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("render cache dropped %d expired entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, int]:
        now = self._clock()
        with self._lock:
            total = len(self._entries)
            expired = sum(1 for _html, expires_at in self._entries.values() if now >= expires_at)
        return {
            "total": total,
            "expired": expired,
            "valid": total - expired,
            "capacity_percent": total * 100 // self.max_entries,
        }


@dataclass(frozen=True)
class MetricsSnapshot:
    cache_hits: int
    cache_misses: int
    total_requests: int
    hit_rate_percent: float
    render_batches: int
    total_render_ms: float
    avg_render_ms: float
    deduplicated_requests: int
    uptime_seconds: float


class CacheMetrics:
    """Counters describing cache effectiveness and render cost."""

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0
            self._render_batches = 0
            self._render_ms = 0.0
            self._deduplicated = 0
            self._started = self._clock()

    def record_hit(self) -> None:
        with self._lock:
            self._hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self._misses += 1

    def record_render(self, elapsed_ms: float) -> None:
        with self._lock:
            self._render_batches += 1
            self._render_ms += elapsed_ms

    def record_deduplication(self, count: int) -> None:
        with self._lock:
            self._deduplicated += count

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            total = self._hits + self._misses
            return MetricsSnapshot(
                cache_hits=self._hits,
                cache_misses=self._misses,
                total_requests=total,
                hit_rate_percent=(self._hits * 100.0 / total) if total else 0.0,
                render_batches=self._render_batches,
                total_render_ms=self._render_ms,
                avg_render_ms=(self._render_ms / self._render_batches) if self._render_batches else 0.0,
                deduplicated_requests=self._deduplicated,
                uptime_seconds=self._clock() - self._started,
            )
