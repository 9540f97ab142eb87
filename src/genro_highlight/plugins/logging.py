# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Logging plugin for the Genro Highlight bridge.

Wraps entry point calls with start/end messages including timing. Async entry
points are timed until their coroutine completes.

Configuration
-------------
Accepted keys (bridge-level or per-entry):
    - ``enabled``: Gate the plugin entirely (default True)
    - ``before``: Log "start" message (default True)
    - ``after``: Log "end" message with timing (default True)
    - ``log``: Use logger.info() when available (default True)
    - ``print``: Always use print() (default False)

Example::

    class Host(BridgeClass):
        def __init__(self):
            self.api = Bridge(self, name="api").plug("logging")

        @expose("api", logging_before=False)
        async def warmup(self):
            ...
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable

from genro_highlight.bridge.bridge import Bridge
from genro_highlight.plugins._base_plugin import BasePlugin, EntryPoint


class LoggingPlugin(BasePlugin):
    """Logging plugin with configurable start/end messages and timing."""

    plugin_code = "logging"
    plugin_description = "Logs entry point calls with timing"

    __slots__ = ("_logger",)

    def __init__(self, bridge, *, logger: logging.Logger | None = None, **cfg):
        self._logger = logger or logging.getLogger("genro_highlight")
        super().__init__(bridge, **cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002
    ):
        """Configure logging plugin options.

        Args:
            enabled: Enable/disable the plugin entirely.
            before: Log "{entry} start" before execution.
            after: Log "{entry} end (X ms)" after execution.
            log: Use logger.info() when handlers available.
            print: Always use print() instead of logger.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, *, cfg: dict) -> None:
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None) or getattr(
                logger, "has_handlers", None
            )
            if callable(has_handlers) and has_handlers():
                logger.info(message)
            else:
                print(message)

    def wrap_handler(self, bridge, entry: EntryPoint, call_next: Callable):
        """Wrap entry with start/end logging and timing."""

        def _start() -> tuple[dict, float]:
            cfg = self._effective_config(entry.name)
            if cfg["before"]:
                self._emit(f"{entry.name} start", cfg=cfg)
            return cfg, time.perf_counter()

        def _end(cfg: dict, t0: float) -> None:
            elapsed = (time.perf_counter() - t0) * 1000
            if cfg["after"]:
                self._emit(f"{entry.name} end ({elapsed:.2f} ms)", cfg=cfg)

        if inspect.iscoroutinefunction(entry.func):

            async def logged_async(*args, **kwargs):
                cfg, t0 = _start()
                result = await call_next(*args, **kwargs)
                _end(cfg, t0)
                return result

            return logged_async

        def logged(*args, **kwargs):
            cfg, t0 = _start()
            result = call_next(*args, **kwargs)
            _end(cfg, t0)
            return result

        return logged

    def _effective_config(self, entry_name: str) -> dict:
        """Get effective configuration for an entry, merging defaults."""
        defaults = {"enabled": True, "before": True, "after": True, "log": True, "print": False}
        cfg = defaults | self.configuration(entry_name)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Bridge.register_plugin(LoggingPlugin)
