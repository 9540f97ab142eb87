# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Engine lifecycle for Genro Highlight.

:class:`EngineLifecycleManager` owns creation, caching and teardown of a
single engine instance. Build one at process start and hand it to every
component that issues highlight requests.

State machine
-------------
::

    UNINITIALIZED --ensure_ready--> INITIALIZING
    INITIALIZING  --success-------> READY
    INITIALIZING  --failure-------> FAILED   (next ensure_ready retries)
    READY         --dispose-------> UNINITIALIZED

Concurrent callers during ``INITIALIZING`` await the same pending task, so at
most one initialization is ever in flight. Waiters are shielded: cancelling
one caller never cancels the shared initialization.

Example::

    manager = EngineLifecycleManager()
    await manager.warmup()
    html = manager.engine.render("x = 1", "python", "nord")
    await manager.dispose()
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from genro_highlight.exceptions import InitializationError

from .engine import Engine, load_engine

__all__ = ["EngineLifecycleManager", "EngineState"]

logger = logging.getLogger("genro_highlight")


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class EngineLifecycleManager:
    """Lazy, race-guarded owner of one engine instance.

    Args:
        loader: Coroutine function building the engine. Defaults to
            :func:`~genro_highlight.core.engine.load_engine`.

    Attributes:
        construction_count: Number of initialization attempts started.
    """

    __slots__ = ("_loader", "_engine", "_pending", "_state", "construction_count")

    def __init__(self, loader: Callable[[], Awaitable[Engine]] | None = None) -> None:
        self._loader = loader or load_engine
        self._engine: Engine | None = None
        self._pending: asyncio.Task | None = None
        self._state = EngineState.UNINITIALIZED
        self.construction_count = 0

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is EngineState.READY

    @property
    def engine(self) -> Engine:
        """Return the live engine.

        Raises:
            InitializationError: If the engine is not ready.
        """
        if self._engine is None or self._state is not EngineState.READY:
            raise InitializationError("engine is not initialized")
        return self._engine

    async def ensure_ready(self) -> None:
        """Initialize the engine unless it is ready; join an in-flight initialization.

        Raises:
            InitializationError: If loading the engine fails or is cancelled by
                :meth:`dispose`.
        """
        if self._state is EngineState.READY:
            return
        pending = self._pending
        if pending is None:
            pending = self._pending = asyncio.ensure_future(self._initialize())
        try:
            await asyncio.shield(pending)
        except asyncio.CancelledError:
            if pending.cancelled():
                raise InitializationError("engine initialization cancelled by dispose") from None
            raise

    async def warmup(self) -> None:
        """Initialize ahead of the first real request."""
        await self.ensure_ready()

    async def dispose(self) -> None:
        """Release the engine and reset to ``UNINITIALIZED``.

        Safe to call at any time, including before any initialization.
        An initialization still in flight is cancelled and its result is
        abandoned, not released: a loader already running in a worker thread
        (``load_engine``) finishes there and its engine is simply dropped.
        A loader that returns after being superseded has its engine released.
        """
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
            with contextlib.suppress(asyncio.CancelledError, InitializationError):
                await pending
        engine, self._engine = self._engine, None
        self._state = EngineState.UNINITIALIZED
        if engine is not None:
            engine.release()
            logger.info("highlight engine disposed")

    async def _initialize(self) -> None:
        task = asyncio.current_task()
        self._state = EngineState.INITIALIZING
        self.construction_count += 1
        logger.info("highlight engine initializing")
        try:
            engine = await self._loader()
        except Exception as exc:
            if self._pending is task:
                self._pending = None
                self._state = EngineState.FAILED
            logger.warning("highlight engine initialization failed: %s", exc)
            raise InitializationError("engine initialization failed", cause=exc) from exc
        if self._pending is not task:
            # disposed while loading
            engine.release()
            return
        self._engine = engine
        self._state = EngineState.READY
        self._pending = None
        logger.info(
            "highlight engine ready (%d languages, %d themes)",
            len(engine.languages),
            len(engine.themes),
        )
