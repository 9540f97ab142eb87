"""Core runtime aggregator for Genro Highlight.

Exposes the runtime building blocks from a single module:

    - ``Engine`` / ``PygmentsEngine``: the highlighting back-end
    - ``EngineLifecycleManager``: lazy, race-guarded engine owner
    - ``Highlighter``: single and batch highlighting
    - ``ContentRenderer``: highlights code blocks of HTML documents
    - ``RenderCache`` / ``CacheMetrics``: result cache and its counters

Importing this module performs only imports; it does not load the engine.
"""

from .cache import CacheMetrics, MetricsSnapshot, RenderCache
from .content import ContentRenderer
from .engine import Engine, PygmentsEngine, ThemeInfo, load_engine
from .highlighter import Highlighter
from .lifecycle import EngineLifecycleManager, EngineState
from .models import HighlightOutcome, HighlightRequest

__all__ = [
    "CacheMetrics",
    "ContentRenderer",
    "Engine",
    "EngineLifecycleManager",
    "EngineState",
    "HighlightOutcome",
    "HighlightRequest",
    "Highlighter",
    "MetricsSnapshot",
    "PygmentsEngine",
    "RenderCache",
    "ThemeInfo",
    "load_engine",
]
