"""Genro Highlight - syntax highlighting adapter for embedding hosts.

Wraps Pygments behind a small set of named entry points, with a lazily
initialized engine shared by every caller, concurrent batch highlighting with
per-item failure isolation, and a render cache.

Public exports:
    - ``EngineLifecycleManager``: Owns the one engine instance
    - ``Highlighter``: Single and batch highlighting
    - ``HighlighterHost``: Entry points reachable by name
    - ``HighlightSettings``: Defaults and policies

Built-in bridge plugins (logging) are auto-registered on first import.

Example::

    from genro_highlight import EngineLifecycleManager, Highlighter, HighlighterHost

    host = HighlighterHost(Highlighter(EngineLifecycleManager()))
    html = await host.api.call("highlightCode", "print('hi')", {"lang": "python"})
"""

from importlib import import_module

__version__ = "0.1.0"

from .bridge import Bridge, BridgeClass, BridgeNode, HighlighterHost, expose
from .config import HighlightSettings
from .core import (
    ContentRenderer,
    EngineLifecycleManager,
    HighlightOutcome,
    HighlightRequest,
    Highlighter,
    RenderCache,
)
from .exceptions import (
    HighlightError,
    InitializationError,
    NotFound,
    RenderError,
    UnsupportedOptionError,
    ValidationError,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging",):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "Bridge",
    "BridgeClass",
    "BridgeNode",
    "ContentRenderer",
    "EngineLifecycleManager",
    "HighlightError",
    "HighlightOutcome",
    "HighlightRequest",
    "HighlightSettings",
    "Highlighter",
    "HighlighterHost",
    "InitializationError",
    "NotFound",
    "RenderCache",
    "RenderError",
    "UnsupportedOptionError",
    "ValidationError",
    "expose",
]
