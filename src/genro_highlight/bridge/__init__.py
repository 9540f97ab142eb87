"""Host bridge for Genro Highlight.

Exposes named entry points to an embedding host process:

    - ``Bridge``: Entry point registry with plugin pipeline
    - ``BridgeClass``: Mixin for classes owning bridges
    - ``BridgeNode``: Callable handle returned by ``node()``
    - ``expose``: Decorator marking methods as entry points
    - ``HighlighterHost``: The highlighting entry points

Importing this module performs only imports; plugins are registered by the
top-level ``genro_highlight`` package.
"""

from .base_bridge import BaseBridge
from .bridge import Bridge
from .bridge_node import BridgeNode
from .decorators import expose
from .exposing import BridgeClass, is_bridge_class
from .host import HighlighterHost

__all__ = [
    "BaseBridge",
    "Bridge",
    "BridgeClass",
    "BridgeNode",
    "HighlighterHost",
    "expose",
    "is_bridge_class",
]
