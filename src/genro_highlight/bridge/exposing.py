# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""BridgeClass mixin.

Objects owning one or more :class:`~genro_highlight.bridge.bridge.Bridge`
instances inherit from :class:`BridgeClass`. Bridges register themselves on
construction; the owner keeps them in a lazily created registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from genro_toolbox.typeutils import safe_is_instance

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .base_bridge import BaseBridge

__all__ = ["BridgeClass", "is_bridge_class"]

_REGISTRY_ATTR = "__genro_highlight_bridge_registry__"


class BridgeClass:
    """Mixin for objects exposing entry points through bridges."""

    @property
    def _bridges(self) -> dict[str, BaseBridge]:
        """Lazy-initialized bridge registry."""
        registry = getattr(self, _REGISTRY_ATTR, None)
        if registry is None:
            registry = {}
            object.__setattr__(self, _REGISTRY_ATTR, registry)
        return registry

    def _register_bridge(self, bridge: BaseBridge) -> None:
        """Register a bridge with this instance.

        Called automatically by the bridge during initialization.
        """
        if bridge.name:
            self._bridges[bridge.name] = bridge

    @property
    def default_bridge(self) -> BaseBridge | None:
        """The only bridge of this instance, or None when there are several."""
        bridges = self._bridges
        if len(bridges) == 1:
            return next(iter(bridges.values()))
        return None

    def get_bridge(self, name: str) -> BaseBridge:
        try:
            return self._bridges[name]
        except KeyError:
            raise AttributeError(f"No bridge named {name!r} on {type(self).__name__}") from None


def is_bridge_class(obj: Any) -> bool:
    return safe_is_instance(obj, "genro_highlight.bridge.exposing.BridgeClass")  # type: ignore[no-any-return]
