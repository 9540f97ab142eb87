# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Decorator helpers for marking exposed methods.

This module contains only marker helpers; no bridge mutation happens at
decoration time.

``expose(bridge=None, *, name=None, **kwargs)``
    Returns a decorator storing metadata on the function under
    ``_expose_decorator_kw`` as a list of dicts. Each payload starts with
    ``{"name": bridge}``.

    - ``name`` sets the host-facing entry name (``entry_name`` in the payload);
      otherwise the function name is used.
    - Extra ``**kwargs`` are copied verbatim into the payload
      (e.g. ``logging_after=False``).
    - The decorator returns the original function unchanged aside from the marker.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

__all__ = ["expose"]


def expose(
    bridge: str | None = None, *, name: str | None = None, **kwargs: Any
) -> Callable[[Callable], Callable]:
    """Mark a method as an entry point of the given bridge.

    Args:
        bridge: Bridge identifier. If None, uses the owner's only bridge.
        name: Host-facing entry name (e.g. ``"highlightCode"``).
        **kwargs: Extra metadata merged into the entry (e.g. plugin flags).

    Example::

        class Host(BridgeClass):
            def __init__(self):
                self.api = Bridge(self, name="api")

            @expose("api", name="getVersion")
            def get_version(self):
                return "1.0"
    """

    def decorator(func: Callable) -> Callable:
        markers = list(getattr(func, "_expose_decorator_kw", []))
        payload: dict[str, Any] = {"name": bridge}
        if name is not None:
            payload["entry_name"] = name
        payload.update(kwargs)
        markers.append(payload)
        setattr(func, "_expose_decorator_kw", markers)  # noqa: B010
        return func

    return decorator
