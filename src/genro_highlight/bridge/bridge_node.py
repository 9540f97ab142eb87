# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""BridgeNode - callable handle on one entry point.

Example::

    node = host.api.node("highlightCode")
    html = await node("x = 1", {"lang": "python"})
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from genro_highlight.exceptions import NotFound

if TYPE_CHECKING:  # pragma: no cover
    from .base_bridge import BaseBridge

__all__ = ["BridgeNode"]


class BridgeNode:
    """Entry lookup result with a callable interface.

    A node for an unknown name is falsy; calling it raises the ``not_found``
    exception (``NotFound`` unless overridden through ``errors``).
    """

    __slots__ = ("_bridge", "_entry", "name", "_exceptions")

    DEFAULT_EXCEPTIONS: dict[str, type[Exception]] = {"not_found": NotFound}

    def __init__(
        self,
        bridge: BaseBridge,
        name: str,
        errors: dict[str, type[Exception]] | None = None,
    ) -> None:
        self._bridge = bridge
        self.name = name
        self._entry = bridge._entries.get(name)
        self._exceptions = dict(self.DEFAULT_EXCEPTIONS)
        if errors:
            self._exceptions.update(errors)

    def __bool__(self) -> bool:
        return self._entry is not None

    @property
    def doc(self) -> str:
        if self._entry is None:
            return ""
        return inspect.getdoc(self._entry.func) or ""

    @property
    def metadata(self) -> dict[str, Any]:
        if self._entry is None:
            return {}
        return dict(self._entry.metadata)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke the entry point (through the plugin pipeline).

        Raises:
            NotFound: The name does not match any entry point.
        """
        if self._entry is None:
            exc_class = self._exceptions["not_found"]
            raise exc_class(f"{self._bridge.name}:{self.name}")
        return self._entry.handler(*args, **kwargs)  # type: ignore[misc]

    def __repr__(self) -> str:
        if not self:
            return "BridgeNode(empty)"
        return f"BridgeNode(name={self.name!r})"
