# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Plugin-free bridge runtime for Genro Highlight.

:class:`BaseBridge` binds methods of an owner object as named entry points,
resolves names to callable nodes and exposes introspection data. The plugin
pipeline lives in :class:`~genro_highlight.bridge.bridge.Bridge`.

Constructor::

    BaseBridge(owner, name=None, *, description=None)

- ``owner`` is required and must be a ``BridgeClass`` instance.
- Entries are discovered lazily: methods decorated with ``@expose`` are
  registered on first use (``node``/``call``/``entries``).

Marker discovery
----------------
``_iter_marked_methods`` walks the MRO of ``type(owner)`` (derived class
wins) and yields functions carrying ``_expose_decorator_kw`` markers whose
``name`` matches this bridge (``None`` matches the owner's only bridge).

Options
-------
Keyword options given to ``@expose``/``add_entry`` are split: keys
prefixed with a known plugin code (``logging_after=False``) become that
plugin's per-entry configuration; everything else is entry metadata.

Hooks for subclasses
--------------------
- ``_wrap_handler``: wrap callables (middleware stack).
- ``_after_entry_registered``: invoked after registering an entry.
- ``_describe_entry_extra``: extend per-entry description.
- ``_plugin_codes``: plugin prefixes recognised in options.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from typing import Any

from genro_toolbox import dictExtract

from genro_highlight.plugins._base_plugin import EntryPoint

from .bridge_node import BridgeNode
from .exposing import is_bridge_class

__all__ = ["BaseBridge"]


class BaseBridge:
    """Plugin-free bridge bound to an owner instance."""

    __slots__ = ("instance", "name", "description", "_entries_raw", "_bound")

    def __init__(self, owner: Any, name: str | None = None, *, description: str | None = None) -> None:
        if owner is None:
            raise ValueError("Bridge requires a parent instance")
        if not is_bridge_class(owner):
            raise TypeError(
                f"Bridge owner must be a BridgeClass instance, got {type(owner).__name__}. "
                "Inherit from BridgeClass to use Bridge."
            )
        self.instance = owner
        self.name = name
        self.description = description
        self._entries_raw: dict[str, EntryPoint] = {}
        self._bound = False
        owner._register_bridge(self)

    @property
    def _entries(self) -> dict[str, EntryPoint]:
        """Access entries, triggering lazy binding if needed."""
        if not self._bound:
            self._bind()
        return self._entries_raw

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def add_entry(
        self,
        target: Any,
        *,
        name: str | None = None,
        replace: bool = False,
        **options: Any,
    ) -> BaseBridge:
        """Register a callable (or an owner attribute name) as an entry point.

        Returns:
            self (to allow chaining).

        Raises:
            ValueError: on entry name collision when replace is False.
            TypeError: on unsupported target type.
        """
        if isinstance(target, str):
            bound = getattr(self.instance, target)
        elif callable(target):
            bound = (
                target
                if inspect.ismethod(target) or not inspect.isfunction(target)
                else target.__get__(self.instance, type(self.instance))
            )
        else:
            raise TypeError(f"Unsupported entry target: {target!r}")
        self._register_callable(bound, name=name, replace=replace, options=options)
        return self

    def _register_callable(
        self,
        bound: Callable,
        *,
        name: str | None,
        replace: bool,
        options: dict[str, Any],
    ) -> None:
        logical_name = name or bound.__name__
        if logical_name in self._entries_raw and not replace:
            raise ValueError(f"Entry name collision: {logical_name}")
        metadata, plugin_options = self._split_options(options)
        entry = EntryPoint(name=logical_name, func=bound, bridge=self, plugins=[], metadata=metadata)
        if plugin_options:
            entry.metadata["plugin_config"] = plugin_options
        self._entries_raw[logical_name] = entry
        self._after_entry_registered(entry)
        entry.handler = self._wrap_handler(entry, entry.func)

    def _split_options(self, options: dict[str, Any]) -> tuple[dict[str, Any], dict[str, dict[str, Any]]]:
        plugin_options: dict[str, dict[str, Any]] = {}
        for code in self._plugin_codes():
            extracted = dictExtract(options, f"{code}_", slice_prefix=True, pop=False)
            if extracted:
                plugin_options[code] = dict(extracted)
        prefixes = tuple(f"{code}_" for code in plugin_options)
        metadata = {k: v for k, v in options.items() if not (prefixes and k.startswith(prefixes))}
        return metadata, plugin_options

    def _iter_marked_methods(self) -> Iterator[tuple[Callable, dict[str, Any]]]:
        cls = type(self.instance)
        default = self.instance.default_bridge
        default_name = default.name if default is not None else None
        seen_names: set[str] = set()
        for base in cls.__mro__:
            for attr_name, value in vars(base).items():
                if not inspect.isfunction(value) or attr_name in seen_names:
                    continue
                seen_names.add(attr_name)
                for marker in getattr(value, "_expose_decorator_kw", None) or []:
                    marker_name = marker.get("name") or default_name
                    if marker_name != self.name:
                        continue
                    payload = dict(marker)
                    payload.pop("name", None)
                    yield value, payload

    def _bind(self) -> None:
        """Discover ``@expose`` methods and register them (runs once)."""
        if self._bound:
            return
        self._bound = True
        for func, marker in self._iter_marked_methods():
            entry_name = marker.pop("entry_name", None)
            self.add_entry(func, name=entry_name, **marker)

    def _rebuild_handlers(self) -> None:
        for entry in self._entries_raw.values():
            entry.handler = self._wrap_handler(entry, entry.func)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def node(self, name: str, errors: dict[str, type[Exception]] | None = None) -> BridgeNode:
        """Return a callable node for the entry called ``name``.

        The node is falsy when no such entry exists; calling it then raises
        ``NotFound`` (or the class mapped to ``not_found`` in ``errors``).
        """
        return BridgeNode(self, name, errors)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke the entry called ``name``; async entries return an awaitable."""
        return self.node(name)(*args, **kwargs)

    def entries(self) -> dict[str, dict[str, Any]]:
        """Return ``{name: info}`` for every entry point."""
        result: dict[str, dict[str, Any]] = {}
        for entry in self._entries.values():
            info: dict[str, Any] = {
                "name": entry.name,
                "doc": inspect.getdoc(entry.func) or "",
                "is_async": inspect.iscoroutinefunction(entry.func),
                "metadata": {k: v for k, v in entry.metadata.items() if k != "plugin_config"},
            }
            info.update(self._describe_entry_extra(entry, info))
            result[entry.name] = info
        return result

    # ------------------------------------------------------------------
    # Hooks (no-op for BaseBridge)
    # ------------------------------------------------------------------
    def _plugin_codes(self) -> tuple[str, ...]:
        return ()

    def _wrap_handler(self, entry: EntryPoint, call_next: Callable) -> Callable:
        return call_next

    def _after_entry_registered(self, entry: EntryPoint) -> None:
        return None

    def _describe_entry_extra(self, entry: EntryPoint, base_description: dict[str, Any]) -> dict[str, Any]:
        return {}
