# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Bridge with plugin pipeline.

``Bridge`` extends ``BaseBridge`` with a global plugin registry, per-bridge
plugin instances and middleware wrapping.

Global registry
---------------
``Bridge.register_plugin(plugin_class)`` validates that ``plugin_class`` is a
``BasePlugin`` subclass with a ``plugin_code``.

Attaching plugins
-----------------
``plug(plugin_name, **config)`` instantiates a registered plugin, applies
``on_decore`` to existing entries, rebuilds handlers and returns ``self``.

Wrapping pipeline
-----------------
``_wrap_handler(entry, call_next)`` builds layers from the attached plugins in
reverse order (last attached closest to the handler). Each layer checks at
call time whether its plugin is enabled for the entry.

Example::

    class Host(BridgeClass):
        def __init__(self):
            self.api = Bridge(self, name="api").plug("logging")

        @expose("api", name="ping")
        async def ping(self):
            return "pong"
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from genro_highlight.plugins._base_plugin import BasePlugin, EntryPoint

from .base_bridge import BaseBridge

__all__ = ["Bridge"]

_PLUGIN_REGISTRY: dict[str, type[BasePlugin]] = {}


class Bridge(BaseBridge):
    """Bridge with plugin registry and pipeline support."""

    __slots__ = BaseBridge.__slots__ + ("_plugins", "_plugins_by_name", "_plugin_info")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._plugins: list[BasePlugin] = []
        self._plugins_by_name: dict[str, BasePlugin] = {}
        self._plugin_info: dict[str, dict[str, Any]] = {}
        super().__init__(*args, **kwargs)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: type[BasePlugin], name: str | None = None) -> None:
        """Register a plugin class globally.

        Raises:
            TypeError: If plugin_class is not a BasePlugin subclass.
            ValueError: If plugin_code is missing or another class owns the code.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(f"Plugin {plugin_class.__name__} is missing plugin_code")
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> dict[str, type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> Bridge:
        """Attach a registered plugin by name.

        Returns:
            self (for method chaining).

        Raises:
            ValueError: If the plugin is unknown or already attached.
        """
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(f"Unknown plugin '{plugin}'. Available plugins: {available}")
        if plugin in self._plugins_by_name:
            raise ValueError(f"Plugin '{plugin}' is already attached to this bridge")
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        if self._bound:
            for entry in self._entries_raw.values():
                self._decorate(instance, entry)
            self._rebuild_handlers()
        return self

    def iter_plugins(self) -> list[BasePlugin]:
        return list(self._plugins)

    def __getattr__(self, name: str) -> Any:
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to bridge '{self.name}'")
        return plugin

    # ------------------------------------------------------------------
    # Runtime switches
    # ------------------------------------------------------------------
    def set_plugin_enabled(self, entry_name: str, plugin_name: str, enabled: bool = True) -> None:
        """Enable or disable a plugin for one entry at runtime."""
        bucket = self._plugin_bucket(plugin_name)
        slot = bucket.setdefault(entry_name, {"config": {}, "locals": {}})
        slot.setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, entry_name: str, plugin_name: str) -> bool:
        """Resolve ``enabled``: entry locals, entry config, global locals, global config."""
        bucket = self._plugin_bucket(plugin_name)
        for scope in (entry_name, "_all_"):
            data = bucket.get(scope, {})
            for layer in ("locals", "config"):
                if "enabled" in data.get(layer, {}):
                    return bool(data[layer]["enabled"])
        return True

    def _plugin_bucket(self, plugin_name: str) -> dict[str, Any]:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to bridge '{self.name}'")
        return bucket

    # ------------------------------------------------------------------
    # Overrides/hooks
    # ------------------------------------------------------------------
    def _plugin_codes(self) -> tuple[str, ...]:  # type: ignore[override]
        return tuple(_PLUGIN_REGISTRY)

    def _wrap_handler(self, entry: EntryPoint, call_next: Callable) -> Callable:  # type: ignore[override]
        wrapped = call_next
        for plugin in reversed(self._plugins):
            plugin_call = plugin.wrap_handler(self, entry, wrapped)
            wrapped = self._create_wrapper(plugin, entry, plugin_call, wrapped)
        return wrapped

    def _create_wrapper(
        self,
        plugin: BasePlugin,
        entry: EntryPoint,
        plugin_call: Callable,
        next_handler: Callable,
    ) -> Callable:
        @wraps(next_handler)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not self.is_plugin_enabled(entry.name, plugin.name):
                return next_handler(*args, **kwargs)
            return plugin_call(*args, **kwargs)

        return wrapper

    def _decorate(self, plugin: BasePlugin, entry: EntryPoint) -> None:
        cfg = entry.metadata.get("plugin_config", {}).get(plugin.name)
        if cfg:
            plugin.configure(_target=entry.name, **cfg)
        if plugin.name not in entry.plugins:
            entry.plugins.append(plugin.name)
        plugin.on_decore(self, entry.func, entry)

    def _after_entry_registered(self, entry: EntryPoint) -> None:  # type: ignore[override]
        for plugin in self._plugins:
            self._decorate(plugin, entry)

    def _describe_entry_extra(  # type: ignore[override]
        self, entry: EntryPoint, base_description: dict[str, Any]
    ) -> dict[str, Any]:
        plugins_info: dict[str, dict[str, Any]] = {}
        for plugin in self._plugins:
            plugin_data: dict[str, Any] = {}
            config = plugin.configuration(entry.name)
            if config:
                plugin_data["config"] = config
            meta = plugin.entry_metadata(self, entry)
            if meta:
                plugin_data["metadata"] = meta
            if plugin_data:
                plugins_info[plugin.name] = plugin_data
        if plugins_info:
            return {"plugins": plugins_info}
        return {}
