# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Plugin contract definitions for the Genro Highlight bridge.

Objects
-------
``EntryPoint``
    Dataclass capturing an exposed callable at registration time. Fields:
        - ``name``: host-facing entry name
        - ``func``: bound callable invoked by the bridge
        - ``bridge``: Bridge instance that owns the entry
        - ``plugins``: list of plugin names applied to the entry
        - ``metadata``: mutable dict used by plugins to store annotations

``BasePlugin``
    Base class every bridge plugin subclasses. Provides configuration helpers
    backed by the bridge's ``_plugin_info`` store and the hooks ``on_decore``
    and ``wrap_handler``.

    Required class attributes:
        - ``plugin_code``: unique identifier used for registration (e.g. "logging")
        - ``plugin_description``: human-readable description of the plugin

Example::

    class CountingPlugin(BasePlugin):
        plugin_code = "counting"
        plugin_description = "Counts entry point calls"

        def configure(self, enabled: bool = True):
            pass  # Storage handled by wrapper

        def wrap_handler(self, bridge, entry, call_next):
            def wrapper(*args, **kwargs):
                entry.metadata["calls"] = entry.metadata.get("calls", 0) + 1
                return call_next(*args, **kwargs)
            return wrapper
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import wraps
from typing import Any

from pydantic import validate_call

__all__ = ["BasePlugin", "EntryPoint"]


@dataclass
class EntryPoint:
    """Metadata for an exposed entry point.

    Attributes:
        name: Host-facing entry name.
        func: Bound callable invoked by the bridge.
        bridge: Bridge instance that owns this entry.
        plugins: List of plugin names applied to this entry.
        metadata: Mutable dict for plugins to store annotations.
    """

    name: str
    func: Callable
    bridge: Any
    plugins: list[str]
    metadata: dict[str, Any] = field(default_factory=dict)
    handler: Callable | None = None


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() to handle flags, _target, validation and storage."""
    validated = validate_call(original_configure)

    @wraps(original_configure)
    def wrapper(
        self: BasePlugin, *, _target: str = "_all_", flags: str | None = None, **kwargs: Any
    ) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))
        validated(self, **kwargs)
        self._write_config(_target, kwargs)

    return wrapper


class BasePlugin:
    """Hook interface and configuration helpers for bridge plugins."""

    __slots__ = ("name", "_bridge")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])  # type: ignore[method-assign]

    def __init__(self, bridge: Any, **config: Any):
        self.name = self.plugin_code
        self._bridge = bridge
        self._get_store().setdefault(self.name, {}).setdefault(
            "_all_", {"config": {"enabled": True}, "locals": {}}
        )
        self.configure(**config)

    def configure(self, *, _target: str = "_all_", **config: Any) -> None:
        """Define accepted configuration keys in subclasses."""
        self._write_config(_target, config)

    def _write_config(self, target: str, config: dict[str, Any]) -> None:
        if not config:
            return
        bucket = self._get_store().setdefault(self.name, {})
        bucket.setdefault(target, {"config": {}, "locals": {}})["config"].update(config)

    def configuration(self, entry_name: str | None = None) -> dict[str, Any]:
        """Read merged configuration (base + optional per-entry override)."""
        plugin_bucket = self._get_store().get(self.name)
        if not plugin_bucket:
            return {}
        merged = dict(plugin_bucket.get("_all_", {}).get("config", {}))
        if entry_name:
            merged.update(plugin_bucket.get(entry_name, {}).get("config", {}))
        return merged

    def _parse_flags(self, flags: str) -> dict[str, bool]:
        """Parse flag string like "enabled,before:off" into boolean dict."""
        mapping: dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def _get_store(self) -> dict[str, Any]:
        return self._bridge._plugin_info  # type: ignore[no-any-return]

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def on_decore(self, bridge: Any, func: Callable, entry: EntryPoint) -> None:  # pragma: no cover
        """Called when an entry point is registered."""
        return None

    def wrap_handler(self, bridge: Any, entry: EntryPoint, call_next: Callable) -> Callable:
        """Return the middleware for ``entry``; default passes through."""
        return call_next

    def entry_metadata(self, bridge: Any, entry: EntryPoint) -> dict[str, Any]:
        """Plugin-specific metadata for introspection."""
        return {}
