# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for entry point discovery, dispatch and the plugin pipeline."""

import asyncio

import pytest
from pydantic import ValidationError as PydanticValidationError

from genro_highlight import Bridge, BridgeClass, NotFound, expose
from genro_highlight.bridge import BaseBridge, is_bridge_class
from genro_highlight.plugins._base_plugin import BasePlugin


class DummyLogger:
    def __init__(self):
        self.records = []

    def has_handlers(self):
        return True

    def info(self, message):
        self.records.append(message)


class Service(BridgeClass):
    def __init__(self, logger=None):
        self.api = Bridge(self, name="api")
        if logger is not None:
            self.api.plug("logging", logger=logger)

    @expose(name="describeService")
    def describe(self):
        """Return the service name."""
        return "service"

    @expose(kind="query")
    async def fetch(self, key):
        await asyncio.sleep(0)
        return f"value:{key}"

    @expose(logging_flags="enabled:off")
    def quiet(self):
        return "shh"

    def helper(self):
        return "not exposed"


class TwoBridges(BridgeClass):
    def __init__(self):
        self.public = Bridge(self, name="public")
        self.admin = Bridge(self, name="admin")

    @expose("public")
    def ping(self):
        return "pong"

    @expose("admin", name="ping")
    def admin_ping(self):
        return "admin-pong"


# --- discovery and dispatch ---


def test_exposed_methods_are_discovered_under_their_names():
    service = Service()
    assert set(service.api.entries()) == {"describeService", "fetch", "quiet"}
    assert service.api.call("describeService") == "service"


def test_async_entries_return_awaitables():
    service = Service()
    assert asyncio.run(service.api.call("fetch", "k")) == "value:k"


def test_unknown_entry_raises_not_found():
    service = Service()
    node = service.api.node("helper")
    assert not node
    assert repr(node) == "BridgeNode(empty)"
    with pytest.raises(NotFound) as excinfo:
        service.api.call("helper")
    assert excinfo.value.selector == "api:helper"


def test_node_can_map_not_found_to_custom_exception():
    class Missing(Exception):
        pass

    node = Service().api.node("nothing", errors={"not_found": Missing})
    with pytest.raises(Missing):
        node()


def test_node_exposes_doc_and_metadata():
    service = Service()
    node = service.api.node("describeService")
    assert node
    assert node.doc == "Return the service name."
    assert service.api.node("fetch").metadata == {"kind": "query"}


def test_entries_introspection():
    entries = Service().api.entries()
    assert entries["fetch"]["is_async"] is True
    assert entries["describeService"]["is_async"] is False
    assert entries["fetch"]["metadata"] == {"kind": "query"}


def test_bridges_only_see_their_own_entries():
    owner = TwoBridges()
    assert owner.public.call("ping") == "pong"
    assert owner.admin.call("ping") == "admin-pong"
    assert owner.default_bridge is None
    assert owner.get_bridge("admin") is owner.admin
    with pytest.raises(AttributeError):
        owner.get_bridge("missing")


def test_add_entry_and_collision():
    service = Service()
    service.api.add_entry(lambda self: "extra", name="extra")
    assert service.api.call("extra") == "extra"
    with pytest.raises(ValueError, match="collision"):
        service.api.add_entry("helper", name="extra")
    service.api.add_entry("helper", name="extra", replace=True)
    assert service.api.call("extra") == "not exposed"


def test_add_entry_rejects_non_callables():
    with pytest.raises(TypeError):
        Service().api.add_entry(42)


def test_owner_must_be_a_bridge_class():
    with pytest.raises(TypeError):
        BaseBridge(object())
    with pytest.raises(ValueError):
        BaseBridge(None)
    assert is_bridge_class(Service())
    assert not is_bridge_class(object())


# --- plugins ---


def test_plug_unknown_plugin_fails():
    with pytest.raises(ValueError, match="Unknown plugin"):
        Service().api.plug("does-not-exist")


def test_plug_twice_fails():
    service = Service(logger=DummyLogger())
    with pytest.raises(ValueError, match="already attached"):
        service.api.plug("logging")


def test_builtin_plugins_are_registered():
    from genro_highlight.plugins.logging import LoggingPlugin

    registry = Bridge.available_plugins()
    assert registry["logging"] is LoggingPlugin
    registry.pop("logging")
    assert "logging" in Bridge.available_plugins()


def test_register_plugin_validates_class():
    with pytest.raises(TypeError):
        Bridge.register_plugin(object)

    class Nameless(BasePlugin):
        pass

    with pytest.raises(ValueError):
        Bridge.register_plugin(Nameless)


def test_logging_plugin_records_sync_and_async_calls():
    logger = DummyLogger()
    service = Service(logger=logger)
    service.api.call("describeService")
    asyncio.run(service.api.call("fetch", "k"))
    assert logger.records[0] == "describeService start"
    assert logger.records[1].startswith("describeService end (")
    assert logger.records[2] == "fetch start"
    assert logger.records[3].startswith("fetch end (")
    assert logger.records[3].endswith(" ms)")


def test_logging_disabled_per_entry_through_flags():
    logger = DummyLogger()
    service = Service(logger=logger)
    assert service.api.call("quiet") == "shh"
    assert logger.records == []
    assert service.api.is_plugin_enabled("quiet", "logging") is False
    assert service.api.entries()["quiet"]["plugins"]["logging"]["config"]["enabled"] is False


def test_plugin_can_be_toggled_at_runtime():
    logger = DummyLogger()
    service = Service(logger=logger)
    service.api.set_plugin_enabled("describeService", "logging", False)
    service.api.call("describeService")
    assert logger.records == []
    service.api.set_plugin_enabled("describeService", "logging", True)
    service.api.call("describeService")
    assert len(logger.records) == 2


def test_plug_after_binding_wraps_existing_entries():
    logger = DummyLogger()
    service = Service()
    assert service.api.call("describeService") == "service"
    service.api.plug("logging", logger=logger, after=False)
    service.api.call("describeService")
    assert logger.records == ["describeService start"]
    assert service.api.logging.configuration()["after"] is False


def test_plugin_attribute_access():
    service = Service(logger=DummyLogger())
    assert service.api.logging.name == "logging"
    assert [plugin.name for plugin in service.api.iter_plugins()] == ["logging"]
    with pytest.raises(AttributeError):
        service.api.missing_plugin  # noqa: B018
    with pytest.raises(AttributeError):
        service.api.is_plugin_enabled("describeService", "missing_plugin")


def test_plugin_configure_is_validated():
    service = Service(logger=DummyLogger())
    with pytest.raises(PydanticValidationError):
        service.api.logging.configure(before="not-a-bool")
