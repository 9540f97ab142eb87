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

"""Tests for refreshing theme options in YAML settings documents."""

import yaml

from genro_highlight.core.engine import ThemeInfo
from genro_highlight.settings_sync import (
    main,
    sync_settings_file,
    theme_options,
    update_theme_fields,
)

THEMES = [
    ThemeInfo(id="github-dark", display_name="Github Dark", kind="dark"),
    ThemeInfo(id="xcode", display_name="Xcode", kind="light"),
    ThemeInfo(id="nord", display_name="Nord", kind="dark"),
]

SETTINGS = """\
apiVersion: v1alpha1
kind: Setting
metadata:
  name: highlight-settings
spec:
  forms:
  - group: highlight
    label: Highlighting
    formSchema:
    - name: enabled
      type: checkbox
      value: true
    - name: lightTheme
      type: select
      options: []
    - name: darkTheme
      type: select
    - name: theme
      type: select
      options:
      - label: stale
        value: stale
  - group: other
    formSchema:
    - name: theme
      type: select
      options: []
"""


def test_theme_options_preserve_order_and_label():
    options = theme_options(THEMES)
    assert [option["value"] for option in options] == ["github-dark", "xcode", "nord"]
    assert options[0]["label"] == "Github Dark（dark）"
    assert options[1]["label"] == "Xcode（light）"


def test_update_theme_fields_only_touches_target_group():
    document = yaml.safe_load(SETTINGS)
    options = theme_options(THEMES)
    assert update_theme_fields(document, options) == 3

    highlight, other = document["spec"]["forms"]
    fields = {field["name"]: field for field in highlight["formSchema"]}
    for name in ("lightTheme", "darkTheme", "theme"):
        assert fields[name]["options"] == options
    assert "options" not in fields["enabled"]
    assert fields["enabled"]["value"] is True
    assert other["formSchema"][0]["options"] == []


def test_update_theme_fields_with_other_group():
    document = yaml.safe_load(SETTINGS)
    assert update_theme_fields(document, theme_options(THEMES), group="other") == 1
    assert len(document["spec"]["forms"][1]["formSchema"][0]["options"]) == 3


def test_documents_without_forms_are_ignored():
    assert update_theme_fields({}, []) == 0
    assert update_theme_fields({"spec": {}}, []) == 0
    assert update_theme_fields(None, []) == 0
    assert update_theme_fields({"spec": {"forms": ["junk", {"group": "highlight"}]}}, []) == 0


def test_sync_rewrites_file_in_place(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SETTINGS, encoding="utf-8")

    assert sync_settings_file(path, THEMES) == 3

    text = path.read_text(encoding="utf-8")
    assert "Github Dark（dark）" in text
    assert text.index("apiVersion") < text.index("kind") < text.index("spec")
    assert "\n  forms:\n" in text
    document = yaml.safe_load(text)
    assert document["metadata"]["name"] == "highlight-settings"
    assert len(document["spec"]["forms"][0]["formSchema"][1]["options"]) == 3


def test_sync_defaults_to_bundled_themes(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SETTINGS, encoding="utf-8")
    sync_settings_file(path)
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    values = [option["value"] for option in document["spec"]["forms"][0]["formSchema"][1]["options"]]
    assert "nord" in values
    assert values == sorted(values)


def test_main_exit_codes(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SETTINGS, encoding="utf-8")
    assert main([str(path), "--group", "other"]) == 0
    assert main([str(tmp_path / "missing.yaml")]) == 1

    broken = tmp_path / "broken.yaml"
    broken.write_text("spec: [unclosed", encoding="utf-8")
    assert main([str(broken)]) == 1
