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

"""Shared fakes: a counting engine loader and an instrumented engine."""

import asyncio
import html

import pytest

from genro_highlight import EngineLifecycleManager, Highlighter, HighlightSettings
from genro_highlight.core.engine import Engine, ThemeInfo


class FakeEngine(Engine):
    """Engine double recording every render call."""

    def __init__(self, languages=("python", "javascript", "sql"), themes=("nord", "xcode", "monokai")):
        self._languages = frozenset(languages)
        self._themes = frozenset(themes)
        self.render_calls = []
        self.released = False

    @property
    def languages(self):
        return self._languages

    @property
    def themes(self):
        return self._themes

    def render(self, code, lang, theme, **options):
        self.render_calls.append((code, lang, theme, options))
        if "boom" in code:
            raise RuntimeError("grammar exploded")
        extra = "".join(f' data-{key}="{value}"' for key, value in sorted(options.items()))
        return f'<pre class="hl" data-lang="{lang}" data-theme="{theme}"{extra}>{html.escape(code)}</pre>'

    def theme_info(self):
        dark = {"nord", "monokai"}
        return [
            ThemeInfo(id=name, display_name=name.title(), kind="dark" if name in dark else "light")
            for name in sorted(self._themes)
        ]

    def release(self):
        self.released = True


class CountingLoader:
    """Engine loader counting constructions; can fail the first N attempts."""

    def __init__(self, *, fail_times=0, delay=0.01):
        self.calls = 0
        self.fail_times = fail_times
        self.delay = delay
        self.engines = []

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.calls <= self.fail_times:
            raise OSError("grammar assets missing")
        engine = FakeEngine()
        self.engines.append(engine)
        return engine


@pytest.fixture
def loader():
    return CountingLoader()


@pytest.fixture
def manager(loader):
    return EngineLifecycleManager(loader)


@pytest.fixture
def settings():
    return HighlightSettings(default_language="python", default_theme="nord")


@pytest.fixture
def highlighter(manager, settings):
    return Highlighter(manager, settings)
