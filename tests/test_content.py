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

"""Tests for highlighting code blocks inside HTML content."""

import asyncio

from bs4 import BeautifulSoup

from genro_highlight import ContentRenderer, HighlightSettings, Highlighter
from genro_highlight.core.content import extract_language


def run(coro):
    return asyncio.run(coro)


def soup_of(html):
    return BeautifulSoup(html, "html.parser")


def test_extract_language_reads_code_then_pre_classes():
    soup = soup_of(
        '<pre class="lang-SQL"><code class="hljs language-python">x</code></pre>'
        '<pre class="lang-sql"><code>y</code></pre>'
        '<pre><code class="language-">z</code></pre>'
    )
    codes = soup.select("pre > code")
    assert extract_language(codes[0], codes[0].parent) == "python"
    assert extract_language(codes[1], codes[1].parent) == "sql"
    assert extract_language(codes[2], codes[2].parent) == ""


def test_supported_block_is_replaced(highlighter):
    renderer = ContentRenderer(highlighter)
    html = run(renderer.render('<p>intro</p><pre><code class="language-python">a &lt; b</code></pre>'))
    soup = soup_of(html)
    assert soup.p.get_text() == "intro"
    rendered = soup.select("div > pre.hl")
    assert len(rendered) == 1
    assert rendered[0]["data-lang"] == "python"
    assert rendered[0]["data-theme"] == "nord"
    assert rendered[0].get_text() == "a < b"
    assert soup.select("pre > code") == []


def test_unknown_and_unlabelled_blocks_are_untouched(highlighter, loader):
    source = (
        '<pre><code class="language-cobol">MOVE A TO B</code></pre>'
        "<pre><code>plain</code></pre>"
        "<code class=\"language-python\">inline</code>"
    )
    html = run(ContentRenderer(highlighter).render(source))
    assert soup_of(html).select("pre.hl") == []
    assert "MOVE A TO B" in html and "plain" in html and "inline" in html
    assert loader.engines[0].render_calls == []


def test_duplicate_blocks_are_rendered_once(highlighter, loader):
    block = '<pre><code class="language-sql">SELECT 1</code></pre>'
    html = run(ContentRenderer(highlighter).render(block * 3))
    assert len(soup_of(html).select("pre.hl")) == 3
    assert len(loader.engines[0].render_calls) == 1
    assert highlighter.metrics.snapshot().deduplicated_requests == 2


def test_configured_theme_is_used_in_single_mode(manager, loader):
    settings = HighlightSettings(theme="monokai")
    renderer = ContentRenderer(Highlighter(manager, settings))
    html = run(renderer.render('<pre><code class="language-javascript">x</code></pre>'))
    assert soup_of(html).select_one("pre.hl")["data-theme"] == "monokai"


def test_double_render_emits_light_and_dark_variants(manager, loader):
    settings = HighlightSettings(double_render=True, light_theme="xcode", dark_theme="monokai")
    renderer = ContentRenderer(Highlighter(manager, settings))
    html = run(renderer.render('<pre><code class="language-python">x = 1</code></pre>'))
    soup = soup_of(html)
    light = soup.select_one("div.light > pre.hl")
    dark = soup.select_one("div.dark > pre.hl")
    assert light["data-theme"] == "xcode"
    assert dark["data-theme"] == "monokai"
    assert len(loader.engines[0].render_calls) == 2


def test_failed_block_is_left_in_place(highlighter):
    source = (
        '<pre><code class="language-python">boom()</code></pre>'
        '<pre><code class="language-python">fine()</code></pre>'
    )
    html = run(ContentRenderer(highlighter).render(source))
    soup = soup_of(html)
    assert soup.select_one("pre > code").get_text() == "boom()"
    assert [pre.get_text() for pre in soup.select("pre.hl")] == ["fine()"]


def test_disabled_renderer_returns_content_unchanged(manager, loader):
    renderer = ContentRenderer(Highlighter(manager, HighlightSettings(enabled=False)))
    source = '<pre><code class="language-python">x</code></pre>'
    assert run(renderer.render(source)) == source
    assert loader.calls == 0


def test_content_without_code_blocks(highlighter):
    assert run(ContentRenderer(highlighter).render("<p>nothing here</p>")) == "<p>nothing here</p>"
