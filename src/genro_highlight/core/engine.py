# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Engine - the highlighting back-end behind the adapter.

Defines the minimal interface every back-end must implement, plus
:class:`PygmentsEngine`, the concrete implementation built on Pygments.
The engine is an opaque collaborator: tokenizing and HTML generation are
entirely Pygments' business.

Required members:
    - ``languages`` -> frozenset of supported language IDs
    - ``themes`` -> frozenset of supported theme IDs
    - ``render(code, lang, theme, **options)`` -> markup string
    - ``theme_info()`` -> bundled theme metadata
    - ``release()`` -> free resources

Example::

    engine = await load_engine()
    html = engine.render("print(1)", "python", "nord")
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_all_lexers, get_lexer_by_name
from pygments.styles import get_all_styles, get_style_by_name
from pygments.util import ClassNotFound

from genro_highlight.exceptions import RenderError

__all__ = ["Engine", "PygmentsEngine", "ThemeInfo", "load_engine"]


@dataclass(frozen=True)
class ThemeInfo:
    """Bundled metadata for one theme.

    Attributes:
        id: Theme identifier accepted by ``render``.
        display_name: Human-readable name.
        kind: ``"light"`` or ``"dark"``.
    """

    id: str
    display_name: str
    kind: str


class Engine(ABC):
    """Minimal interface for highlighting back-ends."""

    @property
    @abstractmethod
    def languages(self) -> frozenset[str]:
        """Supported language IDs."""
        ...

    @property
    @abstractmethod
    def themes(self) -> frozenset[str]:
        """Supported theme IDs."""
        ...

    @abstractmethod
    def render(self, code: str, lang: str, theme: str, **options: Any) -> str:
        """Render ``code`` to markup. Raises on unsupported input."""
        ...

    @abstractmethod
    def theme_info(self) -> list[ThemeInfo]:
        """Return metadata for every bundled theme."""
        ...

    @abstractmethod
    def release(self) -> None:
        """Free any resources held by the engine."""
        ...


class PygmentsEngine(Engine):
    """Pygments-backed engine.

    Languages are every lexer alias Pygments knows; themes are every style
    name. Rendering uses ``HtmlFormatter(noclasses=True)`` so the markup
    carries inline styles and needs no stylesheet. Extra ``options`` are
    forwarded to the formatter unchanged (``linenos``, ``hl_lines``,
    ``wrapcode``...).
    """

    __slots__ = ("_languages", "_themes", "_released")

    def __init__(self) -> None:
        self._languages = frozenset(
            alias for _name, aliases, _files, _mimes in get_all_lexers() for alias in aliases
        )
        self._themes = frozenset(get_all_styles())
        self._released = False

    @property
    def languages(self) -> frozenset[str]:
        return self._languages

    @property
    def themes(self) -> frozenset[str]:
        return self._themes

    def render(self, code: str, lang: str, theme: str, **options: Any) -> str:
        if self._released:
            raise RenderError("engine has been released")
        try:
            lexer = get_lexer_by_name(lang)
            formatter = HtmlFormatter(style=theme, noclasses=True, **options)
        except ClassNotFound as exc:
            raise RenderError(f"cannot render {lang!r} with {theme!r}", cause=exc) from exc
        return pygments_highlight(code, lexer, formatter)

    def theme_info(self) -> list[ThemeInfo]:
        return [_describe_style(name) for name in sorted(self._themes)]

    def release(self) -> None:
        self._languages = frozenset()
        self._themes = frozenset()
        self._released = True


async def load_engine() -> Engine:
    """Build a :class:`PygmentsEngine` off the event loop.

    Lexer and style discovery walks entry points and imports plugin modules,
    so it runs in a worker thread.
    """
    return await asyncio.to_thread(PygmentsEngine)


def _describe_style(name: str) -> ThemeInfo:
    style = get_style_by_name(name)
    display = " ".join(part.capitalize() for part in name.replace("_", "-").split("-"))
    kind = "dark" if _luminance(getattr(style, "background_color", None)) < 0.5 else "light"
    return ThemeInfo(id=name, display_name=display, kind=kind)


def _luminance(color: str | None) -> float:
    """Relative luminance of a ``#rgb``/``#rrggbb`` color; unknown colors count as white."""
    if not color or not color.startswith("#"):
        return 1.0
    hexpart = color[1:]
    if len(hexpart) == 3:
        hexpart = "".join(ch * 2 for ch in hexpart)
    if len(hexpart) != 6:
        return 1.0
    try:
        red, green, blue = (int(hexpart[i : i + 2], 16) / 255 for i in (0, 2, 4))
    except ValueError:
        return 1.0
    return 0.2126 * red + 0.7152 * green + 0.0722 * blue
