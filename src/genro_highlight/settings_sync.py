# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Refresh theme dropdowns of a YAML settings document.

A settings document holds ``spec.forms``: a list of forms, each with a
``group`` and a ``formSchema`` list of fields. For every form of the target
group, every field named ``lightTheme``, ``darkTheme`` or ``theme`` gets its
``options`` replaced by one ``{label, value}`` pair per bundled theme, in
metadata order. Anything else in the document is left as is.

The file is rewritten in place with 2-space indentation, unlimited line width
and the original key order.

Usage::

    genro-highlight-sync path/to/settings.yaml --group highlight
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import yaml

from genro_highlight.core.engine import PygmentsEngine, ThemeInfo

__all__ = [
    "THEME_FIELD_NAMES",
    "DEFAULT_GROUP",
    "theme_options",
    "update_theme_fields",
    "sync_settings_file",
    "main",
]

logger = logging.getLogger("genro_highlight")

THEME_FIELD_NAMES = ("lightTheme", "darkTheme", "theme")
DEFAULT_GROUP = "highlight"


def theme_options(themes: Iterable[ThemeInfo]) -> list[dict[str, str]]:
    """Build dropdown options: label ``"Display Name（kind）"``, value = theme id."""
    return [{"label": f"{theme.display_name}（{theme.kind}）", "value": theme.id} for theme in themes]


def update_theme_fields(
    document: Any, options: list[dict[str, str]], *, group: str = DEFAULT_GROUP
) -> int:
    """Overwrite the options of theme fields in forms of ``group``.

    Returns:
        Number of fields updated.
    """
    spec = document.get("spec") if isinstance(document, dict) else None
    forms = spec.get("forms") if isinstance(spec, dict) else None
    if not forms:
        return 0
    updated = 0
    for form in forms:
        if not isinstance(form, dict) or form.get("group") != group:
            continue
        for field in form.get("formSchema") or []:
            if isinstance(field, dict) and field.get("name") in THEME_FIELD_NAMES:
                field["options"] = [dict(option) for option in options]
                updated += 1
    return updated


def sync_settings_file(
    path: str | Path,
    themes: Iterable[ThemeInfo] | None = None,
    *,
    group: str = DEFAULT_GROUP,
) -> int:
    """Rewrite the settings file at ``path`` in place.

    Args:
        path: YAML settings document.
        themes: Theme metadata. Defaults to the themes bundled with the engine.
        group: Form group whose theme fields are refreshed.

    Returns:
        Number of fields updated.
    """
    path = Path(path)
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    if themes is None:
        engine = PygmentsEngine()
        try:
            themes = engine.theme_info()
        finally:
            engine.release()
    updated = update_theme_fields(document, theme_options(themes), group=group)
    if updated == 0:
        logger.warning("no theme fields found in %s", path)
    path.write_text(
        yaml.safe_dump(
            document,
            indent=2,
            width=float("inf"),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        ),
        encoding="utf-8",
    )
    return updated


def get_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Refresh theme options in a YAML settings file.")
    parser.add_argument("path", type=Path, help="settings document to rewrite in place")
    parser.add_argument(
        "--group",
        default=DEFAULT_GROUP,
        help=f"form group holding the theme fields (default: {DEFAULT_GROUP})",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = get_args(argv)
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        updated = sync_settings_file(args.path, group=args.group)
    except (OSError, yaml.YAMLError) as exc:
        logger.error("cannot update %s: %s", args.path, exc)
        return 1
    logger.info("updated %d theme fields in %s", updated, args.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
