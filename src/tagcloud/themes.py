"""Built-in themes."""

from __future__ import annotations

__all__ = ["DARK_THEME", "LIGHT_THEME", "RANDOM_THEME", "THEMES"]

from tagcloud.render.style import Theme

RANDOM_THEME = Theme(name="random")

LIGHT_THEME = Theme(
    name="light",
    background_color="#ffffff",
    palette=("#1b4965", "#5fa8d3", "#ca6702", "#9b2226", "#386641", "#333333"),
)

DARK_THEME = Theme(
    name="dark",
    background_color="#1d1f21",
    palette=("#f0c674", "#81a2be", "#b5bd68", "#cc6666", "#b294bb", "#8abeb7"),
    font_weight="bold",
)

THEMES = {t.name: t for t in (RANDOM_THEME, LIGHT_THEME, DARK_THEME)}
