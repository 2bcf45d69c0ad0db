"""Visualization layer: themes, matplotlib viewer, and renderers."""

from comfort_map.viz.render import (
    ComfortMapView,
    RenderResult,
    comfort_rgb,
    layer_rgb,
    render_animation,
    render_frame,
    show_interactive,
)
from comfort_map.viz.theme import (
    DEFAULT_THEME,
    NIGHT_THEME,
    REGISTERED_THEMES,
    Theme,
    get_theme,
)

__all__ = [
    "ComfortMapView",
    "DEFAULT_THEME",
    "NIGHT_THEME",
    "REGISTERED_THEMES",
    "RenderResult",
    "Theme",
    "comfort_rgb",
    "get_theme",
    "layer_rgb",
    "render_animation",
    "render_frame",
    "show_interactive",
]
