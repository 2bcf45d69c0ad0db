"""Visualization theme presets for the comfort-map renderers.

Themes are frozen dataclasses that group all styling constants together, so
renderers accept a ``Theme`` instead of referencing module-level literals.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    # Heatmap (HSB with hue driven by comfort)
    saturation: float = 0.70
    brightness: float = 0.90
    heatmap_alpha: float = 0.95
    layer_cmap: str = "viridis"

    # Canvas and overlays
    background_color: str = "#F2F2F2"
    pod_fill_color: str = "#FFFFFF"
    pod_ring_color: str = "#2E9E4F"
    pod_core_color: str = "#27B24A"
    agent_color: str = "#FFD21A"
    agent_halo_color: str = "#FFFFFF"
    trail_color: str = "#332B14"
    trail_alpha: float = 0.40
    rain_outline_color: str = "#3F5A8A"

    # Legend panel
    legend_face_color: str = "#000000"
    legend_alpha: float = 0.45
    legend_text_color: str = "#FFFFFF"

    weather_labels: dict[str, str] = field(default_factory=dict)


_WEATHER_LABELS: dict[str, str] = {
    "sunny": "Sunny",
    "rain": "Rain",
    "heat": "Heatwave",
}

DEFAULT_THEME = Theme(weather_labels=_WEATHER_LABELS)

NIGHT_THEME = Theme(
    saturation=0.60,
    brightness=0.70,
    layer_cmap="magma",
    background_color="#101418",
    pod_fill_color="#D8D8D8",
    pod_ring_color="#4CC36E",
    pod_core_color="#1F8A3E",
    agent_color="#FFC107",
    agent_halo_color="#B0B0B0",
    trail_color="#F5E6B3",
    trail_alpha=0.30,
    rain_outline_color="#8FB3FF",
    legend_face_color="#1A1A1A",
    legend_alpha=0.70,
    legend_text_color="#E8E8E8",
    weather_labels=_WEATHER_LABELS,
)

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "night": NIGHT_THEME,
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name (case-insensitive)."""
    key = name.lower()
    if key not in REGISTERED_THEMES:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; available: {valid}")
    return REGISTERED_THEMES[key]
