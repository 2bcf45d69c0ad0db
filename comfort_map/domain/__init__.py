"""Domain layer: weather modes, noise, comfort field, trails, and agents."""

from comfort_map.domain.weather import (
    WEATHER_KEYS,
    WEATHER_WEIGHTS,
    BlendWeights,
    WeatherMode,
    WeatherState,
    parse_weather_mode,
    weights_for,
)
from comfort_map.domain.noise import ValueNoise  # noqa: I001
from comfort_map.domain.field import (
    LAYER_NAMES,
    FieldSnapshot,
    FieldSynthesizer,
    RainCloud,
    comfort_to_hue,
    rain_cloud_at,
)
from comfort_map.domain.trail import Trail
from comfort_map.domain.agent import AgentView, GradientAgent, clamp_magnitude, normalize

__all__ = [
    "AgentView",
    "BlendWeights",
    "FieldSnapshot",
    "FieldSynthesizer",
    "GradientAgent",
    "LAYER_NAMES",
    "RainCloud",
    "Trail",
    "ValueNoise",
    "WEATHER_KEYS",
    "WEATHER_WEIGHTS",
    "WeatherMode",
    "WeatherState",
    "clamp_magnitude",
    "comfort_to_hue",
    "normalize",
    "parse_weather_mode",
    "rain_cloud_at",
    "weights_for",
]
