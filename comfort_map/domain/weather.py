"""Weather modes, their comfort blend weights, and the mutable mode holder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WeatherMode(Enum):
    """Discrete scenario selecting the comfort blend weights."""

    SUNNY = "sunny"
    RAIN = "rain"
    HEAT = "heat"


@dataclass(frozen=True)
class BlendWeights:
    """Weights of the four comfort terms; must sum to 1.0."""

    cool: float
    """Weight of ``1 - temp``."""
    eco: float
    """Weight of eco-pod proximity."""
    dry: float
    """Weight of ``1 - rain``."""
    base: float
    """Weight of the structural noise."""

    def __post_init__(self) -> None:
        if min(self.cool, self.eco, self.dry, self.base) < 0.0:
            raise ValueError("blend weights must be >= 0")
        if abs(self.total - 1.0) > 1e-9:
            raise ValueError("blend weights must sum to 1.0")

    @property
    def total(self) -> float:
        return self.cool + self.eco + self.dry + self.base


WEATHER_WEIGHTS: dict[WeatherMode, BlendWeights] = {
    # Balanced: pods and cooler areas matter, light rain penalty.
    WeatherMode.SUNNY: BlendWeights(cool=0.35, eco=0.35, dry=0.20, base=0.10),
    # Staying dry and near a pod matter most.
    WeatherMode.RAIN: BlendWeights(cool=0.15, eco=0.45, dry=0.30, base=0.10),
    # Temperature dominates.
    WeatherMode.HEAT: BlendWeights(cool=0.55, eco=0.20, dry=0.15, base=0.10),
}

WEATHER_KEYS: dict[str, WeatherMode] = {
    "1": WeatherMode.SUNNY,
    "2": WeatherMode.RAIN,
    "3": WeatherMode.HEAT,
}
"""Keyboard bindings used by the interactive viewer."""


def weights_for(mode: WeatherMode) -> BlendWeights:
    return WEATHER_WEIGHTS[mode]


def parse_weather_mode(raw: str) -> WeatherMode:
    """Parse a weather name (``sunny``/``rain``/``heat``) or key (``1``-``3``)."""
    normalized = raw.strip().lower()
    if normalized in WEATHER_KEYS:
        return WEATHER_KEYS[normalized]
    try:
        return WeatherMode(normalized)
    except ValueError as exc:
        valid = ", ".join(mode.value for mode in WeatherMode)
        raise ValueError(f"weather must be one of {valid}") from exc


class WeatherState:
    """Holder of the current weather mode.

    The input collaborator is the only writer; the synthesizer reads
    ``mode`` once per frame.
    """

    def __init__(self, mode: WeatherMode = WeatherMode.SUNNY) -> None:
        self._mode = mode

    @property
    def mode(self) -> WeatherMode:
        return self._mode

    def set(self, mode: WeatherMode) -> None:
        self._mode = mode

    def handle_key(self, key: str | None) -> bool:
        """Apply a key press; return True when it selected a weather mode."""
        if key is None or key not in WEATHER_KEYS:
            return False
        self._mode = WEATHER_KEYS[key]
        return True

    def __repr__(self) -> str:
        return f"WeatherState(mode={self._mode.value!r})"
