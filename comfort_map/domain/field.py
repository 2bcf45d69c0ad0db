"""Comfort-field synthesis over the fixed-resolution grid.

The synthesizer blends four terms per cell: structural noise (``base``),
a vertical temperature gradient (``temp``), a moving rain-cloud gaussian
(``rain``), and proximity to the nearest eco-pod (``eco``). The static terms
are computed once; rain and the weighted blend are recomputed every frame.
Each frame produces a fresh read-only ``FieldSnapshot``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

import numpy as np

from comfort_map.config.constants import MAX_HUE_DEGREES
from comfort_map.domain.weather import WeatherMode, weights_for

if TYPE_CHECKING:
    from comfort_map.config.types import FieldConfig

NoiseFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]
"""Deterministic smooth function of two coordinate arrays, values in [0, 1]."""

LAYER_NAMES: tuple[str, ...] = ("comfort", "temp", "rain", "eco", "base")


@dataclass(frozen=True)
class RainCloud:
    """Circular rain region derived from the frame index."""

    cx: float
    cy: float
    radius: float


@dataclass(frozen=True, eq=False)
class FieldSnapshot:
    """Read-only comfort grid for one frame, indexed ``comfort[i, j]`` (column, row)."""

    comfort: np.ndarray
    width: float
    height: float
    frame: int
    weather: WeatherMode
    rain_cloud: RainCloud
    layers: Mapping[str, np.ndarray] = field(default_factory=dict)

    @property
    def cols(self) -> int:
        return int(self.comfort.shape[0])

    @property
    def rows(self) -> int:
        return int(self.comfort.shape[1])

    def in_bounds(self, x: float, y: float) -> bool:
        return 0.0 <= x < self.width and 0.0 <= y < self.height

    def comfort_at(self, x: float, y: float) -> float:
        """Comfort of the cell containing ``(x, y)``; 0.0 outside the playfield."""
        if not self.in_bounds(x, y):
            return 0.0
        i = math.floor(x / (self.width / self.cols))
        j = math.floor(y / (self.height / self.rows))
        i = min(max(i, 0), self.cols - 1)
        j = min(max(j, 0), self.rows - 1)
        return float(self.comfort[i, j])

    def hue(self) -> np.ndarray:
        """Per-cell hue in degrees (red = uncomfortable, blue = comfortable)."""
        return comfort_to_hue(self.comfort)


def comfort_to_hue(comfort: float | np.ndarray) -> float | np.ndarray:
    """Linear map of comfort [0, 1] onto hue [0, 210] degrees."""
    hue = np.clip(comfort, 0.0, 1.0) * MAX_HUE_DEGREES
    if np.ndim(hue) == 0:
        return float(hue)
    return hue


def rain_cloud_at(frame: int, config: FieldConfig) -> RainCloud:
    """Rain-cloud geometry at ``frame``; the centre drifts periodically."""
    cx = config.width * (0.5 + config.rain_drift_x * math.sin(config.rain_freq_x * frame))
    cy = config.height * (0.5 + config.rain_drift_y * math.cos(config.rain_freq_y * frame))
    return RainCloud(cx=cx, cy=cy, radius=config.rain_radius_fraction * config.width)


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class FieldSynthesizer:
    """Compute the per-frame comfort grid for a fixed canvas and eco-pod set."""

    def __init__(
        self,
        config: FieldConfig,
        noise: NoiseFunction,
        points_of_interest: tuple[tuple[float, float], ...] | None = None,
    ) -> None:
        self.config = config
        self.points_of_interest = (
            config.poi_positions() if points_of_interest is None else tuple(points_of_interest)
        )
        cols, rows = config.cols, config.rows
        ii, jj = np.meshgrid(np.arange(cols), np.arange(rows), indexing="ij")
        self._x = (ii + 0.5) * config.cell_width
        self._y = (jj + 0.5) * config.cell_height
        self.base = _read_only(
            np.asarray(
                noise(ii * config.noise_scale, jj * config.noise_scale), dtype=float
            ).copy()
        )
        # Top row warmest (1.0), bottom row coolest (0.0).
        self.temp = _read_only(np.broadcast_to(np.linspace(1.0, 0.0, rows), (cols, rows)).copy())
        self.eco = _read_only(self._eco_proximity())

    def _eco_proximity(self) -> np.ndarray:
        if not self.points_of_interest:
            return np.zeros_like(self._x)
        pois = np.asarray(self.points_of_interest, dtype=float)
        dx = self._x[..., None] - pois[:, 0]
        dy = self._y[..., None] - pois[:, 1]
        min_dist = np.sqrt(dx**2 + dy**2).min(axis=-1)
        reach = self.config.eco_radius_fraction * self.config.width
        return np.clip(1.0 - min_dist / reach, 0.0, 1.0)

    def rain(self, cloud: RainCloud) -> np.ndarray:
        """Gaussian rain intensity: 1 at the cloud centre, towards 0 far away."""
        dist = np.hypot(self._x - cloud.cx, self._y - cloud.cy)
        return np.exp(-((dist / cloud.radius) ** 2))

    def synthesize(self, frame: int, weather: WeatherMode) -> FieldSnapshot:
        """Build the comfort snapshot for ``frame`` under ``weather``."""
        cloud = rain_cloud_at(frame, self.config)
        rain = _read_only(self.rain(cloud))
        w = weights_for(weather)
        comfort = (
            w.cool * (1.0 - self.temp)
            + w.eco * self.eco
            + w.dry * (1.0 - rain)
            + w.base * self.base
        )
        comfort = _read_only(np.clip(comfort, 0.0, 1.0))
        layers = MappingProxyType(
            {
                "comfort": comfort,
                "temp": self.temp,
                "rain": rain,
                "eco": self.eco,
                "base": self.base,
            }
        )
        return FieldSnapshot(
            comfort=comfort,
            width=float(self.config.width),
            height=float(self.config.height),
            frame=frame,
            weather=weather,
            rain_cloud=cloud,
            layers=layers,
        )
