"""Centralized domain constants for the comfort-map simulation.

All magic numbers shared by the field synthesizer, the agents, and the
renderers are defined here. Consuming modules should import from this module
rather than defining their own inline literals.
"""

from __future__ import annotations

CANVAS_WIDTH = 600
"""Default playfield width in length units (pixels)."""

CANVAS_HEIGHT = 900
"""Default playfield height in length units (pixels)."""

GRID_COLS = 70
"""Default number of grid columns."""

GRID_ROWS = 105
"""Default number of grid rows."""

NUM_AGENTS = 12
"""Default number of gradient-following agents."""

TARGET_FPS = 30
"""Target frame rate of the interactive viewer."""

NOISE_SCALE = 0.08
"""Cell-index multiplier applied before sampling structural noise."""

NOISE_OCTAVES = 4
"""Number of octaves summed by the structural noise."""

NOISE_FALLOFF = 0.5
"""Amplitude multiplier between successive noise octaves."""

RAIN_RADIUS_FRACTION = 0.45
"""Rain-cloud radius as a fraction of the canvas width."""

ECO_RADIUS_FRACTION = 0.4
"""Distance (fraction of canvas width) at which eco-pod comfort reaches zero."""

POINTS_OF_INTEREST: tuple[tuple[float, float], ...] = (
    (0.30, 0.25),
    (0.65, 0.35),
    (0.40, 0.60),
    (0.70, 0.80),
)
"""Eco-pod positions as (x, y) fractions of the canvas."""

SAMPLE_EPSILON = 10.0
"""Offset used for central-difference gradient sampling."""

FLAT_GRADIENT_THRESHOLD = 0.0005
"""Gradient magnitude below which an agent wanders randomly."""

VELOCITY_INERTIA = 0.75
"""Share of the previous velocity kept by each steering update."""

MAX_SPEED = 2.0
"""Agent velocity magnitude cap."""

TRAIL_CAPACITY = 80
"""Maximum number of trail positions kept per agent."""

RESPAWN_MARGIN = 40.0
"""Distance beyond any playfield edge at which an agent respawns."""

MIN_COMFORT = 0.18
"""Sampled comfort below which an agent respawns."""

SPAWN_RADIUS_MIN = 10.0
"""Minimum respawn distance from the chosen eco-pod."""

SPAWN_RADIUS_MAX = 60.0
"""Maximum respawn distance from the chosen eco-pod."""

MAX_HUE_DEGREES = 210.0
"""Hue assigned to comfort 1.0 (blue); comfort 0.0 maps to 0 degrees (red)."""

BRIGHTNESS_JITTER = 8.0
"""Half-range of the per-cell brightness texture, in percent."""

FLUSH_THRESHOLD = 8_192
"""Flush recorded rows to Parquet once this in-memory row count is reached."""
