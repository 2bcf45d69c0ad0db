"""Configuration layer: constants and typed config dataclasses."""

from comfort_map.config.constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    GRID_COLS,
    GRID_ROWS,
    MAX_SPEED,
    MIN_COMFORT,
    NUM_AGENTS,
    POINTS_OF_INTEREST,
    RESPAWN_MARGIN,
    TARGET_FPS,
    TRAIL_CAPACITY,
)
from comfort_map.config.types import (  # noqa: I001
    AgentConfig,
    FieldConfig,
    SimulationConfig,
)

__all__ = [
    "AgentConfig",
    "CANVAS_HEIGHT",
    "CANVAS_WIDTH",
    "FieldConfig",
    "GRID_COLS",
    "GRID_ROWS",
    "MAX_SPEED",
    "MIN_COMFORT",
    "NUM_AGENTS",
    "POINTS_OF_INTEREST",
    "RESPAWN_MARGIN",
    "SimulationConfig",
    "TARGET_FPS",
    "TRAIL_CAPACITY",
]
