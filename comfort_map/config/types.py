"""Configuration dataclasses for the field synthesizer, agents, and runs.

All frozen dataclasses that parameterise a simulation live here. Each one
validates itself on construction and raises ``ValueError`` on bad values.
"""

from __future__ import annotations

from dataclasses import dataclass

from comfort_map.config.constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    ECO_RADIUS_FRACTION,
    FLAT_GRADIENT_THRESHOLD,
    GRID_COLS,
    GRID_ROWS,
    MAX_SPEED,
    MIN_COMFORT,
    NOISE_FALLOFF,
    NOISE_OCTAVES,
    NOISE_SCALE,
    NUM_AGENTS,
    POINTS_OF_INTEREST,
    RAIN_RADIUS_FRACTION,
    RESPAWN_MARGIN,
    SAMPLE_EPSILON,
    SPAWN_RADIUS_MAX,
    SPAWN_RADIUS_MIN,
    TARGET_FPS,
    TRAIL_CAPACITY,
    VELOCITY_INERTIA,
)
from comfort_map.domain.weather import WeatherMode

__all__ = [
    "AgentConfig",
    "FieldConfig",
    "SimulationConfig",
]

# ---------------------------------------------------------------------------
# Component configs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldConfig:
    """Canvas, grid resolution, and field-synthesis coefficients."""

    width: float = CANVAS_WIDTH
    height: float = CANVAS_HEIGHT
    cols: int = GRID_COLS
    rows: int = GRID_ROWS
    noise_scale: float = NOISE_SCALE
    noise_octaves: int = NOISE_OCTAVES
    noise_falloff: float = NOISE_FALLOFF
    rain_drift_x: float = 0.3
    """Horizontal drift amplitude of the rain cloud (fraction of width)."""
    rain_drift_y: float = 0.2
    """Vertical drift amplitude of the rain cloud (fraction of height)."""
    rain_freq_x: float = 0.007
    """Angular frequency (radians per frame) of the horizontal drift."""
    rain_freq_y: float = 0.004
    """Angular frequency (radians per frame) of the vertical drift."""
    rain_radius_fraction: float = RAIN_RADIUS_FRACTION
    eco_radius_fraction: float = ECO_RADIUS_FRACTION
    points_of_interest: tuple[tuple[float, float], ...] = POINTS_OF_INTEREST
    """Eco-pod positions as (x, y) fractions of the canvas."""

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("canvas dimensions must be > 0")
        if self.cols < 1 or self.rows < 1:
            raise ValueError("grid dimensions must be >= 1")
        if self.noise_octaves < 1:
            raise ValueError("noise_octaves must be >= 1")
        if not 0.0 < self.noise_falloff <= 1.0:
            raise ValueError("noise_falloff must be in (0.0, 1.0]")
        if self.rain_radius_fraction <= 0:
            raise ValueError("rain_radius_fraction must be > 0")
        if self.eco_radius_fraction <= 0:
            raise ValueError("eco_radius_fraction must be > 0")
        for fx, fy in self.points_of_interest:
            if not (0.0 <= fx <= 1.0 and 0.0 <= fy <= 1.0):
                raise ValueError("points_of_interest fractions must be in [0.0, 1.0]")

    @property
    def cell_width(self) -> float:
        return self.width / self.cols

    @property
    def cell_height(self) -> float:
        return self.height / self.rows

    def poi_positions(self) -> tuple[tuple[float, float], ...]:
        """Absolute eco-pod positions on the canvas."""
        return tuple((fx * self.width, fy * self.height) for fx, fy in self.points_of_interest)


@dataclass(frozen=True)
class AgentConfig:
    """Steering, respawn, and trail parameters shared by all agents."""

    count: int = NUM_AGENTS
    sample_epsilon: float = SAMPLE_EPSILON
    flat_threshold: float = FLAT_GRADIENT_THRESHOLD
    inertia: float = VELOCITY_INERTIA
    """Share of the old velocity kept; the gradient direction gets ``1 - inertia``."""
    max_speed: float = MAX_SPEED
    trail_capacity: int = TRAIL_CAPACITY
    respawn_margin: float = RESPAWN_MARGIN
    min_comfort: float = MIN_COMFORT
    spawn_radius_min: float = SPAWN_RADIUS_MIN
    spawn_radius_max: float = SPAWN_RADIUS_MAX
    initial_speed_range: float = 1.0
    """Respawn velocity components are drawn from ``[-range, range]``."""
    wander_range: float = 0.5
    """Flat-field wander components are drawn from ``[-range, range]``."""

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("count must be >= 0")
        if self.sample_epsilon <= 0:
            raise ValueError("sample_epsilon must be > 0")
        if self.flat_threshold < 0:
            raise ValueError("flat_threshold must be >= 0")
        if not 0.0 <= self.inertia <= 1.0:
            raise ValueError("inertia must be in [0.0, 1.0]")
        if self.max_speed <= 0:
            raise ValueError("max_speed must be > 0")
        if self.trail_capacity < 1:
            raise ValueError("trail_capacity must be >= 1")
        if self.respawn_margin < 0:
            raise ValueError("respawn_margin must be >= 0")
        if not 0.0 <= self.min_comfort <= 1.0:
            raise ValueError("min_comfort must be in [0.0, 1.0]")
        if self.spawn_radius_min < 0 or self.spawn_radius_max < self.spawn_radius_min:
            raise ValueError("spawn radii must satisfy 0 <= spawn_radius_min <= spawn_radius_max")
        if self.initial_speed_range < 0:
            raise ValueError("initial_speed_range must be >= 0")
        if self.wander_range <= 0:
            raise ValueError("wander_range must be > 0")


# ---------------------------------------------------------------------------
# Run config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationConfig:
    """Everything needed to build a reproducible simulation run."""

    width: float = CANVAS_WIDTH
    height: float = CANVAS_HEIGHT
    cols: int = GRID_COLS
    rows: int = GRID_ROWS
    n_agents: int = NUM_AGENTS
    fps: int = TARGET_FPS
    seed: int = 0
    noise_seed: int | None = None
    """Seed for the structural noise; defaults to ``seed`` when unset."""
    weather: WeatherMode = WeatherMode.SUNNY
    field: FieldConfig | None = None
    agents: AgentConfig | None = None

    def __post_init__(self) -> None:
        if self.fps < 1:
            raise ValueError("fps must be >= 1")
        FieldConfig(width=self.width, height=self.height, cols=self.cols, rows=self.rows)
        AgentConfig(count=self.n_agents)
        if self.field is not None and (
            (self.field.width, self.field.height, self.field.cols, self.field.rows)
            != (self.width, self.height, self.cols, self.rows)
        ):
            raise ValueError(
                "field conflicts with SimulationConfig canvas/grid fields; "
                "use from_components or keep fields consistent"
            )
        if self.agents is not None and self.agents.count != self.n_agents:
            raise ValueError("agents.count conflicts with n_agents")

    @classmethod
    def from_components(
        cls,
        field: FieldConfig | None = None,
        agents: AgentConfig | None = None,
        fps: int = TARGET_FPS,
        seed: int = 0,
        noise_seed: int | None = None,
        weather: WeatherMode = WeatherMode.SUNNY,
    ) -> "SimulationConfig":
        """Compose SimulationConfig from reusable sub-config components."""
        field = field or FieldConfig()
        agents = agents or AgentConfig()
        return cls(
            width=field.width,
            height=field.height,
            cols=field.cols,
            rows=field.rows,
            n_agents=agents.count,
            fps=fps,
            seed=seed,
            noise_seed=noise_seed,
            weather=weather,
            field=field,
            agents=agents,
        )

    def to_components(self) -> tuple[FieldConfig, AgentConfig]:
        """Decompose SimulationConfig into its field and agent configs."""
        field = self.field or FieldConfig(
            width=self.width, height=self.height, cols=self.cols, rows=self.rows
        )
        agents = self.agents or AgentConfig(count=self.n_agents)
        return field, agents

    @property
    def resolved_noise_seed(self) -> int:
        return self.seed if self.noise_seed is None else self.noise_seed
