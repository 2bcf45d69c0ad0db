"""Gradient-following agents ("cyclists") that climb the comfort field.

Each agent samples the current ``FieldSnapshot`` at its position and four
offsets, estimates the gradient by central differences, blends it into its
velocity, moves, and respawns near a random eco-pod when it strays beyond the
playfield margin or sits in low comfort. Agents never read each other's state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from random import Random
from typing import TYPE_CHECKING

import numpy as np

from comfort_map.domain.trail import Trail

if TYPE_CHECKING:
    from comfort_map.config.types import AgentConfig
    from comfort_map.domain.field import FieldSnapshot


@dataclass(frozen=True, eq=False)
class AgentView:
    """Immutable per-frame copy of one agent for renderers and recorders."""

    agent_id: int
    x: float
    y: float
    vx: float
    vy: float
    local_comfort: float
    trail: np.ndarray

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)


def clamp_magnitude(vx: float, vy: float, cap: float) -> tuple[float, float]:
    """Rescale ``(vx, vy)`` to length ``cap`` when it is longer, keeping direction."""
    mag = math.hypot(vx, vy)
    if mag > cap:
        scale = cap / mag
        return vx * scale, vy * scale
    return vx, vy


def normalize(vx: float, vy: float) -> tuple[float, float]:
    """Unit vector along ``(vx, vy)``; the zero vector stays zero."""
    mag = math.hypot(vx, vy)
    if mag == 0.0:
        return 0.0, 0.0
    return vx / mag, vy / mag


class GradientAgent:
    """One agent with position, bounded velocity, and a ring-buffer trail."""

    def __init__(
        self,
        agent_id: int,
        config: AgentConfig,
        points_of_interest: tuple[tuple[float, float], ...],
        rng: Random,
    ) -> None:
        if not points_of_interest:
            raise ValueError("points_of_interest must not be empty")
        self.agent_id = agent_id
        self.config = config
        self.points_of_interest = tuple(points_of_interest)
        self.trail = Trail(config.trail_capacity)
        self.x = 0.0
        self.y = 0.0
        self.vx = 0.0
        self.vy = 0.0
        self.local_comfort = 0.0
        self.gradient = (0.0, 0.0)
        self.respawn_count = 0
        self.respawn(rng)

    # ------------------------------------------------------------------
    # Respawn
    # ------------------------------------------------------------------

    def respawn(self, rng: Random) -> None:
        """Reset near a random eco-pod with a fresh velocity and empty trail."""
        cfg = self.config
        px, py = rng.choice(self.points_of_interest)
        angle = rng.uniform(0.0, 2.0 * math.pi)
        radius = rng.uniform(cfg.spawn_radius_min, cfg.spawn_radius_max)
        self.x = px + math.cos(angle) * radius
        self.y = py + math.sin(angle) * radius
        self.vx = rng.uniform(-cfg.initial_speed_range, cfg.initial_speed_range)
        self.vy = rng.uniform(-cfg.initial_speed_range, cfg.initial_speed_range)
        self.trail.clear()

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------

    def perceive(self, snapshot: FieldSnapshot) -> None:
        """Sample comfort around the agent and estimate the local gradient."""
        eps = self.config.sample_epsilon
        x, y = self.x, self.y
        center = snapshot.comfort_at(x, y)
        right = snapshot.comfort_at(x + eps, y)
        left = snapshot.comfort_at(x - eps, y)
        up = snapshot.comfort_at(x, y - eps)
        down = snapshot.comfort_at(x, y + eps)
        self.gradient = ((right - left) / (2 * eps), (down - up) / (2 * eps))
        self.local_comfort = center

    def decide(self, rng: Random) -> None:
        """Steer the velocity toward the gradient, wandering on a flat field."""
        cfg = self.config
        gx, gy = self.gradient
        if math.hypot(gx, gy) < cfg.flat_threshold:
            gx = rng.uniform(-cfg.wander_range, cfg.wander_range)
            gy = rng.uniform(-cfg.wander_range, cfg.wander_range)
        gx, gy = normalize(gx, gy)
        steer = 1.0 - cfg.inertia
        vx = cfg.inertia * self.vx + steer * gx
        vy = cfg.inertia * self.vy + steer * gy
        self.vx, self.vy = clamp_magnitude(vx, vy, cfg.max_speed)

    def should_respawn(self, width: float, height: float) -> bool:
        margin = self.config.respawn_margin
        outside = (
            self.x <= -margin
            or self.x >= width + margin
            or self.y <= -margin
            or self.y >= height + margin
        )
        return outside or self.local_comfort < self.config.min_comfort

    def act(self, snapshot: FieldSnapshot, rng: Random) -> bool:
        """Move, extend the trail, and respawn if needed; True when respawned."""
        self.x += self.vx
        self.y += self.vy
        self.trail.append(self.x, self.y)
        if self.should_respawn(snapshot.width, snapshot.height):
            self.respawn(rng)
            self.respawn_count += 1
            return True
        return False

    def update(self, snapshot: FieldSnapshot, rng: Random) -> bool:
        """Run one full perceive/decide/act cycle against ``snapshot``."""
        self.perceive(snapshot)
        self.decide(rng)
        return self.act(snapshot, rng)

    def view(self) -> AgentView:
        return AgentView(
            agent_id=self.agent_id,
            x=self.x,
            y=self.y,
            vx=self.vx,
            vy=self.vy,
            local_comfort=self.local_comfort,
            trail=self.trail.to_array(),
        )
