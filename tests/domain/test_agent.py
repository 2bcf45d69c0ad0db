"""Tests for gradient-ascent agents."""

from __future__ import annotations

import math
from random import Random

import numpy as np
import pytest

from comfort_map.config.types import AgentConfig
from comfort_map.domain.agent import GradientAgent, clamp_magnitude, normalize
from comfort_map.domain.field import FieldSnapshot, RainCloud
from comfort_map.domain.weather import WeatherMode

POI = ((200.0, 200.0),)


def _snapshot(comfort: np.ndarray, size: float = 400.0) -> FieldSnapshot:
    return FieldSnapshot(
        comfort=comfort,
        width=size,
        height=size,
        frame=1,
        weather=WeatherMode.SUNNY,
        rain_cloud=RainCloud(cx=0.0, cy=0.0, radius=1.0),
    )


def _agent(config: AgentConfig | None = None, seed: int = 0) -> GradientAgent:
    return GradientAgent(0, config or AgentConfig(), POI, Random(seed))


def _place(agent: GradientAgent, x: float, y: float, vx: float = 0.0, vy: float = 0.0) -> None:
    agent.x, agent.y, agent.vx, agent.vy = x, y, vx, vy


class TestHelpers:
    def test_clamp_leaves_short_vectors(self) -> None:
        assert clamp_magnitude(1.0, 1.0, 2.0) == (1.0, 1.0)

    def test_clamp_scales_long_vectors(self) -> None:
        vx, vy = clamp_magnitude(3.0, 4.0, 2.0)
        assert math.isclose(math.hypot(vx, vy), 2.0)
        assert math.isclose(vy / vx, 4.0 / 3.0)

    def test_normalize(self) -> None:
        assert normalize(0.0, 0.0) == (0.0, 0.0)
        vx, vy = normalize(0.0, -5.0)
        assert (vx, vy) == (0.0, -1.0)


class TestRespawn:
    def test_requires_points_of_interest(self) -> None:
        with pytest.raises(ValueError):
            GradientAgent(0, AgentConfig(), (), Random(0))

    @pytest.mark.parametrize("seed", range(20))
    def test_spawns_within_radius_of_pod(self, seed: int) -> None:
        agent = _agent(seed=seed)
        distance = math.hypot(agent.x - 200.0, agent.y - 200.0)
        assert 10.0 - 1e-9 <= distance <= 60.0 + 1e-9
        assert abs(agent.vx) <= 1.0 and abs(agent.vy) <= 1.0
        assert len(agent.trail) == 0

    def test_respawn_clears_trail(self) -> None:
        agent = _agent()
        agent.trail.append(1.0, 2.0)
        agent.respawn(Random(3))
        assert len(agent.trail) == 0

    def test_spawns_near_one_of_several_pods(self) -> None:
        pods = ((50.0, 50.0), (350.0, 350.0))
        rng = Random(1)
        for agent_id in range(30):
            agent = GradientAgent(agent_id, AgentConfig(), pods, rng)
            nearest = min(math.hypot(agent.x - px, agent.y - py) for px, py in pods)
            assert nearest <= 60.0 + 1e-9


class TestShouldRespawn:
    def test_margin_boundary_respawns(self) -> None:
        agent = _agent()
        _place(agent, 400.0 + 40.0, 100.0)
        agent.local_comfort = 1.0
        assert agent.should_respawn(400.0, 400.0)

    def test_inside_margin_does_not_respawn(self) -> None:
        agent = _agent()
        _place(agent, 439.0, -39.0)
        agent.local_comfort = 1.0
        assert not agent.should_respawn(400.0, 400.0)

    def test_low_comfort_respawns(self) -> None:
        agent = _agent()
        _place(agent, 200.0, 200.0)
        agent.local_comfort = 0.1
        assert agent.should_respawn(400.0, 400.0)

    def test_act_respawns_at_margin(self) -> None:
        snapshot = _snapshot(np.full((40, 40), 0.5))
        agent = _agent()
        _place(agent, 440.0, 100.0)
        agent.local_comfort = 1.0
        assert agent.act(snapshot, Random(0)) is True
        assert agent.respawn_count == 1
        assert len(agent.trail) == 0
        assert math.hypot(agent.x - 200.0, agent.y - 200.0) <= 60.0 + 1e-9

    def test_update_respawns_in_low_comfort(self) -> None:
        snapshot = _snapshot(np.full((40, 40), 0.05))
        agent = _agent()
        assert agent.update(snapshot, Random(0)) is True
        assert agent.respawn_count == 1


class TestDecide:
    def test_flat_field_substitutes_wander_direction(self) -> None:
        snapshot = _snapshot(np.full((40, 40), 0.5))
        agent = _agent()
        _place(agent, 200.0, 200.0, vx=2.0, vy=0.0)
        agent.perceive(snapshot)
        assert agent.gradient == (0.0, 0.0)
        agent.decide(Random(5))
        # Inertia keeps 0.75 of the old velocity; the rest is a unit wander vector.
        assert math.isclose(math.hypot(agent.vx - 1.5, agent.vy), 0.25)
        assert math.hypot(agent.vx, agent.vy) <= 2.0 + 1e-9

    def test_climbs_gradient(self) -> None:
        cols = 40
        ramp = 0.2 + 0.8 * np.arange(cols, dtype=float) / (cols - 1)
        snapshot = _snapshot(np.repeat(ramp[:, None], cols, axis=1))
        agent = _agent()
        _place(agent, 200.0, 200.0)
        assert agent.update(snapshot, Random(0)) is False
        assert agent.vx > 0.0
        assert math.isclose(agent.vy, 0.0, abs_tol=1e-12)
        assert list(agent.trail)[-1] == (agent.x, agent.y)

    def test_speed_never_exceeds_cap(self) -> None:
        rng = np.random.default_rng(7)
        agent = _agent()
        py_rng = Random(7)
        for _ in range(300):
            snapshot = _snapshot(rng.uniform(0.2, 1.0, size=(40, 40)))
            agent.update(snapshot, py_rng)
            assert math.hypot(agent.vx, agent.vy) <= 2.0 + 1e-9
            assert len(agent.trail) <= 80


def test_view_is_snapshot_of_state() -> None:
    agent = _agent()
    agent.trail.append(1.0, 1.0)
    view = agent.view()
    agent.trail.append(2.0, 2.0)
    assert view.agent_id == 0
    assert view.trail.shape == (1, 2)
    assert math.isclose(view.speed, math.hypot(agent.vx, agent.vy))
