"""Frame-driven simulation engine: one field synthesis, then every agent."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from random import Random

from comfort_map.config.types import SimulationConfig
from comfort_map.domain.agent import AgentView, GradientAgent
from comfort_map.domain.field import FieldSnapshot, FieldSynthesizer
from comfort_map.domain.noise import ValueNoise
from comfort_map.domain.weather import WeatherMode, WeatherState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FrameState:
    """Everything the rendering boundary needs for one frame."""

    frame: int
    snapshot: FieldSnapshot
    agents: tuple[AgentView, ...]
    respawned: tuple[int, ...]
    """IDs of agents that respawned during this frame."""

    @property
    def weather(self) -> WeatherMode:
        return self.snapshot.weather


class ComfortSimulation:
    """Owns the field synthesizer, the agents, the weather, and the clock."""

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or SimulationConfig()
        self.field_config, self.agent_config = self.config.to_components()
        self.noise = ValueNoise(
            seed=self.config.resolved_noise_seed,
            octaves=self.field_config.noise_octaves,
            falloff=self.field_config.noise_falloff,
        )
        self.points_of_interest = self.field_config.poi_positions()
        self.synthesizer = FieldSynthesizer(
            self.field_config, self.noise, points_of_interest=self.points_of_interest
        )
        self.weather = WeatherState(self.config.weather)
        self.rng = Random(self.config.seed)
        self.frame = 0
        self.agents: list[GradientAgent] = []
        if self.agent_config.count > 0:
            if not self.points_of_interest:
                raise ValueError("agents require at least one point of interest")
            self.agents = [
                GradientAgent(agent_id, self.agent_config, self.points_of_interest, self.rng)
                for agent_id in range(self.agent_config.count)
            ]
        self.last_snapshot: FieldSnapshot | None = None

    def _log_weather_change(self, previous: WeatherMode) -> None:
        current = self.weather.mode
        if current != previous:
            logger.info("weather %s -> %s at frame %d", previous.value, current.value, self.frame)

    def set_weather(self, mode: WeatherMode) -> None:
        previous = self.weather.mode
        self.weather.set(mode)
        self._log_weather_change(previous)

    def handle_key(self, key: str | None) -> bool:
        """Forward a key press to the weather holder; True when it selected a mode."""
        previous = self.weather.mode
        if not self.weather.handle_key(key):
            return False
        self._log_weather_change(previous)
        return True

    def reachable_schedule(
        self, weather_schedule: Mapping[int, WeatherMode] | None, n_frames: int
    ) -> dict[int, WeatherMode]:
        """Keep schedule entries inside the next ``n_frames`` frames; warn about the rest."""
        first, last = self.frame + 1, self.frame + n_frames
        reachable: dict[int, WeatherMode] = {}
        for frame, mode in sorted((weather_schedule or {}).items()):
            if first <= frame <= last:
                reachable[frame] = mode
            else:
                logger.warning(
                    "weather-schedule frame %d is outside frames %d-%d; skipped",
                    frame,
                    first,
                    last,
                )
        return reachable

    def step(self) -> FrameState:
        """Advance one frame and return its immutable state."""
        self.frame += 1
        snapshot = self.synthesizer.synthesize(self.frame, self.weather.mode)
        respawned: list[int] = []
        for agent in self.agents:
            if agent.update(snapshot, self.rng):
                respawned.append(agent.agent_id)
        self.last_snapshot = snapshot
        return FrameState(
            frame=self.frame,
            snapshot=snapshot,
            agents=tuple(agent.view() for agent in self.agents),
            respawned=tuple(respawned),
        )

    def run(
        self,
        n_frames: int,
        weather_schedule: Mapping[int, WeatherMode] | None = None,
    ) -> Iterator[FrameState]:
        """Yield ``n_frames`` successive frames.

        ``weather_schedule`` maps a frame number to the mode applied just
        before that frame is computed.
        """
        if n_frames < 0:
            raise ValueError("n_frames must be >= 0")
        schedule = self.reachable_schedule(weather_schedule, n_frames)
        for _ in range(n_frames):
            upcoming = self.frame + 1
            if upcoming in schedule:
                self.set_weather(schedule[upcoming])
            yield self.step()
