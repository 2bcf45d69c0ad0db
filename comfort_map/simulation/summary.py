"""Per-frame scalar summaries of the comfort field and the agents."""

from __future__ import annotations

import numpy as np

from comfort_map.simulation.engine import FrameState


def mean_or_zero(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def summarize_frame(state: FrameState, min_comfort: float) -> dict[str, float | int | str]:
    """Compute frame-level summary values for logging and CLI reports."""
    comfort = state.snapshot.comfort
    return {
        "frame": state.frame,
        "weather": state.weather.value,
        "comfort_mean": float(np.mean(comfort)),
        "comfort_min": float(np.min(comfort)),
        "comfort_max": float(np.max(comfort)),
        "low_comfort_fraction": float(np.mean(comfort < min_comfort)),
        "rain_cx": state.snapshot.rain_cloud.cx,
        "rain_cy": state.snapshot.rain_cloud.cy,
        "agent_speed_mean": mean_or_zero([a.speed for a in state.agents]),
        "agent_comfort_mean": mean_or_zero([a.local_comfort for a in state.agents]),
        "respawn_count": len(state.respawned),
    }
