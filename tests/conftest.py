from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from comfort_map.config.types import SimulationConfig  # noqa: E402


@pytest.fixture
def small_config() -> SimulationConfig:
    """Small canvas and grid so full frames stay cheap in tests."""
    return SimulationConfig(width=120, height=180, cols=12, rows=18, n_agents=3, seed=1)
