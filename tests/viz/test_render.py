"""Tests for the matplotlib viewer and renderers (Agg backend)."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import matplotlib.pyplot as plt
import numpy as np
import pytest

from comfort_map.config.types import SimulationConfig
from comfort_map.domain.field import FieldSnapshot, RainCloud
from comfort_map.domain.weather import WeatherMode
from comfort_map.simulation.engine import ComfortSimulation
from comfort_map.viz.render import (
    ComfortMapView,
    comfort_rgb,
    layer_rgb,
    render_animation,
    render_frame,
)


def _snapshot(comfort: np.ndarray) -> FieldSnapshot:
    return FieldSnapshot(
        comfort=comfort,
        width=100.0,
        height=100.0,
        frame=1,
        weather=WeatherMode.SUNNY,
        rain_cloud=RainCloud(cx=50.0, cy=50.0, radius=40.0),
        layers={"temp": comfort},
    )


@pytest.fixture
def view(small_config: SimulationConfig):
    simulation = ComfortSimulation(small_config)
    view = ComfortMapView(simulation, simulation.step())
    yield view
    plt.close(view.fig)


class TestColour:
    def test_image_is_row_major_rgb(self) -> None:
        image = comfort_rgb(_snapshot(np.full((4, 6), 0.5)))
        assert image.shape == (6, 4, 3)
        assert image.min() >= 0.0
        assert image.max() <= 1.0

    def test_low_comfort_is_red_high_is_blue(self) -> None:
        low = comfort_rgb(_snapshot(np.zeros((2, 2))))[0, 0]
        high = comfort_rgb(_snapshot(np.ones((2, 2))))[0, 0]
        assert low[0] > low[2]
        assert high[2] > high[0]

    def test_jitter_stays_in_range(self) -> None:
        simulation = ComfortSimulation(SimulationConfig(cols=8, rows=8, n_agents=0))
        image = comfort_rgb(simulation.step().snapshot, noise=simulation.noise)
        assert image.min() >= 0.0
        assert image.max() <= 1.0

    def test_layer_image(self) -> None:
        image = layer_rgb(_snapshot(np.linspace(0, 1, 16).reshape(4, 4)), "temp")
        assert image.shape == (4, 4, 3)

    def test_unknown_layer_rejected(self) -> None:
        with pytest.raises(ValueError):
            layer_rgb(_snapshot(np.zeros((2, 2))), "wind")


class TestView:
    def test_weather_keys(self, view: ComfortMapView) -> None:
        view.on_key(SimpleNamespace(key="3"))
        assert view.simulation.weather.mode is WeatherMode.HEAT
        assert "Heatwave" in view.weather_text.get_text()
        view.on_key(SimpleNamespace(key="2"))
        assert view.simulation.weather.mode is WeatherMode.RAIN

    def test_unrelated_key_ignored(self, view: ComfortMapView) -> None:
        view.on_key(SimpleNamespace(key="q"))
        view.on_key(SimpleNamespace(key=None))
        assert view.simulation.weather.mode is WeatherMode.SUNNY
        assert not view.paused

    def test_pause_stops_advance(self, view: ComfortMapView) -> None:
        view.on_key(SimpleNamespace(key=" "))
        assert view.paused
        frame = view.simulation.frame
        view.advance()
        assert view.simulation.frame == frame
        view.on_key(SimpleNamespace(key=" "))
        view.advance()
        assert view.simulation.frame == frame + 1

    def test_layer_cycling(self, view: ComfortMapView) -> None:
        view.on_key(SimpleNamespace(key="m"))
        assert view.layer == "temp"
        for _ in range(4):
            view.cycle_layer()
        assert view.layer == "comfort"

    def test_draw_moves_agents(self, view: ComfortMapView) -> None:
        state = view.simulation.step()
        view.draw(state)
        expected = np.array([[a.x, a.y] for a in state.agents])
        np.testing.assert_allclose(view.agents.get_offsets(), expected)
        assert view.state is state


class TestRenderAnimation:
    def test_writes_gif(self, small_config: SimulationConfig, tmp_path: Path) -> None:
        simulation = ComfortSimulation(small_config)
        result = render_animation(
            simulation,
            output_path=Path("out/map.gif"),
            n_frames=3,
            fps=10,
            base_dir=tmp_path,
            weather_schedule={2: WeatherMode.RAIN},
        )
        assert result.output_path == (tmp_path / "out" / "map.gif").resolve()
        assert result.output_path.stat().st_size > 0
        assert result.n_frames == simulation.frame
        assert result.n_frames >= 3
        assert result.final_weather is WeatherMode.RAIN

    def test_rejects_escaping_output(self, small_config: SimulationConfig, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="escapes base_dir"):
            render_animation(
                ComfortSimulation(small_config),
                output_path=Path("../map.gif"),
                n_frames=2,
                base_dir=tmp_path,
            )

    def test_warns_about_schedule_past_last_frame(
        self, small_config: SimulationConfig, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        result = render_animation(
            ComfortSimulation(small_config),
            output_path=tmp_path / "map.gif",
            n_frames=2,
            weather_schedule={40: WeatherMode.HEAT},
        )
        assert result.final_weather is WeatherMode.SUNNY
        assert "weather-schedule frame 40" in caplog.text

    def test_rejects_zero_frames(self, small_config: SimulationConfig, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            render_animation(ComfortSimulation(small_config), tmp_path / "x.gif", n_frames=0)


class TestRenderFrame:
    def test_writes_png(self, small_config: SimulationConfig, tmp_path: Path) -> None:
        state = render_frame(
            ComfortSimulation(small_config),
            output_path=Path("frame.png"),
            frame=5,
            base_dir=tmp_path,
            layer="rain",
        )
        assert state.frame == 5
        assert (tmp_path / "frame.png").stat().st_size > 0

    def test_rejects_unknown_layer(self, small_config: SimulationConfig, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown layer"):
            render_frame(ComfortSimulation(small_config), tmp_path / "f.png", frame=1, layer="x")

    def test_rejects_past_frame(self, small_config: SimulationConfig, tmp_path: Path) -> None:
        simulation = ComfortSimulation(small_config)
        simulation.step()
        simulation.step()
        with pytest.raises(ValueError):
            render_frame(simulation, tmp_path / "f.png", frame=2)
