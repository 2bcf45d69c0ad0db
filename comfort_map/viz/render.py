"""Matplotlib-based rendering of the comfort map, eco-pods, and agents."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib import animation
from matplotlib.collections import LineCollection
from matplotlib.colors import hsv_to_rgb
from matplotlib.patches import Circle

from comfort_map.config.constants import BRIGHTNESS_JITTER, MAX_HUE_DEGREES
from comfort_map.domain.field import LAYER_NAMES, FieldSnapshot, comfort_to_hue
from comfort_map.domain.noise import ValueNoise
from comfort_map.domain.weather import WeatherMode
from comfort_map.io.paths import resolve_within_base as _resolve_within_base
from comfort_map.simulation.engine import ComfortSimulation, FrameState
from comfort_map.viz.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

PAUSE_KEY = " "
LAYER_KEY = "m"

_LEGEND_LINES = (
    "Yellow dots: cyclists follow the comfort gradient.",
    "White pins: eco-pod stations.",
)


# ---------------------------------------------------------------------------
# Cell-fill helpers
# ---------------------------------------------------------------------------


def _brightness_jitter(noise: ValueNoise, cols: int, rows: int, frame: int) -> np.ndarray:
    """(cols, rows) brightness offsets in percent, driven by 3D noise."""
    ii, jj = np.meshgrid(np.arange(cols), np.arange(rows), indexing="ij")
    texture = noise(ii * 0.1, jj * 0.1, np.full(ii.shape, frame * 0.01))
    return (np.asarray(texture) * 2.0 - 1.0) * BRIGHTNESS_JITTER


def comfort_rgb(
    snapshot: FieldSnapshot,
    theme: Theme = DEFAULT_THEME,
    noise: ValueNoise | None = None,
) -> np.ndarray:
    """Return an (rows, cols, 3) RGB image of the comfort heatmap.

    Hue follows ``comfort_to_hue``; with ``noise`` the brightness gets a
    small per-cell texture.
    """
    hue = np.asarray(comfort_to_hue(snapshot.comfort)) / 360.0
    value = np.full(hue.shape, theme.brightness * 100.0)
    if noise is not None:
        value = value + _brightness_jitter(noise, snapshot.cols, snapshot.rows, snapshot.frame)
    value = np.clip(value / 100.0, 0.0, 1.0)
    saturation = np.full(hue.shape, theme.saturation)
    hsv = np.stack([hue, saturation, value], axis=-1)
    return hsv_to_rgb(hsv).transpose(1, 0, 2)


def layer_rgb(snapshot: FieldSnapshot, layer: str, theme: Theme = DEFAULT_THEME) -> np.ndarray:
    """Return an (rows, cols, 3) RGB image of one named field term."""
    if layer not in snapshot.layers:
        valid = ", ".join(LAYER_NAMES)
        raise ValueError(f"Unknown layer {layer!r}; available: {valid}")
    values = np.clip(np.asarray(snapshot.layers[layer]), 0.0, 1.0)
    cmap = matplotlib.colormaps[theme.layer_cmap]
    return cmap(values.T)[..., :3]


def _trail_segments(state: FrameState) -> list[np.ndarray]:
    return [agent.trail for agent in state.agents if len(agent.trail) >= 2]


def _agent_offsets(state: FrameState) -> np.ndarray:
    if not state.agents:
        return np.empty((0, 2))
    return np.array([(agent.x, agent.y) for agent in state.agents])


def draw_points_of_interest(
    ax: plt.Axes, points: tuple[tuple[float, float], ...], theme: Theme = DEFAULT_THEME
) -> None:
    """Draw eco-pod pins: shadow, white disc, green ring, and core dot."""
    for px, py in points:
        ax.add_patch(Circle((px + 2, py + 3), 8, color="black", alpha=0.25, zorder=3))
        ax.add_patch(Circle((px, py), 11, color=theme.pod_fill_color, zorder=4))
        ax.add_patch(
            Circle((px, py), 10, fill=False, edgecolor=theme.pod_ring_color, linewidth=2, zorder=5)
        )
        ax.add_patch(Circle((px, py), 4.5, color=theme.pod_core_color, zorder=6))


def _draw_legend(ax: plt.Axes, theme: Theme) -> Any:
    """Legend panel with a red-to-blue comfort bar; returns the weather text artist."""
    panel = ax.inset_axes((0.02, 0.82, 0.48, 0.16))
    panel.set_facecolor(theme.legend_face_color)
    panel.patch.set_alpha(theme.legend_alpha)
    panel.set_xticks([])
    panel.set_yticks([])
    for spine in panel.spines.values():
        spine.set_visible(False)
    panel.set_xlim(0, 1)
    panel.set_ylim(0, 1)

    text_kw = {"color": theme.legend_text_color, "transform": panel.transAxes}
    panel.text(0.04, 0.88, "Bike Comfort Map", fontsize=10, weight="bold", va="top", **text_kw)

    bar = panel.inset_axes((0.04, 0.56, 0.6, 0.1))
    gradient = np.linspace(0.0, 1.0, 180)
    bar_hsv = np.stack(
        [
            gradient * MAX_HUE_DEGREES / 360.0,
            np.full_like(gradient, theme.saturation),
            np.full_like(gradient, theme.brightness),
        ],
        axis=-1,
    )
    bar.imshow(hsv_to_rgb(bar_hsv)[None, :, :], aspect="auto")
    bar.set_xticks([])
    bar.set_yticks([])
    panel.text(0.04, 0.50, "Uncomfortable", fontsize=7, va="top", **text_kw)
    panel.text(0.64, 0.50, "Comfortable", fontsize=7, va="top", ha="right", **text_kw)
    panel.text(0.04, 0.34, "\n".join(_LEGEND_LINES), fontsize=6, va="top", **text_kw)
    weather_text = panel.text(0.04, 0.08, "", fontsize=7, va="bottom", **text_kw)
    panel.text(
        0.96,
        0.08,
        "Keys: 1 sunny  2 rain  3 heat  m layer  space pause",
        fontsize=5,
        va="bottom",
        ha="right",
        **text_kw,
    )
    return weather_text


# ---------------------------------------------------------------------------
# Frame view
# ---------------------------------------------------------------------------


class ComfortMapView:
    """Figure with heatmap, eco-pods, rain outline, agents, trails, and legend."""

    def __init__(
        self,
        simulation: ComfortSimulation,
        initial: FrameState,
        theme: Theme = DEFAULT_THEME,
        show_rain: bool = True,
        jitter: bool = True,
    ) -> None:
        self.simulation = simulation
        self.theme = theme
        self.state = initial
        self.layer = "comfort"
        self.paused = False
        self._noise = simulation.noise if jitter else None
        self.animation: animation.FuncAnimation | None = None

        snapshot = initial.snapshot
        aspect = snapshot.height / snapshot.width
        self.fig, self.ax = plt.subplots(figsize=(6, 6 * aspect))
        self.fig.patch.set_facecolor(theme.background_color)
        self.ax.set_facecolor(theme.background_color)
        self.image = self.ax.imshow(
            self._image_for(snapshot),
            extent=(0, snapshot.width, snapshot.height, 0),
            origin="upper",
            interpolation="nearest",
            alpha=theme.heatmap_alpha,
            zorder=1,
        )
        self.ax.set_xlim(0, snapshot.width)
        self.ax.set_ylim(snapshot.height, 0)
        self.ax.set_xticks([])
        self.ax.set_yticks([])

        cloud = snapshot.rain_cloud
        self.rain_outline = Circle(
            (cloud.cx, cloud.cy),
            cloud.radius,
            fill=False,
            linestyle="--",
            linewidth=1,
            edgecolor=theme.rain_outline_color,
            alpha=0.6,
            zorder=2,
            visible=show_rain,
        )
        self.ax.add_patch(self.rain_outline)
        draw_points_of_interest(self.ax, simulation.points_of_interest, theme)

        self.trails = LineCollection(
            _trail_segments(initial),
            colors=theme.trail_color,
            linewidths=2,
            alpha=theme.trail_alpha,
            zorder=7,
        )
        self.ax.add_collection(self.trails)
        offsets = _agent_offsets(initial)
        self.halos = self.ax.scatter(
            offsets[:, 0],
            offsets[:, 1],
            s=120,
            facecolors="none",
            edgecolors=theme.agent_halo_color,
            linewidths=1,
            zorder=8,
        )
        self.agents = self.ax.scatter(
            offsets[:, 0], offsets[:, 1], s=45, color=theme.agent_color, zorder=9
        )
        self.weather_text = _draw_legend(self.ax, theme)
        self._update_weather_text()
        self.fig.tight_layout()

    def _image_for(self, snapshot: FieldSnapshot) -> np.ndarray:
        if self.layer == "comfort":
            return comfort_rgb(snapshot, self.theme, self._noise)
        return layer_rgb(snapshot, self.layer, self.theme)

    def _update_weather_text(self) -> None:
        mode = self.simulation.weather.mode
        label = self.theme.weather_labels.get(mode.value, mode.value)
        suffix = "" if self.layer == "comfort" else f"   layer: {self.layer}"
        self.weather_text.set_text(f"Weather mode: {label}{suffix}")

    @property
    def artists(self) -> tuple[Any, ...]:
        return (self.image, self.rain_outline, self.trails, self.halos, self.agents)

    def draw(self, state: FrameState) -> tuple[Any, ...]:
        """Push ``state`` into the figure artists."""
        self.state = state
        snapshot = state.snapshot
        self.image.set_data(self._image_for(snapshot))
        cloud = snapshot.rain_cloud
        self.rain_outline.set_center((cloud.cx, cloud.cy))
        self.rain_outline.set_radius(cloud.radius)
        self.trails.set_segments(_trail_segments(state))
        offsets = _agent_offsets(state)
        self.halos.set_offsets(offsets)
        self.agents.set_offsets(offsets)
        self._update_weather_text()
        return self.artists

    def advance(self) -> tuple[Any, ...]:
        """Step the simulation once (unless paused) and redraw."""
        if self.paused:
            return self.artists
        return self.draw(self.simulation.step())

    def cycle_layer(self) -> str:
        idx = LAYER_NAMES.index(self.layer)
        self.layer = LAYER_NAMES[(idx + 1) % len(LAYER_NAMES)]
        self.draw(self.state)
        return self.layer

    def on_key(self, event: Any) -> None:
        """Keyboard handler: weather selection, pause toggle, layer cycling."""
        key = getattr(event, "key", None)
        if self.simulation.handle_key(key):
            self._update_weather_text()
        elif key == PAUSE_KEY:
            self.paused = not self.paused
        elif key == LAYER_KEY:
            self.cycle_layer()
        else:
            return
        self.fig.canvas.draw_idle()


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RenderResult:
    """Summary of one rendered animation."""

    output_path: Path
    n_frames: int
    total_respawns: int
    final_weather: WeatherMode


def show_interactive(
    simulation: ComfortSimulation,
    theme: Theme = DEFAULT_THEME,
    show_rain: bool = True,
) -> ComfortMapView:
    """Open the live window; keys 1-3 switch weather while it runs."""
    view = ComfortMapView(simulation, simulation.step(), theme=theme, show_rain=show_rain)
    view.fig.canvas.mpl_connect("key_press_event", view.on_key)

    def update(_frame: int) -> tuple[Any, ...]:
        return view.advance()

    view.animation = animation.FuncAnimation(
        view.fig,
        update,
        frames=itertools.count(),
        init_func=lambda: view.artists,
        interval=max(1, int(1000 / simulation.config.fps)),
        blit=False,
        cache_frame_data=False,
    )
    plt.show()
    return view


def render_animation(
    simulation: ComfortSimulation,
    output_path: Path,
    n_frames: int,
    fps: int | None = None,
    base_dir: Path | None = None,
    weather_schedule: Mapping[int, WeatherMode] | None = None,
    theme: Theme = DEFAULT_THEME,
    show_rain: bool = True,
) -> RenderResult:
    """Render ``n_frames`` simulation frames to a GIF (Pillow) or video (ffmpeg)."""
    if n_frames < 1:
        raise ValueError("n_frames must be >= 1")
    if base_dir is None:
        output_path = Path(output_path).resolve()
    else:
        output_path = _resolve_within_base(Path(output_path), Path(base_dir).resolve())
    effective_fps = fps if fps is not None else simulation.config.fps
    if effective_fps < 1:
        raise ValueError("fps must be >= 1")
    schedule = simulation.reachable_schedule(weather_schedule, n_frames)
    total_respawns = 0

    def _step() -> FrameState:
        nonlocal total_respawns
        upcoming = simulation.frame + 1
        if upcoming in schedule:
            simulation.set_weather(schedule[upcoming])
        state = simulation.step()
        total_respawns += len(state.respawned)
        return state

    view = ComfortMapView(simulation, _step(), theme=theme, show_rain=show_rain)

    def update(frame_index: int) -> tuple[Any, ...]:
        if frame_index == 0:
            return view.draw(view.state)
        return view.draw(_step())

    anim = animation.FuncAnimation(
        view.fig,
        update,
        frames=n_frames,
        init_func=lambda: view.artists,
        interval=max(1, int(1000 / effective_fps)),
        blit=False,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = output_path.suffix.lower()
    writer: animation.PillowWriter | animation.FFMpegWriter
    if suffix == ".gif":
        writer = animation.PillowWriter(fps=effective_fps)
    else:
        writer = animation.FFMpegWriter(fps=effective_fps)
    anim.save(output_path, writer=writer)
    plt.close(view.fig)
    logger.info("rendered %d frames to %s", simulation.frame, output_path)
    return RenderResult(
        output_path=output_path,
        n_frames=simulation.frame,
        total_respawns=total_respawns,
        final_weather=simulation.weather.mode,
    )


def render_frame(
    simulation: ComfortSimulation,
    output_path: Path,
    frame: int,
    base_dir: Path | None = None,
    weather_schedule: Mapping[int, WeatherMode] | None = None,
    layer: str = "comfort",
    theme: Theme = DEFAULT_THEME,
) -> FrameState:
    """Advance to ``frame`` and save that single frame as a still image."""
    if frame < 1:
        raise ValueError("frame must be >= 1")
    if layer not in LAYER_NAMES:
        valid = ", ".join(LAYER_NAMES)
        raise ValueError(f"Unknown layer {layer!r}; available: {valid}")
    if base_dir is None:
        output_path = Path(output_path).resolve()
    else:
        output_path = _resolve_within_base(Path(output_path), Path(base_dir).resolve())
    remaining = frame - simulation.frame
    if remaining < 1:
        raise ValueError("frame must be later than the simulation's current frame")
    *_, state = simulation.run(remaining, weather_schedule=weather_schedule)
    view = ComfortMapView(simulation, state, theme=theme)
    if layer != view.layer:
        view.layer = layer
        view.draw(state)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    view.fig.savefig(output_path, facecolor=view.fig.get_facecolor())
    plt.close(view.fig)
    return state
