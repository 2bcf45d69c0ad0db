"""CLI entrypoint: live viewer, headless rendering, and run recording.

This module owns CLI argument parsing and mode dispatch. All domain logic
lives in the extracted modules:

- ``comfort_map.config``              – configuration dataclasses
- ``comfort_map.simulation.engine``   – ``ComfortSimulation`` frame engine
- ``comfort_map.simulation.persistence`` – ``record_run`` Parquet recorder
- ``comfort_map.viz.render``          – matplotlib viewer and renderers
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import TypeVar

from comfort_map.config.constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    GRID_COLS,
    GRID_ROWS,
    NUM_AGENTS,
    TARGET_FPS,
)
from comfort_map.config.types import SimulationConfig
from comfort_map.domain.field import LAYER_NAMES
from comfort_map.domain.weather import WeatherMode, parse_weather_mode
from comfort_map.simulation.engine import ComfortSimulation
from comfort_map.simulation.persistence import record_run
from comfort_map.viz.render import render_animation, render_frame, show_interactive
from comfort_map.viz.theme import REGISTERED_THEMES, Theme, get_theme

logger = logging.getLogger(__name__)

_V = TypeVar("_V", int, float, str)

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _parse_weather_schedule(raw: str) -> dict[int, WeatherMode]:
    """Parse ``FRAME:MODE`` pairs, e.g. ``"90:rain,180:heat"``."""
    schedule: dict[int, WeatherMode] = {}
    for part in (p.strip() for p in raw.split(",")):
        if not part:
            continue
        tokens = part.split(":")
        if len(tokens) != 2:
            raise ValueError("weather-schedule entries must use FRAME:MODE format")
        frame_raw, mode_raw = tokens
        try:
            frame = int(frame_raw)
        except ValueError as exc:
            raise ValueError("weather-schedule frames must be integers") from exc
        if frame < 1:
            raise ValueError("weather-schedule frames must be >= 1")
        if frame in schedule:
            logger.warning("weather-schedule frame %d given twice; keeping the last", frame)
        schedule[frame] = parse_weather_mode(mode_raw)
    return schedule


def _resolve(
    cli_val: object, key: str, file_cfg: dict[str, object], default: _V, kind: type[_V]
) -> _V:
    """Pick the CLI value, else the config-file value, else ``default``, as ``kind``.

    Booleans are rejected, and an ``int`` key rejects floats with a fraction.
    """
    raw = cli_val if cli_val is not None else file_cfg.get(key, default)
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str, Path)):
        raise ValueError(f"{key} must be a {kind.__name__} value, got {raw!r}")
    if kind is int and isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"{key} must be an integer value, got {raw!r}")
    try:
        return kind(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a {kind.__name__} value, got {raw!r}") from exc


def _theme_for(args: argparse.Namespace, file_cfg: dict[str, object]) -> Theme:
    return get_theme(_resolve(args.theme, "theme", file_cfg, "default", str))


def _load_file_config(parser: argparse.ArgumentParser, path: Path | None) -> dict[str, object]:
    if path is None:
        return {}
    try:
        payload = json.loads(Path(path).read_text())
    except FileNotFoundError:
        parser.error(f"Config file not found: {path}")
    except json.JSONDecodeError as exc:
        parser.error(f"Config file is not valid JSON: {path}: {exc}")
    if not isinstance(payload, dict):
        parser.error(f"Config file must contain a JSON object: {path}")
    return payload


def _build_simulation_config(
    args: argparse.Namespace, file_cfg: dict[str, object]
) -> SimulationConfig:
    """Resolve the run configuration from CLI, config file, and defaults."""
    seed = _resolve(args.seed, "seed", file_cfg, 0, int)
    has_noise_seed = args.noise_seed is not None or file_cfg.get("noise_seed") is not None
    return SimulationConfig(
        width=_resolve(args.width, "width", file_cfg, CANVAS_WIDTH, float),
        height=_resolve(args.height, "height", file_cfg, CANVAS_HEIGHT, float),
        cols=_resolve(args.cols, "cols", file_cfg, GRID_COLS, int),
        rows=_resolve(args.rows, "rows", file_cfg, GRID_ROWS, int),
        n_agents=_resolve(args.agents, "n_agents", file_cfg, NUM_AGENTS, int),
        fps=_resolve(args.fps, "fps", file_cfg, TARGET_FPS, int),
        seed=seed,
        noise_seed=(
            _resolve(args.noise_seed, "noise_seed", file_cfg, seed, int) if has_noise_seed else None
        ),
        weather=parse_weather_mode(
            _resolve(args.weather, "weather", file_cfg, WeatherMode.SUNNY.value, str)
        ),
    )


def _resolve_schedule(
    args: argparse.Namespace, file_cfg: dict[str, object]
) -> dict[int, WeatherMode]:
    raw = _resolve(getattr(args, "weather_schedule", None), "weather_schedule", file_cfg, "", str)
    return _parse_weather_schedule(raw)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def _build_common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    common.add_argument("--seed", type=int, default=None)
    common.add_argument("--noise-seed", type=int, default=None)
    common.add_argument(
        "--weather",
        type=str,
        default=None,
        help="Initial weather mode: sunny, rain, heat (or 1, 2, 3)",
    )
    common.add_argument("--agents", type=int, default=None)
    common.add_argument("--fps", type=int, default=None)
    common.add_argument("--width", type=float, default=None)
    common.add_argument("--height", type=float, default=None)
    common.add_argument("--cols", type=int, default=None)
    common.add_argument("--rows", type=int, default=None)
    common.add_argument(
        "--theme",
        type=str,
        default=None,
        choices=sorted(REGISTERED_THEMES),
        help="Theme preset name",
    )
    return common


def _build_show_parser(sub: argparse._SubParsersAction, common: argparse.ArgumentParser) -> None:
    p = sub.add_parser("show", parents=[common], help="Open the interactive viewer")
    p.set_defaults(func=_handle_show)
    p.add_argument("--rain-outline", action=argparse.BooleanOptionalAction, default=True)


def _build_render_parser(sub: argparse._SubParsersAction, common: argparse.ArgumentParser) -> None:
    p = sub.add_parser("render", parents=[common], help="Render an animation to GIF or video")
    p.set_defaults(func=_handle_render)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--frames", type=int, default=None)
    p.add_argument("--weather-schedule", type=str, default=None, metavar="FRAME:MODE,...")
    p.add_argument("--base-dir", type=Path, default=Path("."))
    p.add_argument("--rain-outline", action=argparse.BooleanOptionalAction, default=True)


def _build_snapshot_parser(
    sub: argparse._SubParsersAction, common: argparse.ArgumentParser
) -> None:
    p = sub.add_parser("snapshot", parents=[common], help="Save one frame as a still image")
    p.set_defaults(func=_handle_snapshot)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--frame", type=int, default=1)
    p.add_argument("--layer", type=str, choices=list(LAYER_NAMES), default="comfort")
    p.add_argument("--weather-schedule", type=str, default=None, metavar="FRAME:MODE,...")
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _build_record_parser(sub: argparse._SubParsersAction, common: argparse.ArgumentParser) -> None:
    p = sub.add_parser("record", parents=[common], help="Record frame and track logs to Parquet")
    p.set_defaults(func=_handle_record)
    p.add_argument("--out-dir", type=Path, default=None)
    p.add_argument("--frames", type=int, default=None)
    p.add_argument("--weather-schedule", type=str, default=None, metavar="FRAME:MODE,...")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Animated bike comfort map with gradient agents")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    common = _build_common_parser()
    sub = parser.add_subparsers(dest="command", required=True)
    _build_show_parser(sub, common)
    _build_render_parser(sub, common)
    _build_snapshot_parser(sub, common)
    _build_record_parser(sub, common)
    return parser


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_show(args: argparse.Namespace, file_cfg: dict[str, object]) -> dict[str, object]:
    config = _build_simulation_config(args, file_cfg)
    theme = _theme_for(args, file_cfg)
    simulation = ComfortSimulation(config)
    show_interactive(simulation, theme=theme, show_rain=args.rain_outline)
    return {
        "mode": "show",
        "frames": simulation.frame,
        "final_weather": simulation.weather.mode.value,
    }


def _handle_render(args: argparse.Namespace, file_cfg: dict[str, object]) -> dict[str, object]:
    config = _build_simulation_config(args, file_cfg)
    theme = _theme_for(args, file_cfg)
    n_frames = _resolve(args.frames, "frames", file_cfg, 150, int)
    schedule = _resolve_schedule(args, file_cfg)
    result = render_animation(
        ComfortSimulation(config),
        output_path=args.output,
        n_frames=n_frames,
        base_dir=args.base_dir,
        weather_schedule=schedule,
        theme=theme,
        show_rain=args.rain_outline,
    )
    return {
        "mode": "render",
        "output": str(result.output_path),
        "frames": result.n_frames,
        "total_respawns": result.total_respawns,
        "final_weather": result.final_weather.value,
    }


def _handle_snapshot(args: argparse.Namespace, file_cfg: dict[str, object]) -> dict[str, object]:
    config = _build_simulation_config(args, file_cfg)
    theme = _theme_for(args, file_cfg)
    state = render_frame(
        ComfortSimulation(config),
        output_path=args.output,
        frame=args.frame,
        base_dir=args.base_dir,
        weather_schedule=_resolve_schedule(args, file_cfg),
        layer=args.layer,
        theme=theme,
    )
    return {
        "mode": "snapshot",
        "frame": state.frame,
        "layer": args.layer,
        "weather": state.weather.value,
    }


def _handle_record(args: argparse.Namespace, file_cfg: dict[str, object]) -> dict[str, object]:
    config = _build_simulation_config(args, file_cfg)
    n_frames = _resolve(args.frames, "frames", file_cfg, 300, int)
    out_dir = Path(_resolve(args.out_dir, "out_dir", file_cfg, "data", str))
    result = record_run(
        config,
        n_frames=n_frames,
        out_dir=out_dir,
        weather_schedule=_resolve_schedule(args, file_cfg),
    )
    return {
        "mode": "record",
        "run_id": result.run_id,
        "frames": result.n_frames,
        "total_respawns": result.total_respawns,
        "comfort_mean": result.comfort_mean,
        "final_weather": result.final_weather.value,
        "frame_log": str(result.frame_log_path),
        "agent_tracks": str(result.agent_tracks_path),
    }


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint with subcommands.

    Supports ``--config path/to/config.json`` for reproducible runs. CLI
    arguments override config-file values; config-file values override
    built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    file_cfg = _load_file_config(parser, args.config)
    try:
        summary = args.func(args, file_cfg)
    except ValueError as exc:
        parser.error(str(exc))
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
