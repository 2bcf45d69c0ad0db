"""Headless run recording: per-frame summaries and agent tracks to Parquet."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from comfort_map.config.constants import FLUSH_THRESHOLD
from comfort_map.config.types import SimulationConfig
from comfort_map.domain.weather import WeatherMode
from comfort_map.io.paths import agent_tracks_path, frame_log_path, logs_dir, run_metadata_path
from comfort_map.io.schemas import (
    FRAME_SCHEMA,
    FRAME_SUMMARY_COLUMNS,
    RECORD_SCHEMA_VERSION,
    TRACK_SCHEMA,
)
from comfort_map.simulation.engine import ComfortSimulation
from comfort_map.simulation.summary import summarize_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordResult:
    """Outcome of one recorded run."""

    run_id: str
    n_frames: int
    total_respawns: int
    final_weather: WeatherMode
    comfort_mean: float
    frame_log_path: Path
    agent_tracks_path: Path


def deterministic_run_id(config: SimulationConfig, n_frames: int) -> str:
    """Build a run ID stable across runs for identical seeds and lengths."""
    return f"seed{config.seed}_n{config.resolved_noise_seed}_f{n_frames}"


def flush_columns(
    columns: dict[str, list],
    path: Path,
    schema: pa.Schema,
    writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated rows to Parquet and clear the in-memory buffers."""
    if not columns["run_id"]:
        return writer
    table = pa.Table.from_pydict(columns, schema=schema)
    if writer is None:
        writer = pq.ParquetWriter(path, schema)
    writer.write_table(table)
    for values in columns.values():
        values.clear()
    return writer


def _finalize(writer: pq.ParquetWriter | None, path: Path, schema: pa.Schema) -> None:
    if writer is None:
        pq.write_table(schema.empty_table(), path)
    else:
        writer.close()


def record_run(
    config: SimulationConfig,
    n_frames: int,
    out_dir: Path,
    weather_schedule: Mapping[int, WeatherMode] | None = None,
    flush_threshold: int = FLUSH_THRESHOLD,
) -> RecordResult:
    """Run ``n_frames`` headless frames and persist summaries and tracks."""
    if n_frames < 0:
        raise ValueError("n_frames must be >= 0")
    if flush_threshold < 1:
        raise ValueError("flush_threshold must be >= 1")

    out_dir = Path(out_dir)
    logs_dir(out_dir).mkdir(parents=True, exist_ok=True)
    frames_path = frame_log_path(out_dir)
    tracks_path = agent_tracks_path(out_dir)
    run_id = deterministic_run_id(config, n_frames)

    simulation = ComfortSimulation(config)
    schedule = simulation.reachable_schedule(weather_schedule, n_frames)
    _, agent_config = config.to_components()
    frame_columns: dict[str, list] = {name: [] for name in FRAME_SCHEMA.names}
    track_columns: dict[str, list] = {name: [] for name in TRACK_SCHEMA.names}
    frame_writer: pq.ParquetWriter | None = None
    track_writer: pq.ParquetWriter | None = None
    total_respawns = 0
    comfort_sum = 0.0

    try:
        for state in simulation.run(n_frames, weather_schedule=schedule):
            summary = summarize_frame(state, min_comfort=agent_config.min_comfort)
            frame_columns["run_id"].append(run_id)
            for key in FRAME_SUMMARY_COLUMNS:
                frame_columns[key].append(summary[key])
            total_respawns += len(state.respawned)
            comfort_sum += float(summary["comfort_mean"])

            respawned = set(state.respawned)
            for agent in state.agents:
                track_columns["run_id"].append(run_id)
                track_columns["frame"].append(state.frame)
                track_columns["agent_id"].append(agent.agent_id)
                track_columns["x"].append(agent.x)
                track_columns["y"].append(agent.y)
                track_columns["vx"].append(agent.vx)
                track_columns["vy"].append(agent.vy)
                track_columns["local_comfort"].append(agent.local_comfort)
                track_columns["respawned"].append(agent.agent_id in respawned)

            if len(track_columns["run_id"]) >= flush_threshold:
                track_writer = flush_columns(track_columns, tracks_path, TRACK_SCHEMA, track_writer)
            if len(frame_columns["run_id"]) >= flush_threshold:
                frame_writer = flush_columns(frame_columns, frames_path, FRAME_SCHEMA, frame_writer)

        frame_writer = flush_columns(frame_columns, frames_path, FRAME_SCHEMA, frame_writer)
        track_writer = flush_columns(track_columns, tracks_path, TRACK_SCHEMA, track_writer)
    except BaseException:
        for writer in (frame_writer, track_writer):
            if writer is not None:
                writer.close()
        raise
    _finalize(frame_writer, frames_path, FRAME_SCHEMA)
    _finalize(track_writer, tracks_path, TRACK_SCHEMA)

    metadata = {
        "schema_version": RECORD_SCHEMA_VERSION,
        "run_id": run_id,
        "seed": config.seed,
        "noise_seed": config.resolved_noise_seed,
        "n_frames": n_frames,
        "n_agents": len(simulation.agents),
        "width": config.width,
        "height": config.height,
        "cols": config.cols,
        "rows": config.rows,
        "initial_weather": config.weather.value,
        "weather_schedule": {str(frame): mode.value for frame, mode in schedule.items()},
        "points_of_interest": [list(p) for p in simulation.points_of_interest],
    }
    run_metadata_path(out_dir).write_text(json.dumps(metadata, ensure_ascii=False, indent=2))
    logger.info("recorded %d frames to %s", n_frames, logs_dir(out_dir))

    return RecordResult(
        run_id=run_id,
        n_frames=n_frames,
        total_respawns=total_respawns,
        final_weather=simulation.weather.mode,
        comfort_mean=comfort_sum / n_frames if n_frames else 0.0,
        frame_log_path=frames_path,
        agent_tracks_path=tracks_path,
    )
