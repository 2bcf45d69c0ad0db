"""I/O layer: Parquet schemas and output path helpers."""

from comfort_map.io.paths import (
    agent_tracks_path,
    frame_log_path,
    logs_dir,
    resolve_within_base,
    run_metadata_path,
)
from comfort_map.io.schemas import (
    FRAME_SCHEMA,
    FRAME_SUMMARY_COLUMNS,
    RECORD_SCHEMA_VERSION,
    TRACK_SCHEMA,
)

__all__ = [
    "FRAME_SCHEMA",
    "FRAME_SUMMARY_COLUMNS",
    "RECORD_SCHEMA_VERSION",
    "TRACK_SCHEMA",
    "agent_tracks_path",
    "frame_log_path",
    "logs_dir",
    "resolve_within_base",
    "run_metadata_path",
]
