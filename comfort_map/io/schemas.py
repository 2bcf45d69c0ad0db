"""Parquet schema definitions for recorded comfort-map runs.

Both Arrow schemas written by the recorder are centralised here so that the
writer and any reader work against the same column contracts.
"""

from __future__ import annotations

import pyarrow as pa

RECORD_SCHEMA_VERSION = 1

FRAME_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("frame", pa.int64()),
        ("weather", pa.string()),
        ("comfort_mean", pa.float64()),
        ("comfort_min", pa.float64()),
        ("comfort_max", pa.float64()),
        ("low_comfort_fraction", pa.float64()),
        ("rain_cx", pa.float64()),
        ("rain_cy", pa.float64()),
        ("agent_speed_mean", pa.float64()),
        ("agent_comfort_mean", pa.float64()),
        ("respawn_count", pa.int64()),
    ]
)

TRACK_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("frame", pa.int64()),
        ("agent_id", pa.int64()),
        ("x", pa.float64()),
        ("y", pa.float64()),
        ("vx", pa.float64()),
        ("vy", pa.float64()),
        ("local_comfort", pa.float64()),
        ("respawned", pa.bool_()),
    ]
)

FRAME_SUMMARY_COLUMNS: list[str] = [name for name in FRAME_SCHEMA.names if name != "run_id"]
