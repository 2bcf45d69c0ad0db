"""Simulation layer: frame engine, frame summaries, and Parquet recording."""

from comfort_map.simulation.engine import ComfortSimulation, FrameState
from comfort_map.simulation.persistence import RecordResult, flush_columns, record_run
from comfort_map.simulation.summary import summarize_frame

__all__ = [
    "ComfortSimulation",
    "FrameState",
    "RecordResult",
    "flush_columns",
    "record_run",
    "summarize_frame",
]
