"""Path construction helpers for recorded runs and rendered outputs."""

from __future__ import annotations

from pathlib import Path


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve an output *path* relative to *base_dir*, refusing anything outside it.

    Absolute paths are accepted only when they already point inside *base_dir*.
    """
    base = base_dir.resolve()
    resolved = (base / path).resolve()
    if not resolved.is_relative_to(base):
        raise ValueError(f"Path escapes base_dir: {path}")
    return resolved


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def frame_log_path(out_dir: Path) -> Path:
    """Return path to the per-frame summary Parquet file."""
    return logs_dir(out_dir) / "frame_log.parquet"


def agent_tracks_path(out_dir: Path) -> Path:
    """Return path to the per-agent track Parquet file."""
    return logs_dir(out_dir) / "agent_tracks.parquet"


def run_metadata_path(out_dir: Path) -> Path:
    """Return path to the run metadata JSON file."""
    return logs_dir(out_dir) / "run.json"
