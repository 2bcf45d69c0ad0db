"""Tests for the comfort-map command line."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from comfort_map.cli import _parse_weather_schedule, _resolve, main
from comfort_map.config.types import SimulationConfig
from comfort_map.domain.field import FieldSnapshot
from comfort_map.domain.weather import WeatherMode
from comfort_map.simulation.engine import ComfortSimulation, FrameState
from comfort_map.viz.render import RenderResult

SMALL = ["--width", "100", "--height", "150", "--cols", "10", "--rows", "15", "--agents", "2"]


class TestWeatherSchedule:
    def test_parses_pairs(self) -> None:
        assert _parse_weather_schedule("90:rain, 180:heat") == {
            90: WeatherMode.RAIN,
            180: WeatherMode.HEAT,
        }

    def test_accepts_keys_and_empty_parts(self) -> None:
        assert _parse_weather_schedule("5:3,,") == {5: WeatherMode.HEAT}
        assert _parse_weather_schedule("") == {}

    @pytest.mark.parametrize("raw", ["90", "x:rain", "0:rain", "5:snow", "1:2:3"])
    def test_rejects_malformed(self, raw: str) -> None:
        with pytest.raises(ValueError):
            _parse_weather_schedule(raw)

    def test_duplicate_keeps_last(self, caplog: pytest.LogCaptureFixture) -> None:
        assert _parse_weather_schedule("4:rain,4:heat") == {4: WeatherMode.HEAT}
        assert "given twice" in caplog.text


class TestResolve:
    def test_cli_value_wins(self) -> None:
        assert _resolve(3, "seed", {"seed": 9}, 0, int) == 3

    def test_file_value_then_default(self) -> None:
        assert _resolve(None, "seed", {"seed": 9}, 0, int) == 9
        assert _resolve(None, "seed", {}, 0, int) == 0

    def test_coerces_to_kind(self) -> None:
        assert _resolve(None, "width", {"width": 80}, 600.0, float) == 80.0
        assert _resolve(None, "cols", {"cols": 12.0}, 70, int) == 12
        assert _resolve(Path("out"), "out_dir", {}, "data", str) == "out"

    @pytest.mark.parametrize(
        ("raw", "kind"), [(True, int), (2.5, int), ("abc", float), ([1], int), (None, str)]
    )
    def test_rejects_bad_values(self, raw: object, kind: type) -> None:
        with pytest.raises(ValueError):
            _resolve(None, "key", {"key": raw}, kind(), kind)


def test_record_prints_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["record", "--out-dir", str(tmp_path), "--frames", "3", "--seed", "4", *SMALL])
    summary = json.loads(capsys.readouterr().out)
    assert summary["mode"] == "record"
    assert summary["frames"] == 3
    assert summary["run_id"] == "seed4_n4_f3"
    assert Path(summary["frame_log"]).exists()
    assert Path(summary["agent_tracks"]).exists()


def test_config_file_values_used(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = tmp_path / "run.json"
    config_path.write_text(
        json.dumps(
            {
                "seed": 5,
                "frames": 2,
                "n_agents": 1,
                "width": 80,
                "height": 80,
                "cols": 8,
                "rows": 8,
                "weather": "heat",
                "out_dir": str(tmp_path / "data"),
            }
        )
    )
    main(["record", "--config", str(config_path)])
    summary = json.loads(capsys.readouterr().out)
    assert summary["run_id"] == "seed5_n5_f2"
    assert summary["final_weather"] == "heat"
    assert (tmp_path / "data" / "logs" / "frame_log.parquet").exists()


def test_cli_overrides_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = tmp_path / "run.json"
    config_path.write_text(json.dumps({"seed": 5, "frames": 9}))
    main(
        [
            "record",
            "--config",
            str(config_path),
            "--seed",
            "6",
            "--frames",
            "1",
            "--out-dir",
            str(tmp_path),
            *SMALL,
        ]
    )
    summary = json.loads(capsys.readouterr().out)
    assert summary["run_id"] == "seed6_n6_f1"


def test_missing_config_file_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["record", "--config", str(tmp_path / "missing.json")])


def test_invalid_json_config_exits(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.json"
    config_path.write_text("{not json")
    with pytest.raises(SystemExit):
        main(["record", "--config", str(config_path)])


def test_invalid_weather_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["record", "--weather", "snow", "--out-dir", str(tmp_path), *SMALL])


def test_render_dispatch(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    fake = RenderResult(
        output_path=tmp_path / "map.gif",
        n_frames=12,
        total_respawns=3,
        final_weather=WeatherMode.RAIN,
    )
    with patch("comfort_map.cli.render_animation", return_value=fake) as render:
        main(
            [
                "render",
                "--output",
                "map.gif",
                "--frames",
                "12",
                "--weather-schedule",
                "6:rain",
                "--base-dir",
                str(tmp_path),
                *SMALL,
            ]
        )
    kwargs = render.call_args.kwargs
    assert kwargs["n_frames"] == 12
    assert kwargs["weather_schedule"] == {6: WeatherMode.RAIN}
    assert kwargs["base_dir"] == tmp_path
    summary = json.loads(capsys.readouterr().out)
    assert summary == {
        "mode": "render",
        "output": str(tmp_path / "map.gif"),
        "frames": 12,
        "total_respawns": 3,
        "final_weather": "rain",
    }


def test_show_dispatch(capsys: pytest.CaptureFixture[str]) -> None:
    with patch("comfort_map.cli.show_interactive") as show:
        main(["show", "--weather", "2", "--theme", "night", "--no-rain-outline", *SMALL])
    simulation = show.call_args.args[0]
    assert simulation.weather.mode is WeatherMode.RAIN
    assert show.call_args.kwargs["show_rain"] is False
    assert json.loads(capsys.readouterr().out)["mode"] == "show"


def test_snapshot_dispatch(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch("comfort_map.cli.render_frame") as render:
        render.return_value = FrameState(
            frame=7, snapshot=_fake_snapshot(), agents=(), respawned=()
        )
        main(["snapshot", "--output", "f.png", "--frame", "7", "--layer", "eco", *SMALL])
    assert render.call_args.kwargs["frame"] == 7
    assert render.call_args.kwargs["layer"] == "eco"
    summary = json.loads(capsys.readouterr().out)
    assert summary == {"mode": "snapshot", "frame": 7, "layer": "eco", "weather": "sunny"}


def _fake_snapshot() -> FieldSnapshot:
    return ComfortSimulation(SimulationConfig(cols=4, rows=4, n_agents=0)).step().snapshot


def test_requires_subcommand() -> None:
    with pytest.raises(SystemExit):
        main([])


def test_noise_seed_from_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = tmp_path / "run.json"
    config_path.write_text(json.dumps({"seed": 1, "noise_seed": 2, "frames": 1}))
    main(["record", "--config", str(config_path), "--out-dir", str(tmp_path), *SMALL])
    assert json.loads(capsys.readouterr().out)["run_id"] == "seed1_n2_f1"
