from pathlib import Path

import cv2
import numpy as np
import pytest

from termcam.cli import USAGE_MSG, main, parse_frame_count
from termcam.errors import ConfigurationError
from termcam.pipeline import Pipeline


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_config(workdir: Path, backend: str = "file", image: str = "still.png") -> None:
    (workdir / "termcam_config.yaml").write_text(
        "Termcam:\n"
        "  playback_interval_seconds: 0.001\n"
        "  grid:\n"
        "    source_width: 8\n"
        "    source_height: 4\n"
        "    block_width: 4\n"
        "    block_height: 2\n"
        "  capture:\n"
        f"    backend: {backend}\n"
        f"    image_path: {image}\n"
    )


def _write_still(workdir: Path) -> None:
    image = np.full((6, 10, 3), 40, dtype=np.uint8)
    assert cv2.imwrite(str(workdir / "still.png"), image)


@pytest.mark.parametrize(
    "argv",
    [[], ["-x"], ["-s", "extra"], ["-r", "5"], ["-p"], ["-s", "-p", "clip"]],
)
def test_bad_invocations_print_usage(argv, capsys) -> None:
    assert main(argv) == 1
    assert USAGE_MSG in capsys.readouterr().err


def test_frame_count_parsing() -> None:
    assert parse_frame_count("12") == 12
    for raw in ("abc", "-3", "1.5"):
        with pytest.raises(ConfigurationError, match="non-negative integer"):
            parse_frame_count(raw)


def test_record_over_the_cap_fails_without_creating_a_file(workdir: Path, capsys) -> None:
    _write_config(workdir)
    _write_still(workdir)

    assert main(["-r", "501", "clip"]) == 1

    assert "exceeds the maximum of 500" in capsys.readouterr().err
    assert not (workdir / "records" / "clip").exists()


def test_record_non_integer_count(workdir: Path, capsys) -> None:
    assert main(["-r", "many", "clip"]) == 1
    assert "non-negative integer" in capsys.readouterr().err


def test_play_missing_file(workdir: Path, capsys) -> None:
    assert main(["-p", "missing"]) == 1
    assert "File doesn't exist" in capsys.readouterr().err


def test_record_then_play(workdir: Path, capsys) -> None:
    _write_config(workdir)
    _write_still(workdir)

    assert main(["-r", "2", "clip"]) == 0
    lines = (workdir / "records" / "clip").read_text().splitlines()
    assert lines == ["40 40 40"] * 8

    capsys.readouterr()
    assert main(["-p", "clip"]) == 0
    out = capsys.readouterr().out
    assert out.count("\033[48;2;40;40;40m ") == 8


def test_stream_capture_failure_exits_non_zero(workdir: Path, capsys) -> None:
    _write_config(workdir, image="absent.png")

    assert main(["-s"]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_interrupted_stream_exits_cleanly(workdir: Path, mocker) -> None:
    _write_config(workdir)
    stream = mocker.patch.object(Pipeline, "stream", side_effect=KeyboardInterrupt)

    assert main(["-s"]) == 0
    stream.assert_called_once()


def test_invalid_config_file(workdir: Path, capsys) -> None:
    (workdir / "termcam_config.yaml").write_text("Termcam:\n  grid:\n    block_width: 7\n")
    assert main(["-s"]) == 1
    assert "does not divide" in capsys.readouterr().err


def test_unknown_log_level(workdir: Path, capsys) -> None:
    assert main(["--log-level", "chatty", "-p", "clip"]) == 1
    assert "Unknown log level" in capsys.readouterr().err


def test_mirror_flag_overrides_config(workdir: Path, mocker) -> None:
    _write_config(workdir)
    renderer = mocker.patch("termcam.cli.AnsiRenderer")
    mocker.patch.object(Pipeline, "stream", return_value=0)

    assert main(["-s", "--no-mirror"]) == 0
    assert renderer.call_args.kwargs["mirror"] is False


@pytest.mark.parametrize("argv", [["-h"], ["--help"], ["--str"], ["--pla", "clip"]])
def test_help_and_abbreviations_are_usage_errors(argv, capsys) -> None:
    assert main(argv) == 1
    assert USAGE_MSG in capsys.readouterr().err


def test_record_write_failure_exits_non_zero(workdir: Path, mocker, capsys) -> None:
    _write_config(workdir)
    _write_still(workdir)
    mocker.patch("termcam.pipeline.write_frame", side_effect=OSError(28, "No space left on device"))

    assert main(["-r", "2", "clip"]) == 1
    assert "No space left on device" in capsys.readouterr().err
