import logging
import os

import pygame
import pytest

from gravsnap import cli
from gravsnap.config import ConfigError, SnapshotConfig
from gravsnap.data_models import MassLayout
from gravsnap.logging_config import PACKAGE_LOGGER

HEADLESS = ["--no-display", "--size", "20", "16", "--shape-height", "8", "-i", "3", "--step", "1"]


@pytest.mark.parametrize("changes", [
    dict(width=0),
    dict(height=-5),
    dict(layout="hexagon"),
    dict(layout=MassLayout.PRESET),
    dict(mass_count=0),
    dict(softening=0.0),
    dict(initial_iterations=-1),
    dict(step=-2),
    dict(frames=0),
    dict(classifier="sepia"),
    dict(name=""),
])
def test_validate_rejects(changes):
    with pytest.raises(ConfigError):
        SnapshotConfig().updated(**changes).validate()


def test_validate_normalises_layout():
    config = SnapshotConfig(layout="line").validate()
    assert config.layout is MassLayout.LINE
    config = SnapshotConfig(preset="square").validate()
    assert config.layout is MassLayout.PRESET


def test_save_dir_with_no_save_warns(caplog):
    with caplog.at_level(logging.WARNING):
        SnapshotConfig(save=False, save_dir="somewhere").validate()
    assert "no-save" in caplog.text


def test_defaults_without_flags():
    config, args = cli.parse_config([])
    assert config == SnapshotConfig()
    assert not args.panel
    assert args.log_level == "INFO"


def test_flags_map_to_config():
    config, _ = cli.parse_config([
        "--size", "640", "480", "--frames", "12", "--shape", "line", "--shapeheight", "150",
        "--dt", "0.05", "--gravity", "20", "--softening", "2.5", "-i", "50", "--step", "5",
        "--ns", "--name", "out.png", "-g", "--classifier", "nearest", "--seed", "7",
    ])
    assert (config.width, config.height) == (640, 480)
    assert config.frames == 12
    assert config.layout is MassLayout.LINE
    assert config.shape_height == 150.0
    assert (config.dt, config.gravity, config.softening) == (0.05, 20.0, 2.5)
    assert (config.initial_iterations, config.step) == (50, 5)
    assert config.save is False
    assert config.name == "out.png"
    assert config.timestamp_dir is True
    assert config.classifier == "nearest"
    assert config.seed == 7


@pytest.mark.parametrize("text", ["inf", "INF", "infinite", "0"])
def test_unbounded_frames(text):
    config, _ = cli.parse_config(["--frames", text])
    assert config.frames is None
    assert config.unbounded


def test_preset_flag_selects_preset_layout():
    config, _ = cli.parse_config(["--preset", "pentagon"])
    assert config.preset == "pentagon"
    assert config.layout is MassLayout.PRESET


def test_apply_options_keeps_base_for_missing_flags():
    base = SnapshotConfig(width=77, gravity=12.0)
    args = cli.build_parser().parse_args(["--dt", "0.2"])
    config = cli.apply_options(args, base)
    assert (config.width, config.gravity, config.dt) == (77, 12.0, 0.2)


@pytest.mark.parametrize("argv", [
    ["--size", "10"],
    ["--size", "0", "10"],
    ["--frames", "-3"],
    ["--frames", "lots"],
    ["--shape", "hexagon"],
    ["--softening", "0"],
    ["-i", "-1"],
    ["--bogus"],
])
def test_bad_arguments_exit_with_usage_error(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_config(argv)
    assert excinfo.value.code == 2


def test_headless_run_without_saving():
    config, _ = cli.parse_config(HEADLESS + ["--ns"])
    assert cli.run(config) == 0


def test_run_saves_numbered_frames(tmp_path):
    config, _ = cli.parse_config(HEADLESS + ["--frames", "2", "--save-in", str(tmp_path)])
    assert cli.run(config) == 0
    assert sorted(os.listdir(tmp_path)) == ["gravity-snapshot_0.bmp", "gravity-snapshot_1.bmp"]


def test_missing_save_directory_fails(tmp_path):
    config, _ = cli.parse_config(HEADLESS + ["--save-in", str(tmp_path / "missing")])
    assert cli.run(config) == 1


def test_unknown_preset_fails_before_creating_output(tmp_path):
    config, _ = cli.parse_config(HEADLESS + ["--preset", "no-such-preset", "--save-in", str(tmp_path), "-g"])
    assert cli.run(config) == 1
    assert os.listdir(tmp_path) == []


def test_display_that_cannot_open_fails_cleanly(monkeypatch):
    pygame.display.quit()
    monkeypatch.setenv("SDL_VIDEODRIVER", "nosuchdriver")
    config, _ = cli.parse_config(["--size", "8", "8", "--ns", "-i", "1"])
    assert cli.run(config) == 1
    pygame.display.quit()


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_main_headless(tmp_path, package_logger):
    log_file = tmp_path / "run.log"
    status = cli.main(HEADLESS + ["--ns", "--log-file", str(log_file)])
    assert status == 0
    assert "Frame Rendering Complete" in log_file.read_text(encoding="utf-8")
