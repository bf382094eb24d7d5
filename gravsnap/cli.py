#!/usr/bin/env python3
"""
Command-line front end for Gravity Snapshot.

Every flag is declared once in OPTIONS: the argparse arguments it takes, the
SnapshotConfig field(s) it sets and the converter that validates its value.
build_parser() and apply_options() are both driven from that table, so adding
a flag never touches the simulation code.

Exit status: 0 when all frames were rendered, 1 on a configuration error, a
failed save/display or a closed window, 2 on unparsable arguments.
"""
import argparse
import logging
import sys
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from .classifier import FIELD_CLASSIFIERS
from .config import ConfigError, SnapshotConfig
from .data_models import MassLayout
from .display import PygameDisplay
from .driver import DriverState, FrameSinkError, ProgressiveDriver, resolve_scene
from .logging_config import setup_logging
from .probe import ProbeSession, run_interactive
from .storage import FrameSaver, resolve_save_directory
from .utils import parse_frames

logger = logging.getLogger(__name__)


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {text}")
    return value


def _positive_float(text: str) -> float:
    value = float(text)
    if not value > 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {text}")
    return value


def _frames(text: str) -> Optional[int]:
    try:
        return parse_frames(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _set(field: str) -> Callable[[Dict[str, Any], Any], None]:
    def setter(changes: Dict[str, Any], value: Any) -> None:
        changes[field] = value
    return setter


def _set_size(changes: Dict[str, Any], value: Sequence[int]) -> None:
    changes["width"], changes["height"] = value


def _set_layout(changes: Dict[str, Any], value: str) -> None:
    changes["layout"] = MassLayout.parse(value)


def _set_preset(changes: Dict[str, Any], value: str) -> None:
    changes["preset"] = value
    changes["layout"] = MassLayout.PRESET


class Option(NamedTuple):
    flags: Tuple[str, ...]
    dest: str
    setter: Optional[Callable[[Dict[str, Any], Any], None]]
    kwargs: Dict[str, Any]


OPTIONS: Tuple[Option, ...] = (
    Option(("--size",), "size", _set_size,
           dict(nargs=2, type=_positive_int, metavar=("W", "H"), help="the width and height of the frames")),
    Option(("--frames",), "frames", _set("frames"),
           dict(type=_frames, help='the number of frames to render, default is 1; "inf" renders indefinitely')),
    Option(("--shape",), "shape", _set_layout,
           dict(choices=[m.value for m in MassLayout if m is not MassLayout.PRESET],
                help="mass layout: triangle, line or random")),
    Option(("--shape-height", "--shapeheight"), "shape_height", _set("shape_height"),
           dict(type=float, help="the height of the shape in pixels")),
    Option(("--masses",), "mass_count", _set("mass_count"),
           dict(type=_positive_int, help="number of masses for the random layout")),
    Option(("--seed",), "seed", _set("seed"),
           dict(type=int, help="seed for the random layout")),
    Option(("--preset",), "preset", _set_preset,
           dict(help="mass preset name (from the presets folder) or path to a preset JSON file")),
    Option(("--dt",), "dt", _set("dt"),
           dict(type=float, help="the time step of one iteration")),
    Option(("--gravity",), "gravity", _set("gravity"),
           dict(type=float, help="the force of gravity")),
    Option(("--softening",), "softening", _set("softening"),
           dict(type=_positive_float, help="added to the squared distance to keep forces finite")),
    Option(("-i", "--iterations"), "initial_iterations", _set("initial_iterations"),
           dict(type=_non_negative_int, help="the number of iterations before the first frame, default is 100")),
    Option(("--step",), "step", _set("step"),
           dict(type=_non_negative_int, help="by how much the number of iterations increases per frame, default is 10")),
    Option(("--classifier",), "classifier", _set("classifier"),
           dict(choices=sorted(FIELD_CLASSIFIERS), help="pixel coloring: weighted blend or flat nearest-mass color")),
    Option(("--ns", "--no-save"), "no_save", lambda changes, value: changes.update(save=not value),
           dict(action="store_true", help="don't save the frames")),
    Option(("--name",), "name", _set("name"),
           dict(help="base file name; the extension picks the image format")),
    Option(("--save-in",), "save_dir", _set("save_dir"),
           dict(metavar="DIRECTORY", help="save directory (must exist)")),
    Option(("-g", "--timestamp-dir"), "timestamp_dir", _set("timestamp_dir"),
           dict(action="store_true",
                help="save into a new directory named after the current time, inside --save-in if given")),
    Option(("--no-display",), "no_display", lambda changes, value: changes.update(display=not value),
           dict(action="store_true", help="render without opening a window")),
    Option(("--interactive",), "interactive", _set("interactive"),
           dict(action="store_true", help="drop a single particle with the mouse instead of rendering")),
    Option(("--panel",), "panel", None,
           dict(action="store_true", help="open the control panel")),
    Option(("--log-level",), "log_level", None,
           dict(default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging verbosity")),
    Option(("--log-file",), "log_file", None,
           dict(help="also write the log to this file")),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gravity-snapshot",
        description="Render basins of attraction of a particle field falling toward fixed masses.",
    )
    for option in OPTIONS:
        kwargs = dict(option.kwargs)
        if option.setter is not None:
            # flags left off the command line must not override the base config
            kwargs.setdefault("default", argparse.SUPPRESS)
        parser.add_argument(*option.flags, dest=option.dest, **kwargs)
    return parser


def apply_options(args: argparse.Namespace, base: Optional[SnapshotConfig] = None) -> SnapshotConfig:
    """Fold every explicitly given flag into a copy of `base`."""
    changes: Dict[str, Any] = {}
    for option in OPTIONS:
        if option.setter is None:
            continue
        if not hasattr(args, option.dest):
            continue
        option.setter(changes, getattr(args, option.dest))
    return (base or SnapshotConfig()).updated(**changes)


def parse_config(argv: Optional[List[str]] = None) -> Tuple[SnapshotConfig, argparse.Namespace]:
    args = build_parser().parse_args(argv)
    return apply_options(args), args


def build_sinks(config: SnapshotConfig, stop_event=None):
    """
    Create the display and saver sinks a config asks for.

    Returns:
        (sinks, display) where display is None for headless runs.

    Raises:
        ConfigError: the save directory is unusable.
        FrameSinkError: the display window could not be opened.
    """
    sinks = []
    display = None
    if config.display:
        display = PygameDisplay(config.width, config.height, stop_event=stop_event)
    if config.save:
        try:
            directory = resolve_save_directory(config.save_dir, config.timestamp_dir)
        except ConfigError:
            if display is not None:
                display.close()
            raise
        sinks.append(FrameSaver(directory, config.name, config.frames))
    else:
        logger.info("Not Saving")
    if display is not None:
        sinks.append(display)
    return sinks, display


def run_interactive_mode(config: SnapshotConfig) -> int:
    masses, gravity = resolve_scene(config)
    session = ProbeSession(masses.masses, gravity=gravity, dt=config.dt,
                           softening=config.softening, classifier=config.classifier)
    run_interactive(session, config.width, config.height)
    return 0


def run(config: SnapshotConfig) -> int:
    """Validate and execute one run; returns the process exit status."""
    display = None
    try:
        config.validate()
        if config.interactive:
            return run_interactive_mode(config)
        # an unknown preset must fail before any window or directory is created
        masses, gravity = resolve_scene(config)
        sinks, display = build_sinks(config)
        driver = ProgressiveDriver(config, sinks, masses=masses, gravity=gravity)
        state = driver.run()
        if state is DriverState.DONE and display is not None:
            display.wait_until_closed()
        return 0 if state is DriverState.DONE else 1
    except ConfigError as exc:
        logger.error("Error: %s", exc)
        return 1
    except FrameSinkError as exc:
        logger.error("Rendering stopped: %s", exc)
        return 1
    finally:
        if display is not None:
            display.close()


def main(argv: Optional[List[str]] = None) -> int:
    config, args = parse_config(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    if args.panel:
        from .ui import run_panel
        run_panel(config)
        return 0
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
