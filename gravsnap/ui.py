#!/usr/bin/env python3
"""
Dear PyGui control panel for Gravity Snapshot.

What this module does
- Shows a control window (Dear PyGui, main thread) for every run setting: canvas size,
  mass layout or preset, physics constants, frame schedule and output options.
- "Render" starts a RenderThread: a background thread that runs the ProgressiveDriver with
  the pygame display (and the frame saver when saving is on).
- "Stop" sets the thread's stop event; the display sink reports closed and the driver
  aborts at the next frame boundary.
- "Probe" opens the interactive single-particle window instead of rendering.

Threading model
- The render thread exclusively owns the particle grid. The only state shared with the UI
  is the RenderStatus record, guarded by a lock, which the UI polls on a frame callback.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional

import dearpygui.dearpygui as dpg

from .classifier import FIELD_CLASSIFIERS
from .cli import build_sinks, run_interactive_mode
from .config import ConfigError, SnapshotConfig
from .data_models import MassLayout
from .driver import DriverState, FrameSinkError, ProgressiveDriver, resolve_scene
from .presets_loader import list_presets
from .utils import parse_frames, try_float, try_int

logger = logging.getLogger(__name__)

NO_PRESET = "(none)"


@dataclass
class RenderStatus:
    running: bool = False
    frame: int = -1
    iterations: int = 0
    state: Optional[DriverState] = None
    error: Optional[str] = None


class StatusSink:
    """Frame sink that only records progress for the panel."""

    closed = False

    def __init__(self, status: RenderStatus, lock: threading.Lock):
        self.status = status
        self.lock = lock

    def emit(self, frame) -> None:
        with self.lock:
            self.status.frame = frame.index
            self.status.iterations = frame.iterations


class RenderThread(threading.Thread):
    """Runs one progressive render in the background."""

    def __init__(self, config: SnapshotConfig, status: RenderStatus, lock: threading.Lock):
        super().__init__(daemon=True)
        self.config = config
        self.status = status
        self.lock = lock
        self.stop_event = threading.Event()

    def stop(self) -> None:
        self.stop_event.set()

    def _finish(self, state: Optional[DriverState], error: Optional[str] = None) -> None:
        with self.lock:
            self.status.running = False
            self.status.state = state
            self.status.error = error

    def run(self):
        display = None
        try:
            masses, gravity = resolve_scene(self.config)
            sinks, display = build_sinks(self.config, stop_event=self.stop_event)
            sinks.append(StatusSink(self.status, self.lock))
            driver = ProgressiveDriver(self.config, sinks, masses=masses, gravity=gravity)
            state = driver.run()
            self._finish(state)
            if state is DriverState.DONE and display is not None:
                display.wait_until_closed()
        except (ConfigError, FrameSinkError) as exc:
            logger.error("Render failed: %s", exc)
            self._finish(DriverState.ABORTED, str(exc))
        finally:
            if display is not None:
                display.close()


class UI:
    """
    Dear PyGui interface: run settings, render/stop/probe buttons, progress readout.
    """
    def __init__(self, config: SnapshotConfig):
        self.config = config
        self.lock = threading.Lock()
        self.status = RenderStatus()
        self.thread: Optional[RenderThread] = None
        self.status_msg_id = None
        self.progress_id = None
        self._preset_map = {name: key for key, name in list_presets()}
        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback (~10Hz at 60 FPS)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_render)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        cfg = self.config
        dpg.create_context()
        dpg.create_viewport(title='Gravity Snapshot - Controls', width=460, height=600)

        with dpg.window(label="Controls", width=440, height=580, pos=(10, 10), tag="main_window"):
            dpg.add_text("Canvas")
            with dpg.group(horizontal=True):
                dpg.add_input_text(label="Width", default_value=str(cfg.width), width=80, tag="width_input")
                dpg.add_input_text(label="Height", default_value=str(cfg.height), width=80, tag="height_input")

            dpg.add_separator()
            dpg.add_text("Masses")
            layouts = [m.value for m in MassLayout if m is not MassLayout.PRESET]
            default_layout = cfg.layout.value if cfg.layout is not MassLayout.PRESET else layouts[0]
            dpg.add_combo(layouts, label="Layout", default_value=default_layout, width=150, tag="layout_combo")
            dpg.add_input_text(label="Shape height", default_value=str(cfg.shape_height), width=100,
                               tag="shape_height_input")
            with dpg.group(horizontal=True):
                dpg.add_input_text(label="Random masses", default_value=str(cfg.mass_count), width=60,
                                   tag="mass_count_input")
                dpg.add_input_text(label="Seed", default_value="" if cfg.seed is None else str(cfg.seed),
                                   width=100, tag="seed_input")
            preset_items = [NO_PRESET] + list(self._preset_map)
            dpg.add_combo(preset_items, label="Preset", default_value=NO_PRESET, width=200, tag="preset_combo")

            dpg.add_separator()
            dpg.add_text("Physics")
            dpg.add_input_text(label="Gravity", default_value=str(cfg.gravity), width=100, tag="gravity_input")
            dpg.add_input_text(label="dt", default_value=str(cfg.dt), width=100, tag="dt_input")
            dpg.add_input_text(label="Softening", default_value=str(cfg.softening), width=100,
                               tag="softening_input")

            dpg.add_separator()
            dpg.add_text("Frames")
            dpg.add_input_text(label="Initial iterations", default_value=str(cfg.initial_iterations), width=100,
                               tag="iterations_input")
            dpg.add_input_text(label="Step", default_value=str(cfg.step), width=100, tag="step_input")
            dpg.add_input_text(label="Frames (inf = unbounded)",
                               default_value="inf" if cfg.frames is None else str(cfg.frames), width=100,
                               tag="frames_input")
            dpg.add_combo(sorted(FIELD_CLASSIFIERS), label="Coloring", default_value=cfg.classifier, width=150,
                          tag="classifier_combo")

            dpg.add_separator()
            dpg.add_text("Output")
            dpg.add_checkbox(label="Save frames", default_value=cfg.save, tag="save_checkbox")
            dpg.add_input_text(label="File name", default_value=cfg.name, width=200, tag="name_input")
            dpg.add_input_text(label="Save in", default_value=cfg.save_dir or "", width=200, tag="save_dir_input")
            dpg.add_checkbox(label="Timestamped directory", default_value=cfg.timestamp_dir, tag="timestamp_checkbox")

            dpg.add_separator()
            with dpg.group(horizontal=True):
                dpg.add_button(label="Render", callback=self._on_render_clicked)
                dpg.add_button(label="Stop", callback=self._on_stop_clicked)
                dpg.add_button(label="Probe", callback=self._on_probe_clicked)
            self.progress_id = dpg.add_text("Idle")
            self.status_msg_id = dpg.add_text("", color=(180, 220, 180))

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _read_config(self) -> SnapshotConfig:
        """Build a validated config from the widgets; raises ConfigError on bad input."""
        def number(tag, convert, label):
            value = convert(dpg.get_value(tag))
            if value is None:
                raise ConfigError(f"{label} must be a number")
            return value

        seed_text = dpg.get_value("seed_input").strip()
        preset_name = dpg.get_value("preset_combo")
        try:
            frames = parse_frames(dpg.get_value("frames_input"))
        except ValueError as exc:
            raise ConfigError(str(exc)) from None

        config = self.config.updated(
            width=number("width_input", try_int, "Width"),
            height=number("height_input", try_int, "Height"),
            layout=MassLayout.parse(dpg.get_value("layout_combo")),
            shape_height=number("shape_height_input", try_float, "Shape height"),
            mass_count=number("mass_count_input", try_int, "Random masses"),
            seed=number("seed_input", try_int, "Seed") if seed_text else None,
            preset=self._preset_map.get(preset_name) if preset_name != NO_PRESET else None,
            gravity=number("gravity_input", try_float, "Gravity"),
            dt=number("dt_input", try_float, "dt"),
            softening=number("softening_input", try_float, "Softening"),
            initial_iterations=number("iterations_input", try_int, "Initial iterations"),
            step=number("step_input", try_int, "Step"),
            frames=frames,
            classifier=dpg.get_value("classifier_combo"),
            save=bool(dpg.get_value("save_checkbox")),
            name=dpg.get_value("name_input").strip(),
            save_dir=dpg.get_value("save_dir_input").strip() or None,
            timestamp_dir=bool(dpg.get_value("timestamp_checkbox")),
            display=True,
            interactive=False,
        )
        return config.validate()

    def _busy(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def _on_render_clicked(self):
        if self._busy():
            self._set_error("A render is already running; stop it first.")
            return
        try:
            config = self._read_config()
        except ConfigError as exc:
            self._set_error(str(exc))
            return
        with self.lock:
            self.status = RenderStatus(running=True)
        self.thread = RenderThread(config, self.status, self.lock)
        self.thread.start()
        self._set_status("Rendering...")

    def _on_stop_clicked(self):
        if not self._busy():
            self._set_status("Nothing to stop.")
            return
        self.thread.stop()
        self._set_status("Stopping at the next frame boundary...")

    def _on_probe_clicked(self):
        if self._busy():
            self._set_error("Stop the render before opening the probe.")
            return
        try:
            config = self._read_config()
        except ConfigError as exc:
            self._set_error(str(exc))
            return
        # pygame owns its own window; the panel is blocked until the probe closes
        try:
            run_interactive_mode(config)
        except ConfigError as exc:
            self._set_error(str(exc))
            return
        self._set_status("Probe closed.")

    def _sync_ui_with_render(self):
        with self.lock:
            status = RenderStatus(**vars(self.status))
        if status.running:
            if status.frame >= 0:
                dpg.set_value(self.progress_id, f"Frame {status.frame} - {status.iterations} iterations")
            else:
                dpg.set_value(self.progress_id, "Integrating first frame...")
        elif status.state is not None:
            dpg.set_value(self.progress_id, f"{status.state.value.capitalize()} after {status.frame + 1} frame(s)")
            if status.error:
                self._set_error(status.error)
        self._schedule_sync()


def run_panel(config: Optional[SnapshotConfig] = None) -> None:
    """Open the control panel and block until it is closed."""
    ui = UI(config or SnapshotConfig())
    try:
        dpg.start_dearpygui()
    finally:
        if ui.thread is not None and ui.thread.is_alive():
            ui.thread.stop()
            ui.thread.join(timeout=2.0)
        dpg.destroy_context()
