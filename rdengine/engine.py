# engine.py
# The facade collaborators talk to: configure / seed / parameters / journeys /
# tick / forcing / render / presets.
#
# One tick = controller update -> N sequential sub-steps -> (caller renders).
# Forcing may come from other threads; it is serialized against the stepper
# with a lock, and submit_force() queues edits that are drained at the next tick.

import logging
import threading
from collections import deque
from dataclasses import replace

import numpy as np

from . import colorize as _colorize
from .config import EngineConfig, ColorConfig, BACKENDS
from .errors import ConfigurationError
from .forcing import Channel, apply_force, apply_stamp, apply_tool
from .grid import GridStore, standard_seed
from .kinetics import Model, reaction_for, get_presets, find_preset
from .params import Parameters, ParameterController, EASE_MS
from .stepper import NumpyStepper, steps_for_speed

logger = logging.getLogger(__name__)


def make_stepper(backend: str):
    backend = str(backend).lower()
    if backend not in BACKENDS:
        raise ConfigurationError(f"Unknown backend {backend!r}; choose one of {list(BACKENDS)}")
    if backend == "numpy":
        return NumpyStepper()
    try:
        from .taichi_backend import TaichiStepper
    except ImportError as e:
        raise ConfigurationError(f"taichi backend unavailable: {e}") from e
    return TaichiStepper()


class Engine:
    def __init__(self, config: EngineConfig = None, **overrides):
        self.config = replace(config or EngineConfig(), **overrides)
        self.rng = np.random.default_rng(self.config.rng_seed)
        self.running = True
        self.frame_count = 0
        self.elapsed_ms = 0.0
        self._lock = threading.RLock()
        self._pending = deque()
        self.grid = None
        self.stepper = None
        self.model = None
        self.controller = ParameterController(rng=self.rng)
        self.sim_speed = max(0.0, float(self.config.sim_speed))
        self.configure(self.config.resolution, self.config.model, self.config.backend)

    # ---------- configuration ----------
    def configure(self, resolution=None, model=None, backend=None):
        """(Re)allocate the grid for `resolution` / `model` and reseed.

        Raises ConfigurationError and leaves the previous state intact when the
        request cannot be honoured.
        """
        resolution = self.config.resolution if resolution is None else resolution
        try:
            model = Model.parse(self.model if model is None else model)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        backend = self.config.backend if backend is None else backend

        stepper = self.stepper if (self.stepper is not None and backend == self.stepper.name) \
            else make_stepper(backend)
        grid = GridStore(resolution)
        try:
            grid.seed(standard_seed(grid.resolution, self.config.seed, self.rng))
        except MemoryError as e:
            raise ConfigurationError(f"cannot seed a {grid.resolution}x{grid.resolution} grid: {e}") from e

        with self._lock:
            model_changed = model is not self.model
            self.grid = grid
            self.stepper = stepper
            self.model = model
            self.config = replace(self.config, resolution=grid.resolution, model=model, backend=stepper.name)
            self._pending.clear()
            if model_changed:
                self.controller.reset(Parameters.for_model(model))
            self.frame_count = 0
        logger.info("configured %dx%d %s grid on %s backend",
                    grid.resolution, grid.resolution, model.value, stepper.name)

    def seed(self, pattern=None):
        """Reset the field; with no pattern, use the standard center-blob seed."""
        with self._lock:
            if pattern is None:
                pattern = standard_seed(self.grid.resolution, self.config.seed, self.rng)
            self.grid.seed(pattern)
            self.frame_count = 0
        logger.info("seeded %dx%d field", self.grid.resolution, self.grid.resolution)

    # ---------- parameters ----------
    def set_parameters(self, f, k, diffusion_a=None, diffusion_b=None):
        with self._lock:
            self.controller.set_immediate(f, k, diffusion_a, diffusion_b)

    def get_parameters(self) -> Parameters:
        return self.controller.params

    def ease_to_parameters(self, f, k, duration_ms=EASE_MS):
        with self._lock:
            self.controller.ease_to(f, k, duration_ms)

    def set_journey(self, journey_type, speed=None):
        with self._lock:
            self.controller.set_journey(journey_type, speed)

    def stop_journey(self):
        with self._lock:
            self.controller.stop_journey()

    @property
    def journey(self):
        return self.controller.journey

    def set_speed(self, sim_speed):
        self.sim_speed = max(0.0, float(sim_speed))

    @property
    def steps_per_tick(self):
        return steps_for_speed(self.sim_speed)

    def get_presets(self, model=None):
        return get_presets(self.model if model is None else model)

    def apply_preset(self, key, duration_ms=EASE_MS):
        preset = find_preset(self.model, key)
        logger.debug("preset %s (F=%.4f K=%.4f)", preset.name, preset.f, preset.k)
        self.ease_to_parameters(preset.f, preset.k, duration_ms)
        return preset

    # ---------- time ----------
    def pause(self):
        self.running = False

    def resume(self):
        self.running = True

    def toggle_pause(self):
        self.running = not self.running
        return self.running

    def tick(self, dt_ms: float) -> int:
        """Advance one animation frame; returns the number of sub-steps run."""
        with self._lock:
            self._drain()
            self.controller.tick(dt_ms)
            self.elapsed_ms += max(0.0, float(dt_ms))
            if not self.running:
                return 0
            return self._advance()

    def step(self) -> int:
        """One frame's worth of sub-steps, even while paused."""
        with self._lock:
            self._drain()
            return self._advance()

    def _advance(self):
        steps = self.steps_per_tick
        if steps:
            params = self.controller.params
            self.stepper.advance(self.grid, params, reaction_for(self.model), steps)
        self.frame_count += 1
        return steps

    # ---------- forcing ----------
    def apply_force(self, x, y, radius, strength=1.0, channel=Channel.B, sign=1):
        with self._lock:
            return apply_force(self.grid, x, y, radius, strength, channel, sign)

    def apply_stamp(self, x, y, radius, channel=Channel.B):
        with self._lock:
            return apply_stamp(self.grid, x, y, radius, channel)

    def apply_tool(self, x, y, tool, radius, strength=1.0, channel=Channel.B):
        with self._lock:
            return apply_tool(self.grid, tool, x, y, radius, strength, channel)

    def submit_force(self, x, y, radius, strength=1.0, channel=Channel.B, sign=1, tool=None):
        """Queue an edit from any thread; applied at the start of the next tick."""
        self._pending.append((x, y, radius, strength, channel, sign, tool))

    def _drain(self):
        while self._pending:
            x, y, radius, strength, channel, sign, tool = self._pending.popleft()
            if tool is not None:
                apply_tool(self.grid, tool, x, y, radius, strength, channel)
            else:
                apply_force(self.grid, x, y, radius, strength, channel, sign)

    # ---------- output ----------
    def field(self) -> np.ndarray:
        """Copy of the current (2, R, R) state."""
        with self._lock:
            return self.grid.snapshot()

    def render_frame(self, color: ColorConfig = None, scale=None) -> np.ndarray:
        color = color or ColorConfig()
        if scale is not None:
            color = replace(color, scale=scale)
        return _colorize.render(self.field(), color)
