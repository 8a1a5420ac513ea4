# params.py
# Live (feed, kill, diffusion) tuple and the controller that moves it:
# instant set, eased transition, and autonomous "journeys" through (F, K) space.

import enum
import logging
import math
from dataclasses import dataclass, asdict, replace
from typing import Optional

import numpy as np

from .config import F_RANGE, K_RANGE, DIFFUSION_RANGE, clamp
from .kinetics import Model, MODEL_DEFAULTS

logger = logging.getLogger(__name__)

EASE_MS = 1000.0


@dataclass(frozen=True)
class Parameters:
    feed: float = 0.055
    kill: float = 0.062
    diffusion_a: float = 0.21
    diffusion_b: float = 0.105
    model: Model = Model.GRAY_SCOTT

    def clamped(self):
        return replace(self,
                       feed=clamp(float(self.feed), *F_RANGE),
                       kill=clamp(float(self.kill), *K_RANGE),
                       diffusion_a=clamp(float(self.diffusion_a), *DIFFUSION_RANGE),
                       diffusion_b=clamp(float(self.diffusion_b), *DIFFUSION_RANGE))

    @classmethod
    def for_model(cls, model):
        model = Model.parse(model)
        d = MODEL_DEFAULTS[model]
        return cls(d.f, d.k, d.diffusion_a, d.diffusion_b, model)

    def as_dict(self):
        d = asdict(self)
        d["model"] = self.model.value
        return d

    @classmethod
    def from_dict(cls, d):
        d = dict(d)
        model = Model.parse(d.pop("model", Model.GRAY_SCOTT))
        base = cls.for_model(model)
        return replace(base, **{k: float(v) for k, v in d.items()}).clamped()


# =========================
# Journeys
# =========================
class JourneyType(enum.Enum):
    NONE = "none"
    LINEAR = "linear"
    CIRCULAR = "circular"
    FIGURE8 = "figure8"
    RANDOM_WALK = "random"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "").replace("-", "")
        for j in cls:
            if key in (j.value, j.name.lower().replace("_", "")):
                return j
        raise ValueError(f"Unknown journey {value!r}; choose one of {[j.value for j in cls]}")


@dataclass
class JourneyState:
    type: JourneyType = JourneyType.NONE
    phase: float = 0.0
    speed: float = 1.0
    # random walk only
    target_f: Optional[float] = None
    target_k: Optional[float] = None

    @property
    def active(self):
        return self.type is not JourneyType.NONE


RANDOM_REROLL_P = 0.01
RANDOM_APPROACH = 0.02
RANDOM_F = (0.015, 0.060)
RANDOM_K = (0.045, 0.075)


def linear_path(t):
    p = (math.sin(t * 0.5) + 1.0) / 2.0
    return 0.02 + p * 0.04, 0.045 + p * 0.025


def circular_path(t):
    return 0.04 + math.cos(t) * 0.015, 0.058 + math.sin(t) * 0.015


def figure8_path(t):
    return 0.04 + math.sin(t) * 0.02, 0.058 + math.sin(t * 2.0) * 0.01


PATHS = {
    JourneyType.LINEAR: linear_path,
    JourneyType.CIRCULAR: circular_path,
    JourneyType.FIGURE8: figure8_path,
}


def random_walk(journey: JourneyState, f, k, rng):
    if journey.target_f is None or rng.random() < RANDOM_REROLL_P:
        journey.target_f = RANDOM_F[0] + rng.random() * (RANDOM_F[1] - RANDOM_F[0])
        journey.target_k = RANDOM_K[0] + rng.random() * (RANDOM_K[1] - RANDOM_K[0])
    return (f + (journey.target_f - f) * RANDOM_APPROACH,
            k + (journey.target_k - k) * RANDOM_APPROACH)


# =========================
# Controller
# =========================
class ControllerState(enum.Enum):
    IDLE = "idle"
    EASING = "easing"
    JOURNEYING = "journeying"


@dataclass
class Easing:
    start_f: float
    start_k: float
    target_f: float
    target_k: float
    start_ms: float
    duration_ms: float

    def progress(self, now_ms):
        if self.duration_ms <= 0:
            return 1.0
        return min(1.0, max(0.0, (now_ms - self.start_ms) / self.duration_ms))


def ease_out_cubic(p):
    return 1.0 - (1.0 - p) ** 3


class ParameterController:
    """Owns the live Parameters. Time is the sum of tick() deltas, not wall clock."""

    def __init__(self, params: Parameters = None, rng=None):
        self._params = (params or Parameters()).clamped()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock_ms = 0.0
        self.easing: Optional[Easing] = None
        self.journey = JourneyState()

    @property
    def params(self) -> Parameters:
        return self._params

    @property
    def state(self) -> ControllerState:
        if self.easing is not None:
            return ControllerState.EASING
        if self.journey.active:
            return ControllerState.JOURNEYING
        return ControllerState.IDLE

    def _publish(self, params: Parameters):
        clamped = params.clamped()
        if clamped != params:
            logger.debug("clamped %s -> %s", params, clamped)
        self._params = clamped

    def reset(self, params: Parameters):
        """Swap in a whole parameter set (model change); cancels easing and journeys."""
        self.easing = None
        self.journey = JourneyState(speed=self.journey.speed)
        self._publish(params)

    def set_immediate(self, f, k, diffusion_a=None, diffusion_b=None):
        self.easing = None
        p = self._params
        self._publish(replace(p, feed=f, kill=k,
                              diffusion_a=p.diffusion_a if diffusion_a is None else diffusion_a,
                              diffusion_b=p.diffusion_b if diffusion_b is None else diffusion_b))

    def ease_to(self, f, k, duration_ms=EASE_MS):
        target = replace(self._params, feed=f, kill=k).clamped()
        if self.journey.active:
            logger.debug("ease cancels %s journey", self.journey.type.value)
            self.journey = JourneyState(speed=self.journey.speed)
        self.easing = Easing(self._params.feed, self._params.kill,
                             target.feed, target.kill, self.clock_ms, float(duration_ms))
        logger.debug("easing to F=%.4f K=%.4f over %.0f ms", target.feed, target.kill, duration_ms)
        if duration_ms <= 0:
            self._advance_easing()

    def set_journey(self, journey_type, speed=None):
        journey_type = JourneyType.parse(journey_type)
        speed = self.journey.speed if speed is None else max(0.0, float(speed))
        self.easing = None
        self.journey = JourneyState(type=journey_type, phase=0.0, speed=speed)
        logger.debug("journey %s at speed %.2f", journey_type.value, speed)

    def stop_journey(self):
        self.journey = JourneyState(speed=self.journey.speed)

    def tick(self, dt_ms: float):
        dt_ms = max(0.0, float(dt_ms))
        self.clock_ms += dt_ms
        if self.easing is not None:
            self._advance_easing()
        elif self.journey.active:
            self._advance_journey(dt_ms)

    def _advance_easing(self):
        e = self.easing
        p = e.progress(self.clock_ms)
        w = ease_out_cubic(p)
        self._publish(replace(self._params,
                              feed=e.start_f + (e.target_f - e.start_f) * w,
                              kill=e.start_k + (e.target_k - e.start_k) * w))
        if p >= 1.0:
            self._publish(replace(self._params, feed=e.target_f, kill=e.target_k))
            self.easing = None

    def _advance_journey(self, dt_ms):
        j = self.journey
        j.phase += dt_ms * j.speed * 0.001
        if j.type is JourneyType.RANDOM_WALK:
            f, k = random_walk(j, self._params.feed, self._params.kill, self.rng)
        else:
            f, k = PATHS[j.type](j.phase)
        self._publish(replace(self._params, feed=f, kill=k))
