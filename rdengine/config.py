# config.py
# Dataclass configuration for the engine, the initial seed and the colorizer.

from dataclasses import dataclass, field
from typing import Optional, Tuple

import matplotlib.colors as mcolors

from .kinetics import Model

# =========================
# Parameter domains
# =========================
F_RANGE = (0.0, 0.1)
K_RANGE = (0.0, 0.08)
# explicit Euler on the 9-point stencil is stable while D * 1.6 < 2
DIFFUSION_RANGE = (0.0, 1.25)

STEPS_PER_SPEED = 8
BACKENDS = ("numpy", "taichi")


def clamp(x, lo, hi): return max(lo, min(hi, x))


@dataclass
class SeedConfig:
    blob_radius: float = 20.0          # center disc of B
    cluster_count: int = 5             # extra random discs of B
    cluster_radius: float = 10.0
    speckle_probability: float = 0.001 # isolated B cells


@dataclass
class EngineConfig:
    resolution: int = 256
    model: Model = Model.GRAY_SCOTT
    backend: str = "numpy"
    sim_speed: float = 1.0
    rng_seed: Optional[int] = None
    seed: SeedConfig = field(default_factory=SeedConfig)


# =========================
# Colors
# =========================
COLOR_SCHEMES = {
    "classic": ((0, 0, 0),    (255, 255, 255)),
    "thermal": ((0, 0, 128),  (255, 0, 0)),
    "ocean":   ((0, 30, 60),  (0, 200, 255)),
    "forest":  ((10, 30, 10), (100, 200, 80)),
    "sunset":  ((60, 20, 80), (255, 150, 50)),
    "neon":    ((10, 0, 30),  (0, 255, 200)),
}


def to_rgb(color) -> Tuple[float, float, float]:
    """Accepts 0..1 floats, 0..255 ints, or anything matplotlib understands ('navy', '#ff8800')."""
    if isinstance(color, (tuple, list)) and len(color) == 3 and any(c > 1 for c in color):
        return tuple(clamp(float(c) / 255.0, 0.0, 1.0) for c in color)
    return tuple(float(c) for c in mcolors.to_rgb(color))


@dataclass
class ColorConfig:
    low: tuple = (0.0, 0.0, 0.0)
    high: tuple = (1.0, 1.0, 1.0)
    contrast: float = 1.0
    brightness: float = 1.0
    scale: int = 1

    def __post_init__(self):
        self.low = to_rgb(self.low)
        self.high = to_rgb(self.high)
        self.scale = max(1, int(self.scale))

    @classmethod
    def from_scheme(cls, name: str, **kw):
        try:
            low, high = COLOR_SCHEMES[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown color scheme {name!r}; choose one of {sorted(COLOR_SCHEMES)}") from None
        return cls(low=low, high=high, **kw)
