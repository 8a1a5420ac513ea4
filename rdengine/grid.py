# grid.py
# Double-buffered two-channel concentration field on a periodic R x R lattice.

import logging

import numpy as np

from .config import SeedConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

A, B = 0, 1
DTYPE = np.float32


class GridStore:
    """Owns the front/back buffers, each shaped (2, R, R) = (channel, row, col).

    Exactly one buffer is current (authoritative); the other is scratch.
    Writers fill scratch completely and then call swap().
    """

    def __init__(self, resolution: int):
        self.resolution = 0
        self._buffers = None
        self._front = 0
        self.allocate(resolution)

    def allocate(self, resolution: int):
        if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)):
            raise ConfigurationError(f"resolution must be an integer, got {resolution!r}")
        if resolution <= 0:
            raise ConfigurationError(f"resolution must be positive, got {resolution}")
        try:
            buffers = [np.zeros((2, resolution, resolution), dtype=DTYPE),
                       np.zeros((2, resolution, resolution), dtype=DTYPE)]
        except (MemoryError, ValueError) as e:
            raise ConfigurationError(f"cannot allocate a {resolution}x{resolution} grid: {e}") from e
        self._buffers = buffers
        self._front = 0
        self.resolution = int(resolution)
        logger.debug("allocated %dx%d grid", resolution, resolution)

    @property
    def shape(self):
        return (self.resolution, self.resolution)

    def current(self) -> np.ndarray:
        return self._buffers[self._front]

    def scratch(self) -> np.ndarray:
        return self._buffers[1 - self._front]

    def swap(self):
        self._front = 1 - self._front

    @property
    def front_index(self):
        return self._front

    def seed(self, pattern):
        """Write `pattern` (shape (2, R, R), or an (A, B) pair) into both buffers."""
        field = np.array(pattern, dtype=DTYPE)
        if field.shape != (2, self.resolution, self.resolution):
            raise ValueError(f"seed pattern has shape {field.shape}, "
                             f"expected {(2, self.resolution, self.resolution)}")
        np.clip(field, 0.0, 1.0, out=field)
        for buf in self._buffers:
            buf[...] = field

    def wrap(self, i, j):
        return i % self.resolution, j % self.resolution

    def read(self, i, j):
        i, j = self.wrap(i, j)
        cur = self.current()
        return float(cur[A, i, j]), float(cur[B, i, j])

    def snapshot(self) -> np.ndarray:
        return self.current().copy()


# =========================
# Initial conditions
# =========================
def torus_dist2(n, cy, cx):
    """Squared toroidal distance of every cell of an n x n grid to (cy, cx)."""
    idx = np.arange(n, dtype=np.float64)
    dy = np.abs(idx - cy) % n
    dy = np.minimum(dy, n - dy)
    dx = np.abs(idx - cx) % n
    dx = np.minimum(dx, n - dx)
    return dy[:, None] ** 2 + dx[None, :] ** 2


def standard_seed(n: int, cfg: SeedConfig = None, rng=None) -> np.ndarray:
    """A saturated everywhere; B=1 in a center blob, a few random clusters and sparse speckles."""
    cfg = cfg or SeedConfig()
    rng = rng if rng is not None else np.random.default_rng()
    field = np.zeros((2, n, n), dtype=DTYPE)
    field[A] = 1.0

    c = n / 2.0
    mask = torus_dist2(n, c, c) < cfg.blob_radius ** 2
    if cfg.speckle_probability > 0:
        mask |= rng.random((n, n)) < cfg.speckle_probability
    for _ in range(int(cfg.cluster_count)):
        sy, sx = rng.random(2) * n
        mask |= torus_dist2(n, sy, sx) < cfg.cluster_radius ** 2
    field[B][mask] = 1.0
    return field
