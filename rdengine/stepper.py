# stepper.py
# Explicit diffusion-reaction update on the periodic grid (numpy backend).

import math

import numpy as np

from .config import STEPS_PER_SPEED
from .grid import A, B

DT = 1.0  # time resolution lives in the diffusion/feed/kill magnitudes

W_ORTHO = 0.2
W_DIAG = 0.05


def laplacian(Z):
    """9-point weighted Laplacian over the last two axes, periodic in both."""
    n = np.roll(Z, 1, -2)
    s = np.roll(Z, -1, -2)
    return (W_ORTHO * (n + s + np.roll(Z, 1, -1) + np.roll(Z, -1, -1))
            + W_DIAG * (np.roll(n, 1, -1) + np.roll(n, -1, -1)
                        + np.roll(s, 1, -1) + np.roll(s, -1, -1))
            - Z)


def steps_for_speed(sim_speed: float) -> int:
    if sim_speed <= 0:
        return 0
    return int(math.ceil(sim_speed * STEPS_PER_SPEED))


class NumpyStepper:
    """Advances a GridStore in place: read current, write scratch, swap."""

    name = "numpy"

    def step(self, grid, params, reaction):
        cur = grid.current()
        nxt = grid.scratch()
        a, b = cur[A], cur[B]
        lap = laplacian(cur)
        da, db = reaction(a, b, params.feed, params.kill)
        np.add(a, DT * (params.diffusion_a * lap[A] + da), out=nxt[A], casting="unsafe")
        np.add(b, DT * (params.diffusion_b * lap[B] + db), out=nxt[B], casting="unsafe")
        # clamp for stability
        np.clip(nxt, 0.0, 1.0, out=nxt)
        grid.swap()

    def advance(self, grid, params, reaction, steps: int):
        for _ in range(steps):
            self.step(grid, params, reaction)
        return steps
