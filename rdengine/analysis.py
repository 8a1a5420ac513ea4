# analysis.py
# Coarse pattern statistics: connected blobs on the torus, a phase-connectivity
# class label and the linear stability of the uniform state.

from typing import NamedTuple

import numpy as np
from scipy import ndimage

from . import kinetics
from .grid import B
from .stepper import W_ORTHO, W_DIAG


class ComponentStats(NamedTuple):
    count: int
    sizes: np.ndarray        # descending
    coverage: float          # fraction of cells above threshold

    @property
    def largest(self):
        return int(self.sizes[0]) if self.count else 0

    @property
    def mean_size(self):
        return float(self.sizes.mean()) if self.count else 0.0


def _as_b(field):
    field = np.asarray(field)
    return field[B] if field.ndim == 3 else field


def torus_label(mask):
    """ndimage.label with the opposite edges glued together."""
    labels, n = ndimage.label(mask)
    if n == 0:
        return labels, 0
    parent = np.arange(n + 1)

    def find(x):
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for p, q in zip(np.concatenate([labels[0, :], labels[:, 0]]),
                    np.concatenate([labels[-1, :], labels[:, -1]])):
        if p and q:
            rp, rq = find(p), find(q)
            if rp != rq:
                parent[max(rp, rq)] = min(rp, rq)
    roots = np.array([find(i) for i in range(n + 1)])
    uniq, relabel = np.unique(roots, return_inverse=True)
    merged = relabel[labels]
    return merged, len(uniq) - 1


def component_stats(field, threshold=0.25) -> ComponentStats:
    mask = _as_b(field) > threshold
    labels, n = torus_label(mask)
    sizes = np.bincount(labels.ravel())[1:] if n else np.zeros(0, dtype=np.int64)
    return ComponentStats(int(n), np.sort(sizes)[::-1], float(mask.mean()))


def phase_stats(field, threshold=None):
    """Component stats of the high phase and of the low phase (default split at the mean)."""
    Z = _as_b(field).astype(np.float64)
    t = Z.mean() if threshold is None else threshold
    return component_stats(Z, t), component_stats(-Z, -t)


def classify_pattern(field, flat=1e-3, ratio=4.0):
    """'uniform', 'spots', 'holes' or 'stripes' from how the two phases break up.

    Spots leave many islands of high B in one connected sea, holes the reverse.
    Stripes and labyrinths split both phases into comparable counts of bands.
    """
    Z = _as_b(field)
    if float(np.std(Z)) < flat:
        return "uniform"
    high, low = phase_stats(Z)
    if high.count >= ratio * max(low.count, 1):
        return "spots"
    if low.count >= ratio * max(high.count, 1):
        return "holes"
    return "stripes"


class Stability(NamedTuple):
    growth: float            # largest real growth rate per step over all wavenumbers
    wavelength: float        # cells; inf when the fastest mode is uniform
    turing: bool             # a stationary mode with k > 0 grows
    hopf: bool               # the uniform state oscillates with growing amplitude


def linear_stability(params, samples=512) -> Stability:
    """Linearise the reaction at its uniform steady state against the 9-point stencil."""
    a0, b0 = kinetics.steady_state(params.model, params.feed, params.kill)
    J = kinetics.jacobian(params.model, a0, b0, params.feed, params.kill)
    k = np.linspace(0.0, np.pi, samples)
    # Stencil symbol along one axis
    lam = W_ORTHO * (2.0 * np.cos(k) + 2.0) + W_DIAG * 4.0 * np.cos(k) - 1.0
    M = np.repeat(J[None], samples, axis=0)
    M[:, 0, 0] += params.diffusion_a * lam
    M[:, 1, 1] += params.diffusion_b * lam
    ev = np.linalg.eigvals(M)
    re = ev.real
    stationary = np.abs(ev.imag) < 1e-12
    turing = bool(np.any((re[1:] > 0) & stationary[1:]))
    hopf = bool(np.any((re[0] > 0) & ~stationary[0]))
    top = re.max(axis=1)
    i = int(np.argmax(top))
    wavelength = 2.0 * np.pi / k[i] if i else float("inf")
    return Stability(float(top[i]), float(wavelength), turing, hopf)
