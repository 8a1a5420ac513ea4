# kinetics.py
# Local reaction terms for the supported two-chemical models, plus the preset table.
#
# Every model is a pure function  reaction(a, b, F, K) -> (da, db)  working on
# floats or numpy arrays alike. Channel A is the substrate/inhibitor, channel B the
# activator that gets rendered. All models take the same (feed, kill) dialect;
# Brusselator and Schnakenberg map it onto canonical constants pinned per preset.

import enum
from typing import NamedTuple, List

import numpy as np


class Model(enum.Enum):
    GRAY_SCOTT = "gray-scott"
    BRUSSELATOR = "brusselator"
    SCHNAKENBERG = "schnakenberg"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        for m in cls:
            if m.value == key or m.name.lower().replace("_", "-") == key:
                return m
        raise ValueError(f"Unknown model {value!r}; choose one of {[m.value for m in cls]}")


class Preset(NamedTuple):
    name: str
    f: float
    k: float


class ModelDefaults(NamedTuple):
    f: float
    k: float
    diffusion_a: float
    diffusion_b: float


# =========================
# Gray–Scott
# =========================
def gray_scott(a, b, F, K):
    abb = a * b * b
    da = -abb + F * (1.0 - a)
    db = abb - (K + F) * b
    return da, db


# =========================
# Brusselator (rescaled)
# =========================
# u = activator = B*SCALE, v = inhibitor = A*SCALE
#   du/dt = alpha - (beta+1) u + u^2 v
#   dv/dt = beta u - u^2 v
# Steady state (alpha, beta/alpha). With eta = sqrt(Db/Da) the Turing line is
# beta = (1 + alpha*eta)^2 and the Hopf line beta = 1 + alpha^2. alpha*eta = 1
# gives stripes, alpha*eta < 1 gives spots, small alpha sits past Hopf only (waves).
BRUSS_SCALE = 6.0
BRUSS_RATE = 0.006


def brusselator(a, b, F, K):
    alpha, beta = brusselator_constants(F, K)
    u = b * BRUSS_SCALE
    v = a * BRUSS_SCALE
    uuv = u * u * v
    du = alpha - (beta + 1.0) * u + uuv
    dv = beta * u - uuv
    return BRUSS_RATE * dv / BRUSS_SCALE, BRUSS_RATE * du / BRUSS_SCALE


# =========================
# Schnakenberg (rescaled)
# =========================
# u = activator = B*SCALE, v = substrate = A*SCALE
#   du/dt = p - u + u^2 v
#   dv/dt = q - u^2 v
# Linearly the same as the Brusselator with alpha = p+q and beta = 2q/(p+q);
# stripes sit at (p+q)*eta = 1/3. Needs a fast substrate (Da/Db ~ 20).
SCHNAK_SCALE = 4.0
SCHNAK_RATE = 0.018


def schnakenberg(a, b, F, K):
    p, q = schnakenberg_constants(F, K)
    u = b * SCHNAK_SCALE
    v = a * SCHNAK_SCALE
    uuv = u * u * v
    du = p - u + uuv
    dv = q - uuv
    return SCHNAK_RATE * dv / SCHNAK_SCALE, SCHNAK_RATE * du / SCHNAK_SCALE


REACTIONS = {
    Model.GRAY_SCOTT: gray_scott,
    Model.BRUSSELATOR: brusselator,
    Model.SCHNAKENBERG: schnakenberg,
}


def model_of(reaction_fn):
    for model, fn in REACTIONS.items():
        if fn is reaction_fn:
            return model
    raise ValueError(f"{reaction_fn!r} is not a registered reaction")


def reaction_for(model):
    return REACTIONS[Model.parse(model)]


def reaction(model, a, b, F, K):
    """Evaluate the local reaction rate of `model` at (a, b)."""
    return REACTIONS[Model.parse(model)](a, b, F, K)



MODEL_DEFAULTS = {
    Model.GRAY_SCOTT:   ModelDefaults(0.055, 0.062, 0.21, 0.105),
    Model.BRUSSELATOR:  ModelDefaults(0.040, 0.060, 0.40, 0.05),
    Model.SCHNAKENBERG: ModelDefaults(0.040, 0.060, 1.00, 0.05),
}


# =========================
# Presets (name, F, K)
# =========================
PRESETS = {
    Model.GRAY_SCOTT: (
        Preset("Mitosis",     0.0367, 0.0649),
        Preset("Coral",       0.0545, 0.0620),
        Preset("Fingerprint", 0.0370, 0.0610),
        Preset("Spirals",     0.0180, 0.0510),
        Preset("Maze",        0.0290, 0.0570),
        Preset("Spots",       0.0380, 0.0660),
        Preset("Stripes",     0.0350, 0.0600),
        Preset("Waves",       0.0140, 0.0450),
        Preset("Solitons",    0.0250, 0.0550),
        Preset("Worms",       0.0460, 0.0650),
        Preset("Holes",       0.0390, 0.0649),
        Preset("Chaos",       0.0260, 0.0590),
    ),
    Model.BRUSSELATOR: (
        Preset("Spots",   0.040, 0.060),
        Preset("Stripes", 0.035, 0.065),
        Preset("Spirals", 0.020, 0.055),
        Preset("Waves",   0.025, 0.058),
        Preset("Mixed",   0.030, 0.062),
        Preset("Chaos",   0.045, 0.052),
    ),
    Model.SCHNAKENBERG: (
        Preset("Dots",   0.040, 0.060),
        Preset("Lines",  0.030, 0.065),
        Preset("Mixed",  0.035, 0.058),
        Preset("Sparse", 0.020, 0.070),
        Preset("Dense",  0.050, 0.055),
        Preset("Waves",  0.025, 0.062),
    ),
}


def get_presets(model) -> List[Preset]:
    return list(PRESETS[Model.parse(model)])


def find_preset(model, key) -> Preset:
    """Look a preset up by index or (case-insensitive) name."""
    presets = PRESETS[Model.parse(model)]
    if isinstance(key, int):
        return presets[key]
    for p in presets:
        if p.name.lower() == str(key).strip().lower():
            return p
    raise ValueError(f"No preset {key!r} for {Model.parse(model).value}; "
                     f"choose one of {[p.name for p in presets]}")


# =========================
# Canonical constants
# =========================
# Each Brusselator/Schnakenberg preset pins its own canonical pair; any other
# (F, K) is an inverse-square-distance blend of the pinned pairs.
# Brusselator (alpha, beta), eta = sqrt(0.05/0.4)
BRUSS_ANCHORS = {
    "Spots":   (1.41421, 2.475),   # alpha*eta = 1/2, just past Turing
    "Stripes": (2.82843, 4.6),     # alpha*eta = 1
    "Spirals": (0.45, 1.30),       # past Hopf, below Turing
    "Waves":   (0.40, 1.24),
    "Mixed":   (2.12132, 3.43),
    "Chaos":   (1.0, 2.3),         # past both
}

# Schnakenberg (p, q), eta = sqrt(0.05/1.0)
SCHNAK_ANCHORS = {
    "Dots":   (0.18605, 0.70837),  # (p+q)*eta = 1/5
    "Lines":  (0.03313, 1.45758),  # (p+q)*eta = 1/3
    "Mixed":  (0.13633, 1.07113),
    "Sparse": (0.22468, 0.66975),
    "Dense":  (0.12164, 0.77279),
    "Waves":  (0.10828, 0.12712),  # past Hopf, below Turing
}

SPAN_F = 0.1
SPAN_K = 0.08


def _pinned(model, anchors):
    return [(p.f, p.k, anchors[p.name]) for p in PRESETS[model]]


_BRUSS_PINNED = _pinned(Model.BRUSSELATOR, BRUSS_ANCHORS)
_SCHNAK_PINNED = _pinned(Model.SCHNAKENBERG, SCHNAK_ANCHORS)


def _blend(pinned, F, K):
    F = float(F)
    K = float(K)
    total = 0.0
    c1 = 0.0
    c2 = 0.0
    for f, k, (x, y) in pinned:
        d2 = ((F - f) / SPAN_F) ** 2 + ((K - k) / SPAN_K) ** 2
        if d2 < 1e-18:
            return x, y
        w = 1.0 / d2
        total += w
        c1 += w * x
        c2 += w * y
    return c1 / total, c2 / total


def brusselator_constants(F, K):
    return _blend(_BRUSS_PINNED, F, K)


def schnakenberg_constants(F, K):
    return _blend(_SCHNAK_PINNED, F, K)


def rate_constants(model, F, K):
    """The pair of constants a model's reaction actually runs with at (F, K)."""
    model = Model.parse(model)
    if model is Model.BRUSSELATOR:
        return brusselator_constants(F, K)
    if model is Model.SCHNAKENBERG:
        return schnakenberg_constants(F, K)
    return float(F), float(K)


def steady_state(model, F, K):
    """Homogeneous (a, b) where the reaction vanishes."""
    model = Model.parse(model)
    if model is Model.BRUSSELATOR:
        alpha, beta = brusselator_constants(F, K)
        return beta / alpha / BRUSS_SCALE, alpha / BRUSS_SCALE
    if model is Model.SCHNAKENBERG:
        p, q = schnakenberg_constants(F, K)
        s = p + q
        return q / (s * s) / SCHNAK_SCALE, s / SCHNAK_SCALE
    return 1.0, 0.0


def jacobian(model, a, b, F, K, eps=1e-6):
    """Central-difference Jacobian [[da/da, da/db], [db/da, db/db]] of the reaction."""
    fn = reaction_for(model)
    J = np.empty((2, 2))
    for col, (ea, eb) in enumerate(((eps, 0.0), (0.0, eps))):
        hi = fn(a + ea, b + eb, F, K)
        lo = fn(a - ea, b - eb, F, K)
        J[0, col] = (hi[0] - lo[0]) / (2 * eps)
        J[1, col] = (hi[1] - lo[1]) / (2 * eps)
    return J
