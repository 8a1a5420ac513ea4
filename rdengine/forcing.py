# forcing.py
# Localized edits of one chemical channel (brush / eraser / stamp).
#
# Each edit is an out-of-band "step": it reads the current buffer, writes the whole
# scratch buffer and swaps, so the current buffer is always complete.

import enum
import logging

import numpy as np

from .grid import A, B, torus_dist2

logger = logging.getLogger(__name__)


class Tool(enum.Enum):
    BRUSH = "brush"
    ERASER = "eraser"
    STAMP = "stamp"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown tool {value!r}; choose one of {[t.value for t in cls]}") from None


class Channel(enum.IntEnum):
    A = A
    B = B

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        elif value in (A, B):
            return cls(value)
        raise ValueError(f"Unknown channel {value!r}; use 'A' or 'B'")


def falloff_mask(n, x, y, radius, strength):
    """(1 - d/r)^2 * strength inside the disc, 0 outside; d is the toroidal distance."""
    d = np.sqrt(torus_dist2(n, y, x))
    fall = np.zeros((n, n), dtype=np.float64)
    inside = d < radius
    fall[inside] = (1.0 - d[inside] / radius) ** 2 * strength
    return fall


def apply_force(grid, x, y, radius, strength=1.0, channel=Channel.B, sign=1):
    """Add (sign > 0) or subtract (sign < 0) a smooth radial bump on `channel` around (x, y).

    sign == 0 leaves the field untouched. x is the column, y the row, both in grid
    cells; positions wrap around the torus.
    """
    if radius <= 0 or sign == 0:
        return False
    channel = Channel.parse(channel)
    n = grid.resolution
    fall = falloff_mask(n, x, y, radius, strength)
    cur = grid.current()
    nxt = grid.scratch()
    nxt[...] = cur
    delta = fall if sign > 0 else -fall
    nxt[channel] = np.clip(cur[channel] + delta, 0.0, 1.0)
    grid.swap()
    return True


def apply_stamp(grid, x, y, radius, channel=Channel.B, value=1.0):
    """Hard-edged disc: set `channel` to `value` wherever d <= radius."""
    if radius <= 0:
        return False
    channel = Channel.parse(channel)
    n = grid.resolution
    inside = torus_dist2(n, y, x) <= radius * radius
    cur = grid.current()
    nxt = grid.scratch()
    nxt[...] = cur
    nxt[channel][inside] = min(1.0, max(0.0, value))
    grid.swap()
    return True


def apply_tool(grid, tool, x, y, radius, strength=1.0, channel=Channel.B):
    """Dispatch a pointer event the way the painting tools behave.

    Brush on B paints activator, brush on A (and the eraser) scrubs activator away;
    the stamp drops a saturated disc of B.
    """
    tool = Tool.parse(tool)
    channel = Channel.parse(channel)
    if tool is Tool.STAMP:
        return apply_stamp(grid, x, y, radius, Channel.B)
    if tool is Tool.ERASER or channel is Channel.A:
        return apply_force(grid, x, y, radius, strength, Channel.B, sign=-1)
    return apply_force(grid, x, y, radius, strength, Channel.B, sign=+1)
