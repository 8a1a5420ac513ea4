# colorize.py
# Channel B -> RGB through a two-stop gradient with contrast/brightness.
# Purely derived: nothing here writes back into the simulation.

import numpy as np
from PIL import Image

from .config import ColorConfig
from .grid import B


def tone(values, contrast=1.0, brightness=1.0):
    v = np.clip((np.asarray(values, dtype=np.float32) - 0.5) * contrast + 0.5, 0.0, 1.0)
    return np.clip(v * brightness, 0.0, 1.0)


def colorize(field, color: ColorConfig = None) -> np.ndarray:
    """Map a (2, R, R) state (or a bare (R, R) B field) to an (R, R, 3) float image in [0, 1]."""
    color = color or ColorConfig()
    field = np.asarray(field)
    values = field[B] if field.ndim == 3 else field
    t = tone(values, color.contrast, color.brightness)[..., None]
    low = np.asarray(color.low, dtype=np.float32)
    high = np.asarray(color.high, dtype=np.float32)
    return low + t * (high - low)


def to_uint8(rgb) -> np.ndarray:
    return (np.clip(rgb, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def to_image(rgb, scale: int = 1) -> Image.Image:
    rgb = np.asarray(rgb)
    img = Image.fromarray(rgb if rgb.dtype == np.uint8 else to_uint8(rgb))
    if scale > 1:
        img = img.resize((img.width * scale, img.height * scale), Image.Resampling.BILINEAR)
    return img


def render(field, color: ColorConfig = None) -> np.ndarray:
    """uint8 pixel buffer, upsampled by color.scale for high-resolution export."""
    color = color or ColorConfig()
    rgb = colorize(field, color)
    if color.scale == 1:
        return to_uint8(rgb)
    return np.asarray(to_image(rgb, color.scale))


def save_png(path, pixels):
    to_image(pixels).save(path, format="PNG")
    return path


def save_gif(frames, path="pattern.gif", duration_ms=50):
    imgs = [to_image(f) for f in frames]
    imgs[0].save(path, save_all=True, append_images=imgs[1:], loop=0, duration=duration_ms)
    return path
