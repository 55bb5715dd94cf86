"""
Iteration count -> RGBA colour.

Counts are normalised, square-root compressed and used as the hue of an
HSV colour with saturation 0.5. Interior points (count == max) get zero
value and come out black.

The emitted sample copies the blue channel into green as well, matching
the frames produced by the original GPU shader. Pass blue_as_green=False
for the ordinary (r, g, b) mapping.
"""

import math

import numpy as np

from mandel.utils import clamp, fract, mix

SATURATION = 0.5
HUE_OFFSETS = (1.0, 2.0 / 3.0, 1.0 / 3.0)


def hsv_to_rgb(h: float, s: float, v: float) -> tuple:
    rgb = []
    for k in HUE_OFFSETS:
        p = abs(fract(h + k) * 6.0 - 3.0)
        rgb.append(v * mix(1.0, clamp(p - 1.0, 0.0, 1.0), s))
    return tuple(rgb)


def color_sample(n: int, max_iterations: int, blue_as_green: bool = True) -> tuple:
    normalized = n / max_iterations
    val = math.sqrt(normalized)
    brightness = 0.0 if n >= max_iterations else 1.0
    r, g, b = hsv_to_rgb(val, SATURATION, brightness)
    if blue_as_green:
        g = b
    return (r, g, b, 1.0)


def hsv_to_rgb_array(h, s, v) -> np.ndarray:
    """Array form of hsv_to_rgb; returns shape h.shape + (3,)."""
    h = np.asarray(h, dtype=np.float64)[..., None]
    v = np.asarray(v, dtype=np.float64)[..., None]
    k = np.asarray(HUE_OFFSETS)
    shifted = h + k
    p = np.abs((shifted - np.floor(shifted)) * 6.0 - 3.0)
    q = np.clip(p - 1.0, 0.0, 1.0)
    return v * (1.0 * (1.0 - s) + q * s)


def colorize(iters, max_iterations: int, blue_as_green: bool = True) -> np.ndarray:
    """Map an array of iteration counts to float32 RGBA, shape iters.shape + (4,)."""
    iters = np.asarray(iters)
    normalized = iters / max_iterations
    val = np.sqrt(normalized)
    brightness = np.where(iters >= max_iterations, 0.0, 1.0)
    rgb = hsv_to_rgb_array(val, SATURATION, brightness)

    out = np.empty(iters.shape + (4,), dtype=np.float32)
    out[..., 0] = rgb[..., 0]
    out[..., 1] = rgb[..., 2] if blue_as_green else rgb[..., 1]
    out[..., 2] = rgb[..., 2]
    out[..., 3] = 1.0
    return out
