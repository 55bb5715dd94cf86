import math

import numpy as np

BAILOUT_RADIUS = 2.0


def pixel_to_complex(x: int, y: int, width: int, height: int, params) -> tuple:
    """
    Map pixel (x, y) of a width x height image onto the params window.

    Pixel (0, 0) lands exactly on (x_min, y_min); the last pixel sits one
    pixel-width short of (x_max, y_max).
    """
    x_norm = x / width
    y_norm = y / height
    re = x_norm * (params.x_max - params.x_min) + params.x_min
    im = y_norm * (params.y_max - params.y_min) + params.y_min
    return re, im


def complex_grid(x0: int, x1: int, y0: int, y1: int, width: int, height: int, params):
    """
    Vectorised pixel_to_complex over the pixel block [x0, x1) x [y0, y1).

    Returns (re, im) float64 arrays of shape (y1 - y0, x1 - x0).
    """
    xs = np.arange(x0, x1, dtype=np.float64) / width
    ys = np.arange(y0, y1, dtype=np.float64) / height
    re = xs * (params.x_max - params.x_min) + params.x_min
    im = ys * (params.y_max - params.y_min) + params.y_min
    return np.broadcast_to(re, (len(ys), len(xs))), np.broadcast_to(im[:, None], (len(ys), len(xs)))


def escape_time(c_re: float, c_im: float, max_iterations: int) -> int:
    """Iterations z -> z^2 + c survives from z = 0 with |z| <= 2, capped at max_iterations."""
    z_re, z_im = 0.0, 0.0
    n = 0
    while math.sqrt(z_re * z_re + z_im * z_im) <= BAILOUT_RADIUS and n < max_iterations:
        z_re, z_im = z_re * z_re - z_im * z_im + c_re, z_re * z_im + z_im * z_re + c_im
        n += 1
    return n


def escape_time_grid(c_re, c_im, max_iterations: int) -> np.ndarray:
    """
    Vectorised escape_time. Counts are identical to the scalar loop: a
    point keeps iterating while |z| <= 2 and its count is below the cap.
    """
    c_re = np.asarray(c_re, dtype=np.float64)
    c_im = np.asarray(c_im, dtype=np.float64)
    z_re = np.zeros(c_re.shape, dtype=np.float64)
    z_im = np.zeros(c_re.shape, dtype=np.float64)
    n = np.zeros(c_re.shape, dtype=np.int64)

    for _ in range(max_iterations):
        active = np.sqrt(z_re * z_re + z_im * z_im) <= BAILOUT_RADIUS
        if not np.any(active):
            break
        zr, zi = z_re[active], z_im[active]
        z_re[active] = zr * zr - zi * zi + c_re[active]
        z_im[active] = zr * zi + zi * zr + c_im[active]
        n[active] += 1

    return n
