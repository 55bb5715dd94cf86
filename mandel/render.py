from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

import numpy as np

from mandel.coloring import color_sample, colorize
from mandel.iterators import complex_grid, escape_time, escape_time_grid, pixel_to_complex
from mandel.params import DEFAULT_TILE, ParamsError, is_positive_int, validate_size


def work_group_count(size, tile):
    """Number of tiles needed to cover `size`, rounding up on each axis."""
    (width, height), (tile_w, tile_h) = size, tile
    return (width + tile_w - 1) // tile_w, (height + tile_h - 1) // tile_h


def shade_pixel(x, y, width, height, params, blue_as_green=True):
    """
    One work unit: colour for pixel (x, y), or None when (x, y) lies in
    the padding of a tile that overhangs the image.
    """
    if x >= width or y >= height:
        return None
    c_re, c_im = pixel_to_complex(x, y, width, height, params)
    n = escape_time(c_re, c_im, params.max_iterations)
    return color_sample(n, params.max_iterations, blue_as_green)


def _scalar_tile(task):
    (gx, gy), (tile_w, tile_h), (width, height), params, blue_as_green = task
    x0, y0 = gx * tile_w, gy * tile_h
    block = np.zeros((min(tile_h, height - y0), min(tile_w, width - x0), 4), dtype=np.float32)
    for ly in range(tile_h):
        for lx in range(tile_w):
            sample = shade_pixel(x0 + lx, y0 + ly, width, height, params, blue_as_green)
            if sample is None:
                continue
            block[ly, lx] = sample
    return x0, y0, block


def _vector_tile(task):
    (gx, gy), (tile_w, tile_h), (width, height), params, blue_as_green = task
    x0, y0 = gx * tile_w, gy * tile_h
    x1, y1 = min(x0 + tile_w, width), min(y0 + tile_h, height)
    c_re, c_im = complex_grid(x0, x1, y0, y1, width, height, params)
    iters = escape_time_grid(c_re, c_im, params.max_iterations)
    return x0, y0, colorize(iters, params.max_iterations, blue_as_green)


KERNELS = {
    "scalar": _scalar_tile,
    "vector": _vector_tile,
}


EXECUTORS = {
    "serial": None,
    "threads": ThreadPoolExecutor,
    "processes": ProcessPoolExecutor,
}


def _map_tiles(fn, tasks, executor, workers):
    pool_cls = EXECUTORS[executor]
    if pool_cls is None:
        return list(map(fn, tasks))
    with pool_cls(max_workers=workers) as pool:
        return list(pool.map(fn, tasks))


def generate_image(
    params,
    width,
    height,
    *,
    tile=DEFAULT_TILE,
    kernel="vector",
    executor="threads",
    workers=None,
    blue_as_green=True,
):
    """
    Render the Mandelbrot set for `params` into a (height, width, 4) float32 image.

    Colours are kept at full float precision; they are not quantised to
    8 bits per channel before display (use display.to_rgba8 for that).

    The work grid is padded to whole tiles; every tile is an independent
    task. Returns only after all tiles are stored, and the result is
    read-only.

    kernel:
      "scalar" -> one shade_pixel work unit per pixel
      "vector" -> numpy evaluation of each tile (default)
    executor:
      "serial" | "threads" (default) | "processes"
    """
    params.validate()
    width, height = validate_size(width, height)
    tile_w, tile_h = tile
    if not (is_positive_int(tile_w) and is_positive_int(tile_h)):
        raise ParamsError(f"Tile size must be positive integers, got {tile_w}x{tile_h}")
    try:
        fn = KERNELS[kernel]
    except KeyError:
        raise ValueError(f"Unknown kernel: {kernel}") from None
    if executor not in EXECUTORS:
        raise ValueError(f"Unknown executor: {executor}")

    groups_x, groups_y = work_group_count((width, height), (tile_w, tile_h))
    tasks = [
        ((gx, gy), (tile_w, tile_h), (width, height), params, blue_as_green)
        for gy in range(groups_y)
        for gx in range(groups_x)
    ]

    image = np.zeros((height, width, 4), dtype=np.float32)
    for x0, y0, block in _map_tiles(fn, tasks, executor, workers):
        h, w = block.shape[:2]
        image[y0:y0 + h, x0:x0 + w] = block

    image.setflags(write=False)
    return image


class FrameRenderer:
    """
    Owns the output of successive generation passes.

    `frame` always holds the last fully generated image; a pass rejected
    at validation leaves it untouched.
    """

    def __init__(self, size, *, tile=DEFAULT_TILE, kernel="vector", executor="threads",
                 workers=None, blue_as_green=True):
        self.size = validate_size(*size)
        self.tile = tile
        self.kernel = kernel
        self.executor = executor
        self.workers = workers
        self.blue_as_green = blue_as_green
        self.frame = None

    def run(self, params):
        width, height = self.size
        self.frame = generate_image(
            params,
            width,
            height,
            tile=self.tile,
            kernel=self.kernel,
            executor=self.executor,
            workers=self.workers,
            blue_as_green=self.blue_as_green,
        )
        return self.frame
