"""
Display pass: draws a generated image onto a surface through a
full-screen quad.

Two stages, as on the GPU:
- vertex_stage   -> positions pass through as clip space, texcoords unchanged
- fragment_stage -> nearest-filter sample of the image, red forced to 1.0

rasterize() sits between them and turns the indexed triangle list into a
per-pixel texcoord field plus a coverage mask. Counter-clockwise
triangles are front-facing; back faces are culled.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

# (x, y, z) clip-space positions and (u, v) texcoords of the quad A, B, C, D
QUAD_POSITIONS = np.array(
    [
        [-1.0, 1.0, 0.0],
        [-1.0, -1.0, 0.0],
        [1.0, -1.0, 0.0],
        [1.0, 1.0, 0.0],
    ]
)
QUAD_TEX_COORDS = np.array(
    [
        [0.0, 0.0],
        [0.0, 1.0],
        [1.0, 1.0],
        [1.0, 0.0],
    ]
)
QUAD_INDICES = np.array([0, 1, 2, 2, 3, 0], dtype=np.uint16)


def vertex_stage(positions: np.ndarray, tex_coords: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """No transform: (x, y, z) -> (x, y, z, 1); texcoords are forwarded as is."""
    positions = np.asarray(positions, dtype=np.float64)
    clip = np.concatenate([positions, np.ones((len(positions), 1))], axis=1)
    return clip, np.asarray(tex_coords, dtype=np.float64)


def _edge(ax, ay, bx, by, px, py):
    return (bx - ax) * (py - ay) - (by - ay) * (px - ax)


def rasterize(
    clip: np.ndarray,
    tex_coords: np.ndarray,
    indices: np.ndarray,
    surface_size: Tuple[int, int],
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Interpolate texcoords at every pixel centre covered by the triangles.

    Returns (uv, covered): uv has shape (height, width, 2), covered is a
    (height, width) bool mask.
    """
    width, height = surface_size
    ndc = clip[:, :2] / clip[:, 3:4]
    # viewport transform: NDC y points up, window rows point down
    wx = (ndc[:, 0] + 1.0) * 0.5 * width
    wy = (1.0 - ndc[:, 1]) * 0.5 * height

    px, py = np.meshgrid(np.arange(width) + 0.5, np.arange(height) + 0.5)
    uv = np.zeros((height, width, 2))
    covered = np.zeros((height, width), dtype=bool)

    for tri in np.asarray(indices).reshape(-1, 3):
        i0, i1, i2 = (int(i) for i in tri)
        area_ndc = _edge(ndc[i0, 0], ndc[i0, 1], ndc[i1, 0], ndc[i1, 1], ndc[i2, 0], ndc[i2, 1])
        if area_ndc <= 0.0:
            continue

        area = _edge(wx[i0], wy[i0], wx[i1], wy[i1], wx[i2], wy[i2])
        w0 = _edge(wx[i1], wy[i1], wx[i2], wy[i2], px, py) / area
        w1 = _edge(wx[i2], wy[i2], wx[i0], wy[i0], px, py) / area
        w2 = _edge(wx[i0], wy[i0], wx[i1], wy[i1], px, py) / area
        inside = (w0 >= 0.0) & (w1 >= 0.0) & (w2 >= 0.0)

        interp = (
            w0[..., None] * tex_coords[i0]
            + w1[..., None] * tex_coords[i1]
            + w2[..., None] * tex_coords[i2]
        )
        uv[inside] = interp[inside]
        covered |= inside

    return uv, covered


def sample_nearest(image: np.ndarray, uv: np.ndarray) -> np.ndarray:
    """Nearest-filter lookup with repeat addressing on both axes."""
    height, width = image.shape[:2]
    u = uv[..., 0] - np.floor(uv[..., 0])
    v = uv[..., 1] - np.floor(uv[..., 1])
    tx = np.minimum((u * width).astype(np.int64), width - 1)
    ty = np.minimum((v * height).astype(np.int64), height - 1)
    return image[ty, tx]


def fragment_stage(image: np.ndarray, uv: np.ndarray, force_red: bool = True) -> np.ndarray:
    color = np.array(sample_nearest(image, uv), dtype=np.float32)
    if force_red:
        color[..., 0] = 1.0
    return color


def present(
    image: np.ndarray,
    surface_size: Optional[Tuple[int, int]] = None,
    *,
    target: Optional[np.ndarray] = None,
    positions: np.ndarray = QUAD_POSITIONS,
    tex_coords: np.ndarray = QUAD_TEX_COORDS,
    indices: np.ndarray = QUAD_INDICES,
    force_red: bool = True,
) -> np.ndarray:
    """
    Draw `image` onto a surface and return the frame (height, width, 4) float32.

    surface_size defaults to the image size. Pixels the geometry does not
    cover keep the contents of `target` (zeros when no target is given).
    """
    if surface_size is None:
        if target is not None:
            surface_size = (target.shape[1], target.shape[0])
        else:
            surface_size = (image.shape[1], image.shape[0])
    width, height = surface_size

    if target is None:
        frame = np.zeros((height, width, 4), dtype=np.float32)
    else:
        if target.shape[:2] != (height, width):
            raise ValueError(f"Target shape {target.shape[:2]} does not match surface {height}x{width}")
        frame = np.array(target, dtype=np.float32)

    clip, uv_in = vertex_stage(positions, tex_coords)
    uv, covered = rasterize(clip, uv_in, indices, (width, height))
    frame[covered] = fragment_stage(image, uv[covered], force_red)
    return frame


def to_rgba8(frame: np.ndarray) -> np.ndarray:
    """Quantise a float frame to uint8 RGBA for export."""
    return (np.clip(frame, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
