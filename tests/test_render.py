import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from mandel.coloring import color_sample
from mandel.iterators import escape_time, pixel_to_complex
from mandel.params import FractalParams, ParamsError
from mandel.render import FrameRenderer, generate_image, shade_pixel, work_group_count

CLASSIC = FractalParams(x_min=-2.0, x_max=1.0, y_min=-1.5, y_max=1.5, max_iterations=50)


def test_work_group_count_rounds_up():
    assert work_group_count((10, 10), (16, 16)) == (1, 1)
    assert work_group_count((32, 17), (16, 16)) == (2, 2)
    assert work_group_count((1024, 1024), (16, 16)) == (64, 64)


def test_shade_pixel_skips_padding():
    assert shade_pixel(12, 3, 10, 10, CLASSIC) is None
    assert shade_pixel(3, 10, 10, 10, CLASSIC) is None
    assert shade_pixel(9, 9, 10, 10, CLASSIC) is not None


def test_end_to_end_4x4_counts():
    """Pixel (3, 2) maps to c = (0.25, 0); pixel (3, 3) to c = (0.25, 0.75)."""
    assert pixel_to_complex(3, 2, 4, 4, CLASSIC) == (0.25, 0.0)
    assert escape_time(*pixel_to_complex(3, 2, 4, 4, CLASSIC), CLASSIC.max_iterations) == 50

    n_corner = escape_time(*pixel_to_complex(3, 3, 4, 4, CLASSIC), CLASSIC.max_iterations)
    assert n_corner < 10

    image = generate_image(CLASSIC, 4, 4)
    assert image.shape == (4, 4, 4)
    np.testing.assert_array_equal(image[2, 3], np.float32(color_sample(50, 50)))
    np.testing.assert_array_equal(image[3, 3], np.float32(color_sample(n_corner, 50)))


@pytest.mark.parametrize("kernel", ["scalar", "vector"])
def test_padded_grid_keeps_image_size(kernel):
    image = generate_image(CLASSIC, 10, 10, tile=(16, 16), kernel=kernel, executor="serial")
    assert image.shape == (10, 10, 4)
    # every pixel was written: alpha is 1 everywhere
    np.testing.assert_array_equal(image[..., 3], np.ones((10, 10), dtype=np.float32))


def test_kernels_agree():
    params = FractalParams(-0.9, -0.6, 0.1, 0.35, 80)
    scalar = generate_image(params, 21, 13, tile=(8, 8), kernel="scalar", executor="serial")
    vector = generate_image(params, 21, 13, tile=(8, 8), kernel="vector", executor="serial")
    np.testing.assert_array_equal(scalar, vector)


@pytest.mark.parametrize("executor", ["threads", "processes"])
def test_executors_agree_with_serial(executor):
    expected = generate_image(CLASSIC, 20, 12, tile=(16, 16), executor="serial")
    result = generate_image(CLASSIC, 20, 12, tile=(16, 16), executor=executor, workers=2)
    np.testing.assert_array_equal(result, expected)


def test_tile_size_does_not_change_image():
    a = generate_image(CLASSIC, 19, 11, tile=(16, 16), executor="serial")
    b = generate_image(CLASSIC, 19, 11, tile=(3, 5), executor="serial")
    np.testing.assert_array_equal(a, b)


def test_output_is_read_only():
    image = generate_image(CLASSIC, 4, 4)
    with pytest.raises(ValueError):
        image[0, 0, 0] = 0.5


@pytest.mark.parametrize(
    "params",
    [
        FractalParams(1.0, -2.0, -1.5, 1.5, 50),
        FractalParams(-2.0, 1.0, 1.5, 1.5, 50),
        FractalParams(-2.0, 1.0, -1.5, 1.5, 0),
    ],
)
def test_invalid_params_rejected(params):
    with pytest.raises(ParamsError):
        generate_image(params, 4, 4)


def test_bad_size_and_names_rejected():
    with pytest.raises(ParamsError):
        generate_image(CLASSIC, 0, 4)
    with pytest.raises(ParamsError):
        generate_image(CLASSIC, 4, 4, tile=(0, 16))
    with pytest.raises(ParamsError):
        generate_image(CLASSIC, 4, 4, tile=(2.5, 2))
    with pytest.raises(ParamsError):
        generate_image(CLASSIC, float("inf"), 4)
    with pytest.raises(ParamsError):
        generate_image(CLASSIC, 4, float("nan"))
    with pytest.raises(ValueError, match="Unknown kernel"):
        generate_image(CLASSIC, 4, 4, kernel="gpu")
    with pytest.raises(ValueError, match="Unknown executor"):
        generate_image(CLASSIC, 4, 4, executor="cluster")


def test_frame_renderer_keeps_previous_frame_on_error():
    renderer = FrameRenderer((8, 6), executor="serial")
    first = renderer.run(CLASSIC)
    assert first.shape == (6, 8, 4)

    with pytest.raises(ParamsError):
        renderer.run(FractalParams(0.0, 0.0, -1.0, 1.0, 10))
    assert renderer.frame is first


def test_plain_colors_keep_green():
    tinted = generate_image(CLASSIC, 8, 8, executor="serial")
    plain = generate_image(CLASSIC, 8, 8, executor="serial", blue_as_green=False)
    np.testing.assert_array_equal(tinted[..., 1], tinted[..., 2])
    np.testing.assert_array_equal(tinted[..., 0], plain[..., 0])
    assert not np.array_equal(plain[..., 1], plain[..., 2])
