import argparse
import os
import sys
import time
from pathlib import Path

# Ensure repository root is on sys.path so `from mandel...` works when running
# this script directly (e.g. `python scripts/make_image.py`).
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from mandel.display import present, to_rgba8
from mandel.params import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_SIZE,
    DEFAULT_TILE,
    FractalParams,
    View,
)
from mandel.render import FrameRenderer
from mandel.utils import parse_complex


def build_params(args) -> FractalParams:
    if args.center is not None:
        c = parse_complex(args.center)
        view = View(center=(c.real, c.imag), zoom=args.zoom)
        return view.to_params(args.max_iter)
    if args.cx is not None or args.cy is not None:
        view = View(center=(args.cx or 0.0, args.cy or 0.0), zoom=args.zoom)
        return view.to_params(args.max_iter)
    return FractalParams(
        x_min=args.xmin,
        x_max=args.xmax,
        y_min=args.ymin,
        y_max=args.ymax,
        max_iterations=args.max_iter,
    )


def main():
    parser = argparse.ArgumentParser(description="Render a Mandelbrot set frame")
    parser.add_argument("--xmin", type=float, default=-2.0)
    parser.add_argument("--xmax", type=float, default=1.0)
    parser.add_argument("--ymin", type=float, default=-1.5)
    parser.add_argument("--ymax", type=float, default=1.5)
    parser.add_argument("--center", type=str, default=None,
                        help="window centre; overrides the bounds. Use the '=' form for a "
                             "negative real part: --center=-0.75+0.1j")
    parser.add_argument("--cx", type=float, default=None, help="real part of the window centre")
    parser.add_argument("--cy", type=float, default=None, help="imaginary part of the window centre")
    parser.add_argument("--zoom", type=float, default=1.0,
                        help="half-extent of the window when a centre is given")
    parser.add_argument("--width", type=int, default=DEFAULT_SIZE[0])
    parser.add_argument("--height", type=int, default=DEFAULT_SIZE[1])
    parser.add_argument("--max_iter", type=int, default=DEFAULT_MAX_ITERATIONS)
    parser.add_argument("--tile", type=int, default=DEFAULT_TILE[0])
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--kernel", type=str, default="vector", choices=["scalar", "vector"])
    parser.add_argument("--executor", type=str, default="threads",
                        choices=["serial", "threads", "processes"])
    parser.add_argument("--plain-colors", action="store_true",
                        help="keep the green channel and skip the forced red on display")
    parser.add_argument("--outfile", type=str, default=None)
    parser.add_argument("--show", action="store_true")

    args = parser.parse_args()

    try:
        params = build_params(args)
        renderer = FrameRenderer(
            (args.width, args.height),
            tile=(args.tile, args.tile),
            kernel=args.kernel,
            executor=args.executor,
            workers=args.workers,
            blue_as_green=not args.plain_colors,
        )
        print(f"[run] {args.width}x{args.height} | max_iter={params.max_iterations} | "
              f"window={params.extent} | kernel={args.kernel}/{args.executor}")
        start_time = time.time()
        image = renderer.run(params)
    except ValueError as e:
        print(f"[error] {e}")
        return 1
    print(f"[run] generated in {time.time() - start_time:.2f} seconds")

    frame = present(image, force_red=not args.plain_colors)

    if args.outfile:
        out_path = Path(args.outfile)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        from PIL import Image
        Image.fromarray(to_rgba8(frame)).save(out_path)
        print(f"[run] saved to {out_path}")

    if args.show:
        import matplotlib.pyplot as plt
        plt.figure(figsize=(8, 8))
        # row 0 holds y_min, so the y axis runs downward
        x_min, x_max, y_min, y_max = params.extent
        plt.imshow(frame, extent=(x_min, x_max, y_max, y_min), origin="upper")
        plt.title(f"Mandelbrot Set ({args.width}x{args.height}, max_iter={params.max_iterations})")
        plt.xlabel("Re(c)")
        plt.ylabel("Im(c)")
        plt.gca().set_aspect("equal", adjustable="box")
        plt.show()

    print("[run] done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
