from mandel.params import FractalParams, ParamsError, View
from mandel.render import FrameRenderer, generate_image
from mandel.display import present, to_rgba8

__all__ = [
    "FractalParams",
    "ParamsError",
    "View",
    "FrameRenderer",
    "generate_image",
    "present",
    "to_rgba8",
]
