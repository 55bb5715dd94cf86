# mandel/utils.py
import math


def parse_complex(s: str) -> complex:
    """
    Parse strings like '-0.75+0.1j', '0.5j' or '-2' into a complex number.
    """
    s = s.strip().lower().replace(" ", "")
    try:
        return complex(s)
    except ValueError:
        raise ValueError(f"Not a complex number: {s!r}") from None


def clamp(v, vmin, vmax):
    return max(vmin, min(v, vmax))


def fract(v: float) -> float:
    return v - math.floor(v)


def mix(a: float, b: float, t: float) -> float:
    return a * (1.0 - t) + b * t
