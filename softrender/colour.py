from typing import Optional

import numpy as np

from .types import RGB

__all__ = ["BLACK", "WHITE", "RED", "GREEN", "BLUE", "rgb", "random_colour"]


def rgb(r: int, g: int, b: int) -> RGB:
    """Build an 8-bit colour; channels outside [0, 255] are clamped."""
    return np.clip(np.array((r, g, b)), 0, 255).astype(np.uint8)


BLACK: RGB = rgb(0, 0, 0)
WHITE: RGB = rgb(255, 255, 255)
RED: RGB = rgb(255, 0, 0)
GREEN: RGB = rgb(0, 255, 0)
BLUE: RGB = rgb(0, 0, 255)


def random_colour(rng: Optional[np.random.Generator] = None) -> RGB:
    """Uniformly random colour, handy to tell faces apart in debug renders."""
    if rng is None:
        rng = np.random.default_rng()

    return rng.integers(0, 256, size=3, dtype=np.uint8)
