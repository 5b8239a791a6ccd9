import logging
from os import PathLike
from typing import Sequence, Union

import numpy as np
from PIL import Image

from .colour import BLACK
from .types import RGB, Canvas, ZBuffer

__all__ = ["FrameBuffer", "DepthBuffer"]

logger = logging.getLogger(__name__)


class FrameBuffer:
    """RGB pixel store, row-major with the origin at the top-left.

    Geometry is rendered with y pointing up, so the image is flipped
    vertically once, when it is written out (see `to_image`).
    """

    def __init__(self, width: int, height: int, background: RGB = BLACK):
        self.width = width
        self.height = height
        self.pixels: Canvas = np.empty((height, width, 3), dtype=np.uint8)
        self.pixels[...] = background

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.width}x{self.height})"

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> RGB:
        return self.pixels[y, x]

    def set(self, x: int, y: int, colour: RGB) -> None:
        """Write one pixel. Writes outside the buffer are logged and dropped."""
        if not self.contains(x, y):
            logger.error(
                "Out of bounds set pixel %d,%d size %dx%d",
                x,
                y,
                self.width,
                self.height,
            )
            return
        self.pixels[y, x] = colour

    def line(self, p0: Sequence[int], p1: Sequence[int], colour: RGB) -> None:
        """Draw a line from `p0` to `p1`, end point excluded.

        Steps one pixel at a time along the major axis and interpolates the
        other one, always left to right (or bottom to top for steep lines).
        """
        (x0, y0), (x1, y1) = (int(p0[0]), int(p0[1])), (int(p1[0]), int(p1[1]))
        # taller than wide: step along y instead
        steep = abs(x0 - x1) < abs(y0 - y1)
        if steep:
            x0, y0, x1, y1 = y0, x0, y1, x1
        if x0 > x1:
            x0, y0, x1, y1 = x1, y1, x0, y0

        for x in range(x0, x1):
            t = (x - x0) / (x1 - x0)
            y = int(y0 * (1.0 - t) + y1 * t)
            if steep:
                self.set(y, x, colour)
            else:
                self.set(x, y, colour)

    def flip_vertically(self) -> None:
        """Flip the stored image in place, top row becomes bottom row."""
        self.pixels = np.ascontiguousarray(self.pixels[::-1])

    def to_image(self, flip_vertical: bool = True) -> Image.Image:
        """Pillow image of the buffer.

        With `flip_vertical` (default) the buffer's row 0 ends up at the
        bottom of the image, as expected for renders where y points up. The
        buffer itself is not modified.
        """
        pixels = self.pixels[::-1] if flip_vertical else self.pixels

        return Image.fromarray(np.ascontiguousarray(pixels))

    def save(self, path: Union[str, PathLike], flip_vertical: bool = True) -> None:
        self.to_image(flip_vertical=flip_vertical).save(path)
        logger.info("Saved %r to %s", self, path)


class DepthBuffer:
    """Per-pixel depth store. Larger values are nearer to the viewer.

    Every pixel starts at -inf, so the first depth test at any pixel passes.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        # float64: a stored depth must compare equal to the same depth
        # recomputed later, so first-drawn wins on ties
        self.values: ZBuffer = np.full((height, width), -np.inf, dtype=np.float64)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.width}x{self.height})"

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> float:
        """Depth at a pixel; -inf outside the buffer, where nothing is stored."""
        if not self.contains(x, y):
            return -np.inf

        return float(self.values[y, x])

    def set(self, x: int, y: int, z: float) -> None:
        if not self.contains(x, y):
            logger.error(
                "Out of bounds set depth %d,%d size %dx%d",
                x,
                y,
                self.width,
                self.height,
            )
            return
        self.values[y, x] = z

    def to_image(self, flip_vertical: bool = True) -> Image.Image:
        """Grayscale depth map: nearest written depth is white, farthest written
        depth is near black, unwritten pixels are black."""
        written = np.isfinite(self.values)
        grey = np.zeros(self.values.shape, dtype=np.uint8)
        if written.any():
            near = self.values[written].max()
            far = self.values[written].min()
            span = near - far
            if span > 0:
                grey[written] = (1 + (self.values[written] - far) / span * 254).astype(
                    np.uint8
                )
            else:
                grey[written] = 255
        if flip_vertical:
            grey = grey[::-1]

        return Image.fromarray(np.ascontiguousarray(grey))
