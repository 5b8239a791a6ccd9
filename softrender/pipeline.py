import logging
from typing import Callable, NamedTuple, Optional

import numpy as np

from .buffers import DepthBuffer, FrameBuffer
from .geometry import barycentric_grid
from .types import RGB, Triangle, Vec3f

__all__ = ["RasterStats", "Fragment", "bounding_box", "rasterise"]

logger = logging.getLogger(__name__)

Fragment = Callable[[Vec3f], Optional[RGB]]
"""Per-pixel shading: barycentric weights in, colour or None (discard) out."""


class RasterStats(NamedTuple):
    """Pixel counts of one or more rasterised triangles.

    - drawn: passed the depth test and written.
    - discarded: passed the depth test but the fragment returned no colour.
    - outside: in the bounding box but outside the triangle.
    """

    drawn: int = 0
    discarded: int = 0
    outside: int = 0

    def __add__(self, other: "RasterStats") -> "RasterStats":  # type: ignore[override]
        return RasterStats(
            drawn=self.drawn + other.drawn,
            discarded=self.discarded + other.discarded,
            outside=self.outside + other.outside,
        )


def bounding_box(
    screen_verts: Triangle,
    width: int,
    height: int,
) -> Optional[tuple[int, int, int, int]]:
    """Integer bounding box `(x_min, x_max, y_min, y_max)` of the truncated
    x-y of the triangle, both ends inclusive, clipped to `width` x `height`.

    Returns None when nothing of the box lies in the frame, or when a
    coordinate is not finite.
    """
    xy = screen_verts[:, :2]
    if not np.isfinite(xy).all():
        return None

    # truncation towards zero, as a cast to int
    xs = [int(x) for x in xy[:, 0]]
    ys = [int(y) for y in xy[:, 1]]
    x_min, x_max = max(min(xs), 0), min(max(xs), width - 1)
    y_min, y_max = max(min(ys), 0), min(max(ys), height - 1)
    if x_min > x_max or y_min > y_max:
        return None

    return x_min, x_max, y_min, y_max


def rasterise(
    screen_verts: Triangle,
    fragment: Fragment,
    frame: FrameBuffer,
    depth: DepthBuffer,
) -> RasterStats:
    """Fill one triangle into `frame`, with depth test against `depth`.

    Parameters:
      - screen_verts: the 3 vertices in screen space; x-y decide coverage
        and z is the depth, larger is nearer.
      - fragment: called with the barycentric weights of each pixel that
        passes the depth test.
      - frame, depth: target buffers, of the same size.

    Every pixel `(x, y)` of the bounding box is tested at its integer
    coordinates. A covered pixel is drawn only if its interpolated depth is
    strictly greater than the stored one, so on ties the triangle drawn first
    wins. Depth is written only together with a colour: when `fragment`
    discards, the stored depth is left as is and a farther triangle drawn
    later can still fill that pixel.

    Return: pixel counts for this triangle.
    """
    box = bounding_box(screen_verts, frame.width, frame.height)
    if box is None:
        logger.debug("Tri off screen or not finite: %s", screen_verts.tolist())
        return RasterStats()
    x_min, x_max, y_min, y_max = box
    logger.debug("Tri BBox x %d,%d y %d,%d", x_min, x_max, y_min, y_max)

    xs, ys = np.meshgrid(
        np.arange(x_min, x_max + 1),
        np.arange(y_min, y_max + 1),
    )
    weights = barycentric_grid(screen_verts, xs, ys)
    inside = ~(weights < 0).any(axis=-1)
    # not perspective corrected: the divide already happened per vertex
    zs = weights @ screen_verts[:, 2]

    drawn = discarded = 0
    # row by row: y outer, x inner
    for row, col in zip(*np.nonzero(inside)):
        x, y = int(xs[row, col]), int(ys[row, col])
        z = float(zs[row, col])
        if not z > depth.get(x, y):
            continue
        colour = fragment(weights[row, col])
        if colour is None:
            discarded += 1
            continue
        depth.set(x, y, z)
        frame.set(x, y, colour)
        drawn += 1

    stats = RasterStats(
        drawn=drawn,
        discarded=discarded,
        outside=int(inside.size - np.count_nonzero(inside)),
    )
    logger.debug(
        "discarded %d outside %d drawn %d",
        stats.discarded,
        stats.outside,
        stats.drawn,
    )

    return stats
