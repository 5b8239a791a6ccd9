import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .buffers import DepthBuffer, FrameBuffer
from .model import Face, Model
from .pipeline import RasterStats, rasterise
from .types import RGB, Triangle, Vec3f
from .world import World

__all__ = ["SHADE_EPSILON", "Shader"]

logger = logging.getLogger(__name__)

# added before truncating a shaded channel to 8 bits
SHADE_EPSILON: float = 1e-9


class Shader(ABC):
    """Base class for a rendering pass over one model.

    A shader is bound to one model (read only, used for texture sampling)
    and to one frame buffer and depth buffer, which it alone writes while the
    pass lasts. Construct it, call `draw_face` for each face (or
    `draw_model`), then drop it.

    Per-face state is written by `vertex` and read by `fragment`; it is
    overwritten for every face and never accumulated. Subclasses add their
    own per-face fields next to the shared ones below.
    """

    def __init__(self, model: Model, frame: FrameBuffer, depth: DepthBuffer):
        if (frame.width, frame.height) != (depth.width, depth.height):
            raise ValueError(f"buffer sizes differ: {frame!r}, {depth!r}")
        self.model = model
        self.frame = frame
        self.depth = depth

        # texture coordinates of the 3 vertices of the current face
        self.uvs: Triangle = np.zeros((3, 3))
        # object space normals of the 3 vertices of the current face
        self.normals: Triangle = np.zeros((3, 3))
        # the current face, in screen space
        self.screen_verts: Triangle = np.zeros((3, 3))

    @abstractmethod
    def vertex(self, world: World, face: Face) -> Triangle:
        """Override this to implement the vertex stage.

        Transform the face into screen space with `world.world_to_screen`,
        store whatever `fragment` needs on the instance, and return the screen
        space triangle (also kept as `self.screen_verts`).
        """
        raise NotImplementedError("vertex shader not implemented")

    @abstractmethod
    def fragment(self, world: World, bc: Vec3f) -> Optional[RGB]:
        """Override this to implement the fragment stage.

        Parameters:
          - world: the same world given to `vertex`.
          - bc: barycentric weights of the pixel, in the order of the face's
            vertices; all non-negative.

        Return: the pixel colour, or None to discard the pixel (e.g. a back
          facing polygon). A discarded pixel does not update the depth
          buffer.
        """
        raise NotImplementedError("fragment shader not implemented")

    def draw_face(self, world: World, face: Face) -> RasterStats:
        """Run `vertex` on the face, then `fragment` for each covered pixel
        that passes the depth test."""
        screen_verts = self.vertex(world, face)

        return rasterise(
            screen_verts,
            lambda bc: self.fragment(world, bc),
            self.frame,
            self.depth,
        )

    def draw_model(self, world: World) -> RasterStats:
        """`draw_face` for every face of the bound model, in order."""
        stats = RasterStats()
        for face in self.model:
            stats += self.draw_face(world, face)
        logger.info(
            "%s drew %d faces: %d pixels drawn, %d discarded",
            type(self).__name__,
            len(self.model),
            stats.drawn,
            stats.discarded,
        )

        return stats

    @staticmethod
    def shade(colour: RGB, intensity: float) -> RGB:
        """Scale each channel by `intensity`, clamped to [0, 255] and
        truncated to 8 bits.

        Products within `SHADE_EPSILON` below an integer truncate to that
        integer, so an intensity off by a rounding error (0.9999999999999999
        instead of 1) gives the same channel value.
        """
        return np.clip(colour * intensity + SHADE_EPSILON, 0, 255).astype(np.uint8)
