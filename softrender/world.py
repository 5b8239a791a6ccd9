import logging
from typing import Union

import numpy as np

from .geometry import identity, normalise, transform, vec3
from .types import Matrix4, Vec3f

__all__ = ["DEPTH_RESOLUTION", "World"]

logger = logging.getLogger(__name__)

# screen space z spans [0, DEPTH_RESOLUTION]
DEPTH_RESOLUTION: float = 65536.0

VecLike = Union[Vec3f, tuple[float, float, float]]


class World:
    """Camera, projection and viewport of a scene, plus its light.

    - model_view: transform from object space to eye space
    - projection: weak perspective, transform from eye space to clip space
    - viewport: transform from the bi-unit cube ([-1...1]^3) to screen space
      ([x, x+w] * [y, y+h] * [0, DEPTH_RESOLUTION])
    - world_to_screen: composite `viewport @ projection @ model_view`

    All matrices start as identity. Change them only through `set_light_dir`,
    `look_at` and `set_viewport`: each of them recomputes `world_to_screen`
    before returning, so the composite is never stale.
    """

    def __init__(self):
        self.light_dir: Vec3f = vec3(0.0, 0.0, -1.0)
        self.model_view: Matrix4 = identity()
        self.projection: Matrix4 = identity()
        self.viewport: Matrix4 = identity()
        self.world_to_screen: Matrix4 = identity()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(light_dir={self.light_dir.tolist()}, "
            f"world_to_screen={self.world_to_screen.tolist()})"
        )

    def set_light_dir(self, light_dir: VecLike) -> None:
        """Set the direction towards the light. It does not need to be
        normalised; shaders normalise it when they use it."""
        self.light_dir = np.asarray(light_dir, dtype=float)
        self._update()

    def look_at(self, eye: VecLike, centre: VecLike, up: VecLike) -> None:
        """Place the camera at `eye`, looking at `centre`, with `up` roughly
        pointing up on screen.

        Parameters:
          - eye: the position of camera, in world space
          - centre: the centre of the frame, where the camera points to, in
            world space
          - up: the "up" direction of the camera frame, need not be
            orthogonal to the viewing direction.
        """
        eye = np.asarray(eye, dtype=float)
        centre = np.asarray(centre, dtype=float)
        up = np.asarray(up, dtype=float)
        self.model_view = self.view_matrix(eye, centre, up)
        self.projection = self.projection_matrix(eye, centre)
        self._update()

    def set_viewport(self, x_off: float, y_off: float, width: float, height: float) -> None:
        """Map the bi-unit cube onto the `width` x `height` rectangle whose
        lower-left corner is at (`x_off`, `y_off`) in pixels."""
        self.viewport = self.viewport_matrix(x_off, y_off, width, height)
        self._update()

    def transform(self, point: VecLike) -> Vec3f:
        """Object space point to screen space, perspective divide included."""
        return transform(self.world_to_screen, point)

    def _update(self) -> None:
        self.world_to_screen = self.compose(
            self.viewport,
            self.projection,
            self.model_view,
        )
        logger.debug("world_to_screen %s", self.world_to_screen.tolist())

    @staticmethod
    def compose(viewport: Matrix4, projection: Matrix4, model_view: Matrix4) -> Matrix4:
        return viewport @ projection @ model_view

    @staticmethod
    def view_matrix(eye: Vec3f, centre: Vec3f, up: Vec3f) -> Matrix4:
        """Compute the model-view matrix as in tinyrenderer's `lookat`.

        The camera frame is an orthonormal basis built from two cross
        products: z from `centre` towards `eye`, x perpendicular to `up` and
        z, y completing the right-handed frame. The scene is translated so
        that `centre` is at the origin, then rotated into that frame.
        """
        z: Vec3f = normalise(eye - centre)
        x: Vec3f = normalise(np.cross(up, z))
        y: Vec3f = normalise(np.cross(z, x))

        rotation: Matrix4 = identity()
        rotation[0, :3] = x
        rotation[1, :3] = y
        rotation[2, :3] = z
        translation: Matrix4 = identity()
        translation[:3, 3] = -centre

        return rotation @ translation

    @staticmethod
    def projection_matrix(eye: Vec3f, centre: Vec3f) -> Matrix4:
        """Weak perspective with a single parameter: w becomes
        `1 - z / |eye - centre|`, so points nearer to the camera grow."""
        projection: Matrix4 = identity()
        projection[3, 2] = -1.0 / np.linalg.norm(eye - centre)

        return projection

    @staticmethod
    def viewport_matrix(
        x_off: float,
        y_off: float,
        width: float,
        height: float,
        depth: float = DEPTH_RESOLUTION,
    ) -> Matrix4:
        """Scale-and-offset matrix from [-1, 1]^3 onto
        [x_off, x_off + width] * [y_off, y_off + height] * [0, depth]."""
        viewport: Matrix4 = identity()
        viewport[0, 3] = x_off + width / 2.0
        viewport[1, 3] = y_off + height / 2.0
        viewport[2, 3] = depth / 2.0
        viewport[0, 0] = width / 2.0
        viewport[1, 1] = height / 2.0
        viewport[2, 2] = depth / 2.0

        return viewport
