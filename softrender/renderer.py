import logging
from typing import NamedTuple, Optional, Union

import numpy as np
from PIL import Image

from .buffers import DepthBuffer, FrameBuffer
from .colour import BLACK, WHITE, random_colour
from .model import Model
from .pipeline import RasterStats
from .shader import Shader
from .shaders import FlatShader, GouraudShader
from .types import RGB, Vec3f
from .world import World

__all__ = ["SHADERS", "CameraParameters", "LightParameters", "Renderer"]

logger = logging.getLogger(__name__)

SHADERS: dict[str, type[Shader]] = {
    "flat": FlatShader,
    "gouraud": GouraudShader,
}

VecLike = Union[Vec3f, tuple[float, float, float]]


class CameraParameters(NamedTuple):
    """Parameters for rendering from camera.

    Default values follow tinyrenderer's lesson on moving the camera.
    """

    width: int = 800
    """width of the image, in pixels."""
    height: int = 800
    """height of the image, in pixels."""
    eye: VecLike = (1.0, 1.0, 3.0)
    """position of the camera in world space."""
    centre: VecLike = (0.0, 0.0, 0.0)
    """target of the camera."""
    up: VecLike = (0.0, 1.0, 0.0)
    """up direction of the camera."""
    margin: float = 1.0 / 8.0
    """empty border around the viewport, as a fraction of width / height."""


class LightParameters(NamedTuple):
    """Parameters for the directional light."""

    direction: VecLike = (1.0, 1.0, 1.0)
    """towards the light, in world space. Need not be normalised."""


class Renderer:
    @staticmethod
    def create_world(camera: CameraParameters, light: LightParameters) -> World:
        """Create a world from camera and light parameters."""
        world = World()
        world.set_light_dir(light.direction)
        world.look_at(camera.eye, camera.centre, camera.up)
        world.set_viewport(
            camera.width * camera.margin,
            camera.height * camera.margin,
            camera.width * (1.0 - 2.0 * camera.margin),
            camera.height * (1.0 - 2.0 * camera.margin),
        )

        return world

    @staticmethod
    def create_buffers(
        width: int,
        height: int,
        background: RGB = BLACK,
    ) -> tuple[FrameBuffer, DepthBuffer]:
        """Fresh frame buffer filled with `background` and an empty depth
        buffer, of the same size."""
        return FrameBuffer(width, height, background=background), DepthBuffer(
            width, height
        )

    @staticmethod
    def shader_type(shader: Union[str, type[Shader]]) -> type[Shader]:
        if isinstance(shader, str):
            try:
                return SHADERS[shader]
            except KeyError:
                raise ValueError(
                    f"unknown shader {shader!r}, expected one of {sorted(SHADERS)}"
                ) from None

        return shader

    @classmethod
    def render(
        cls,
        model: Model,
        world: World,
        frame: FrameBuffer,
        depth: DepthBuffer,
        shader: Union[str, type[Shader]] = "gouraud",
    ) -> RasterStats:
        """Draw every face of `model` into the buffers, in file order.

        Parameters:
          - model: the model to render; its texture is sampled by the shader.
          - world: camera, viewport and light, configured beforehand.
          - frame, depth: target buffers; the shader is their only writer
            for the duration of the pass.
          - shader: a shader class or its name in `SHADERS`.

        Returns: pixel counts summed over all faces.
        """
        return cls.shader_type(shader)(model, frame, depth).draw_model(world)

    @staticmethod
    def render_wireframe(
        model: Model,
        world: World,
        frame: FrameBuffer,
        colour: Optional[RGB] = WHITE,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Draw the edges of every face, without depth test.

        With `colour` None every face gets a random colour from `rng`.
        """
        for face in model:
            screen = [world.transform(vertex) for vertex in face.vertices]
            if not np.isfinite(screen).all():
                continue
            face_colour = random_colour(rng) if colour is None else colour
            for i in range(3):
                frame.line(screen[i][:2], screen[(i + 1) % 3][:2], face_colour)

    @classmethod
    def get_camera_image(
        cls,
        model: Model,
        camera: CameraParameters = CameraParameters(),
        light: LightParameters = LightParameters(),
        shader: Union[str, type[Shader]] = "gouraud",
        background: RGB = BLACK,
    ) -> Image.Image:
        """Render `model` into a new image, flipped for display."""
        world = cls.create_world(camera, light)
        frame, depth = cls.create_buffers(camera.width, camera.height, background)
        cls.render(model, world, frame, depth, shader=shader)

        return frame.to_image()
