from typing import Optional

import numpy as np

from ..buffers import DepthBuffer, FrameBuffer
from ..geometry import normalise, transform_points
from ..model import Face, Model
from ..shader import Shader
from ..types import RGB, Triangle, Vec3f
from ..world import World


class FlatShader(Shader):
    """Flat shading: one light intensity for the whole face, with texture."""

    def __init__(self, model: Model, frame: FrameBuffer, depth: DepthBuffer):
        super().__init__(model, frame, depth)
        # per-face lighting scalar, mean over the 3 vertices
        self.intensity: float = 1.0

    def vertex(self, world: World, face: Face) -> Triangle:
        self.screen_verts = transform_points(world.world_to_screen, face.vertices)
        self.uvs = face.texcoords
        self.normals = face.normals

        light: Vec3f = normalise(world.light_dir)
        self.intensity = float(np.mean(face.normals @ light))

        return self.screen_verts

    def fragment(self, world: World, bc: Vec3f) -> Optional[RGB]:
        # back facing or unlit
        if self.intensity < 0:
            return None
        uv: Vec3f = bc @ self.uvs

        return self.shade(self.model.sample(uv), self.intensity)
