from typing import Optional

from ..geometry import normalise, transform_points
from ..model import Face
from ..shader import Shader
from ..types import RGB, Triangle, Vec3f
from ..world import World


class GouraudShader(Shader):
    """Smooth shading with simple parallel lighting and texture.

    The vertex normals are interpolated per pixel and lit there, so the
    intensity varies across the face.
    """

    def vertex(self, world: World, face: Face) -> Triangle:
        self.screen_verts = transform_points(world.world_to_screen, face.vertices)
        self.uvs = face.texcoords
        # kept raw, interpolated in `fragment`
        self.normals = face.normals

        return self.screen_verts

    def fragment(self, world: World, bc: Vec3f) -> Optional[RGB]:
        # weighted mean of the vertex normals, not re-normalised; dividing by
        # the weight sum keeps identical normals identical after rounding
        normal: Vec3f = (bc @ self.normals) / bc.sum()
        intensity = float(normal @ normalise(world.light_dir))
        if intensity < 0:
            return None
        uv: Vec3f = bc @ self.uvs

        return self.shade(self.model.sample(uv), intensity)
