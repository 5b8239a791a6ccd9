from typing import TypeAlias

import numpy as np
from jaxtyping import Float, Shaped, UInt8

__all__ = [
    "Vec2f",
    "Vec3f",
    "Vec4f",
    "Matrix4",
    "Triangle",
    "Triangle2Df",
    "RGB",
    "Canvas",
    "ZBuffer",
    "Texture",
    "Vertices",
    "Normals",
    "UVCoordinates",
    "FaceIndices",
]

Vec2f: TypeAlias = Float[np.ndarray, "2"]
Vec3f: TypeAlias = Float[np.ndarray, "3"]
# usually used only for 3D homogeneous coordinates
Vec4f: TypeAlias = Float[np.ndarray, "4"]
# homogeneous transform, indexed as [row, column]
Matrix4: TypeAlias = Float[np.ndarray, "4 4"]

# 3 vertices, each vertex x-y-z; in screen space x-y are pixels, z is depth
Triangle: TypeAlias = Float[np.ndarray, "3 3"]
Triangle2Df: TypeAlias = Float[np.ndarray, "3 2"]

RGB: TypeAlias = UInt8[np.ndarray, "3"]
# row-major, origin at top-left: canvas[y, x]
Canvas: TypeAlias = UInt8[np.ndarray, "height width 3"]
ZBuffer: TypeAlias = Float[np.ndarray, "height width"]
# image rows as decoded, first row is the top of the image
Texture: TypeAlias = UInt8[np.ndarray, "textureHeight textureWidth 3"]

# each vertex is defined by 3 float numbers, x-y-z
Vertices: TypeAlias = Float[np.ndarray, "vertices 3"]
Normals: TypeAlias = Float[np.ndarray, "normals 3"]
# u-v-w, w is 0 when the record does not give it
UVCoordinates: TypeAlias = Float[np.ndarray, "uv_counts 3"]
# each face has 3 vertices, for positions / uvs / normals respectively
FaceIndices: TypeAlias = Shaped[np.ndarray, "faces 3 3"]
