from typing import Optional

import numpy as np

from softrender import Face, Model

# a unit square in the x-y plane, facing +z, with uv and normals
SQUARE_OBJ = """\
# square
v -0.5 -0.5 0.0
v 0.5 -0.5 0.0
v 0.5 0.5 0.0
v -0.5 0.5 0.0
vt 0.0 0.0
vt 1.0 0.0
vt 1.0 1.0
vt 0.0 1.0
vn 0.0 0.0 1.0
g square
f 1/1/1 2/2/1 3/3/1
f 1/1/1 3/3/1 4/4/1
"""


def make_face(
    vertices,
    texcoords=((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
    normals=((0.0, 0.0, 1.0),) * 3,
) -> Face:
    return Face(
        vertices=np.array(vertices, dtype=float),
        texcoords=np.array(texcoords, dtype=float),
        normals=np.array(normals, dtype=float),
    )


def make_model(faces: list[Face], texture: Optional[np.ndarray] = None) -> Model:
    """Model holding exactly the given faces, in order."""
    verts = np.concatenate([face.vertices for face in faces])
    uvs = np.concatenate([face.texcoords for face in faces])
    norms = np.concatenate([face.normals for face in faces])
    indices = np.arange(3 * len(faces)).reshape(-1, 3)
    # same index for position / uv / normal of each corner
    faces_idx = np.repeat(indices[:, :, None], 3, axis=2)

    return Model(verts=verts, uvs=uvs, norms=norms, faces=faces_idx, texture=texture)

