from typing import Union

import numpy as np
from jaxtyping import Float

from .types import Matrix4, Triangle, Vec2f, Vec3f

__all__ = [
    "DEGENERATE_EPSILON",
    "vec3",
    "length",
    "normalise",
    "identity",
    "translation",
    "scale",
    "to_homogeneous",
    "normalise_homogeneous",
    "to_cartesian",
    "transform",
    "transform_points",
    "compute_normal",
    "barycentric",
    "barycentric_grid",
]

# |signed area * 2| below which a triangle is treated as degenerate; in
# screen space this is pixels^2, so slivers under half a pixel^2 draw nothing
DEGENERATE_EPSILON: float = 1.0

# returned by `barycentric` for degenerate triangles; the negative component
# classifies every point as outside
_DEGENERATE: Vec3f = np.array((-1.0, 1.0, 1.0))


def vec3(x: float, y: float, z: float) -> Vec3f:
    return np.array((x, y, z), dtype=float)


def length(vector: Float[np.ndarray, "*a dim"]) -> Float[np.ndarray, "*a"]:
    return np.linalg.norm(vector, axis=-1)


def normalise(vector: Float[np.ndarray, "*a dim"]) -> Float[np.ndarray, "*a dim"]:
    """Scale `vector` to unit length.

    A zero-length vector is not guarded against: the result is NaN.
    """
    result = vector / np.linalg.norm(vector, axis=-1, keepdims=True)

    return result


def identity() -> Matrix4:
    return np.identity(4)


def translation(tx: float, ty: float, tz: float) -> Matrix4:
    matrix: Matrix4 = np.identity(4)
    matrix[:3, 3] = (tx, ty, tz)

    return matrix


def scale(sx: float, sy: float, sz: float) -> Matrix4:
    return np.diag((sx, sy, sz, 1.0))


def to_homogeneous(
    coordinates: Float[np.ndarray, "*batch dim"],
    value: float = 1.0,
) -> Float[np.ndarray, "*batch dim+1"]:
    """Transform the coordinates to homogeneous coordinates by append a batch
    of `value`s (default 1.) in the last axis."""
    coordinates = np.asarray(coordinates, dtype=float)
    paddings = np.full((*coordinates.shape[:-1], 1), value, dtype=float)

    return np.concatenate((coordinates, paddings), axis=-1)


def normalise_homogeneous(
    coordinates: Float[np.ndarray, "*batch dim"],
) -> Float[np.ndarray, "*batch dim"]:
    """Divide every element by the last element on the last axis.

    Noted that when a coordinate is 0 and divides by 0, it will produce a nan;
    for non-zero elements divides by 0, a inf will be produced.
    """
    return coordinates / coordinates[..., -1:]


def to_cartesian(
    coordinates: Float[np.ndarray, "*batch dim"],
) -> Float[np.ndarray, "*batch dim-1"]:
    """Perspective divide, then drop the last component."""
    return normalise_homogeneous(coordinates)[..., :-1]


def transform(matrix: Matrix4, point: Union[Vec3f, tuple]) -> Vec3f:
    """Transform a single 3D point: `M @ [x, y, z, 1]`, divided by the
    resulting fourth component.

    When that component is 0 the result holds NaN / Inf; this is left to the
    caller (the rasteriser skips non-finite triangles).
    """
    out: Float[np.ndarray, "4"] = matrix @ to_homogeneous(point)

    return out[:3] / out[3]


def transform_points(
    matrix: Matrix4,
    points: Float[np.ndarray, "N 3"],
) -> Float[np.ndarray, "N 3"]:
    """Batch version of `transform`, with axis 0 being the batch axis."""
    transformed: Float[np.ndarray, "N 4"] = to_homogeneous(points) @ matrix.T

    return to_cartesian(transformed)


def compute_normal(triangle_verts: Triangle) -> Vec3f:
    """Unit normal of a triangle, facing the side from which the vertices
    appear counter-clockwise."""
    normal: Vec3f = np.cross(
        triangle_verts[1] - triangle_verts[0],
        triangle_verts[2] - triangle_verts[0],
    )

    return normalise(normal)


def barycentric(pts: Union[Triangle, Float[np.ndarray, "3 2"]], p: Vec2f) -> Vec3f:
    """Compute the barycentric coordinate of `p` against the x-y of `pts`.

    The weights are in the order of the triangle's vertices, so a vertex maps
    to (1, 0, 0), (0, 1, 0) or (0, 0, 1). Any component is negative if `p`
    is outside of the triangle. z of `pts`, if given, is ignored.

    For a degenerate triangle (twice the area below `DEGENERATE_EPSILON`)
    (-1, 1, 1) is returned for every `p`.
    """
    u: Vec3f = np.cross(
        (pts[2][0] - pts[0][0], pts[1][0] - pts[0][0], pts[0][0] - p[0]),
        (pts[2][1] - pts[0][1], pts[1][1] - pts[0][1], pts[0][1] - p[1]),
    )
    # `u[2]` is (near) 0, that means triangle is degenerate, in this case
    # return something with negative coordinates
    if abs(u[2]) < DEGENERATE_EPSILON:
        return _DEGENERATE.copy()

    return np.array((1.0 - (u[0] + u[1]) / u[2], u[1] / u[2], u[0] / u[2]))


def barycentric_grid(
    pts: Union[Triangle, Float[np.ndarray, "3 2"]],
    xs: Float[np.ndarray, "*grid"],
    ys: Float[np.ndarray, "*grid"],
) -> Float[np.ndarray, "*grid 3"]:
    """`barycentric` evaluated for every point `(xs[i], ys[i])` at once.

    Same formulation and same degenerate policy as `barycentric`; the last
    axis of the result holds the weights.
    """
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    pts = np.asarray(pts, dtype=float)

    # the cross product of (ax, bx, cx) and (ay, by, cy), where only c varies
    # with the sampled point
    ax, bx = pts[2, 0] - pts[0, 0], pts[1, 0] - pts[0, 0]
    ay, by = pts[2, 1] - pts[0, 1], pts[1, 1] - pts[0, 1]
    cx = pts[0, 0] - xs
    cy = pts[0, 1] - ys

    area = ax * by - bx * ay
    if abs(area) < DEGENERATE_EPSILON:
        return np.broadcast_to(_DEGENERATE, (*xs.shape, 3)).copy()

    u0 = bx * cy - cx * by
    u1 = cx * ay - ax * cy

    return np.stack((1.0 - (u0 + u1) / area, u1 / area, u0 / area), axis=-1)
