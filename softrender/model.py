import logging
import math
from os import PathLike
from typing import Iterable, Iterator, NamedTuple, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .colour import WHITE
from .geometry import compute_normal
from .types import (
    RGB,
    FaceIndices,
    Normals,
    Texture,
    Triangle,
    UVCoordinates,
    Vec2f,
    Vec3f,
    Vertices,
)

__all__ = [
    "Face",
    "Model",
    "ModelError",
    "ResourceError",
    "FormatError",
    "load_texture",
]

logger = logging.getLogger(__name__)

# index value marking a vertex without a `vt` or `vn` reference
_MISSING = -1


class ModelError(Exception):
    """Base class for everything that can go wrong while loading a model."""


class ResourceError(ModelError):
    """A mesh or texture file cannot be opened or decoded."""

    def __init__(self, path: Union[str, PathLike], reason: str):
        super().__init__(f"cannot load {path}: {reason}")
        self.path = path
        self.reason = reason


class FormatError(ModelError):
    """Malformed record in a Wavefront OBJ file.

    Attributes:
      - line_number: 1-based line of the offending record, or None when the
        model was not parsed from text.
      - record: the offending line, stripped.
    """

    def __init__(self, message: str, line_number: Optional[int], record: str):
        location = f"line {line_number}" if line_number is not None else "record"
        super().__init__(f"{location}: {message}: {record!r}")
        self.line_number = line_number
        self.record = record


class Face(NamedTuple):
    """One triangle in object space.

    Attributes:
      - vertices: positions of the 3 vertices.
      - texcoords: u-v-w texture coordinates of the 3 vertices.
      - normals: normals of the 3 vertices, not necessarily unit length.
    """

    vertices: Triangle
    texcoords: Triangle
    normals: Triangle


def load_texture(path: Union[str, PathLike]) -> Texture:
    """Decode an image file into an RGB texture with Pillow."""
    try:
        with Image.open(path) as image:
            texture: Texture = np.array(image.convert("RGB"), dtype=np.uint8)
    except (OSError, UnidentifiedImageError) as err:
        raise ResourceError(path, str(err)) from err
    logger.info("Loaded texture %s (%dx%d)", path, texture.shape[1], texture.shape[0])

    return texture


class Model:
    """Triangle mesh with an optional diffuse texture.

    Iterating over a model yields its `Face`s, in file order; iteration can be
    repeated and always gives the same faces.
    """

    def __init__(
        self,
        verts: Vertices,
        uvs: UVCoordinates,
        norms: Normals,
        faces: FaceIndices,
        texture: Optional[Texture] = None,
    ):
        """
        Parameters:
          - verts, uvs, norms: attribute arrays, (N, 3) each.
          - faces: (faces, 3, 3) indices into `verts`, `uvs`, `norms` for each
            corner of each triangle, 0-based. -1 for a missing uv or normal.
          - texture: (height, width, 3) uint8 image, first row at the top.
        """
        self.verts: Vertices = np.asarray(verts, dtype=float).reshape(-1, 3)
        self.uvs: UVCoordinates = np.asarray(uvs, dtype=float).reshape(-1, 3)
        self.norms: Normals = np.asarray(norms, dtype=float).reshape(-1, 3)
        self.faces: FaceIndices = np.asarray(faces, dtype=int).reshape(-1, 3, 3)
        self.texture: Optional[Texture] = texture
        assert isinstance(self.verts, Vertices), f"{self.verts}"
        assert isinstance(self.faces, FaceIndices), f"{self.faces}"

    @classmethod
    def load(
        cls,
        obj_path: Union[str, PathLike],
        texture_path: Optional[Union[str, PathLike]] = None,
    ) -> "Model":
        """Load a Wavefront OBJ file and, optionally, its diffuse texture.

        Raises `ResourceError` when a file cannot be read, `FormatError` on a
        malformed record. Nothing is returned partially loaded.
        """
        try:
            with open(obj_path, "r") as file:
                lines = file.readlines()
        except OSError as err:
            raise ResourceError(obj_path, str(err)) from err

        texture = load_texture(texture_path) if texture_path is not None else None
        model = cls.from_lines(lines, texture=texture)
        logger.info("Loaded model %s: %s", obj_path, model)

        return model

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        texture: Optional[Texture] = None,
    ) -> "Model":
        """Parse OBJ records (`v`, `vt`, `vn`, `f`); anything else is skipped.

        Faces with more than 3 vertices are split into a triangle fan.
        """
        verts: list[tuple[float, ...]] = []
        uvs: list[tuple[float, ...]] = []
        norms: list[tuple[float, ...]] = []
        faces: list[list[list[int]]] = []

        for line_number, line in enumerate(lines, start=1):
            record = line.strip()
            fields = record.split()
            if not fields or fields[0].startswith("#"):
                continue

            kind, values = fields[0], fields[1:]
            if kind == "v":
                # optional w is accepted but unused
                verts.append(_floats(values, 3, 4, line_number, record)[:3])
            elif kind == "vt":
                uv = _floats(values, 1, 3, line_number, record)
                uvs.append(uv + (0.0,) * (3 - len(uv)))
            elif kind == "vn":
                norms.append(_floats(values, 3, 3, line_number, record))
            elif kind == "f":
                if len(values) < 3:
                    raise FormatError(
                        f"expected at least 3 vertices, got {len(values)}",
                        line_number,
                        record,
                    )
                corners = [
                    _corner(value, (len(verts), len(uvs), len(norms)), line_number, record)
                    for value in values
                ]
                for i in range(1, len(corners) - 1):
                    faces.append([corners[0], corners[i], corners[i + 1]])
            else:
                logger.debug("Ignoring record on line %d: %r", line_number, record)

        return cls(
            verts=np.array(verts, dtype=float).reshape(-1, 3),
            uvs=np.array(uvs, dtype=float).reshape(-1, 3),
            norms=np.array(norms, dtype=float).reshape(-1, 3),
            faces=np.array(faces, dtype=int).reshape(-1, 3, 3),
            texture=texture,
        )

    def __len__(self) -> int:
        return len(self.faces)

    def __str__(self) -> str:
        return (
            f"{len(self.verts)} vertices, {len(self.uvs)} uvs, "
            f"{len(self.norms)} normals, {len(self.faces)} faces"
        )

    def __iter__(self) -> Iterator[Face]:
        for i in range(len(self.faces)):
            yield self.face(i)

    def face(self, index: int) -> Face:
        vert_idx, uv_idx, norm_idx = self.faces[index].T
        vertices: Triangle = self.verts[vert_idx]

        texcoords: Triangle = np.zeros((3, 3))
        has_uv = uv_idx != _MISSING
        texcoords[has_uv] = self.uvs[uv_idx[has_uv]]

        normals: Triangle
        if (norm_idx == _MISSING).any():
            # no `vn` given: use the geometric normal for all 3 corners
            normals = np.tile(compute_normal(vertices), (3, 1))
        else:
            normals = self.norms[norm_idx]

        return Face(vertices=vertices, texcoords=texcoords, normals=normals)

    def sample(self, uv: Union[Vec2f, Vec3f]) -> RGB:
        """Nearest-neighbour texture lookup.

        Both coordinates wrap around (repeat mode); v=0 addresses the bottom
        row of the texture image. A model without texture is white.
        """
        if self.texture is None:
            return WHITE
        height, width = self.texture.shape[:2]
        x = math.floor(uv[0] * width) % width
        y = math.floor(uv[1] * height) % height

        return self.texture[height - 1 - y, x]


def _floats(
    values: list[str],
    at_least: int,
    at_most: int,
    line_number: int,
    record: str,
) -> tuple[float, ...]:
    if not at_least <= len(values) <= at_most:
        raise FormatError(
            f"expected {at_least} to {at_most} components, got {len(values)}",
            line_number,
            record,
        )
    try:
        numbers = tuple(float(value) for value in values)
    except ValueError as err:
        raise FormatError(str(err), line_number, record) from err
    # float() also takes "nan" and "inf"
    if not all(math.isfinite(number) for number in numbers):
        raise FormatError("non-finite component", line_number, record)

    return numbers


def _corner(
    value: str,
    counts: tuple[int, int, int],
    line_number: int,
    record: str,
) -> list[int]:
    """Resolve one `v[/vt][/vn]` face reference to 0-based indices."""
    parts = value.split("/")
    if len(parts) > 3 or not parts[0]:
        raise FormatError(f"bad face vertex {value!r}", line_number, record)

    indices = []
    for part, count in zip(parts + [""] * (3 - len(parts)), counts):
        if not part:
            indices.append(_MISSING)
            continue
        try:
            index = int(part)
        except ValueError as err:
            raise FormatError(str(err), line_number, record) from err
        # 1-based in Wavefront Obj; negative indices count back from the end
        resolved = index - 1 if index > 0 else count + index
        if index == 0 or not 0 <= resolved < count:
            raise FormatError(
                f"index {index} out of range (have {count})",
                line_number,
                record,
            )
        indices.append(resolved)

    return indices
