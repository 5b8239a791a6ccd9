from .buffers import DepthBuffer, FrameBuffer
from .colour import BLACK, BLUE, GREEN, RED, WHITE, random_colour, rgb
from .geometry import (
    barycentric,
    barycentric_grid,
    identity,
    normalise,
    transform,
    translation,
    vec3,
)
from .model import Face, FormatError, Model, ModelError, ResourceError
from .pipeline import RasterStats, rasterise
from .renderer import SHADERS, CameraParameters, LightParameters, Renderer
from .shader import Shader
from .shaders import FlatShader, GouraudShader
from .world import DEPTH_RESOLUTION, World

__all__ = [
    "barycentric",
    "barycentric_grid",
    "BLACK",
    "BLUE",
    "CameraParameters",
    "DEPTH_RESOLUTION",
    "DepthBuffer",
    "Face",
    "FlatShader",
    "FormatError",
    "FrameBuffer",
    "GouraudShader",
    "GREEN",
    "identity",
    "LightParameters",
    "Model",
    "ModelError",
    "normalise",
    "random_colour",
    "RasterStats",
    "rasterise",
    "RED",
    "Renderer",
    "ResourceError",
    "rgb",
    "Shader",
    "SHADERS",
    "transform",
    "translation",
    "vec3",
    "WHITE",
    "World",
]
