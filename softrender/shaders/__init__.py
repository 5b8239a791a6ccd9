from .flat import FlatShader
from .gouraud import GouraudShader

__all__ = ["FlatShader", "GouraudShader"]
