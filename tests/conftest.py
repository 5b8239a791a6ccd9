import numpy as np
import pytest
from PIL import Image

from softrender import DepthBuffer, FrameBuffer

from .helpers import SQUARE_OBJ


@pytest.fixture
def square_obj(tmp_path):
    path = tmp_path / "square.obj"
    path.write_text(SQUARE_OBJ)

    return path


@pytest.fixture
def texture_png(tmp_path):
    """2x2 texture: top row red, green; bottom row blue, white."""
    pixels = np.array(
        [
            [[255, 0, 0], [0, 255, 0]],
            [[0, 0, 255], [255, 255, 255]],
        ],
        dtype=np.uint8,
    )
    path = tmp_path / "texture.png"
    Image.fromarray(pixels).save(path)

    return path


@pytest.fixture
def buffers():
    return FrameBuffer(32, 32), DepthBuffer(32, 32)
