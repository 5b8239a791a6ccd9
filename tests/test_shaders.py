import numpy as np
import pytest
from numpy.testing import assert_array_equal

from softrender import (
    DepthBuffer,
    FlatShader,
    FrameBuffer,
    GouraudShader,
    RasterStats,
    Shader,
    World,
    rgb,
)

from .helpers import make_face, make_model

SCREEN_TRIANGLE = ((2.0, 2.0, 0.0), (28.0, 2.0, 0.0), (2.0, 28.0, 0.0))


def lit_world(light=(0.0, 0.0, 1.0)) -> World:
    """Identity transforms, so object space is screen space."""
    world = World()
    world.set_light_dir(light)

    return world


def solid_texture(colour) -> np.ndarray:
    return np.array([[colour]], dtype=np.uint8)


def test_flat_and_gouraud_agree_on_uniform_normals(buffers):
    face = make_face(SCREEN_TRIANGLE, normals=((0.0, 0.0, 0.5),) * 3)
    model = make_model([face], texture=solid_texture((201, 101, 51)))
    world = lit_world()

    flat_frame, flat_depth = buffers
    smooth_frame, smooth_depth = FrameBuffer(32, 32), DepthBuffer(32, 32)
    flat = FlatShader(model, flat_frame, flat_depth).draw_model(world)
    smooth = GouraudShader(model, smooth_frame, smooth_depth).draw_model(world)

    assert flat == smooth
    assert flat.drawn > 0
    assert_array_equal(flat_frame.pixels, smooth_frame.pixels)
    assert_array_equal(flat_frame.get(5, 5), (100, 50, 25))


def test_flat_and_gouraud_agree_on_unit_normals(buffers):
    # not axis aligned, so the weights rarely sum to exactly 1
    face = make_face(((2.0, 2.0, 0.0), (28.0, 3.0, 0.0), (5.0, 29.0, 0.0)))
    model = make_model([face])
    world = lit_world()

    flat_frame, flat_depth = buffers
    smooth_frame, smooth_depth = FrameBuffer(32, 32), DepthBuffer(32, 32)
    flat = FlatShader(model, flat_frame, flat_depth).draw_model(world)
    GouraudShader(model, smooth_frame, smooth_depth).draw_model(world)

    assert_array_equal(flat_frame.pixels, smooth_frame.pixels)
    assert int((smooth_frame.pixels == 255).all(axis=-1).sum()) == flat.drawn


def test_flat_intensity_is_mean_of_vertex_terms(buffers):
    face = make_face(
        SCREEN_TRIANGLE,
        normals=((0.0, 0.0, 1.0), (0.0, 0.0, 0.5), (0.0, 0.0, 0.0)),
    )
    shader = FlatShader(make_model([face]), *buffers)
    shader.vertex(lit_world((0.0, 0.0, 2.0)), face)

    assert shader.intensity == pytest.approx(0.5)


def test_flat_back_facing_draws_nothing(buffers):
    frame, depth = buffers
    model = make_model([make_face(SCREEN_TRIANGLE)])

    stats = FlatShader(model, frame, depth).draw_model(lit_world((0.0, 0.0, -1.0)))

    assert stats.drawn == 0
    assert stats.discarded > 0
    assert frame.pixels.sum() == 0
    assert np.isneginf(depth.values).all()


def test_shading_clamps_to_white(buffers):
    frame, depth = buffers
    face = make_face(SCREEN_TRIANGLE, normals=((0.0, 0.0, 2.0),) * 3)
    model = make_model([face], texture=solid_texture((200, 100, 0)))

    FlatShader(model, frame, depth).draw_model(lit_world())

    assert_array_equal(frame.get(5, 5), (255, 200, 0))


def test_shade_truncates():
    colour = rgb(255, 10, 3)

    assert_array_equal(Shader.shade(colour, 0.5), (127, 5, 1))
    assert_array_equal(Shader.shade(colour, -1.0), (0, 0, 0))
    assert Shader.shade(colour, 0.5).dtype == np.uint8
    # a rounding error below the integer does not lose a step
    assert_array_equal(Shader.shade(rgb(255, 255, 255), 1.0 - 2**-53), (255, 255, 255))
    assert_array_equal(Shader.shade(rgb(200, 200, 200), 0.7 - 1e-16), (140, 140, 140))


def test_flat_intensity_is_per_instance(buffers):
    model = make_model([make_face(SCREEN_TRIANGLE)])
    first = FlatShader(model, *buffers)
    second = FlatShader(model, *buffers)

    first.vertex(lit_world((0.0, 0.0, -1.0)), next(iter(model)))

    assert first.intensity == pytest.approx(-1.0)
    assert second.intensity == 1.0
    assert "intensity" in vars(second)


def test_gouraud_interpolates_intensity(buffers):
    frame, depth = buffers
    face = make_face(
        SCREEN_TRIANGLE,
        normals=((0.0, 0.0, 1.0), (0.0, 0.0, 0.5), (0.0, 0.0, 0.5)),
    )

    GouraudShader(make_model([face]), frame, depth).draw_model(lit_world())

    # no texture: white scaled by the lit normal
    assert_array_equal(frame.get(2, 2), (255, 255, 255))
    assert_array_equal(frame.get(28, 2), (127, 127, 127))
    assert_array_equal(frame.get(2, 28), (127, 127, 127))
    assert 127 < frame.get(10, 10)[0] < 255


def test_gouraud_discards_per_pixel(buffers):
    frame, depth = buffers
    # lit at vertex 0 only, the far corners face away from the light
    face = make_face(
        SCREEN_TRIANGLE,
        normals=((0.0, 0.0, 1.0), (0.0, 0.0, -1.0), (0.0, 0.0, -1.0)),
    )

    stats = GouraudShader(make_model([face]), frame, depth).draw_model(lit_world())

    assert stats.drawn > 0
    assert stats.discarded > 0
    assert frame.get(2, 2)[0] == 255
    assert frame.get(27, 2)[0] == 0
    assert depth.get(27, 2) == -np.inf


def test_vertex_replaces_per_face_state(buffers):
    first = make_face(SCREEN_TRIANGLE, texcoords=((0.1, 0.2, 0.0),) * 3)
    second = make_face(
        ((1.0, 1.0, 0.0), (5.0, 1.0, 0.0), (1.0, 5.0, 0.0)),
        texcoords=((0.7, 0.8, 0.0),) * 3,
        normals=((1.0, 0.0, 0.0),) * 3,
    )
    world = lit_world()
    shader = GouraudShader(make_model([first, second]), *buffers)

    shader.vertex(world, first)
    returned = shader.vertex(world, second)

    assert_array_equal(returned, second.vertices)
    assert_array_equal(shader.screen_verts, second.vertices)
    assert_array_equal(shader.uvs, second.texcoords)
    assert_array_equal(shader.normals, second.normals)


def test_flat_samples_texture_at_interpolated_uv(buffers):
    frame, depth = buffers
    # 2x1 texture: left half red, right half blue
    texture = np.array([[(255, 0, 0), (0, 0, 255)]], dtype=np.uint8)
    face = make_face(
        SCREEN_TRIANGLE,
        texcoords=((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
    )

    FlatShader(make_model([face], texture=texture), frame, depth).draw_model(lit_world())

    assert_array_equal(frame.get(3, 3), (255, 0, 0))
    assert_array_equal(frame.get(25, 3), (0, 0, 255))


def test_draw_model_sums_face_stats(buffers):
    frame, depth = buffers
    left = make_face(((0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (0.0, 10.0, 0.0)))
    right = make_face(((20.0, 0.0, 0.0), (30.0, 0.0, 0.0), (20.0, 10.0, 0.0)))
    world = lit_world()

    total = GouraudShader(make_model([left, right]), frame, depth).draw_model(world)

    single = GouraudShader(make_model([left]), FrameBuffer(32, 32), DepthBuffer(32, 32))
    one = single.draw_model(world)
    assert total == one + one
    assert total.drawn == 2 * 66


def test_shader_is_abstract(buffers):
    with pytest.raises(TypeError):
        Shader(make_model([make_face(SCREEN_TRIANGLE)]), *buffers)


def test_shader_rejects_mismatched_buffers():
    model = make_model([make_face(SCREEN_TRIANGLE)])

    with pytest.raises(ValueError, match="buffer sizes differ"):
        FlatShader(model, FrameBuffer(32, 32), DepthBuffer(16, 32))


def test_draw_face_returns_stats(buffers):
    face = make_face(((0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (0.0, 10.0, 0.0)))
    shader = FlatShader(make_model([face]), *buffers)

    assert shader.draw_face(lit_world(), face) == RasterStats(drawn=66, discarded=0, outside=55)
