import numpy as np
import pytest

from adrender.canvas import Canvas, CanvasError, Shadow
from adrender.color import color
from adrender.geometry import Rect, Size


def test_new_canvas_is_transparent():
    canvas = Canvas(4, 3)
    image = canvas.extract_image()
    assert image.size == (4, 3)
    assert image.mode == "RGBA"
    assert image.getextrema()[3] == (0, 0)


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
def test_invalid_size_is_a_canvas_error(size):
    with pytest.raises(CanvasError):
        Canvas(*size)


def test_opaque_fill():
    canvas = Canvas(4, 4)
    canvas.fill(canvas.bounds, color(0xFF0000))
    assert canvas.extract_image().getpixel((2, 2)) == (255, 0, 0, 255)


def test_source_over_blend():
    canvas = Canvas(2, 2)
    canvas.fill(canvas.bounds, color(0xFFFFFF))
    canvas.fill(canvas.bounds, color(0x000000, 0.5))
    px = canvas.pixel(0, 0)
    assert px.r == pytest.approx(0.5, abs=1e-6)
    assert px.a == pytest.approx(1.0)


def test_translucent_over_transparent_keeps_straight_colour():
    canvas = Canvas(2, 2)
    canvas.fill(canvas.bounds, color(0x38BDF8, 0.25))
    r, g, b, a = canvas.extract_image().getpixel((0, 0))
    assert (r, g, b) == (0x38, 0xBD, 0xF8)
    assert a == round(0.25 * 255)


def test_fractional_edge_gets_partial_coverage():
    canvas = Canvas(3, 1)
    canvas.fill(Rect(0, 0, 1.5, 1), color(0xFFFFFF))
    assert canvas.pixel(0, 0).a == pytest.approx(1.0)
    assert canvas.pixel(1, 0).a == pytest.approx(0.5)
    assert canvas.pixel(2, 0).a == 0


def test_restore_without_save_is_an_error():
    with pytest.raises(CanvasError):
        Canvas(2, 2).restore_state()


def test_saved_state_restores_on_error():
    canvas = Canvas(10, 10)
    with pytest.raises(RuntimeError):
        with canvas.saved_state():
            canvas.set_clip(Rect(0, 0, 2, 2))
            canvas.set_shadow(Shadow(color(0x000000), Size(0, 1), 0))
            raise RuntimeError("boom")
    assert canvas.depth == 0
    assert canvas.state.clip == canvas.bounds
    assert canvas.state.shadow is None


def test_clip_only_shrinks():
    canvas = Canvas(10, 10)
    canvas.set_clip(Rect(0, 0, 5, 5))
    canvas.set_clip(Rect(0, 0, 10, 10))
    assert canvas.state.clip == Rect(0, 0, 5, 5)
    canvas.reset_clip()
    assert canvas.state.clip == canvas.bounds


def test_fill_respects_clip():
    canvas = Canvas(10, 4)
    with canvas.saved_state():
        canvas.set_clip(Rect(0, 0, 5, 4))
        canvas.fill(canvas.bounds, color(0xFFFFFF))
    canvas.fill(Rect(0, 0, 1, 1), color(0xFF0000))
    assert canvas.pixel(4, 1).a == pytest.approx(1.0)
    assert canvas.pixel(6, 1).a == 0


def test_shadow_is_drawn_offset_below_shape():
    canvas = Canvas(40, 40)
    canvas.set_shadow(Shadow(color(0x000000), Size(0, 10), 0))
    canvas.fill(Rect(10, 5, 10, 10), color(0xFFFFFF))
    shape = canvas.pixel(15, 10)
    shadow = canvas.pixel(15, 20)
    assert (shape.r, shape.a) == (pytest.approx(1.0), pytest.approx(1.0))
    assert shadow.r == pytest.approx(0.0)
    assert shadow.a == pytest.approx(1.0)
    assert canvas.pixel(15, 30).a == 0


def test_transparent_fill_casts_no_shadow():
    canvas = Canvas(60, 60)
    canvas.set_shadow(Shadow(color(0x000000, 0.5), Size(0, 0), 8))
    canvas.fill(Rect(20, 20, 20, 20), color(0xFFFFFF, 0.0))
    assert np.all(np.asarray(canvas.extract_image())[..., 3] == 0)


def test_blurred_shadow_spreads_past_the_shape():
    canvas = Canvas(80, 60)
    canvas.set_shadow(Shadow(color(0x000000, 0.5), Size(0, 0), 8))
    canvas.fill(Rect(20, 20, 20, 20), color(0xFFFFFF))
    near = canvas.pixel(43, 30).a
    assert 0 < near < 0.5
    assert canvas.pixel(75, 30).a == 0


def test_extract_only_once():
    canvas = Canvas(2, 2)
    canvas.extract_image()
    with pytest.raises(CanvasError):
        canvas.extract_image()
