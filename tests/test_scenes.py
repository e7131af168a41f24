import numpy as np
import pytest
from PIL import Image

from adrender.core import AdPipeline
from adrender.encoder import PNG_GAMMA, ImageWriteError, save_png
from adrender.canvas import Canvas
from adrender.fonts import ui_font
from adrender.geometry import Rect
from adrender.scenes import (
    AD_SIZE,
    BACKGROUND,
    LAYOUTS,
    _brand_name,
    _fit_font,
    _tag_rects,
    render_ad_1,
    render_ad_2,
)
from adrender.text import measure

from .helpers import ink_columns


@pytest.fixture(scope="module")
def ad_files(tmp_path_factory):
    root = tmp_path_factory.mktemp("ads")
    return {
        "ad-1": save_png(render_ad_1(AD_SIZE), root / "ad-1.png"),
        "ad-2": save_png(render_ad_2(AD_SIZE), root / "ad-2.png"),
    }


@pytest.mark.parametrize("name", ["ad-1", "ad-2"])
def test_written_ad_has_expected_format(ad_files, name):
    with Image.open(ad_files[name]) as image:
        assert image.size == (1600, 1200)
        assert image.mode == "RGBA"
        assert image.info["gamma"] == pytest.approx(PNG_GAMMA)
        assert image.getextrema()[3] == (255, 255)


def test_ad_1_corner_is_background(ad_files):
    with Image.open(ad_files["ad-1"]) as image:
        r, g, b, a = image.getpixel((1599, 1199))
    expected = BACKGROUND.to_rgba8()
    assert abs(r - expected[0]) <= 1
    assert abs(g - expected[1]) <= 1
    assert abs(b - expected[2]) <= 1
    assert a == 255


def test_ad_2_corner_is_close_to_background(ad_files):
    # The bottom-right glow reaches the corner very faintly in this layout.
    with Image.open(ad_files["ad-2"]) as image:
        pixel = image.getpixel((1599, 1199))
    expected = BACKGROUND.to_rgba8()
    assert all(abs(p - e) <= 4 for p, e in zip(pixel[:3], expected[:3]))


def test_ad_1_grid_is_limited_to_top_left(ad_files):
    with Image.open(ad_files["ad-1"]) as image:
        pixels = np.asarray(image, dtype=np.int16)
    # Column 44 carries a grid line near the top, but not below the clip.
    assert pixels[20, 44, 1] > pixels[20, 45, 1]
    assert pixels[1100, 44, 1] == pixels[1100, 45, 1]


def test_rendering_is_deterministic():
    first = np.asarray(render_ad_1(AD_SIZE))
    second = np.asarray(render_ad_1(AD_SIZE))
    assert np.array_equal(first, second)


def test_layout_registry():
    assert set(LAYOUTS) == {"ad-1", "ad-2"}
    assert LAYOUTS["ad-1"].filename == "envguard-pro-ad-1.png"
    assert LAYOUTS["ad-2"].filename == "envguard-pro-ad-2.png"


def test_pipeline_writes_selected_layouts(tmp_path):
    pipeline = AdPipeline(tmp_path / "marketing" / "ads")
    written = pipeline.run(["ad-2"])
    assert len(written) == 1
    assert written[0].is_absolute()
    assert written[0].name == "envguard-pro-ad-2.png"
    assert written[0].exists()


def test_pipeline_rejects_unknown_layout(tmp_path):
    with pytest.raises(ValueError):
        AdPipeline(tmp_path).run(["ad-9"])


def test_pipeline_surfaces_write_errors(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(ImageWriteError):
        AdPipeline(blocker / "ads").run(["ad-1"])


def test_brand_name_leaves_a_gap_between_words():
    canvas = Canvas(300, 60)
    _brand_name(canvas, Rect(0, 0, 42, 42), 36)
    cols = ink_columns(canvas.extract_image())
    assert cols.min() >= 50
    assert np.any(np.diff(cols) > 4)


def test_tags_flow_inside_their_column_without_overlap():
    labels = [
        "Detect fallbacks & warn intelligently",
        "Parse shared set-env.sh files",
        "Produce GitHub Security SARIF",
    ]
    rects = _tag_rects(labels, 80, 442, 500)
    font = ui_font(14, bold=True)
    for label, rect in zip(labels, rects):
        assert rect.min_x >= 80
        assert rect.max_x <= 80 + 500
        assert rect.width >= measure(label, font) + 34
    for a, b in zip(rects, rects[1:]):
        assert a.intersect(b).is_empty
    assert rects[-1].min_y > rects[0].min_y


def test_fit_font_shrinks_only_when_needed():
    text = "myapp/dev/aurora.username used by AURORA_USERNAME"
    narrow = _fit_font(text, 13, 200, bold=False)
    assert narrow.size < 13
    assert measure(text, narrow) <= 200 or narrow.size <= 8
    assert _fit_font("OK", 13, 200).size == 13
