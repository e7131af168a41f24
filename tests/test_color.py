import pytest

from adrender.color import Color, color, with_alpha


def test_hex_is_split_into_normalised_channels():
    c = color(0x38BDF8)
    assert c.r == pytest.approx(0x38 / 255)
    assert c.g == pytest.approx(0xBD / 255)
    assert c.b == pytest.approx(0xF8 / 255)
    assert c.a == 1.0


@pytest.mark.parametrize("hex_value", [0x000000, 0x0A0E17, 0x818CF8, 0xFFFFFF])
@pytest.mark.parametrize("alpha", [0.0, 0.12, 0.65, 1.0])
def test_with_alpha_matches_direct_construction(hex_value, alpha):
    swapped = with_alpha(color(hex_value, 1.0), alpha)
    direct = color(hex_value, alpha)
    assert (swapped.r, swapped.g, swapped.b) == (direct.r, direct.g, direct.b)
    assert swapped.a == pytest.approx(direct.a)


def test_with_alpha_leaves_original_untouched():
    base = color(0x4ADE80, 0.9)
    faded = base.with_alpha(0.1)
    assert base.a == pytest.approx(0.9)
    assert faded.a == pytest.approx(0.1)
    assert faded is not base


def test_colors_are_immutable():
    c = color(0xFFFFFF)
    with pytest.raises(AttributeError):
        c.a = 0.5  # type: ignore[misc]


def test_scaled_alpha_multiplies():
    assert color(0x94A3B8, 0.5).scaled_alpha(0.5).a == pytest.approx(0.25)


def test_to_rgba8_rounds():
    assert Color(1.0, 0.5, 0.0, 1.0).to_rgba8() == (255, 128, 0, 255)
