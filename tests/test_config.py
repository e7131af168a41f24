from pathlib import Path

from adrender.config import DEFAULT_OUTPUT_ROOT, RenderSettings, load_settings


def test_defaults_when_environment_is_empty():
    settings = load_settings({})
    assert isinstance(settings, RenderSettings)
    assert settings.output_root == DEFAULT_OUTPUT_ROOT
    assert (settings.width, settings.height) == (1600, 1200)
    assert settings.fonts_dir is None
    assert settings.layouts == []


def test_environment_overrides():
    settings = load_settings(
        {
            "ADRENDER_OUTPUT_ROOT": "/tmp/ads",
            "ADRENDER_WIDTH": "800",
            "ADRENDER_HEIGHT": "600",
            "ADRENDER_FONTS_DIR": "fonts",
        }
    )
    assert settings.output_root == Path("/tmp/ads")
    assert (settings.width, settings.height) == (800, 600)
    assert settings.fonts_dir == Path("fonts")


def test_invalid_numbers_fall_back_or_clamp():
    settings = load_settings({"ADRENDER_WIDTH": "wide", "ADRENDER_HEIGHT": "-5"})
    assert settings.width == 1600
    assert settings.height == 1
