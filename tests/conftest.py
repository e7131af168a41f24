import pytest

from adrender import fonts


@pytest.fixture(autouse=True)
def _isolated_fonts(monkeypatch):
    monkeypatch.delenv("ADRENDER_FONTS_DIR", raising=False)
    fonts.set_fonts_dir(None)
    yield
    fonts.set_fonts_dir(None)
