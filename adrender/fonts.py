import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple, Union

from PIL import ImageFont


logger = logging.getLogger(__name__)

FontFamily = Literal["ui", "mono"]
FaceType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

PROJECT_FONTS_DIR = Path(__file__).resolve().parent.parent / "fonts"

# Files looked up by name inside the configured and project font folders.
FONT_FILES: Dict[Tuple[str, bool], List[str]] = {
    ("ui", False): ["Inter-Regular.ttf", "Roboto-Regular.ttf", "SpaceGrotesk-Regular.ttf"],
    ("ui", True): ["Inter-Bold.ttf", "Roboto-Bold.ttf", "SpaceGrotesk-Bold.ttf"],
    ("mono", False): ["JetBrainsMono-Regular.ttf", "SFMono-Regular.otf"],
    ("mono", True): ["JetBrainsMono-Bold.ttf", "SFMono-Bold.otf"],
}

SYSTEM_FONTS: Dict[Tuple[str, bool], List[str]] = {
    ("ui", False): [
        # macOS
        "/System/Library/Fonts/SFNS.ttf",
        "/System/Library/Fonts/HelveticaNeue.ttc",
        # Linux
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        # Windows
        "C:/Windows/Fonts/segoeui.ttf",
        "C:/Windows/Fonts/arial.ttf",
    ],
    ("ui", True): [
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "C:/Windows/Fonts/segoeuib.ttf",
        "C:/Windows/Fonts/arialbd.ttf",
    ],
    ("mono", False): [
        "/System/Library/Fonts/SFNSMono.ttf",
        "/System/Library/Fonts/Menlo.ttc",
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
        "C:/Windows/Fonts/consola.ttf",
    ],
    ("mono", True): [
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationMono-Bold.ttf",
        "C:/Windows/Fonts/consolab.ttf",
    ],
}

# Named system fonts, resolved through Pillow's own font directory search.
NAMED_FALLBACK: Dict[str, List[str]] = {
    "ui": ["Helvetica.ttc", "DejaVuSans.ttf", "arial.ttf"],
    "mono": ["Menlo.ttc", "DejaVuSansMono.ttf", "cour.ttf"],
}

_fonts_dir: Optional[Path] = None


@dataclass(frozen=True)
class FontHandle:
    """
    Resolved typeface at a given size. `synthetic_bold` is set when bold was
    requested but only a regular face exists, in which case glyphs are
    emboldened with a stroke at draw time.
    """

    family: str
    size: float
    bold: bool
    path: Optional[str]
    synthetic_bold: bool = False
    face: FaceType = field(default=None, compare=False, repr=False)  # type: ignore[assignment]

    @property
    def stroke_width(self) -> int:
        if not self.synthetic_bold:
            return 0
        return max(1, int(round(self.size * 0.03)))

    def getlength(self, text: str) -> float:
        return float(self.face.getlength(text))

    def metrics(self) -> Tuple[int, int]:
        """
        (ascent, descent) in pixels, both positive.
        """
        if hasattr(self.face, "getmetrics"):
            ascent, descent = self.face.getmetrics()
            return int(ascent), int(descent)
        _, top, _, bottom = self.face.getbbox("Ag")
        return int(bottom), 0


def set_fonts_dir(path: Optional[Path]) -> None:
    """
    Point font lookup at an extra folder searched before system fonts.
    """
    global _fonts_dir
    _fonts_dir = Path(path) if path else None
    _resolve.cache_clear()


def fonts_dir() -> Optional[Path]:
    if _fonts_dir is not None:
        return _fonts_dir
    env = os.environ.get("ADRENDER_FONTS_DIR")
    return Path(env) if env else None


def _candidate_paths(family: str, bold: bool) -> List[str]:
    paths: List[str] = []
    for folder in (fonts_dir(), PROJECT_FONTS_DIR):
        if folder is None or not folder.is_dir():
            continue
        paths.extend(str(folder / name) for name in FONT_FILES[(family, bold)])
    paths.extend(SYSTEM_FONTS[(family, bold)])
    return paths


def _try_load(path: str, size: float) -> Optional[ImageFont.FreeTypeFont]:
    try:
        return ImageFont.truetype(path, size=size)
    except OSError:
        return None


def _load_first(paths: List[str], size: float) -> Tuple[Optional[str], Optional[ImageFont.FreeTypeFont]]:
    for path in paths:
        face = _try_load(path, size)
        if face is not None:
            return path, face
    return None, None


@lru_cache(maxsize=128)
def _resolve(family: str, size: float, bold: bool) -> FontHandle:
    if bold:
        path, face = _load_first(_candidate_paths(family, True), size)
        if face is not None:
            return FontHandle(family, size, True, path, face=face)
        logger.debug("no bold %s face at %.1fpx, synthesising", family, size)

    path, face = _load_first(_candidate_paths(family, False), size)
    if face is None:
        path, face = _load_first(NAMED_FALLBACK[family], size)
    if face is None:
        logger.debug("no %s font found, using Pillow default face", family)
        path = None
        face = ImageFont.load_default(size=size)

    # Stroke emboldening needs a FreeType face; bitmap faces stay regular.
    synthetic = bold and isinstance(face, ImageFont.FreeTypeFont)
    return FontHandle(family, size, bold, path, synthetic_bold=synthetic, face=face)


def ui_font(size: float, bold: bool = False) -> FontHandle:
    return _resolve("ui", float(size), bool(bold))


def mono_font(size: float, bold: bool = False) -> FontHandle:
    return _resolve("mono", float(size), bool(bold))
