"""
Deterministic compositor for the EnvGuard Pro marketing ads.

Modules:
- color / geometry: value types
- canvas: RGBA buffer, compositing and the drawing-state stack
- shapes: rounded rects, ellipses, lines and grids
- gradients: linear and radial fills
- fonts / text: font resolution, single-line and paragraph text
- scenes: the fixed ad layouts
- encoder: PNG encoding and atomic file writes
- config / logging_setup / core: settings, logging and orchestration
"""

from .canvas import Canvas, CanvasError, DrawingState, Shadow, create_canvas
from .color import Color, color, with_alpha
from .core import AdPipeline
from .encoder import PNG_GAMMA, ImageWriteError, encode_png, save_png, write_to_path
from .geometry import Point, Rect, Size
from .scenes import LAYOUTS, render_ad_1, render_ad_2

__all__ = [
    "AdPipeline",
    "Canvas",
    "CanvasError",
    "Color",
    "DrawingState",
    "ImageWriteError",
    "LAYOUTS",
    "PNG_GAMMA",
    "Point",
    "Rect",
    "Shadow",
    "Size",
    "color",
    "create_canvas",
    "encode_png",
    "render_ad_1",
    "render_ad_2",
    "save_png",
    "with_alpha",
    "write_to_path",
]
