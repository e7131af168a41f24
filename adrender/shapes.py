import math
from typing import Callable, List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .canvas import Canvas, Coverage, Shadow, pixel_bounds, rect_coverage
from .color import WHITE, Color
from .geometry import Point, Rect


# Shapes are rasterised at this multiple of the canvas resolution and
# box-filtered down, which gives 16 coverage levels per pixel edge.
SUPERSAMPLE = 4

Painter = Callable[[ImageDraw.ImageDraw, Callable[[float, float], Tuple[float, float]]], None]


def _supersampled(bounds: Rect, paint: Painter) -> Coverage:
    left, top, right, bottom = pixel_bounds(bounds)
    width, height = right - left, bottom - top
    if width <= 0 or height <= 0:
        return Coverage(np.zeros((0, 0), dtype=np.float32), left, top)

    s = SUPERSAMPLE
    mask = Image.new("L", (width * s, height * s), 0)
    draw = ImageDraw.Draw(mask)

    def to_mask(x: float, y: float) -> Tuple[float, float]:
        return ((x - left) * s, (y - top) * s)

    paint(draw, to_mask)
    small = mask.resize((width, height), Image.BOX)
    return Coverage(np.asarray(small, dtype=np.float32) / 255.0, left, top)


def _clamp_radius(rect: Rect, radius: float) -> float:
    return max(0.0, min(radius, min(rect.width, rect.height) / 2.0))


def _draw_rounded(draw: ImageDraw.ImageDraw, to_mask, rect: Rect, radius: float, value: int) -> None:
    x0, y0 = to_mask(rect.min_x, rect.min_y)
    x1, y1 = to_mask(rect.max_x, rect.max_y)
    x0, y0, x1, y1 = round(x0), round(y0), round(x1) - 1, round(y1) - 1
    if x1 < x0 or y1 < y0:
        return
    r = round(radius * SUPERSAMPLE)
    if r <= 0:
        draw.rectangle((x0, y0, x1, y1), fill=value)
    else:
        draw.rounded_rectangle((x0, y0, x1, y1), radius=r, fill=value)


def rounded_rect_coverage(rect: Rect, radius: float) -> Coverage:
    radius = _clamp_radius(rect, radius)
    if radius <= 0:
        return rect_coverage(rect)

    def paint(draw, to_mask):
        _draw_rounded(draw, to_mask, rect, radius, 255)

    return _supersampled(rect, paint)


def rounded_stroke_coverage(rect: Rect, radius: float, line_width: float) -> Coverage:
    """
    Coverage of a stroke of `line_width` centred on the rounded outline.
    """
    radius = _clamp_radius(rect, radius)
    half = line_width / 2.0
    outer = rect.inset(-half, -half)
    inner = rect.inset(half, half)

    def paint(draw, to_mask):
        _draw_rounded(draw, to_mask, outer, radius + half if radius > 0 else 0.0, 255)
        if not inner.is_empty:
            _draw_rounded(draw, to_mask, inner, max(radius - half, 0.0), 0)

    return _supersampled(outer, paint)


def rounded_rect(
    canvas: Canvas,
    rect: Rect,
    radius: float,
    fill: Optional[Color] = None,
    stroke: Optional[Color] = None,
    line_width: float = 1,
    shadow: Optional[Shadow] = None,
) -> None:
    """
    Fill and/or stroke a rounded rectangle. The shadow, when given, is cast by
    the fill only.
    """
    if fill is not None:
        with canvas.saved_state():
            if shadow is not None:
                canvas.set_shadow(shadow)
            canvas.composite(rounded_rect_coverage(rect, radius), fill)

    if stroke is not None and line_width > 0:
        with canvas.saved_state():
            canvas.set_stroke_width(line_width)
            coverage = rounded_stroke_coverage(rect, radius, canvas.state.stroke_width)
            canvas.composite(coverage, stroke)


def ellipse(canvas: Canvas, rect: Rect, fill: Color) -> None:
    def paint(draw, to_mask):
        x0, y0 = to_mask(rect.min_x, rect.min_y)
        x1, y1 = to_mask(rect.max_x, rect.max_y)
        if x1 - x0 >= 1 and y1 - y0 >= 1:
            draw.ellipse((round(x0), round(y0), round(x1) - 1, round(y1) - 1), fill=255)

    canvas.composite(_supersampled(rect, paint), fill)


def line(canvas: Canvas, start: Point, end: Point, stroke: Color, width: float = 1) -> None:
    """
    Stroke one straight segment with butt caps.
    """
    dx, dy = end.x - start.x, end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0 or width <= 0:
        return
    nx, ny = -dy / length * width / 2.0, dx / length * width / 2.0
    corners = [
        (start.x + nx, start.y + ny),
        (end.x + nx, end.y + ny),
        (end.x - nx, end.y - ny),
        (start.x - nx, start.y - ny),
    ]
    xs = [c[0] for c in corners]
    ys = [c[1] for c in corners]
    bounds = Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def paint(draw, to_mask):
        draw.polygon([to_mask(x, y) for x, y in corners], fill=255)

    with canvas.saved_state():
        canvas.set_stroke_width(width)
        canvas.composite(_supersampled(bounds, paint), stroke)


def grid_lines(rect: Rect, spacing: float) -> Tuple[List[float], List[float]]:
    """
    Positions of the vertical (xs) and horizontal (ys) grid lines, from the
    rect's origin up to and including its far edge.
    """
    if spacing <= 0:
        raise ValueError(f"Grid spacing must be positive, got {spacing}")
    columns = int(math.floor(rect.width / spacing)) + 1
    rows = int(math.floor(rect.height / spacing)) + 1
    xs = [rect.min_x + i * spacing for i in range(columns)]
    ys = [rect.min_y + i * spacing for i in range(rows)]
    return xs, ys


def grid(canvas: Canvas, rect: Rect, spacing: float, alpha: float, line_color: Color = WHITE) -> None:
    """
    Crisp 1px grid without anti-aliasing. All lines form a single coverage
    pass so crossings are blended once.
    """
    xs, ys = grid_lines(rect, spacing)
    left, top = int(math.floor(rect.min_x)), int(math.floor(rect.min_y))
    right, bottom = int(math.floor(rect.max_x)), int(math.floor(rect.max_y))
    mask = np.zeros((bottom - top + 1, right - left + 1), dtype=np.float32)
    for x in xs:
        mask[:, int(math.floor(x)) - left] = 1.0
    for y in ys:
        mask[int(math.floor(y)) - top, :] = 1.0

    with canvas.saved_state():
        canvas.set_stroke_width(1)
        canvas.composite(Coverage(mask, left, top), line_color.with_alpha(alpha))
