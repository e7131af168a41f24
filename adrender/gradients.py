from typing import Sequence, Tuple

import numpy as np

from .canvas import Canvas, Coverage, pixel_bounds
from .color import Color
from .geometry import Point, Rect


ColorStop = Tuple[Color, float]


def _interpolate(stops: Sequence[ColorStop], t: np.ndarray) -> np.ndarray:
    """
    Straight-alpha RGBA for each parameter in `t`. Values outside the stop
    range take the nearest end stop's colour.
    """
    if not stops:
        raise ValueError("A gradient needs at least one colour stop")
    ordered = sorted(stops, key=lambda stop: stop[1])
    locations = np.array([loc for _, loc in ordered], dtype=np.float32)
    channels = np.array([[c.r, c.g, c.b, c.a] for c, _ in ordered], dtype=np.float32)

    out = np.empty(t.shape + (4,), dtype=np.float32)
    for i in range(4):
        # np.interp clamps to the first/last value outside `locations`.
        out[..., i] = np.interp(t, locations, channels[:, i])
    return out


def _linear_t(xs: np.ndarray, ys: np.ndarray, start: Point, end: Point) -> np.ndarray:
    dx, dy = end.x - start.x, end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return np.zeros(np.broadcast(xs, ys).shape, dtype=np.float32)
    t = ((xs - start.x) * dx + (ys - start.y) * dy) / length_sq
    return np.clip(t, 0.0, 1.0)


def _radial_t(xs: np.ndarray, ys: np.ndarray, center: Point, radius: float) -> np.ndarray:
    distance = np.hypot(xs - center.x, ys - center.y)
    if radius <= 0:
        return np.ones_like(distance, dtype=np.float32)
    return np.clip(distance / radius, 0.0, 1.0)


def _to_color(rgba: np.ndarray) -> Color:
    r, g, b, a = (float(v) for v in rgba)
    return Color(r, g, b, a)


def sample_linear(stops: Sequence[ColorStop], start: Point, end: Point, point: Point) -> Color:
    t = _linear_t(np.array(point.x), np.array(point.y), start, end)
    return _to_color(_interpolate(stops, np.asarray(t, dtype=np.float32)))


def sample_radial(center: Point, radius: float, inner: Color, outer: Color, point: Point) -> Color:
    t = _radial_t(np.array(point.x), np.array(point.y), center, radius)
    return _to_color(_interpolate([(inner, 0.0), (outer, 1.0)], np.asarray(t, dtype=np.float32)))


def _pixel_centres(canvas: Canvas, region: Rect):
    clipped = region.intersect(canvas.bounds)
    left, top, right, bottom = pixel_bounds(clipped)
    if clipped.is_empty or right <= left or bottom <= top:
        return None
    xs = np.arange(left, right, dtype=np.float32) + 0.5
    ys = np.arange(top, bottom, dtype=np.float32) + 0.5
    return left, top, xs[None, :], ys[:, None]


def linear_gradient(
    canvas: Canvas,
    rect: Rect,
    stops: Sequence[ColorStop],
    start: Point,
    end: Point,
) -> None:
    """
    Fill `rect` with a linear gradient along start -> end. Pixels beyond
    either end keep the end stop's colour.
    """
    with canvas.saved_state():
        canvas.set_clip(rect)
        grid = _pixel_centres(canvas, canvas.state.clip)
        if grid is None:
            return
        left, top, xs, ys = grid
        source = _interpolate(stops, _linear_t(xs, ys, start, end))
        coverage = np.ones(source.shape[:2], dtype=np.float32)
        canvas.composite(Coverage(coverage, left, top), source)


def radial_glow(canvas: Canvas, center: Point, radius: float, inner: Color, outer: Color) -> None:
    """
    Two-stop radial gradient from `inner` at the centre to `outer` at
    `radius`; everything further out is painted with `outer`.
    """
    with canvas.saved_state():
        region = canvas.state.clip
        if outer.a == 0:
            # Past the radius the glow is fully transparent.
            region = region.intersect(Rect(center.x - radius, center.y - radius, radius * 2, radius * 2))
        grid = _pixel_centres(canvas, region)
        if grid is None:
            return
        left, top, xs, ys = grid
        source = _interpolate([(inner, 0.0), (outer, 1.0)], _radial_t(xs, ys, center, radius))
        coverage = np.ones(source.shape[:2], dtype=np.float32)
        canvas.composite(Coverage(coverage, left, top), source)
