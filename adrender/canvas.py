import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Union

import numpy as np
from PIL import Image, ImageFilter

from .color import Color
from .geometry import Rect, Size


logger = logging.getLogger(__name__)


class CanvasError(RuntimeError):
    """
    Raised when the pixel buffer cannot be created or the canvas is misused
    (unbalanced restore, second extraction).
    """


@dataclass(frozen=True)
class Shadow:
    color: Color
    offset: Size
    blur: float


@dataclass(frozen=True)
class DrawingState:
    clip: Rect
    shadow: Optional[Shadow] = None
    stroke_width: float = 1.0


@dataclass(frozen=True)
class Coverage:
    """
    Per-pixel coverage in [0, 1] for the pixel block starting at (left, top).
    """

    values: np.ndarray
    left: int
    top: int

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])


# Either a flat colour or a straight-alpha RGBA array shaped like the coverage.
Source = Union[Color, np.ndarray]


def axis_coverage(lo: float, hi: float, start: int, count: int) -> np.ndarray:
    """
    Fraction of each pixel [start + i, start + i + 1) covered by [lo, hi).
    """
    p = np.arange(start, start + count, dtype=np.float32)
    return np.clip(np.minimum(hi, p + 1) - np.maximum(lo, p), 0.0, 1.0)


def pixel_bounds(rect: Rect):
    """
    Integer (left, top, right, bottom) of every pixel the rect touches.
    """
    left = int(math.floor(rect.min_x))
    top = int(math.floor(rect.min_y))
    right = int(math.ceil(rect.max_x))
    bottom = int(math.ceil(rect.max_y))
    return left, top, right, bottom


def rect_coverage(rect: Rect) -> Coverage:
    """
    Exact area coverage of an axis-aligned rect, including fractional edges.
    """
    left, top, right, bottom = pixel_bounds(rect)
    xs = axis_coverage(rect.min_x, rect.max_x, left, max(right - left, 0))
    ys = axis_coverage(rect.min_y, rect.max_y, top, max(bottom - top, 0))
    return Coverage(np.outer(ys, xs).astype(np.float32), left, top)


class Canvas:
    """
    RGBA pixel buffer plus a stack of drawing states.

    Geometry is always given in top-left-origin pixels. The buffer stores
    premultiplied float RGBA; callers only ever see straight alpha.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise CanvasError(f"Canvas size must be positive, got {width}x{height}")
        try:
            self._buffer = np.zeros((height, width, 4), dtype=np.float32)
        except MemoryError as exc:
            raise CanvasError(f"Could not allocate a {width}x{height} canvas") from exc
        self.width = width
        self.height = height
        self._state = DrawingState(clip=self.bounds)
        self._stack: List[DrawingState] = []
        self._extracted = False

    @property
    def bounds(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    @property
    def state(self) -> DrawingState:
        return self._state

    # -- state stack -----------------------------------------------------

    def save_state(self) -> None:
        self._stack.append(self._state)

    def restore_state(self) -> None:
        if not self._stack:
            raise CanvasError("restore_state() called without a matching save_state()")
        self._state = self._stack.pop()

    @contextmanager
    def saved_state(self) -> Iterator["Canvas"]:
        self.save_state()
        try:
            yield self
        finally:
            self.restore_state()

    @property
    def depth(self) -> int:
        return len(self._stack)

    def set_clip(self, rect: Rect) -> None:
        self._state = replace(self._state, clip=self._state.clip.intersect(rect))

    def reset_clip(self) -> None:
        self._state = replace(self._state, clip=self.bounds)

    def set_shadow(self, shadow: Optional[Shadow]) -> None:
        self._state = replace(self._state, shadow=shadow)

    def set_stroke_width(self, width: float) -> None:
        self._state = replace(self._state, stroke_width=float(width))

    # -- painting --------------------------------------------------------

    def fill(self, rect: Rect, fill: Color) -> None:
        self.composite(rect_coverage(rect), fill)

    def composite(self, coverage: Coverage, source: Source) -> None:
        """
        Paint `source` through `coverage` with source-over blending, honouring
        the current clip and shadow.
        """
        if coverage.values.size == 0:
            return
        shadow = self._state.shadow
        if shadow is not None:
            self._paint_shadow(coverage, source, shadow)
        self._blend(coverage, source)

    def _paint_shadow(self, coverage: Coverage, source: Source, shadow: Shadow) -> None:
        if isinstance(source, Color):
            base = coverage.values * source.a
        else:
            base = coverage.values * source[..., 3]

        sigma = max(shadow.blur, 0.0) / 2.0
        pad = int(math.ceil(sigma * 3)) + 1
        padded = np.zeros((coverage.height + 2 * pad, coverage.width + 2 * pad), dtype=np.float32)
        padded[pad : pad + coverage.height, pad : pad + coverage.width] = base

        layer = Image.fromarray(np.round(padded * 255).astype(np.uint8))
        if sigma > 0:
            layer = layer.filter(ImageFilter.GaussianBlur(sigma))
        blurred = np.asarray(layer, dtype=np.float32) / 255.0

        shifted = Coverage(
            blurred,
            coverage.left - pad + int(round(shadow.offset.width)),
            coverage.top - pad + int(round(shadow.offset.height)),
        )
        self._blend(shifted, shadow.color)

    def _blend(self, coverage: Coverage, source: Source) -> None:
        clip = self._state.clip
        if clip.is_empty:
            return
        cl, ct, cr, cb = pixel_bounds(clip)
        x0 = max(coverage.left, cl, 0)
        y0 = max(coverage.top, ct, 0)
        x1 = min(coverage.left + coverage.width, cr, self.width)
        y1 = min(coverage.top + coverage.height, cb, self.height)
        if x1 <= x0 or y1 <= y0:
            return

        rows = slice(y0 - coverage.top, y1 - coverage.top)
        cols = slice(x0 - coverage.left, x1 - coverage.left)
        mask = coverage.values[rows, cols]
        if clip != self.bounds:
            mask = mask * np.outer(
                axis_coverage(clip.min_y, clip.max_y, y0, y1 - y0),
                axis_coverage(clip.min_x, clip.max_x, x0, x1 - x0),
            )

        if isinstance(source, Color):
            alpha = mask * source.a
            src = alpha[..., None] * np.array([source.r, source.g, source.b, 1.0], dtype=np.float32)
        else:
            block = source[rows, cols]
            alpha = mask * block[..., 3]
            src = np.concatenate([block[..., :3] * alpha[..., None], alpha[..., None]], axis=-1)

        region = self._buffer[y0:y1, x0:x1]
        region *= (1.0 - alpha)[..., None]
        region += src

    # -- output ----------------------------------------------------------

    def pixel(self, x: int, y: int) -> Color:
        """
        Straight-alpha colour currently stored at (x, y).
        """
        r, g, b, a = (float(v) for v in self._buffer[y, x])
        if a <= 0:
            return Color(0.0, 0.0, 0.0, 0.0)
        return Color(r / a, g / a, b / a, a)

    def extract_image(self) -> Image.Image:
        if self._extracted:
            raise CanvasError("extract_image() may only be called once per canvas")
        self._extracted = True

        alpha = self._buffer[..., 3:4]
        safe = np.where(alpha > 0, alpha, 1.0)
        straight = np.where(alpha > 0, self._buffer[..., :3] / safe, 0.0)
        rgba = np.concatenate([straight, alpha], axis=-1)
        data = np.round(np.clip(rgba, 0.0, 1.0) * 255).astype(np.uint8)
        logger.debug("extracted %dx%d image", self.width, self.height)
        return Image.fromarray(data)


def create_canvas(width: int, height: int) -> Canvas:
    return Canvas(width, height)
