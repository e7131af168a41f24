import logging
import math
from typing import List, Literal

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .canvas import Canvas, Coverage
from .color import Color
from .fonts import FontHandle
from .geometry import Point, Rect


logger = logging.getLogger(__name__)

Alignment = Literal["left", "center", "right"]


def measure(text: str, font: FontHandle, tracking: float = 0) -> float:
    """
    Advance width of a single line, including tracking after every glyph.
    """
    if not text:
        return 0.0
    return font.getlength(text) + tracking * len(text)


def _glyph_positions(text: str, font: FontHandle, tracking: float) -> List[float]:
    return [font.getlength(text[:i]) + tracking * i for i in range(len(text))]


def _line_coverage(text: str, origin: Point, font: FontHandle, tracking: float) -> Coverage:
    """
    Rasterise one line into a coverage block. `origin` is the left end of
    the baseline in canvas coordinates.
    """
    ascent, descent = font.metrics()
    stroke = font.stroke_width
    pad = 2 + stroke
    left = int(math.floor(origin.x)) - pad
    top = int(math.floor(origin.y)) - ascent - pad
    width = int(math.ceil(measure(text, font, tracking) + abs(tracking))) + 2 * pad + 1
    height = ascent + descent + 2 * pad + 1

    mask = Image.new("L", (max(width, 1), max(height, 1)), 0)
    draw = ImageDraw.Draw(mask)

    # Pillow rasterises in the same top-left space as the canvas; only the
    # baseline anchor needs translating into the block's local frame.
    baseline_y = origin.y - top
    start_x = origin.x - left
    if isinstance(font.face, ImageFont.FreeTypeFont):
        anchor = "ls"
        y = baseline_y
    else:
        anchor = None
        y = baseline_y - ascent

    if tracking == 0:
        runs = [(start_x, text)]
    else:
        runs = [(start_x + dx, ch) for dx, ch in zip(_glyph_positions(text, font, tracking), text)]

    for x, run in runs:
        draw.text(
            (x, y),
            run,
            font=font.face,
            fill=255,
            anchor=anchor,
            stroke_width=stroke,
            stroke_fill=255,
        )
    return Coverage(np.asarray(mask, dtype=np.float32) / 255.0, left, top)


def draw_line(
    canvas: Canvas,
    text: str,
    origin: Point,
    font: FontHandle,
    fill: Color,
    tracking: float = 0,
    alpha: float = 1.0,
) -> None:
    """
    Draw exactly one line of text with no wrapping; embedded line breaks are
    drawn as spaces. `alpha` scales the colour's own alpha.
    """
    text = " ".join(text.splitlines())
    if not text.strip():
        return
    canvas.composite(_line_coverage(text, origin, font, tracking), fill.scaled_alpha(alpha))


def draw_gradient_line(
    canvas: Canvas,
    text: str,
    origin: Point,
    font: FontHandle,
    first: Color,
    second: Color,
    offset: float = 1.2,
) -> None:
    """
    Approximate gradient-filled glyphs by drawing the text twice, the second
    pass nudged right by `offset` pixels.
    """
    draw_line(canvas, text, origin, font, first)
    draw_line(canvas, text, Point(origin.x + offset, origin.y), font, second)


def _break_word(word: str, font: FontHandle, max_width: float) -> List[str]:
    # Every piece keeps at least one character so narrow widths still progress.
    pieces: List[str] = []
    piece = ""
    for ch in word:
        if piece and measure(piece + ch, font) > max_width:
            pieces.append(piece)
            piece = ch
        else:
            piece += ch
    pieces.append(piece)
    return pieces


def wrap_text(text: str, font: FontHandle, max_width: float) -> List[str]:
    """
    Greedy word wrap. Hard newlines are kept (blank lines included) and each
    line's leading indentation stays with its first word. A word wider than
    `max_width` on its own is broken between characters.
    """
    lines: List[str] = []
    for raw in text.split("\n"):
        raw = raw.rstrip()
        if measure(raw, font) <= max_width:
            lines.append(raw)
            continue

        indent = raw[: len(raw) - len(raw.lstrip())]
        current = ""
        for word in raw.split():
            test = f"{current} {word}" if current else f"{indent}{word}"
            if measure(test, font) <= max_width:
                current = test
                continue
            if current:
                lines.append(current)
                test = word
            if measure(test, font) <= max_width:
                current = test
            else:
                *full, current = _break_word(test, font, max_width)
                lines.extend(full)
        if current:
            lines.append(current)
    return lines


def draw_paragraph(
    canvas: Canvas,
    text: str,
    rect: Rect,
    font: FontHandle,
    fill: Color,
    line_height: float,
    alignment: Alignment = "left",
    alpha: float = 1.0,
) -> int:
    """
    Lay out `text` inside `rect` with word wrapping and a fixed line height,
    anchored to the top. Lines that would not fit entirely inside the rect are
    dropped. Returns how many lines were laid out.
    """
    if line_height <= 0:
        raise ValueError(f"line_height must be positive, got {line_height}")
    if rect.height <= 0 or rect.width <= 0:
        return 0

    lines = wrap_text(text, font, rect.width)
    capacity = int(math.floor(rect.height / line_height + 1e-9))
    visible = lines[:capacity]
    if len(visible) < len(lines):
        logger.debug("paragraph clipped: %d of %d lines fit", len(visible), len(lines))

    _, descent = font.metrics()
    with canvas.saved_state():
        # Glyph overhang past the wrap width is cut at the rect sides only.
        canvas.set_clip(Rect(rect.min_x, 0, rect.width, canvas.height))
        for index, content in enumerate(visible):
            baseline = rect.min_y + (index + 1) * line_height - descent
            slack = rect.width - measure(content, font)
            if alignment == "center":
                x = rect.min_x + slack / 2.0
            elif alignment == "right":
                x = rect.min_x + slack
            else:
                x = rect.min_x
            draw_line(canvas, content, Point(x, baseline), font, fill, alpha=alpha)
    return len(visible)
