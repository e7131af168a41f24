"""
The two fixed EnvGuard Pro marketing layouts.

Every coordinate is an explicit literal relative to the layout margins; each
render builds one canvas, paints back-to-front and extracts the image once.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from PIL import Image

from .canvas import Canvas, Shadow
from .color import Color, color
from .fonts import FontHandle, mono_font, ui_font
from .geometry import Point, Rect, Size
from .gradients import linear_gradient, radial_glow
from .shapes import ellipse, grid, rounded_rect
from .text import draw_gradient_line, draw_line, draw_paragraph, measure


logger = logging.getLogger(__name__)

AD_SIZE = Size(1600, 1200)

BACKGROUND = color(0x0A0E17)
WHITE = color(0xFFFFFF)
SKY = 0x38BDF8
INDIGO = 0x818CF8
GREEN = 0x4ADE80
AMBER = 0xFBBF24
RED = 0xF87171
SLATE = color(0x94A3B8)
MIST = color(0xE2E8F0)
INK = color(0x07101C)
HAIRLINE = color(0xFFFFFF, 0.09)


@dataclass(frozen=True)
class Layout:
    name: str
    filename: str
    render: Callable[[Size], Image.Image]


# -- shared pieces -------------------------------------------------------


def _new_canvas(size: Size) -> Canvas:
    canvas = Canvas(int(size.width), int(size.height))
    canvas.reset_clip()
    canvas.fill(canvas.bounds, BACKGROUND)
    return canvas


def _brand_name(canvas: Canvas, mark: Rect, baseline: float) -> None:
    name_font = ui_font(20, bold=True)
    x = mark.max_x + 12
    draw_line(canvas, "EnvGuard", Point(x, baseline), name_font, WHITE)
    draw_line(canvas, "Pro", Point(x + measure("EnvGuard ", name_font), baseline), name_font, color(SKY))


def _fit_font(text: str, size: float, max_width: float, bold: bool = True, tracking: float = 0) -> FontHandle:
    """
    Largest ui font at or below `size` whose rendering of `text` fits `max_width`.
    """
    font = ui_font(size, bold=bold)
    while size > 8 and measure(text, font, tracking) > max_width:
        size -= 1
        font = ui_font(size, bold=bold)
    return font


def _pill(canvas: Canvas, right: float, top: float, label: str, hue: int, tracking: float) -> Rect:
    font = ui_font(12, bold=True)
    width = measure(label, font, tracking) + 36
    rect = Rect(right - width, top, width, 34)
    rounded_rect(canvas, rect, rect.height / 2, fill=color(hue, 0.12), stroke=color(hue, 0.35))
    draw_line(canvas, label, Point(rect.min_x + 18, rect.min_y + 22), font, color(hue), tracking=tracking)
    return rect


def _chip(canvas: Canvas, right: float, top: float, label: str) -> Rect:
    font = ui_font(12, bold=True)
    width = measure(label, font) + 20
    rect = Rect(right - width, top, width, 30)
    rounded_rect(canvas, rect, 15, fill=color(0xFFFFFF, 0.04), stroke=color(0xFFFFFF, 0.12))
    draw_line(canvas, label, Point(rect.min_x + 10, rect.min_y + 20), font, SLATE)
    return rect


def _badge(canvas: Canvas, box: Rect, label: str, hue: int, size: float = 14) -> None:
    font = _fit_font(label, size, box.width - 6)
    x = box.min_x + (box.width - measure(label, font)) / 2
    draw_line(canvas, label, Point(x, box.min_y + 23), font, color(hue))


def _card_header(canvas: Canvas, card: Rect, title: str, tint: float) -> Rect:
    head = Rect(card.min_x, card.min_y, card.width, 58)
    rounded_rect(canvas, head, 18, fill=color(0x0F172A, tint))
    draw_line(canvas, title, Point(head.min_x + 18, head.min_y + 36), ui_font(16, bold=True), WHITE)
    return head


def _terminal(canvas: Canvas, rect: Rect, title: str, body: str, font_size: float, tint: float) -> None:
    rounded_rect(canvas, rect, 14, fill=color(0x020617, tint), stroke=HAIRLINE)
    bar = Rect(rect.min_x, rect.min_y, rect.width, 40)
    rounded_rect(canvas, bar, 14, fill=color(0x0A0E17, 0.55))

    for dx, hue in ((14, RED), (30, AMBER), (46, GREEN)):
        ellipse(canvas, Rect(bar.min_x + dx, bar.min_y + 15, 10, 10), color(hue, 0.9))
    draw_line(canvas, title, Point(bar.min_x + 70, bar.min_y + 27), ui_font(12, bold=True), SLATE)

    draw_paragraph(
        canvas,
        body,
        Rect(rect.min_x + 14, rect.min_y + 52, rect.width - 28, rect.height - 62),
        mono_font(font_size),
        color(0xE2E8F0, 0.92),
        line_height=20,
    )


def _stat(canvas: Canvas, rect: Rect, key: str, value: str, subtitle: str, value_size: float, value_y: float) -> None:
    draw_line(
        canvas,
        key.upper(),
        Point(rect.min_x + 14, rect.min_y + 26),
        _fit_font(key.upper(), 12, rect.width - 28, tracking=1.2),
        SLATE,
        tracking=1.2,
    )
    draw_line(canvas, value, Point(rect.min_x + 14, rect.min_y + value_y), ui_font(value_size, bold=True), WHITE)
    draw_line(
        canvas,
        subtitle,
        Point(rect.min_x + 14, rect.min_y + 86),
        _fit_font(subtitle, 13, rect.width - 28, bold=False),
        SLATE,
    )


def _cta(canvas: Canvas, rect: Rect, label: str, inset: Tuple[float, float], font_size: float) -> None:
    linear_gradient(
        canvas,
        rect,
        [(color(SKY, 0.95), 0.0), (color(INDIGO, 0.95), 1.0)],
        Point(rect.min_x, rect.min_y),
        Point(rect.max_x, rect.max_y),
    )
    draw_line(
        canvas,
        label,
        Point(rect.min_x + inset[0], rect.min_y + inset[1]),
        _fit_font(label, font_size, rect.width - 2 * inset[0]),
        INK,
    )


# -- ad 1 ----------------------------------------------------------------

AD1_TERMINAL = """\
✔ Loaded config: .envguardrc.json
✔ Imported env files: set-env.sh, shared-env.sh

✖ Missing required variables (2)
    - STRIPE_SECRET_KEY  (src/payments/stripe.ts:14)
    - SENTRY_AUTH_TOKEN  (.github/workflows/release.yml:58)

⚠ Missing variables with fallbacks (5)
    - LOG_LEVEL (defaults to "info")
    - REDIS_TTL (defaults to 3600)

✔ Exit 1 (CI): errors present"""


def render_ad_1(size: Size = AD_SIZE) -> Image.Image:
    canvas = _new_canvas(size)

    radial_glow(canvas, Point(290, 300), 560, color(SKY, 0.18), color(SKY, 0.0))
    radial_glow(canvas, Point(1310, 320), 520, color(INDIGO, 0.16), color(INDIGO, 0.0))
    radial_glow(canvas, Point(900, 1070), 520, color(GREEN, 0.10), color(GREEN, 0.0))

    # Grid only in the top-left region so it fades behind the headline.
    with canvas.saved_state():
        canvas.set_clip(Rect(0, 0, size.width * 0.62, size.height * 0.58))
        grid(canvas, canvas.bounds, spacing=44, alpha=0.05)

    margin_x, margin_y, gap = 80, 70, 32
    col1_w = 820
    col2_w = size.width - margin_x * 2 - gap - col1_w
    top_y, top_h = margin_y, 64

    mark = Rect(margin_x, top_y + 8, 42, 42)
    rounded_rect(
        canvas,
        mark,
        12,
        fill=color(SKY),
        line_width=0,
        shadow=Shadow(color(SKY, 0.15), Size(0, 12), 30),
    )
    linear_gradient(
        canvas,
        mark,
        [(color(SKY), 0.0), (color(INDIGO), 1.0)],
        Point(mark.min_x, mark.min_y),
        Point(mark.max_x, mark.max_y),
    )
    _brand_name(canvas, mark, top_y + 36)
    _pill(canvas, size.width - margin_x, top_y + 15, "CI / CD READY", SKY, 1.2)

    h1 = ui_font(58, bold=True)
    draw_line(canvas, "Stop deploys with", Point(margin_x, top_y + top_h + 84), h1, WHITE)
    draw_gradient_line(
        canvas,
        "missing env vars",
        Point(margin_x, top_y + top_h + 146),
        h1,
        color(SKY),
        color(INDIGO, 0.65),
    )
    draw_paragraph(
        canvas,
        "Validate environment variables across your codebase, export SARIF for security "
        "workflows, and verify AWS SSM / Secrets before release.",
        Rect(margin_x, top_y + top_h + 172, col1_w - 40, 120),
        ui_font(20),
        SLATE,
        line_height=30,
    )

    tags = (
        (GREEN, "Detect fallbacks & warn intelligently"),
        (AMBER, "Parse shared set-env.sh files"),
        (SKY, "Produce GitHub Security SARIF"),
    )
    rects = _tag_rects([label for _, label in tags], margin_x, top_y + top_h + 308, col1_w)
    for (hue, label), rect in zip(tags, rects):
        _tag(canvas, rect, color(hue), label)

    panel = Rect(margin_x + col1_w + gap, top_y + top_h + 20, col2_w, 610)
    rounded_rect(
        canvas,
        panel,
        18,
        fill=color(0x111827, 0.78),
        stroke=HAIRLINE,
        shadow=Shadow(color(0x000000, 0.45), Size(0, 20), 50),
    )
    head = _card_header(canvas, panel, "Pipeline Scan Overview", 0.72)
    _chip(canvas, head.max_x - 18, head.min_y + 14, "envguard-pro scan --ci")

    metric_w = (panel.width - 18 * 2 - 12 * 2) / 3
    for i, (title, value, subtitle) in enumerate(
        (
            ("Files Scanned", "1,842", "JS / TS / YAML / Docker"),
            ("Env Vars Found", "216", "Runtime + build-time"),
            ("Action Items", "7", "2 errors • 5 warnings"),
        )
    ):
        rect = Rect(panel.min_x + 18 + i * (metric_w + 12), panel.min_y + 78, metric_w, 104)
        rounded_rect(canvas, rect, 14, fill=color(0x0F172A, 0.55), stroke=color(0xFFFFFF, 0.08))
        _stat(canvas, rect, title, value, subtitle, value_size=34, value_y=62)

    _terminal(
        canvas,
        Rect(panel.min_x + 18, panel.min_y + 206, panel.width - 36, 360),
        "envguard-pro • summary",
        AD1_TERMINAL,
        font_size=13,
        tint=0.68,
    )

    feat_y = panel.max_y + 36
    feat_w = (size.width - margin_x * 2 - 18 * 2) / 3
    for i, (badge, title, desc) in enumerate(
        (
            (
                "SARIF",
                "Security-ready reporting",
                "Export SARIF results to surface missing configuration in code scanning "
                "dashboards and PR checks.",
            ),
            (
                "AWS",
                "Validate before deploy",
                "Verify SSM parameters and Secrets Manager references exist — catch broken "
                "releases early.",
            ),
            ("PRO", "Shared env scripts", "Import export VAR=... from shell scripts used across repos and teams."),
        )
    ):
        _feature(canvas, Rect(margin_x + i * (feat_w + 18), feat_y, feat_w, 200), badge, title, desc)

    draw_line(
        canvas,
        "Environment variable validation with SARIF output and AWS integration",
        Point(margin_x, size.height - 38),
        ui_font(13),
        SLATE,
        alpha=0.85,
    )
    _cta(canvas, Rect(size.width - margin_x - 160, size.height - 56, 160, 40), "Ship safer today", (20, 26), 14)

    return canvas.extract_image()


TAG_FONT_SIZE = 14
TAG_GAP = 10


def _tag_rects(labels: Sequence[str], left: float, top: float, max_width: float) -> List[Rect]:
    """
    Flow tag pills left to right, starting a new row when the next pill would
    pass `max_width`.
    """
    font = ui_font(TAG_FONT_SIZE, bold=True)
    rects: List[Rect] = []
    x, y = left, top
    for label in labels:
        width = 34 + measure(label, font) + 18
        if x > left and x + width > left + max_width:
            x, y = left, y + 40 + TAG_GAP
        rects.append(Rect(x, y, width, 40))
        x += width + TAG_GAP
    return rects


def _tag(canvas: Canvas, rect: Rect, dot: Color, label: str) -> None:
    rounded_rect(canvas, rect, 20, fill=color(0x111827, 0.70), stroke=HAIRLINE)
    bullet = Rect(rect.min_x + 14, rect.min_y + 15, 10, 10)
    ellipse(canvas, bullet, dot)
    ellipse(canvas, bullet.inset(-6, -6), dot.with_alpha(0.12))
    draw_line(canvas, label, Point(rect.min_x + 34, rect.min_y + 26), ui_font(TAG_FONT_SIZE, bold=True), MIST)


def _feature(canvas: Canvas, rect: Rect, badge: str, title: str, desc: str) -> None:
    rounded_rect(canvas, rect, 18, fill=color(0x111827, 0.70), stroke=HAIRLINE)
    box = Rect(rect.min_x + 20, rect.min_y + 20, 34, 34)
    rounded_rect(canvas, box, 12, fill=color(SKY, 0.12), stroke=color(SKY, 0.35))
    _badge(canvas, box, badge, SKY)
    title_font = _fit_font(title, 18, rect.max_x - 20 - (box.max_x + 12))
    draw_line(canvas, title, Point(box.max_x + 12, box.min_y + 23), title_font, WHITE)
    draw_paragraph(
        canvas,
        desc,
        Rect(rect.min_x + 20, rect.min_y + 60, rect.width - 40, rect.height - 74),
        ui_font(14),
        SLATE,
        line_height=22,
    )


# -- ad 2 ----------------------------------------------------------------

AD2_TERMINAL = """\
$ envguard-pro scan --ci --aws --aws-deep --format sarif --output results.sarif

✔ Serverless references detected (SSM + Secrets)
✔ SSM parameters validated (14)
⚠ Missing Secret Keys (1)
    - myapp/dev/aurora.username (used by AURORA_USERNAME)

✔ SARIF written: results.sarif
✖ Exit 1 (CI): errors present"""

FINDINGS = (
    ("E", RED, "Missing required env var", "SENTRY_AUTH_TOKEN referenced in release workflow", "CI • Blocker"),
    ("E", RED, "AWS secret key missing", "myapp/dev/aurora.username used by AURORA_USERNAME", "AWS • Deep"),
    ("W", AMBER, "Fallback detected", 'LOG_LEVEL defaults to "info" (non-fatal)', "Warn • Triage"),
    ("✔", GREEN, "SSM parameters valid", "/myapp/dev/* validated in us-west-2", "AWS • OK"),
)


def render_ad_2(size: Size = AD_SIZE) -> Image.Image:
    canvas = _new_canvas(size)

    radial_glow(canvas, Point(320, 260), 560, color(SKY, 0.16), color(SKY, 0.0))
    radial_glow(canvas, Point(1280, 280), 580, color(INDIGO, 0.16), color(INDIGO, 0.0))
    radial_glow(canvas, Point(1180, 1000), 520, color(GREEN, 0.10), color(GREEN, 0.0))
    radial_glow(canvas, Point(360, 1000), 520, color(AMBER, 0.06), color(AMBER, 0.0))

    margin_x, margin_y = 80, 70

    mark = Rect(margin_x, margin_y + 6, 42, 42)
    linear_gradient(
        canvas,
        mark,
        [(color(SKY, 0.9), 0.0), (color(INDIGO, 0.9), 1.0)],
        Point(mark.min_x, mark.min_y),
        Point(mark.max_x, mark.max_y),
    )
    _brand_name(canvas, mark, margin_y + 34)
    _pill(canvas, size.width - margin_x, margin_y + 14, "AWS + SARIF", GREEN, 1.1)

    h1 = ui_font(54, bold=True)
    lead = "Prove your config is"
    draw_line(canvas, lead, Point(margin_x, margin_y + 126), h1, WHITE)
    draw_gradient_line(
        canvas,
        "deployable",
        Point(margin_x + measure(lead + " ", h1), margin_y + 126),
        h1,
        color(SKY),
        color(INDIGO, 0.62),
    )
    draw_paragraph(
        canvas,
        "Validate environment variables in code, then verify AWS SSM / Secrets Manager "
        "(including nested JSON keys) and export SARIF for security dashboards.",
        Rect(margin_x, margin_y + 150, size.width - margin_x * 2, 90),
        ui_font(18),
        SLATE,
        line_height=28,
    )

    gap = 18
    main_y = margin_y + 250
    main_h = size.height - main_y - 70
    left_w = 860
    right_w = size.width - margin_x * 2 - gap - left_w
    card_shadow = Shadow(color(0x000000, 0.50), Size(0, 24), 90)

    left = Rect(margin_x, main_y, left_w, main_h)
    rounded_rect(canvas, left, 18, fill=color(0x111827, 0.76), stroke=HAIRLINE, shadow=card_shadow)
    head = _card_header(canvas, left, "CLI Scan + AWS Validation", 0.64)
    _chip(canvas, head.max_x - 18, head.min_y + 14, "--aws --aws-deep --format sarif")

    term = Rect(left.min_x + 18, left.min_y + 80, left.width - 36, 360)
    _terminal(canvas, term, "envguard-pro • aws checks", AD2_TERMINAL, font_size=12.8, tint=0.70)

    kpi_w = (term.width - 12) / 2
    for i, (key, value, sub) in enumerate(
        (
            ("AWS Resources", "15", "Validated in seconds"),
            ("SARIF Findings", "3", "PR + Security tab ready"),
        )
    ):
        rect = Rect(term.min_x + i * (kpi_w + 12), term.max_y + 14, kpi_w, 110)
        rounded_rect(canvas, rect, 16, fill=color(0x0F172A, 0.62), stroke=color(0xFFFFFF, 0.08))
        _stat(canvas, rect, key, value, sub, value_size=30, value_y=60)

    right = Rect(left.max_x + gap, main_y, right_w, main_h)
    rounded_rect(canvas, right, 18, fill=color(0x111827, 0.76), stroke=HAIRLINE, shadow=card_shadow)
    head = _card_header(canvas, right, "Security Findings (SARIF)", 0.64)
    _chip(canvas, head.max_x - 18, head.min_y + 14, "results.sarif")

    row_y = right.min_y + 84
    for badge, hue, title, desc, meta in FINDINGS:
        _finding(canvas, Rect(right.min_x + 18, row_y, right.width - 36, 88), badge, hue, title, desc, meta)
        row_y += 88 + 10

    cta = Rect(right.max_x - 180, right.max_y - 48, 160, 34)
    footer = "Designed for CI pipelines and security reporting."
    footer_x = right.min_x + 18
    draw_line(
        canvas,
        footer,
        Point(footer_x, right.max_y - 30),
        _fit_font(footer, 13, cta.min_x - 12 - footer_x, bold=False),
        SLATE,
        alpha=0.85,
    )
    _cta(canvas, cta, "Validate & ship", (24, 22), 13)

    return canvas.extract_image()


def _finding(canvas: Canvas, rect: Rect, badge: str, hue: int, title: str, desc: str, meta: str) -> None:
    rounded_rect(canvas, rect, 16, fill=color(0x0F172A, 0.52), stroke=color(0xFFFFFF, 0.08))
    box = Rect(rect.min_x + 12, rect.min_y + 26, 34, 34)
    rounded_rect(canvas, box, 12, fill=color(hue, 0.12), stroke=color(hue, 0.35))
    _badge(canvas, box, badge, hue)

    # The meta pill shares the title row; the description runs full width below.
    meta_font = ui_font(12, bold=True)
    meta_width = measure(meta, meta_font) + 24
    meta_rect = Rect(rect.max_x - 12 - meta_width, rect.min_y + 14, meta_width, 28)
    rounded_rect(canvas, meta_rect, 14, fill=color(0xFFFFFF, 0.04), stroke=color(0xFFFFFF, 0.11))
    draw_line(canvas, meta, Point(meta_rect.min_x + 12, meta_rect.min_y + 19), meta_font, SLATE, alpha=0.95)

    text_x = box.max_x + 12
    title_font = _fit_font(title, 16, meta_rect.min_x - 12 - text_x)
    draw_line(canvas, title, Point(text_x, rect.min_y + 34), title_font, WHITE)
    desc_font = _fit_font(desc, 13, rect.max_x - 12 - text_x, bold=False)
    draw_line(canvas, desc, Point(text_x, rect.min_y + 62), desc_font, SLATE)


LAYOUTS: Dict[str, Layout] = {
    "ad-1": Layout("ad-1", "envguard-pro-ad-1.png", render_ad_1),
    "ad-2": Layout("ad-2", "envguard-pro-ad-2.png", render_ad_2),
}
