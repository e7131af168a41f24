from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class Color:
    """
    Straight-alpha sRGB colour with every channel normalised to [0, 1].
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    def with_alpha(self, alpha: float) -> "Color":
        return replace(self, a=float(alpha))

    def scaled_alpha(self, factor: float) -> "Color":
        return replace(self, a=self.a * float(factor))

    def to_rgba8(self) -> Tuple[int, int, int, int]:
        return tuple(_to_byte(v) for v in (self.r, self.g, self.b, self.a))  # type: ignore[return-value]


def color(hex_value: int, alpha: float = 1.0) -> Color:
    """
    Build a colour from a 24-bit 0xRRGGBB integer plus an alpha value.
    """
    r = ((hex_value >> 16) & 0xFF) / 255.0
    g = ((hex_value >> 8) & 0xFF) / 255.0
    b = (hex_value & 0xFF) / 255.0
    return Color(r, g, b, float(alpha))


def with_alpha(c: Color, alpha: float) -> Color:
    return c.with_alpha(alpha)


def _to_byte(value: float) -> int:
    return int(round(min(max(value, 0.0), 1.0) * 255))


WHITE = color(0xFFFFFF)
