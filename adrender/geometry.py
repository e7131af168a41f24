from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in canvas pixels, top-left origin.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inset(self, dx: float, dy: float) -> "Rect":
        """
        Shrink by dx/dy on every side; negative values grow the rect.
        """
        return Rect(self.x + dx, self.y + dy, self.width - 2 * dx, self.height - 2 * dy)

    def intersect(self, other: "Rect") -> "Rect":
        x0 = max(self.min_x, other.min_x)
        y0 = max(self.min_y, other.min_y)
        x1 = min(self.max_x, other.max_x)
        y1 = min(self.max_y, other.max_y)
        if x1 <= x0 or y1 <= y0:
            return Rect(x0, y0, 0, 0)
        return Rect(x0, y0, x1 - x0, y1 - y0)
