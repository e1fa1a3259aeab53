from __future__ import annotations

from dataclasses import dataclass

from pygame.math import Vector2


@dataclass(frozen=True, slots=True)
class Rectangle:
    """Axis-aligned box anchored at its top-left corner; edges are inclusive."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @classmethod
    def around(cls, cx: float, cy: float, half_width: float, half_height: float) -> "Rectangle":
        return cls(cx - half_width, cy - half_height, 2.0 * half_width, 2.0 * half_height)

    def contains(self, point: Vector2) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom

    def intersects(self, other: "Rectangle") -> bool:
        return not (
            other.x > self.right
            or other.right < self.x
            or other.y > self.bottom
            or other.bottom < self.y
        )

    def quadrants(self) -> tuple["Rectangle", "Rectangle", "Rectangle", "Rectangle"]:
        # nw, ne, sw, se; y grows downward. Sharing the midpoint edges keeps the
        # quadrants gap-free, insertion order decides ties.
        mid_x = self.x + self.width / 2.0
        mid_y = self.y + self.height / 2.0
        left_w = mid_x - self.x
        right_w = self.right - mid_x
        top_h = mid_y - self.y
        bottom_h = self.bottom - mid_y
        return (
            Rectangle(self.x, self.y, left_w, top_h),
            Rectangle(mid_x, self.y, right_w, top_h),
            Rectangle(self.x, mid_y, left_w, bottom_h),
            Rectangle(mid_x, mid_y, right_w, bottom_h),
        )


@dataclass(frozen=True, slots=True)
class Circle:
    """Open disc: points exactly on the rim are outside."""

    x: float
    y: float
    radius: float

    def contains(self, point: Vector2) -> bool:
        dx = point.x - self.x
        dy = point.y - self.y
        return dx * dx + dy * dy < self.radius * self.radius

    def intersects(self, other: Rectangle) -> bool:
        nearest_x = max(other.x, min(self.x, other.right))
        nearest_y = max(other.y, min(self.y, other.bottom))
        dx = self.x - nearest_x
        dy = self.y - nearest_y
        return dx * dx + dy * dy <= self.radius * self.radius
