from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass
class Viewport:
    """
    Horizontal pixel window the whole history is stretched across.

    ``left`` never goes above 0 and ``right`` never drops below
    ``width - margin``; the reserved margin keeps the newest samples clear of
    the price labels.
    """

    width: float
    margin: float = 200.0
    left: float = 0.0
    right: Optional[float] = None

    def __post_init__(self) -> None:
        if self.right is None:
            self.right = float(self.width)
        self.clamp()

    @property
    def floating_width(self) -> float:
        return self.right - self.left

    @property
    def right_bound(self) -> float:
        return self.width - self.margin

    @property
    def at_home(self) -> bool:
        return self.left == 0 and self.right == self.width

    def clamp(self) -> None:
        if self.left > 0:
            self.left = 0.0
        if self.right < self.right_bound:
            self.right = self.right_bound

    def pan(self, delta: float) -> bool:
        """Shift both edges by ``delta`` pixels. Returns False when nothing moved."""
        if delta == 0:
            return False
        if self.right == self.right_bound and delta < 0:
            return False
        if self.left == 0 and delta > 0:
            return False
        # Stop the shift at the bound so a pan never changes the span.
        if delta < 0:
            delta = max(delta, self.right_bound - self.right)
        else:
            delta = min(delta, -self.left)
        self.left += delta
        self.right += delta
        self.clamp()
        return delta != 0

    def zoom(self, direction: int, anchor_x: float, divisor: float) -> bool:
        """
        Grow (``direction=1``) or shrink (``-1``) the span around ``anchor_x``.

        Each edge moves by its distance from the anchor over ``divisor``, so the
        sample under the anchor stays put.
        """
        side = 1 if direction > 0 else -1
        before = (self.left, self.right)
        self.right += ((self.right - anchor_x) / divisor) * side
        self.left += ((self.left - anchor_x) / divisor) * side
        self.clamp()
        return (self.left, self.right) != before

    def resize(self, width: float) -> None:
        was_home = self.at_home
        self.width = float(width)
        if was_home:
            self.left = 0.0
            self.right = float(width)
        self.clamp()

    def home(self) -> None:
        self.left = 0.0
        self.right = float(self.width)
        self.clamp()

    def copy(self) -> "Viewport":
        return replace(self)
