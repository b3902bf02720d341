from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .samples import History
from .viewport import Viewport


@dataclass
class PointerState:
    index: int = 0
    visible: bool = False
    is_panning: bool = False
    is_zooming_vertical: bool = False
    x: float = 0.0
    y: float = 0.0

    def clamp_index(self, count: int) -> None:
        if count <= 0:
            self.index = 0
        else:
            self.index = min(max(self.index, 0), count - 1)


@dataclass
class ChartContext:
    """Everything one chart instance mutates. Nothing here is shared between charts."""

    history: History
    viewport: Viewport
    height: float
    zoom: float
    stroke_width: float
    pointer: PointerState = field(default_factory=PointerState)
    origin: Tuple[float, float] = (0.0, 0.0)

    @property
    def width(self) -> float:
        return self.viewport.width

    @property
    def count(self) -> int:
        return len(self.history)

    def local_x(self, x: float) -> float:
        return x - self.origin[0]

    def local_y(self, y: float) -> float:
        return y - self.origin[1]
