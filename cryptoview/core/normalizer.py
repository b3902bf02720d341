from __future__ import annotations

import math
from typing import Union

import numpy as np

from .errors import DegenerateRangeError
from .viewport import Viewport

ArrayOrFloat = Union[float, np.ndarray]


def to_pixel_y(price: ArrayOrFloat, top: float, bottom: float, height: float) -> ArrayOrFloat:
    """Map price to canvas Y; ``top`` lands on 0 and ``bottom`` on ``height``."""
    if top == bottom:
        raise DegenerateRangeError(top, bottom)
    return height - ((price - bottom) / (top - bottom)) * height


def from_pixel_y(y: ArrayOrFloat, top: float, bottom: float, height: float) -> ArrayOrFloat:
    if top == bottom:
        raise DegenerateRangeError(top, bottom)
    if height == 0:
        return bottom
    return bottom + ((height - y) / height) * (top - bottom)


def compress(y: ArrayOrFloat, mid: float, k: float) -> ArrayOrFloat:
    """Vertical zoom around ``mid``; ``k > 1`` squeezes, ``k < 1`` stretches."""
    return (y - mid) / k + mid


def expand(y: ArrayOrFloat, mid: float, k: float) -> ArrayOrFloat:
    return (y - mid) * k + mid


def to_pixel_x(index: ArrayOrFloat, viewport: Viewport, count: int) -> ArrayOrFloat:
    return viewport.left + index * (viewport.floating_width / count)


def pixel_xs(count: int, viewport: Viewport) -> np.ndarray:
    if count <= 0:
        return np.empty(0, dtype=np.float64)
    return to_pixel_x(np.arange(count, dtype=np.float64), viewport, count)


def candle_width(viewport: Viewport, count: int) -> float:
    if count <= 0:
        return 0.0
    return viewport.floating_width / count


def nearest_index(pointer_x: float, origin_x: float, viewport: Viewport, count: int) -> int:
    """
    History index closest to the pointer, always within ``[0, count - 1]``.

    Halves round up, matching how the pointer snaps to the next candle once it
    crosses the midpoint between two samples.
    """
    if count <= 0:
        return 0
    span = viewport.floating_width
    if span <= 0 or math.isnan(pointer_x):
        return 0
    raw = ((pointer_x - origin_x - viewport.left) / span) * count
    if not math.isfinite(raw):
        return count - 1 if raw > 0 else 0
    return min(max(math.floor(raw + 0.5), 0), count - 1)
