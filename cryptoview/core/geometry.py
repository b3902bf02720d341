from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

import numpy as np

from .normalizer import compress, expand, from_pixel_y, pixel_xs, to_pixel_y
from .samples import Extremum, History, visible_subset
from .viewport import Viewport

if TYPE_CHECKING:
    from .variants import ChartVariant

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ScreenGeometry:
    """
    One frame's worth of pixel-space geometry.

    ``top``/``bottom`` are the visible extrema as loaded; ``scale_top`` and
    ``scale_bottom`` are the range actually used for the Y mapping, padded
    apart when the visible series is flat.
    """

    width: float
    height: float
    count: int
    left: float = 0.0
    floating_width: float = 0.0
    zoom: float = 1.0
    top: Optional[Extremum] = None
    bottom: Optional[Extremum] = None
    scale_top: float = 1.0
    scale_bottom: float = 0.0
    xs: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float64))
    ys: Dict[str, np.ndarray] = field(default_factory=dict)
    visible: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.intp))

    @property
    def empty(self) -> bool:
        return self.count == 0 or self.top is None or self.bottom is None

    @property
    def flat(self) -> bool:
        return not self.empty and self.top.value == self.bottom.value

    @property
    def candle_width(self) -> float:
        if self.count <= 0:
            return 0.0
        return self.floating_width / self.count

    @property
    def mid(self) -> float:
        # Midpoint of the visible range in unzoomed pixels.
        return (to_pixel_y(self.scale_top, self.scale_top, self.scale_bottom, self.height)
                + to_pixel_y(self.scale_bottom, self.scale_top, self.scale_bottom, self.height)) / 2.0

    def x_for_index(self, index: int) -> float:
        return self.left + index * self.candle_width

    def y_for_price(self, price):
        y = to_pixel_y(price, self.scale_top, self.scale_bottom, self.height)
        return compress(y, self.mid, self.zoom)

    def price_for_y(self, y):
        base = expand(y, self.mid, self.zoom)
        return from_pixel_y(base, self.scale_top, self.scale_bottom, self.height)


def padded_range(top: float, bottom: float) -> tuple:
    """Spread a flat range so the Y mapping has something to divide by."""
    if top != bottom:
        return top, bottom
    pad = abs(top) * 0.05 or 1.0
    return top + pad, bottom - pad


def project(
    history: History,
    viewport: Viewport,
    zoom: float,
    height: float,
    variant: "ChartVariant",
) -> ScreenGeometry:
    """
    Project the whole history into pixel space for the current view.

    Always recomputed from raw prices: nothing from a previous frame is
    rescaled, so repeated zoom gestures do not accumulate float drift.
    """
    count = len(history)
    width = viewport.width
    if count == 0 or height <= 0 or width <= 0:
        return ScreenGeometry(width=width, height=height, count=count, left=viewport.left,
                              floating_width=viewport.floating_width, zoom=zoom)

    visible = visible_subset(history, viewport)
    top, bottom = variant.extrema_of(history, visible)
    if top is None or bottom is None:
        logger.debug("no visible samples (count=%d, left=%.1f, right=%.1f)", count, viewport.left, viewport.right)
        return ScreenGeometry(width=width, height=height, count=count, left=viewport.left,
                              floating_width=viewport.floating_width, zoom=zoom, visible=visible)

    scale_top, scale_bottom = padded_range(top.value, bottom.value)
    mid = (to_pixel_y(scale_top, scale_top, scale_bottom, height)
           + to_pixel_y(scale_bottom, scale_top, scale_bottom, height)) / 2.0

    def scale(prices: np.ndarray) -> np.ndarray:
        return compress(to_pixel_y(prices, scale_top, scale_bottom, height), mid, zoom)

    ys = variant.project_geometry(history, scale)
    for arr in ys.values():
        arr.flags.writeable = False
    xs = pixel_xs(count, viewport)
    xs.flags.writeable = False
    return ScreenGeometry(
        width=width,
        height=height,
        count=count,
        left=viewport.left,
        floating_width=viewport.floating_width,
        zoom=zoom,
        top=top,
        bottom=bottom,
        scale_top=scale_top,
        scale_bottom=scale_bottom,
        xs=xs,
        ys=ys,
        visible=visible,
    )
