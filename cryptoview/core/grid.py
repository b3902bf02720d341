from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from .config import EngineSettings
from .errors import DegenerateRangeError
from .formatting import format_price
from .geometry import ScreenGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridLine:
    y: float
    value: float
    label: str


@dataclass(frozen=True)
class GridPlan:
    lines: Tuple[GridLine, ...] = ()
    segments: int = 0
    step_px: float = 0.0
    resolution: float = 0.0
    converged: bool = True
    fallback: bool = False

    def __len__(self) -> int:
        return len(self.lines)


def round_to(value: float, resolution: float) -> float:
    # Half-up, so a value sitting exactly between two multiples rounds the same
    # way whatever its sign history.
    return math.floor(value / resolution + 0.5) * resolution


def resolve_rounding(
    top: float,
    bottom: float,
    increment: float = 1.0,
    max_attempts: int = 1000,
) -> Tuple[float, float, float]:
    """
    Round ``top`` and ``bottom`` to a common resolution that keeps them apart.

    Starts at resolution 1 and widens it by ``increment`` while both round to
    the same value. Returns ``(rounded_top, rounded_bottom, resolution)``; when
    no resolution within ``max_attempts`` separates them the raw values are
    returned with resolution 0. Equal inputs raise ``DegenerateRangeError``.
    """
    if top == bottom:
        raise DegenerateRangeError(top, bottom)
    resolution = 1.0
    for _ in range(max_attempts + 1):
        rounded_top = round_to(top, resolution)
        rounded_bottom = round_to(bottom, resolution)
        if rounded_top != rounded_bottom:
            return rounded_top, rounded_bottom, resolution
        resolution += increment
    return top, bottom, 0.0


def converge_segments(pixel_range: float, settings: EngineSettings) -> Tuple[int, bool]:
    """
    Pick a segment count whose step falls in ``[grid_min_px, grid_max_px]``.

    Returns ``(segments, converged)``. Float rounding can make the shrink/grow
    steps oscillate, so the search is capped and falls back to the count that
    puts the step in the middle of the band.
    """
    if pixel_range <= 0 or not math.isfinite(pixel_range):
        return 1, False
    segments = settings.grid_segments
    for _ in range(settings.grid_max_iterations):
        step = pixel_range / segments
        if step < settings.grid_min_px and segments > 1:
            segments = max(1, min(segments - 1, round(segments * 4 / 5)))
        elif step > settings.grid_max_px:
            segments = max(segments + 1, round(segments * 6 / 5))
        else:
            return segments, True
    target = (settings.grid_min_px + settings.grid_max_px) / 2.0
    fallback = max(1, round(pixel_range / target))
    logger.debug("grid segment search did not converge for %.2fpx; using %d", pixel_range, fallback)
    return fallback, False


def plan_grid(geometry: ScreenGeometry, settings: EngineSettings) -> GridPlan:
    if geometry.empty:
        return GridPlan()

    top = geometry.top.value
    bottom = geometry.bottom.value
    try:
        rounded_top, rounded_bottom, resolution = resolve_rounding(
            top, bottom, settings.rounding_increment, settings.rounding_max_attempts
        )
    except DegenerateRangeError:
        logger.debug("flat visible range at %s; single grid line", top)
        y = float(geometry.y_for_price(top))
        return GridPlan(lines=(GridLine(y, top, format_price(top)),), segments=0, fallback=True)

    top_px = float(geometry.y_for_price(rounded_top))
    bottom_px = float(geometry.y_for_price(rounded_bottom))
    pixel_range = abs(bottom_px - top_px)
    segments, converged = converge_segments(pixel_range, settings)
    step = pixel_range / segments
    if step <= 0 or not math.isfinite(step):
        y = float(geometry.y_for_price(top))
        return GridPlan(lines=(GridLine(y, top, format_price(top)),), resolution=resolution, fallback=True)
    if step < settings.grid_min_px:
        # Already down to one segment; skip whole ranges instead.
        step *= math.ceil(settings.grid_min_px / step)

    anchor = min(top_px, bottom_px)
    first = math.ceil((0.0 - anchor) / step)
    last = math.floor((geometry.height - anchor) / step)
    lines = []
    for i in range(first, last + 1):
        y = anchor + i * step
        value = float(geometry.price_for_y(y))
        lines.append(GridLine(y, value, format_price(value)))
    return GridPlan(
        lines=tuple(lines),
        segments=segments,
        step_px=step,
        resolution=resolution,
        converged=converged,
    )
