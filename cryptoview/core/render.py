from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import ChartOptions
from .context import ChartContext
from .formatting import format_timestamp
from .geometry import ScreenGeometry
from .grid import GridPlan
from .surface import DrawingSurface, sharp_pixel
from .variants import ChartVariant, Paint

logger = logging.getLogger(__name__)

LABEL_INSET_X = 35
LABEL_OFFSET_Y = 5
READOUT_X = 10
READOUT_Y = 50
READOUT_LINE = 20


@dataclass(frozen=True)
class Frame:
    geometry: ScreenGeometry
    grid: GridPlan
    context: ChartContext


class RenderOrchestrator:
    """
    Draw order for one frame: clear, border and grid, series, pointer overlay.

    Only sequences calls on the surface; all numbers come precomputed in the
    frame.
    """

    def __init__(self, variant: ChartVariant, options: ChartOptions) -> None:
        self.variant = variant
        self.options = options

    def render(self, surface: DrawingSurface, frame: Frame) -> None:
        geometry = frame.geometry
        surface.clear_region(0, 0, geometry.width, geometry.height)
        if geometry.empty:
            logger.debug("no history")
            return
        paint = Paint(self.options, frame.context.stroke_width, surface.pixel_ratio)
        self.draw_grid(surface, geometry, frame.grid, paint)
        self.variant.draw(surface, geometry, paint)
        self.draw_pointer(surface, frame, paint)

    def draw_grid(self, surface: DrawingSurface, geometry: ScreenGeometry, grid: GridPlan, paint: Paint) -> None:
        style = self.options.style
        surface.draw_rect(0, 0, geometry.width, geometry.height)
        surface.stroke_path(style.border_color, 1)
        if not grid.lines:
            return
        for line in grid.lines:
            y = sharp_pixel(line.y, paint.pixel_ratio)
            surface.move_to(0, y)
            surface.line_to(geometry.width, y)
        surface.stroke_path(style.grid_color, style.grid_width)
        for line in grid.lines:
            surface.draw_text(
                line.label,
                geometry.width - LABEL_INSET_X,
                line.y - LABEL_OFFSET_Y,
                style.label_font,
                style.label_color,
            )

    def draw_pointer(self, surface: DrawingSurface, frame: Frame, paint: Paint) -> None:
        ctx = frame.context
        pointer = ctx.pointer
        if not pointer.visible or ctx.count == 0:
            return
        index = pointer.index
        self.variant.draw_pointer(surface, frame.geometry, index, ctx.local_y(pointer.y), paint)

        style = self.options.style
        sample = ctx.history[index]
        lines = self.variant.readout(sample)
        lines.append(format_timestamp(sample.timestamp, self.options.timestamp_unit))
        for n, text in enumerate(lines):
            surface.draw_text(text, READOUT_X, READOUT_Y + n * READOUT_LINE, style.readout_font, style.readout_color)
