from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .config import ChartOptions
from .errors import ConfigurationError
from .formatting import format_price
from .geometry import ScreenGeometry
from .samples import LINE, OHLC, Extremum, History, Sample, extrema
from .surface import DrawingSurface, Gradient, sharp_pixel

Scale = Callable[[np.ndarray], np.ndarray]


@dataclass
class Paint:
    options: ChartOptions
    stroke_width: float
    pixel_ratio: float = 1.0


class ChartVariant:
    """
    What differs between chart kinds. The engine asks a variant for the
    visible extrema, the projected Y columns, and to draw them.
    """

    name = ""
    sample_kind = ""

    def extrema_of(self, history: History, indices: np.ndarray) -> Tuple[Optional[Extremum], Optional[Extremum]]:
        raise NotImplementedError

    def project_geometry(self, history: History, scale: Scale) -> Dict[str, np.ndarray]:
        raise NotImplementedError

    def draw(self, surface: DrawingSurface, geometry: ScreenGeometry, paint: Paint) -> None:
        raise NotImplementedError

    def draw_pointer(
        self,
        surface: DrawingSurface,
        geometry: ScreenGeometry,
        index: int,
        pointer_y: float,
        paint: Paint,
    ) -> None:
        raise NotImplementedError

    def readout(self, sample: Sample) -> List[str]:
        raise NotImplementedError

    @staticmethod
    def drawable_range(geometry: ScreenGeometry, slack: float) -> Tuple[int, int]:
        """Index range ``[start, end)`` whose X falls within the canvas plus ``slack``."""
        xs = geometry.xs
        start = int(np.searchsorted(xs, -slack, side="left"))
        end = int(np.searchsorted(xs, geometry.width + slack, side="right"))
        return start, end


class CandleVariant(ChartVariant):
    name = "candles"
    sample_kind = OHLC

    def extrema_of(self, history, indices):
        return extrema(history, indices, "high", largest=True), extrema(history, indices, "low", largest=False)

    def project_geometry(self, history, scale):
        # Fresh arrays; the history columns stay untouched.
        return {name: np.array(scale(history.column(name)), dtype=np.float64) for name in ("open", "high", "low", "close")}

    def draw(self, surface, geometry, paint):
        style = paint.options.style
        space = geometry.candle_width
        body_half = space / 4
        start, end = self.drawable_range(geometry, body_half)
        opens, highs = geometry.ys["open"], geometry.ys["high"]
        lows, closes = geometry.ys["low"], geometry.ys["close"]
        wick_width = paint.stroke_width
        for i in range(start, end):
            x = float(geometry.xs[i])
            # Pixel Y grows downward: a close drawn above the open is a rise.
            color = style.bull_color if closes[i] < opens[i] else style.bear_color
            wick_x = sharp_pixel(x, paint.pixel_ratio, wick_width)
            surface.move_to(wick_x, float(highs[i]))
            surface.line_to(wick_x, float(lows[i]))
            surface.stroke_path(color, wick_width)

            body_top = float(min(opens[i], closes[i]))
            body_height = float(abs(closes[i] - opens[i]))
            if body_height > 0:
                surface.draw_rect(x - body_half, body_top, body_half * 2, body_height)
                surface.fill_path(color)
            else:
                surface.move_to(x - body_half, body_top)
                surface.line_to(x + body_half, body_top)
                surface.stroke_path(color, wick_width)

    def draw_pointer(self, surface, geometry, index, pointer_y, paint):
        style = paint.options.style
        ratio = paint.pixel_ratio
        x = sharp_pixel(geometry.x_for_index(index), ratio)
        surface.move_to(x, 0)
        surface.line_to(x, geometry.height)
        surface.stroke_path(style.crosshair_color, style.crosshair_width)

        y = sharp_pixel(pointer_y, ratio)
        surface.move_to(0, y)
        surface.line_to(geometry.width, y)
        surface.stroke_path(style.crosshair_color, style.crosshair_width)

    def readout(self, sample):
        return [
            f"O {format_price(sample.open)}  H {format_price(sample.high)}  "
            f"L {format_price(sample.low)}  C {format_price(sample.close)}"
        ]


class LineVariant(ChartVariant):
    name = "line"
    sample_kind = LINE

    def extrema_of(self, history, indices):
        return extrema(history, indices, "value", largest=True), extrema(history, indices, "value", largest=False)

    def project_geometry(self, history, scale):
        return {"value": np.array(scale(history.column("value")), dtype=np.float64)}

    def draw(self, surface, geometry, paint):
        stroke = paint.options.graph_stroke
        fill = paint.options.graph_fill
        xs = geometry.xs
        ys = geometry.ys["value"]
        start, end = self.drawable_range(geometry, geometry.candle_width)
        # One sample of overhang each side keeps the curve running off the edges.
        start = max(0, start - 1)
        end = min(geometry.count, end + 1)
        if end <= start:
            return
        height = geometry.height

        if fill.enabled:
            left_edge = float(xs[start]) - 10
            right_edge = max(geometry.width, float(xs[end - 1])) + 10
            surface.move_to(left_edge, height)
            surface.line_to(left_edge, float(ys[start]))
            for i in range(start, end):
                surface.line_to(float(xs[i]), float(ys[i]))
            surface.line_to(right_edge, float(ys[end - 1]))
            surface.line_to(right_edge, height + 1)
            surface.fill_path(Gradient(fill.gradient_start, fill.gradient_end, 0.0, height))

        surface.move_to(float(xs[start]), float(ys[start]))
        for i in range(start + 1, end):
            surface.line_to(float(xs[i]), float(ys[i]))
        surface.stroke_path(stroke.color, paint.stroke_width)

    def draw_pointer(self, surface, geometry, index, pointer_y, paint):
        style = paint.options.style
        x = geometry.x_for_index(index)
        y = float(geometry.ys["value"][index])

        guide_x = sharp_pixel(x, paint.pixel_ratio)
        surface.move_to(guide_x, 0)
        surface.line_to(guide_x, geometry.height)
        surface.stroke_path(style.guide_color, 1)

        surface.draw_rect(x - 8, y - 8, 16, 16)
        surface.fill_path(style.pointer_halo_color)
        surface.draw_rect(x - 4, y - 4, 8, 8)
        surface.fill_path(style.pointer_color)

    def readout(self, sample):
        return [format_price(sample.value)]


_VARIANTS = {
    CandleVariant.name: CandleVariant,
    "candle": CandleVariant,
    OHLC: CandleVariant,
    LineVariant.name: LineVariant,
    "linear": LineVariant,
}


def variant_for(kind) -> ChartVariant:
    if isinstance(kind, ChartVariant):
        return kind
    cls = _VARIANTS.get(str(kind).lower())
    if cls is None:
        raise ConfigurationError(f"unknown chart kind {kind!r}; expected one of {sorted(set(_VARIANTS))}")
    return cls()
