from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .errors import ConfigurationError


@dataclass
class GraphStroke:
    color: str = "#ffffff99"
    width: float = 1.0
    hover_width: float = 1.5


@dataclass
class GraphFill:
    gradient_start: Optional[str] = None
    gradient_end: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.gradient_start and self.gradient_end)


@dataclass
class ChartStyle:
    bull_color: str = "#24a599"
    bear_color: str = "#ec544f"
    grid_color: str = "#ffffff33"
    grid_width: float = 0.5
    border_color: str = "#ffffff22"
    label_color: str = "#ffffff44"
    crosshair_color: str = "#666666"
    crosshair_width: float = 0.5
    guide_color: str = "#ffffff33"
    pointer_color: str = "#aaaaff"
    pointer_halo_color: str = "#aaaaff99"
    readout_color: str = "#ffffff"
    label_font: str = "10px Verdana"
    readout_font: str = "12px Verdana"
    background: Optional[str] = None


@dataclass
class ChartOptions:
    graph_stroke: GraphStroke = field(default_factory=GraphStroke)
    graph_fill: GraphFill = field(default_factory=GraphFill)
    style: ChartStyle = field(default_factory=ChartStyle)
    timestamp_unit: str = "s"

    def __post_init__(self) -> None:
        if self.timestamp_unit not in ("s", "ms"):
            raise ConfigurationError(f"timestamp_unit must be 's' or 'ms', got {self.timestamp_unit!r}")

    @classmethod
    def from_mapping(cls, opts: Optional[Mapping[str, Any]]) -> "ChartOptions":
        """
        Build options from a user mapping.

        Keys may be camelCase (``graphStroke.hoverWidth``) or snake_case
        (``graph_stroke.hover_width``). Each field overrides its default on its
        own; missing or falsy values keep the default.
        """
        result = cls()
        if not opts:
            return result
        stroke = _pick(opts, "graphStroke", "graph_stroke")
        if stroke:
            color = _pick(stroke, "color")
            width = _pick(stroke, "width")
            hover_width = _pick(stroke, "hoverWidth", "hover_width")
            if color:
                result.graph_stroke.color = str(color)
            if hover_width:
                result.graph_stroke.hover_width = float(hover_width)
            if width:
                result.graph_stroke.width = float(width)
        fill = _pick(opts, "graphFill", "graph_fill")
        if fill:
            start = _pick(fill, "gradientStart", "gradient_start")
            end = _pick(fill, "gradientEnd", "gradient_end")
            if start:
                result.graph_fill.gradient_start = str(start)
            if end:
                result.graph_fill.gradient_end = str(end)
        style = _pick(opts, "style")
        if style:
            known = {k: v for k, v in dict(style).items() if k in ChartStyle.__dataclass_fields__}
            result.style = replace(result.style, **known)
        unit = _pick(opts, "timestampUnit", "timestamp_unit")
        if unit:
            result.timestamp_unit = str(unit)
            result.__post_init__()
        return result


@dataclass
class EngineSettings:
    zoom_speed: float = 4.0
    panel_margin: float = 200.0
    initial_zoom: float = 1.5
    min_zoom: float = 0.05
    max_zoom: float = 50.0
    axis_drag_divisor: float = 300.0
    grid_min_px: float = 30.0
    grid_max_px: float = 80.0
    grid_segments: int = 20
    grid_max_iterations: int = 64
    rounding_increment: float = 1.0
    rounding_max_attempts: int = 1000
    min_candle_px: float = 1.0
    max_candle_px: float = 120.0

    def __post_init__(self) -> None:
        if self.zoom_speed <= 0 or self.zoom_speed >= 20:
            raise ConfigurationError(f"zoom_speed must be in (0, 20), got {self.zoom_speed}")
        if self.panel_margin < 0:
            raise ConfigurationError(f"panel_margin must be >= 0, got {self.panel_margin}")
        if not (0 < self.min_zoom <= self.initial_zoom <= self.max_zoom):
            raise ConfigurationError(
                f"zoom bounds must satisfy 0 < min <= initial <= max, got "
                f"{self.min_zoom}, {self.initial_zoom}, {self.max_zoom}"
            )
        if self.axis_drag_divisor <= 0:
            raise ConfigurationError("axis_drag_divisor must be > 0")
        if not (0 < self.grid_min_px < self.grid_max_px):
            raise ConfigurationError(
                f"grid band must satisfy 0 < min < max, got {self.grid_min_px}, {self.grid_max_px}"
            )
        if self.grid_segments < 1 or self.grid_max_iterations < 1:
            raise ConfigurationError("grid_segments and grid_max_iterations must be >= 1")
        if self.rounding_increment <= 0 or self.rounding_max_attempts < 0:
            raise ConfigurationError("rounding_increment must be > 0 and rounding_max_attempts >= 0")
        if not (0 < self.min_candle_px < self.max_candle_px):
            raise ConfigurationError(
                f"candle density band must satisfy 0 < min < max, got {self.min_candle_px}, {self.max_candle_px}"
            )

    @property
    def zoom_divisor(self) -> float:
        return 20.0 / self.zoom_speed


def _pick(mapping: Any, *keys: str) -> Any:
    if mapping is None:
        return None
    getter = getattr(mapping, "get", None)
    for key in keys:
        if getter is not None:
            value = getter(key)
        else:
            value = getattr(mapping, key, None)
        if value is not None:
            return value
    return None
