from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Gradient:
    """Vertical linear gradient from ``start`` at ``y0`` to ``end`` at ``y1``."""

    start: str
    end: str
    y0: float
    y1: float


Fill = Union[str, Gradient]


def sharp_pixel(pos: float, pixel_ratio: float, thickness: float = 1) -> float:
    # Odd-width strokes centred on a whole pixel smear over two device pixels.
    if thickness % 2 == 0:
        return pos
    return pos + pixel_ratio / 2


class DrawingSurface:
    """
    Primitive drawing operations the renderer needs.

    ``move_to``/``line_to``/``draw_rect`` build the current path;
    ``fill_path``/``stroke_path`` paint it and start a new one.
    """

    pixel_ratio: float = 1.0

    def move_to(self, x: float, y: float) -> None:
        raise NotImplementedError

    def line_to(self, x: float, y: float) -> None:
        raise NotImplementedError

    def draw_rect(self, x: float, y: float, w: float, h: float) -> None:
        raise NotImplementedError

    def fill_path(self, fill: Fill) -> None:
        raise NotImplementedError

    def stroke_path(self, color: str, width: float) -> None:
        raise NotImplementedError

    def draw_text(self, text: str, x: float, y: float, font: str, color: str = "#ffffff") -> None:
        raise NotImplementedError

    def clear_region(self, x: float, y: float, w: float, h: float) -> None:
        raise NotImplementedError


PathOp = Tuple[Any, ...]


class RecordingSurface(DrawingSurface):
    """Keeps every call as a plain tuple; used for headless rendering and in tests."""

    def __init__(self, pixel_ratio: float = 1.0) -> None:
        self.pixel_ratio = pixel_ratio
        self.commands: List[Tuple[Any, ...]] = []
        self._path: List[PathOp] = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append(("move_to", float(x), float(y)))

    def line_to(self, x: float, y: float) -> None:
        self._path.append(("line_to", float(x), float(y)))

    def draw_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._path.append(("rect", float(x), float(y), float(w), float(h)))

    def fill_path(self, fill: Fill) -> None:
        self.commands.append(("fill", fill, tuple(self._path)))
        self._path = []

    def stroke_path(self, color: str, width: float) -> None:
        self.commands.append(("stroke", color, float(width), tuple(self._path)))
        self._path = []

    def draw_text(self, text: str, x: float, y: float, font: str, color: str = "#ffffff") -> None:
        self.commands.append(("text", text, float(x), float(y), font, color))

    def clear_region(self, x: float, y: float, w: float, h: float) -> None:
        self.commands.append(("clear", float(x), float(y), float(w), float(h)))
        self._path = []

    def of_kind(self, kind: str) -> List[Tuple[Any, ...]]:
        return [c for c in self.commands if c[0] == kind]

    def texts(self) -> List[str]:
        return [c[1] for c in self.commands if c[0] == "text"]


class SurfaceHost:
    """
    What a chart needs from the thing it lives in: a canvas size, where the
    canvas sits in pointer coordinates, and a fresh surface per frame.
    """

    def canvas_size(self) -> Tuple[float, float]:
        raise NotImplementedError

    def canvas_origin(self) -> Tuple[float, float]:
        return (0.0, 0.0)

    def begin_frame(self) -> DrawingSurface:
        raise NotImplementedError

    def end_frame(self, surface: DrawingSurface) -> None:
        pass


class RecordingHost(SurfaceHost):
    def __init__(
        self,
        width: float,
        height: float,
        pixel_ratio: float = 1.0,
        origin: Tuple[float, float] = (0.0, 0.0),
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.pixel_ratio = pixel_ratio
        self.origin = origin
        self.frames: List[RecordingSurface] = []

    def canvas_size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def canvas_origin(self) -> Tuple[float, float]:
        return self.origin

    def begin_frame(self) -> RecordingSurface:
        return RecordingSurface(self.pixel_ratio)

    def end_frame(self, surface: DrawingSurface) -> None:
        self.frames.append(surface)  # type: ignore[arg-type]

    @property
    def last_frame(self) -> Optional[RecordingSurface]:
        return self.frames[-1] if self.frames else None
