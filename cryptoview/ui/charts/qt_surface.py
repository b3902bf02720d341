import re
from typing import Optional

import pyqtgraph as pg
from PyQt6.QtCore import QPointF, QRectF
from PyQt6.QtGui import QBrush, QColor, QFont, QLinearGradient, QPainter, QPainterPath

from cryptoview.core.surface import DrawingSurface, Fill, Gradient

_FONT_RE = re.compile(r'^\s*(?:(bold|light)\s+)?(\d+(?:\.\d+)?)(px|pt)\s+(.+?)\s*$', re.IGNORECASE)
DEFAULT_BACKGROUND = '#131722'


def parse_font(spec: str) -> QFont:
    """Read a CSS-like ``"12px Verdana"`` / ``"bold 9pt Arial"`` font; anything else is a family name."""
    font = QFont()
    match = _FONT_RE.match(spec or '')
    if match is None:
        if spec:
            font.setFamily(spec.strip())
        return font
    weight, size, unit, family = match.groups()
    font.setFamily(family.strip('"\''))
    if unit.lower() == 'px':
        font.setPixelSize(max(1, int(round(float(size)))))
    else:
        font.setPointSizeF(float(size))
    if weight and weight.lower() == 'bold':
        font.setWeight(QFont.Weight.Bold)
    elif weight and weight.lower() == 'light':
        font.setWeight(QFont.Weight.Light)
    return font


class QtPainterSurface(DrawingSurface):
    """
    Drawing surface on top of an active QPainter.

    The painter may target a widget or a QPicture; ChartWidget records every
    frame into a QPicture and replays it on paint.
    """

    def __init__(self, painter: QPainter, pixel_ratio: float = 1.0, background: Optional[str] = None) -> None:
        self.painter = painter
        self.pixel_ratio = float(pixel_ratio) if pixel_ratio else 1.0
        self._background = pg.mkColor(background or DEFAULT_BACKGROUND)
        self._path = QPainterPath()
        self._pen_cache: dict = {}
        self._brush_cache: dict = {}
        self._font_cache: dict = {}
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)

    def _get_pen(self, color: str, width: float):
        key = (color, float(width))
        pen = self._pen_cache.get(key)
        if pen is None:
            pen = pg.mkPen(pg.mkColor(color), width=width)
            self._pen_cache[key] = pen
        return pen

    def _get_brush(self, fill: Fill) -> QBrush:
        if isinstance(fill, Gradient):
            gradient = QLinearGradient(0, fill.y0, 0, fill.y1)
            gradient.setColorAt(0, pg.mkColor(fill.start))
            gradient.setColorAt(1, pg.mkColor(fill.end))
            return QBrush(gradient)
        brush = self._brush_cache.get(fill)
        if brush is None:
            brush = pg.mkBrush(pg.mkColor(fill))
            self._brush_cache[fill] = brush
        return brush

    def _get_font(self, spec: str) -> QFont:
        font = self._font_cache.get(spec)
        if font is None:
            font = parse_font(spec)
            self._font_cache[spec] = font
        return font

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(QPointF(x, y))

    def line_to(self, x: float, y: float) -> None:
        self._path.lineTo(QPointF(x, y))

    def draw_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._path.addRect(QRectF(x, y, w, h).normalized())

    def fill_path(self, fill: Fill) -> None:
        self.painter.fillPath(self._path, self._get_brush(fill))
        self._path = QPainterPath()

    def stroke_path(self, color: str, width: float) -> None:
        self.painter.strokePath(self._path, self._get_pen(color, width))
        self._path = QPainterPath()

    def draw_text(self, text: str, x: float, y: float, font: str, color: str = '#ffffff') -> None:
        self.painter.setFont(self._get_font(font))
        self.painter.setPen(self._get_pen(color, 1))
        self.painter.drawText(QPointF(x, y), text)

    def clear_region(self, x: float, y: float, w: float, h: float) -> None:
        self.painter.fillRect(QRectF(x, y, w, h), self._background)
        self._path = QPainterPath()


def to_qcolor(color: str) -> QColor:
    # pyqtgraph reads CSS-style #RRGGBBAA; QColor would take it as #AARRGGBB.
    return pg.mkColor(color)
