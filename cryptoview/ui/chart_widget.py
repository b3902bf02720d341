import logging
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QPainter, QPicture
from PyQt6.QtWidgets import QGridLayout, QWidget

from cryptoview.core.chart import Chart
from cryptoview.core.config import ChartOptions, EngineSettings
from cryptoview.core.interaction import (
    InputEvent,
    Target,
    pointer_down,
    pointer_enter,
    pointer_leave,
    pointer_move,
    pointer_up,
    wheel,
)
from cryptoview.core.surface import DrawingSurface, SurfaceHost
from cryptoview.core.variants import ChartVariant
from .charts.qt_surface import QtPainterSurface, to_qcolor

logger = logging.getLogger(__name__)

PRICE_AXIS_WIDTH = 70

_BUTTONS = {
    Qt.MouseButton.LeftButton: 0,
    Qt.MouseButton.MiddleButton: 1,
    Qt.MouseButton.RightButton: 2,
}


class _EventSource(QWidget):
    """Turns Qt mouse input into engine events for one target."""

    def __init__(self, owner: 'ChartWidget', target: Target) -> None:
        super().__init__(owner)
        self._owner = owner
        self._target = target
        self._last_pos: Optional[QPointF] = None
        self.setMouseTracking(True)

    def _movement(self, pos: QPointF) -> Tuple[float, float]:
        last = self._last_pos
        self._last_pos = QPointF(pos)
        if last is None:
            return 0.0, 0.0
        return pos.x() - last.x(), pos.y() - last.y()

    def mousePressEvent(self, ev) -> None:
        pos = ev.position()
        self._last_pos = QPointF(pos)
        self._owner.dispatch(pointer_down(pos.x(), pos.y(), _BUTTONS.get(ev.button(), 3), self._target))
        ev.accept()

    def mouseReleaseEvent(self, ev) -> None:
        pos = ev.position()
        self._owner.dispatch(pointer_up(pos.x(), pos.y(), _BUTTONS.get(ev.button(), 3), self._target))
        ev.accept()

    def mouseMoveEvent(self, ev) -> None:
        pos = ev.position()
        dx, dy = self._movement(pos)
        self._owner.dispatch(pointer_move(pos.x(), pos.y(), dx, dy, self._target))

    def enterEvent(self, ev) -> None:
        pos = ev.position()
        self._last_pos = QPointF(pos)
        self._owner.dispatch(pointer_enter(pos.x(), pos.y(), self._target))

    def leaveEvent(self, ev) -> None:
        self._last_pos = None
        self._owner.dispatch(pointer_leave(self._target))


class ChartCanvas(_EventSource):
    def __init__(self, owner: 'ChartWidget') -> None:
        super().__init__(owner, Target.CHART)
        self.setCursor(Qt.CursorShape.CrossCursor)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.PreventContextMenu)

    def wheelEvent(self, ev) -> None:
        delta = ev.angleDelta().y()
        if delta == 0:
            ev.ignore()
            return
        pos = ev.position()
        self._owner.dispatch(wheel(pos.x(), pos.y(), float(delta)))
        ev.accept()

    def resizeEvent(self, ev) -> None:
        super().resizeEvent(ev)
        size = ev.size()
        self._owner.canvas_resized(size.width(), size.height())

    def paintEvent(self, ev) -> None:
        painter = QPainter(self)
        try:
            painter.drawPicture(0, 0, self._owner.picture)
        finally:
            painter.end()


class PriceAxisStrip(_EventSource):
    """Drag area for vertical zoom; drawn as a plain strip with a border."""

    def __init__(self, owner: 'ChartWidget') -> None:
        super().__init__(owner, Target.PRICE_AXIS)
        self.setFixedWidth(PRICE_AXIS_WIDTH)
        self.setCursor(Qt.CursorShape.SizeVerCursor)

    def paintEvent(self, ev) -> None:
        style = self._owner.chart.options.style
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), to_qcolor(style.background or '#131722'))
            painter.setPen(to_qcolor(style.border_color))
            painter.drawLine(0, 0, 0, self.height())
        finally:
            painter.end()


class ChartWidget(QWidget, SurfaceHost):
    """
    PyQt6 host for a Chart.

    Each engine frame is recorded into a QPicture through QtPainterSurface and
    replayed by the canvas on paint, so redraws triggered by input cost one
    picture replay in Qt's paint cycle.
    """

    def __init__(
        self,
        history: Optional[Iterable[Any]] = None,
        options: Union[ChartOptions, Mapping[str, Any], None] = None,
        kind: Union[str, ChartVariant] = 'candles',
        settings: Optional[EngineSettings] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.picture = QPicture()
        self._painter: Optional[QPainter] = None
        self._recording: Optional[QPicture] = None
        self.canvas = ChartCanvas(self)
        self.price_axis = PriceAxisStrip(self)
        layout = QGridLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self.canvas, 0, 0)
        layout.addWidget(self.price_axis, 0, 1)
        self.chart = Chart(self, history, options, kind=kind, settings=settings)

    def canvas_size(self) -> Tuple[float, float]:
        return float(self.canvas.width()), float(self.canvas.height())

    def begin_frame(self) -> DrawingSurface:
        self._recording = QPicture()
        self._painter = QPainter(self._recording)
        background = self.chart.options.style.background if hasattr(self, 'chart') else None
        return QtPainterSurface(self._painter, self.canvas.devicePixelRatioF(), background)

    def end_frame(self, surface: DrawingSurface) -> None:
        if self._painter is not None:
            self._painter.end()
        if self._recording is not None:
            self.picture = self._recording
        self._painter = None
        self._recording = None
        self.canvas.update()

    def dispatch(self, event: InputEvent) -> None:
        self.chart.handle(event)

    def canvas_resized(self, width: int, height: int) -> None:
        if not hasattr(self, 'chart'):
            return
        self.chart.resize(width, height)

    def load_history(self, samples: Iterable[Any]) -> None:
        self.chart.load_history(samples)
