import os
import sys
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


_APP = None


def _app():
    from PyQt6.QtWidgets import QApplication

    # Keep a module-level reference so the QApplication is not garbage-collected.
    global _APP
    _APP = QApplication.instance() or QApplication([])
    return _APP


class TestChartWidgetSmoke(unittest.TestCase):
    def test_widget_records_frames(self) -> None:
        from cryptoview.core.history_io import random_walk_bars
        from cryptoview.core.interaction import pointer_enter, pointer_move, wheel
        from cryptoview.ui.chart_widget import ChartWidget

        app = _app()
        _ = app

        widget = ChartWidget(random_walk_bars(120, seed=1, end_ts=1_700_000_000))
        widget.chart.resize(600, 300)
        self.assertGreater(widget.picture.size(), 0)

        widget.dispatch(pointer_enter(100, 100))
        widget.dispatch(pointer_move(120, 110, movement_x=20, movement_y=10))
        widget.dispatch(wheel(120, 110, 120))
        self.assertTrue(widget.chart.pointer.visible)
        self.assertGreater(widget.chart.viewport.floating_width, 600)

    def test_line_widget_with_gradient(self) -> None:
        from cryptoview.core.history_io import random_walk_line
        from cryptoview.ui.chart_widget import ChartWidget

        _app()
        options = {"graphFill": {"gradientStart": "#24a59966", "gradientEnd": "#24a59900"}}
        widget = ChartWidget(random_walk_line(80, seed=2, end_ts=1_700_000_000), options, kind="line")
        widget.chart.resize(400, 200)
        self.assertGreater(widget.picture.size(), 0)

    def test_render_to_image(self) -> None:
        from PyQt6.QtGui import QImage, QPainter

        from cryptoview.core.chart import Chart
        from cryptoview.core.surface import RecordingHost
        from cryptoview.ui.charts.qt_surface import QtPainterSurface

        _app()
        chart = Chart(RecordingHost(200, 120), [[i, 10 + i % 5] for i in range(30)], kind="line")
        img = QImage(200, 120, QImage.Format.Format_ARGB32_Premultiplied)
        img.fill(0)
        painter = QPainter(img)
        try:
            chart.render_to(QtPainterSurface(painter, 1.0))
        finally:
            painter.end()
        # Background clear paints the whole canvas.
        self.assertNotEqual(img.pixel(1, 1), 0)

    def test_font_and_colour_parsing(self) -> None:
        from PyQt6.QtGui import QFont

        from cryptoview.ui.charts.qt_surface import parse_font, to_qcolor

        _app()
        font = parse_font("12px Verdana")
        self.assertEqual(font.pixelSize(), 12)
        self.assertEqual(font.family(), "Verdana")
        bold = parse_font("bold 9pt Arial")
        self.assertEqual(bold.pointSizeF(), 9.0)
        self.assertEqual(bold.weight(), QFont.Weight.Bold)

        color = to_qcolor("#ff000080")
        self.assertEqual((color.red(), color.alpha()), (255, 128))


class TestMainArguments(unittest.TestCase):
    def test_generated_history_follows_kind(self) -> None:
        from cryptoview.main import build_parser, load_initial_history

        args = build_parser().parse_args(["--kind", "line", "--samples", "12", "--seed", "1"])
        rows = load_initial_history(args)
        self.assertEqual(len(rows), 12)
        self.assertEqual(len(rows[0]), 2)

        args = build_parser().parse_args(["--samples", "7"])
        self.assertEqual(len(load_initial_history(args)[0]), 5)


if __name__ == "__main__":
    unittest.main()
