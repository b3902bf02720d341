import os
import sys
import tempfile
import unittest

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from cryptoview.core.config import ChartOptions, EngineSettings
from cryptoview.core.errors import ConfigurationError, InvalidSampleError
from cryptoview.core.formatting import format_price, format_timestamp
from cryptoview.core.history_io import random_walk_bars, random_walk_line, read_csv_history
from cryptoview.core.samples import LINE, OHLC, History


class ChartOptionsTests(unittest.TestCase):
    def test_defaults(self):
        options = ChartOptions.from_mapping(None)
        self.assertEqual(options.graph_stroke.color, "#ffffff99")
        self.assertEqual(options.graph_stroke.width, 1.0)
        self.assertEqual(options.graph_stroke.hover_width, 1.5)
        self.assertFalse(options.graph_fill.enabled)
        self.assertEqual(options.timestamp_unit, "s")

    def test_camel_case_fields_override_independently(self):
        options = ChartOptions.from_mapping({"graphStroke": {"hoverWidth": 3}})
        self.assertEqual(options.graph_stroke.hover_width, 3.0)
        self.assertEqual(options.graph_stroke.width, 1.0)
        self.assertEqual(options.graph_stroke.color, "#ffffff99")

    def test_snake_case_and_fill(self):
        options = ChartOptions.from_mapping({
            "graph_stroke": {"color": "#123456", "width": 2},
            "graph_fill": {"gradient_start": "#00ff0080", "gradient_end": "#00ff0000"},
            "timestamp_unit": "ms",
        })
        self.assertEqual(options.graph_stroke.color, "#123456")
        self.assertEqual(options.graph_stroke.width, 2.0)
        self.assertTrue(options.graph_fill.enabled)
        self.assertEqual(options.timestamp_unit, "ms")

    def test_half_configured_gradient_is_disabled(self):
        options = ChartOptions.from_mapping({"graphFill": {"gradientStart": "#fff"}})
        self.assertFalse(options.graph_fill.enabled)

    def test_falsy_values_keep_defaults(self):
        options = ChartOptions.from_mapping({"graphStroke": {"width": 0, "color": ""}})
        self.assertEqual(options.graph_stroke.width, 1.0)
        self.assertEqual(options.graph_stroke.color, "#ffffff99")

    def test_style_overrides_ignore_unknown_keys(self):
        options = ChartOptions.from_mapping({"style": {"bull_color": "#00ff00", "sparkle": True}})
        self.assertEqual(options.style.bull_color, "#00ff00")
        self.assertEqual(options.style.bear_color, "#ec544f")

    def test_bad_timestamp_unit(self):
        with self.assertRaises(ConfigurationError):
            ChartOptions.from_mapping({"timestampUnit": "h"})

    def test_instances_do_not_share_nested_defaults(self):
        a = ChartOptions()
        b = ChartOptions()
        a.graph_stroke.width = 4.0
        self.assertEqual(b.graph_stroke.width, 1.0)


class EngineSettingsTests(unittest.TestCase):
    def test_zoom_divisor(self):
        self.assertEqual(EngineSettings().zoom_divisor, 5.0)
        self.assertEqual(EngineSettings(zoom_speed=2).zoom_divisor, 10.0)

    def test_invalid_settings_raise(self):
        bad = (
            {"zoom_speed": 0},
            {"zoom_speed": 25},
            {"panel_margin": -1},
            {"initial_zoom": 100},
            {"grid_min_px": 80, "grid_max_px": 30},
            {"grid_segments": 0},
            {"rounding_increment": 0},
            {"min_candle_px": 5, "max_candle_px": 2},
        )
        for kwargs in bad:
            with self.subTest(**kwargs):
                with self.assertRaises(ConfigurationError):
                    EngineSettings(**kwargs)


class FormattingTests(unittest.TestCase):
    def test_price_precision_follows_magnitude(self):
        self.assertEqual(format_price(12345.678), "12,345.68")
        self.assertEqual(format_price(-250), "-250.00")
        self.assertEqual(format_price(42.5), "42.5000")
        self.assertEqual(format_price(0.5), "0.500000")
        self.assertEqual(format_price(0.00123), "0.00123000")
        self.assertEqual(format_price(0), "0.00")

    def test_timestamp_units_agree(self):
        self.assertEqual(format_timestamp(1_700_000_000, "s"), format_timestamp(1_700_000_000_000, "ms"))

    def test_unrepresentable_timestamp_falls_back(self):
        self.assertEqual(format_timestamp(1e20, "s"), "1e+20")


class HistoryIoTests(unittest.TestCase):
    def test_random_walk_bars_are_consistent(self):
        bars = random_walk_bars(50, seed=3, end_ts=1_700_000_000)
        self.assertEqual(len(bars), 50)
        self.assertEqual(bars, random_walk_bars(50, seed=3, end_ts=1_700_000_000))
        for ts, o, h, lo, c in bars:
            self.assertGreaterEqual(h, max(o, c))
            self.assertLessEqual(lo, min(o, c))
        stamps = [b[0] for b in bars]
        self.assertTrue(all(b - a == 60 for a, b in zip(stamps, stamps[1:])))
        self.assertEqual(len(History.from_rows(bars, OHLC)), 50)

    def test_random_walk_line_uses_close(self):
        bars = random_walk_bars(5, seed=9, end_ts=1_700_000_000)
        line = random_walk_line(5, seed=9, end_ts=1_700_000_000)
        self.assertEqual(line, [[b[0], b[4]] for b in bars])
        self.assertEqual(random_walk_bars(0), [])

    def test_read_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "bars.csv")
            with open(path, "w", encoding="utf-8") as fh:
                fh.write("Timestamp,Open,High,Low,Close\n")
                fh.write("0,10,12,9,11\n")
                fh.write(",,,,\n")
                fh.write("60, 11, 11, 8, 9\n")
            rows = read_csv_history(path, OHLC)
        self.assertEqual(len(rows), 2)
        history = History.from_rows(rows, OHLC)
        self.assertEqual(history[1].low, 8.0)
        self.assertEqual(History.from_rows(rows, LINE)[0].value, 11.0)

    def test_read_csv_without_header(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "empty.csv")
            open(path, "w", encoding="utf-8").close()
            with self.assertRaises(InvalidSampleError):
                read_csv_history(path)


if __name__ == "__main__":
    unittest.main()
