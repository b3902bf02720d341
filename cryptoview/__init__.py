"""
Interactive candlestick/line price chart.

The engine in ``cryptoview.core`` is toolkit-free and draws through a small
primitive surface contract; ``cryptoview.ui`` hosts it in a PyQt6 widget.
"""

from __future__ import annotations

from .core.chart import Chart
from .core.config import ChartOptions, EngineSettings
from .core.errors import ChartError, ConfigurationError, DegenerateRangeError, InvalidSampleError

__all__ = [
    "Chart",
    "ChartOptions",
    "EngineSettings",
    "ChartError",
    "ConfigurationError",
    "DegenerateRangeError",
    "InvalidSampleError",
]
