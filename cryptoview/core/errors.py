from __future__ import annotations


class ChartError(Exception):
    prefix = "CryptoView Error: "

    def __init__(self, message: str) -> None:
        super().__init__(f"{self.prefix}{message}")
        self.detail = message


class ConfigurationError(ChartError):
    """No usable container/surface, or settings that cannot drive a chart."""


class DegenerateRangeError(ChartError):
    """Top and bottom price collapse to the same value."""

    def __init__(self, top: float, bottom: float) -> None:
        super().__init__(f"degenerate price range: top={top} bottom={bottom}")
        self.top = top
        self.bottom = bottom


class InvalidSampleError(ChartError):
    def __init__(self, index: int, row: object, reason: str) -> None:
        super().__init__(f"history row {index} is not a valid sample ({reason}): {row!r}")
        self.index = index
        self.row = row
