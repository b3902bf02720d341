from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidSampleError
from .normalizer import pixel_xs
from .viewport import Viewport

logger = logging.getLogger(__name__)

OHLC = "ohlc"
LINE = "line"

_OHLC_FIELDS = ("open", "high", "low", "close")
_KEY_ALIASES: Dict[str, Tuple[str, ...]] = {
    "timestamp": ("timestamp", "t", "ts", "ts_ms", "time"),
    "open": ("open", "o"),
    "high": ("high", "h"),
    "low": ("low", "l"),
    "close": ("close", "c"),
    "value": ("value", "v", "price", "close", "c"),
}


@dataclass(frozen=True)
class OhlcSample:
    timestamp: float
    open: float
    high: float
    low: float
    close: float

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open


@dataclass(frozen=True)
class LineSample:
    timestamp: float
    value: float


Sample = Union[OhlcSample, LineSample]


@dataclass(frozen=True)
class Extremum:
    index: int
    value: float


class History:
    """
    Ordered, immutable sequence of samples of a single kind.

    Each field is also held as a read-only float64 column so visibility masks,
    extrema and projection run vectorized. Reloading builds a new History; the
    columns are never written after construction.
    """

    def __init__(self, samples: Sequence[Sample], kind: str) -> None:
        if kind not in (OHLC, LINE):
            raise ValueError(f"Unknown history kind: {kind}")
        self.kind = kind
        self._samples: Tuple[Sample, ...] = tuple(samples)
        fields = ("timestamp",) + (_OHLC_FIELDS if kind == OHLC else ("value",))
        self._columns: Dict[str, np.ndarray] = {}
        for name in fields:
            col = np.fromiter((getattr(s, name) for s in self._samples), dtype=np.float64, count=len(self._samples))
            col.flags.writeable = False
            self._columns[name] = col

    @classmethod
    def empty(cls, kind: str) -> "History":
        return cls((), kind)

    @classmethod
    def from_rows(cls, rows: Optional[Iterable[Any]], kind: str) -> "History":
        if rows is None:
            return cls.empty(kind)
        if isinstance(rows, History):
            if rows.kind == kind:
                return rows
            rows = list(rows)
        samples = [coerce_sample(row, kind, idx) for idx, row in enumerate(rows)]
        return cls(samples, kind)

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(k for k in self._columns if k != "timestamp")

    def column(self, name: str) -> np.ndarray:
        try:
            return self._columns[name]
        except KeyError:
            raise KeyError(f"{self.kind} history has no field {name!r}") from None

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, idx: int) -> Sample:
        return self._samples[idx]

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def __bool__(self) -> bool:
        return bool(self._samples)


def coerce_sample(row: Any, kind: str, index: int = 0) -> Sample:
    """Turn a sample object, mapping or ``[ts, o, h, l, c, (v)]`` / ``[ts, value]`` row into a sample."""
    if kind == OHLC and isinstance(row, OhlcSample):
        return row
    if kind == LINE and isinstance(row, LineSample):
        return row
    if kind == LINE and isinstance(row, OhlcSample):
        return LineSample(row.timestamp, row.close)

    if isinstance(row, Mapping):
        names = ("timestamp",) + (_OHLC_FIELDS if kind == OHLC else ("value",))
        values: List[float] = []
        for name in names:
            raw = _lookup(row, _KEY_ALIASES[name])
            if raw is None:
                raise InvalidSampleError(index, row, f"missing {name}")
            values.append(_as_float(raw, index, row, name))
    elif isinstance(row, (list, tuple, np.ndarray)):
        if kind == OHLC:
            if len(row) < 5:
                raise InvalidSampleError(index, row, "expected [ts, open, high, low, close]")
            values = [_as_float(row[i], index, row, str(i)) for i in range(5)]
        else:
            if len(row) < 2:
                raise InvalidSampleError(index, row, "expected [ts, value]")
            # OHLC-shaped rows plot their close.
            pos = 4 if len(row) >= 5 else 1
            values = [_as_float(row[0], index, row, "0"), _as_float(row[pos], index, row, str(pos))]
    else:
        raise InvalidSampleError(index, row, f"unsupported row type {type(row).__name__}")

    if kind == OHLC:
        return OhlcSample(*values)
    return LineSample(*values)


def _lookup(row: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def _as_float(raw: Any, index: int, row: Any, name: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidSampleError(index, row, f"{name} is not a number") from None
    if not math.isfinite(value):
        raise InvalidSampleError(index, row, f"{name} is not finite")
    return value


def visible_subset(history: History, viewport: Viewport) -> np.ndarray:
    """Indices of the samples whose projected X lies on the canvas, ``0 <= x <= width``."""
    count = len(history)
    if count == 0:
        return np.empty(0, dtype=np.intp)
    xs = pixel_xs(count, viewport)
    mask = (xs >= 0.0) & (xs <= viewport.width)
    return np.flatnonzero(mask)


def extrema(history: History, indices: np.ndarray, field: str, largest: bool) -> Optional[Extremum]:
    """
    Max (``largest``) or min of ``field`` over the subset, as a history index.

    Ties keep the first index encountered. Returns ``None`` for an empty subset.
    """
    if len(indices) == 0:
        return None
    values = history.column(field)[indices]
    pos = int(np.argmax(values)) if largest else int(np.argmin(values))
    return Extremum(index=int(indices[pos]), value=float(values[pos]))
