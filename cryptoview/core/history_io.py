from __future__ import annotations

import csv
import logging
import time
from typing import List, Optional

import numpy as np

from .errors import InvalidSampleError
from .samples import LINE, OHLC

logger = logging.getLogger(__name__)


def random_walk_bars(
    count: int,
    start_price: float = 30_000.0,
    interval_s: int = 60,
    seed: Optional[int] = None,
    end_ts: Optional[int] = None,
) -> List[List[float]]:
    """Synthetic ``[ts, open, high, low, close]`` bars ending at ``end_ts`` (epoch seconds)."""
    if count <= 0:
        return []
    rng = np.random.default_rng(seed)
    returns = rng.normal(0.0, 0.002, size=count)
    closes = start_price * np.exp(np.cumsum(returns))
    opens = np.concatenate(([start_price], closes[:-1]))
    spread = np.abs(rng.normal(0.0, 0.0015, size=count)) * closes
    highs = np.maximum(opens, closes) + spread
    lows = np.minimum(opens, closes) - spread * rng.uniform(0.2, 1.0, size=count)
    end = int(end_ts if end_ts is not None else time.time()) // interval_s * interval_s
    ts = end - interval_s * np.arange(count - 1, -1, -1)
    return [
        [float(t), float(o), float(h), float(lo), float(c)]
        for t, o, h, lo, c in zip(ts, opens, highs, lows, closes)
    ]


def random_walk_line(count: int, **kwargs) -> List[List[float]]:
    return [[bar[0], bar[4]] for bar in random_walk_bars(count, **kwargs)]


def read_csv_history(path: str, kind: str = OHLC) -> List[dict]:
    """
    Read rows from a CSV with a header.

    Accepted columns are those ``coerce_sample`` understands (``timestamp``/``t``,
    ``open``/``o``, ..., ``value``). Blank lines are skipped; rows are kept in
    file order.
    """
    if kind not in (OHLC, LINE):
        raise ValueError(f"Unknown history kind: {kind}")
    rows: List[dict] = []
    with open(path, "r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise InvalidSampleError(0, path, "CSV has no header row")
        for row in reader:
            if not any((v or "").strip() for v in row.values()):
                continue
            rows.append({k.strip().lower(): (v.strip() if isinstance(v, str) else v) for k, v in row.items() if k})
    logger.info("read %d rows from %s", len(rows), path)
    return rows
