import argparse
import faulthandler
import logging
import os
import sys
import traceback
from typing import Optional

from PyQt6.QtWidgets import QApplication, QMainWindow

from cryptoview.core.history_io import random_walk_bars, random_walk_line, read_csv_history
from cryptoview.core.samples import LINE, OHLC
from cryptoview.ui.chart_widget import ChartWidget

_FAULT_LOG_HANDLE = None

logger = logging.getLogger(__name__)


def _install_exception_logging(log_dir: str) -> None:
    log_path = os.path.join(log_dir, "exception.log")
    def _hook(exc_type, exc_value, exc_tb):
        logger.critical("unhandled exception", exc_info=(exc_type, exc_value, exc_tb))
        try:
            with open(log_path, "a", encoding="utf-8") as handle:
                handle.write("\n=== Unhandled Exception ===\n")
                traceback.print_exception(exc_type, exc_value, exc_tb, file=handle)
        except OSError:
            pass
    sys.excepthook = _hook


def _enable_faulthandler(log_dir: str) -> None:
    global _FAULT_LOG_HANDLE
    try:
        # Kept open for the process lifetime; faulthandler may write at any point.
        _FAULT_LOG_HANDLE = open(os.path.join(log_dir, "faulthandler.log"), "w", encoding="utf-8")
        _FAULT_LOG_HANDLE.write(f"pid={os.getpid()}\n")
        _FAULT_LOG_HANDLE.flush()
        faulthandler.enable(_FAULT_LOG_HANDLE, all_threads=True)
    except OSError:
        faulthandler.enable(all_threads=True)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Interactive candlestick/line price chart.")
    ap.add_argument("--kind", choices=("candles", "line"), default="candles")
    ap.add_argument("--csv", help="CSV with a header (timestamp,open,high,low,close or timestamp,value)")
    ap.add_argument("--samples", type=int, default=300, help="Generated samples when no --csv is given")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--timestamp-unit", choices=("s", "ms"), default="s")
    ap.add_argument("--gradient", nargs=2, metavar=("START", "END"), help="Area fill for line charts")
    ap.add_argument("--log-level", default="WARNING")
    ap.add_argument("--log-dir", default=os.getcwd(), help="Where exception.log and faulthandler.log go")
    return ap


def load_initial_history(args: argparse.Namespace):
    sample_kind = LINE if args.kind == "line" else OHLC
    if args.csv:
        return read_csv_history(args.csv, sample_kind)
    if args.samples < 0:
        raise SystemExit("--samples must be >= 0")
    if sample_kind == LINE:
        return random_walk_line(args.samples, seed=args.seed)
    return random_walk_bars(args.samples, seed=args.seed)


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _enable_faulthandler(args.log_dir)
    _install_exception_logging(args.log_dir)

    history = load_initial_history(args)
    options = {"timestampUnit": args.timestamp_unit}
    if args.gradient:
        options["graphFill"] = {"gradientStart": args.gradient[0], "gradientEnd": args.gradient[1]}

    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = QMainWindow()
    window.setWindowTitle(f"CryptoView ({args.kind})")
    widget = ChartWidget(history, options, kind=args.kind)
    window.setCentralWidget(widget)
    window.resize(1200, 700)
    window.show()
    return app.exec()


if __name__ == '__main__':
    raise SystemExit(main())
