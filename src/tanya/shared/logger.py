from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO


@dataclass
class _TimerEntry:
    name: str
    start: float
    end: float | None = None

    @property
    def elapsed(self) -> float:
        return (self.end or time.perf_counter()) - self.start


class RunLogger:
    """Human-readable run log for CLI training and query sessions.

    - console  : INFO+  (always on unless disabled)
    - log_file : DEBUG+ (persisted, full detail)

    Library modules log through stdlib ``logging``; ``install_stdlib_bridge``
    routes those records here so a CLI run shows one coherent stream.
    """

    LEVELS: dict[str, int] = {
        "DEBUG":  0,
        "INFO":   1,
        "PROG":   1,
        "METRIC": 1,
        "WARN":   2,
        "ERROR":  3,
    }

    def __init__(
        self,
        log_file: str | Path | None = None,
        console: bool = True,
        min_level: str = "INFO",
    ) -> None:
        self.console = console
        self.min_level = self.LEVELS.get(min_level.upper(), 1)
        self._file: TextIO | None = None
        self.log_path: Path | None = None
        self._timers: dict[str, _TimerEntry] = {}
        self._metrics: dict[str, list[tuple[float, Any]]] = {}
        self._start = time.perf_counter()

        if log_file:
            self.log_path = Path(log_file)
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.log_path, "w", encoding="utf-8", buffering=1)
            self._raw("=" * 80)
            self._raw(f"Tanya run log {time.strftime('%Y-%m-%d %H:%M:%S')}")
            self._raw("=" * 80)
            self._raw("")

    def _raw(self, line: str) -> None:
        if self._file:
            self._file.write(line + "\n")

    def _emit(self, level: str, msg: str) -> None:
        level_int = self.LEVELS.get(level, 1)
        ts = time.strftime("%H:%M:%S")
        elapsed = time.perf_counter() - self._start
        line = f"[{ts}] [{elapsed:7.2f}s] {level:6} | {msg}"

        if self.console and level_int >= self.min_level:
            print(line, flush=True)

        self._raw(line)

    def debug(self, msg: str) -> None:
        self._emit("DEBUG", msg)

    def info(self, msg: str) -> None:
        self._emit("INFO", msg)

    def warn(self, msg: str) -> None:
        self._emit("WARN", msg)

    def error(self, msg: str) -> None:
        self._emit("ERROR", msg)

    def section(self, title: str) -> None:
        sep = "=" * 80
        for line in ("", sep, f"  {title}", sep):
            if self.console:
                print(line, flush=True)
            self._raw(line)

    def progress(self, current: int, total: int, label: str = "", eta: float | None = None) -> None:
        pct = (current / total * 100) if total else 0
        filled = int(20 * current / total) if total else 0
        bar = "#" * filled + "." * (20 - filled)
        msg = f"[{current:>5}/{total}] {bar} {pct:5.1f}%"
        if eta is not None:
            msg += f"  eta {eta:6.1f}s"
        if label:
            msg += f"  {label}"
        self._emit("PROG", msg)

    def metric(self, name: str, value: Any, unit: str = "") -> None:
        t = time.perf_counter() - self._start
        self._metrics.setdefault(name, []).append((t, value))
        vstr = f"{value:.4f}" if isinstance(value, float) else str(value)
        if unit:
            vstr += f" {unit}"
        self._emit("METRIC", f"{name} = {vstr}")

    def metrics(self, name: str) -> list[Any]:
        return [value for _, value in self._metrics.get(name, [])]

    @contextmanager
    def timer(self, name: str):
        entry = _TimerEntry(name=name, start=time.perf_counter())
        self._timers[name] = entry
        try:
            yield entry
        finally:
            entry.end = time.perf_counter()
            self._emit("METRIC", f"timer:{name} = {entry.elapsed:.3f}s")

    def summary(self) -> None:
        self.section("RUN SUMMARY")
        total = time.perf_counter() - self._start
        self.info(f"Total wall time: {total:.2f}s")
        for name, entry in sorted(self._timers.items(), key=lambda x: -x[1].elapsed):
            if entry.end:
                self.info(f"  {name:<40} {entry.elapsed:>8.3f}s")
        if self.log_path:
            self.info(f"Log file: {self.log_path}")

    def install_stdlib_bridge(self, root_logger: str = "tanya", level: int = logging.INFO) -> None:
        handler = _BridgeHandler(self)
        handler.setLevel(level)
        root = logging.getLogger(root_logger)
        root.setLevel(level)
        for existing in [h for h in root.handlers if isinstance(h, _BridgeHandler)]:
            root.removeHandler(existing)
        root.addHandler(handler)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


class _BridgeHandler(logging.Handler):
    _MAP = {
        logging.DEBUG:    "debug",
        logging.INFO:     "info",
        logging.WARNING:  "warn",
        logging.ERROR:    "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, logger: RunLogger) -> None:
        super().__init__()
        self._run = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            getattr(self._run, self._MAP.get(record.levelno, "info"))(msg)
        except Exception:
            self.handleError(record)

