from __future__ import annotations

import logging
import time
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class ErrorEntry:
    ts: float
    context: str
    message: str
    tb: str | None
    count: int = 1

    def summary_line(self) -> str:
        base = f"{self.context}: {self.message}".strip()
        if self.count > 1:
            base += f" (x{self.count})"
        return base


class ErrorLog:
    """
    Recent-failure feed for the frame loop.

    Consecutive identical errors (the usual per-frame failure) collapse into one
    entry with a repeat count. Entries also go to `logging` and, optionally, to a
    plain-text file.
    """

    def __init__(self, *, max_items: int = 20, persist_path: Path | None = None) -> None:
        self._max_items = max(1, int(max_items))
        self._items: list[ErrorEntry] = []
        self._persist_path = Path(persist_path) if persist_path is not None else None

    def items(self) -> list[ErrorEntry]:
        return list(self._items)

    def last(self) -> ErrorEntry | None:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def safe_call(self, context: str, fn: Callable[[], None]) -> bool:
        try:
            fn()
        except Exception as exc:
            self.log_exception(context=context, exc=exc)
            return False
        return True

    def log_exception(self, *, context: str, exc: BaseException) -> None:
        context = str(context or "unknown")
        message = f"{type(exc).__name__}: {exc}".strip()
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        if self._append(context=context, message=message, tb=tb):
            logger.error("%s: %s\n%s", context, message, tb.rstrip())
            self._persist(context=context, message=message, tb=tb)

    def _append(self, *, context: str, message: str, tb: str | None) -> bool:
        now = time.time()
        last = self.last()
        if last is not None and (last.context, last.message) == (context, message):
            last.ts = now
            last.count += 1
            return False
        self._items.append(ErrorEntry(ts=now, context=context, message=message, tb=tb))
        if len(self._items) > self._max_items:
            self._items = self._items[-self._max_items :]
        return True

    def _persist(self, *, context: str, message: str, tb: str | None) -> None:
        p = self._persist_path
        if p is None:
            return
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        lines = [f"[{stamp}] {context}: {message}"]
        if tb:
            lines.append(tb.rstrip())
        lines.append("")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            with p.open("a", encoding="utf-8") as fh:
                fh.write("\n".join(lines))
        except OSError as exc:
            logger.warning("Could not write error log %s: %s", p, exc)


__all__ = ["ErrorEntry", "ErrorLog"]
