from __future__ import annotations

from pathlib import Path

from flap.error_log import ErrorLog


def _raise(msg: str) -> None:
    raise ValueError(msg)


def test_consecutive_identical_errors_collapse() -> None:
    log = ErrorLog(max_items=10)
    assert log.safe_call("update.step", lambda: _raise("boom")) is False
    assert log.safe_call("update.step", lambda: _raise("boom")) is False

    items = log.items()
    assert len(items) == 1
    assert items[0].count == 2
    assert items[0].summary_line() == "update.step: ValueError: boom (x2)"


def test_safe_call_returns_true_on_success() -> None:
    log = ErrorLog()
    calls: list[int] = []
    assert log.safe_call("ok", lambda: calls.append(1)) is True
    assert calls == [1]
    assert log.last() is None


def test_keeps_only_recent_entries() -> None:
    log = ErrorLog(max_items=3)
    for i in range(5):
        log.safe_call(f"c{i}", lambda i=i: _raise(f"m{i}"))
    assert [it.context for it in log.items()] == ["c2", "c3", "c4"]
    log.clear()
    assert log.items() == []


def test_persists_entries_with_traceback(tmp_path: Path) -> None:
    out = tmp_path / "logs" / "errors.log"
    log = ErrorLog(persist_path=out)
    log.safe_call("input.space", lambda: _raise("bad flap"))

    text = out.read_text(encoding="utf-8")
    assert "input.space: ValueError: bad flap" in text
    assert "Traceback" in text
