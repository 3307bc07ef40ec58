from __future__ import annotations

from flap.timers import TimerQueue


def test_one_shot_timer_fires_once_after_delay() -> None:
    q = TimerQueue()
    fired: list[str] = []
    q.add(1000, lambda: fired.append("restart"))

    q.advance(0.5)
    assert fired == []
    q.advance(0.5)
    assert fired == ["restart"]
    q.advance(5.0)
    assert fired == ["restart"]
    assert q.pending() == []


def test_loop_timer_repeats_until_removed() -> None:
    q = TimerQueue()
    ticks: list[int] = []
    handle = q.add(1000, lambda: ticks.append(len(ticks)), loop=True)

    q.advance(1.0)
    q.advance(1.0)
    assert ticks == [0, 1]

    handle.remove()
    q.advance(3.0)
    assert ticks == [0, 1]
    assert q.pending() == []


def test_loop_timer_catches_up_on_long_frame() -> None:
    q = TimerQueue()
    ticks: list[int] = []
    q.add(100, lambda: ticks.append(1), loop=True)
    q.advance(0.35)
    assert len(ticks) == 3


def test_callback_can_remove_its_own_loop_timer() -> None:
    q = TimerQueue()
    calls = {"n": 0}
    holder: dict = {}

    def cb() -> None:
        calls["n"] += 1
        if calls["n"] == 2:
            holder["h"].remove()

    holder["h"] = q.add(100, cb, loop=True)
    q.advance(1.0)
    assert calls["n"] == 2


def test_timer_added_from_callback_is_kept() -> None:
    q = TimerQueue()
    fired: list[str] = []
    q.add(100, lambda: q.add(100, lambda: fired.append("second")))
    q.advance(0.1)
    assert fired == []
    assert len(q.pending()) == 1
    q.advance(0.1)
    assert fired == ["second"]
