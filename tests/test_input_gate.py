from __future__ import annotations

from types import SimpleNamespace

from flap.error_log import ErrorLog
from flap.hooks import EventHooks
from flap.input_gate import ActionGate
from flap.physics import Body
from flap.session import SessionPhase


class _FakeBase:
    def __init__(self) -> None:
        self.accepted: dict[str, object] = {}
        self.ignored: list[str] = []

    def accept(self, event: str, fn) -> None:
        self.accepted[event] = fn

    def ignore(self, event: str) -> None:
        self.ignored.append(event)
        self.accepted.pop(event, None)


def _session(phase: SessionPhase, vy: float = 0.0) -> SimpleNamespace:
    actor = Body(group="actor", width=34, height=24, vy=vy)
    return SimpleNamespace(phase=phase, actor=actor)


def test_action_outside_playing_leaves_velocity_alone() -> None:
    for phase in (SessionPhase.COUNTDOWN, SessionPhase.PAUSED, SessionPhase.GAME_OVER):
        session = _session(phase, vy=42.0)
        gate = ActionGate(session=session, flap_velocity=300.0)
        gate.on_action()
        assert session.actor.vy == 42.0
        assert gate.actions_applied == 0


def test_action_while_playing_overwrites_vertical_velocity() -> None:
    session = _session(SessionPhase.PLAYING, vy=250.0)
    gate = ActionGate(session=session, flap_velocity=300.0)
    gate.on_action()
    assert session.actor.vy == -300.0
    gate.on_action()
    assert session.actor.vy == -300.0
    assert gate.actions_applied == 2


def test_pointer_and_space_have_identical_effect() -> None:
    base = _FakeBase()
    log = ErrorLog()
    hooks = EventHooks(base=base, safe_call=log.safe_call)
    session = _session(SessionPhase.PLAYING)
    gate = ActionGate(session=session, flap_velocity=300.0)
    gate.bind(hooks)

    assert set(base.accepted) == {"mouse1", "space"}
    base.accepted["mouse1"]()
    assert session.actor.vy == -300.0
    session.actor.vy = 90.0
    base.accepted["space"]()
    assert session.actor.vy == -300.0
    assert log.items() == []
