from __future__ import annotations

from typing import Iterable, Protocol

from flap.physics import Body
from flap.session import SessionPhase

DEFAULT_ACTION_EVENTS: tuple[str, ...] = ("mouse1", "space")


class _GatedSession(Protocol):
    @property
    def phase(self) -> SessionPhase: ...

    @property
    def actor(self) -> Body: ...


class ActionGate:
    """Turns any bound input event into one upward impulse on the actor, only while playing."""

    def __init__(self, *, session: _GatedSession, flap_velocity: float) -> None:
        self._session = session
        self._flap_velocity = abs(float(flap_velocity))
        self.actions_applied = 0

    def on_action(self) -> None:
        if self._session.phase is not SessionPhase.PLAYING:
            return
        self._session.actor.vy = -self._flap_velocity
        self.actions_applied += 1

    def bind(self, hooks, *, events: Iterable[str] = DEFAULT_ACTION_EVENTS, group: str = "session") -> None:
        for evt in events:
            hooks.bind(group=group, event=evt, context=f"input.{evt}", fn=self.on_action)


__all__ = ["ActionGate", "DEFAULT_ACTION_EVENTS"]
