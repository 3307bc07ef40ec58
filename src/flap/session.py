"""
Play session state machine.

The session owns phase, countdown and the progression tracker. Engine-side
callbacks (timers, collisions, input) never change that state directly: they
enqueue a `Transition`, and `on_tick` applies queued transitions after the
per-tick play work, so a collision and a score in the same tick both count.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from flap.app_config import GameTuning
from flap.difficulty import DifficultyTier, ranges_for
from flap.obstacles import OBSTACLE_GROUP, ObstaclePool
from flap.physics import ArcadeWorld, Body
from flap.progression import KeyValueStore, ProgressionTracker
from flap.timers import TimerHandle, TimerQueue

logger = logging.getLogger(__name__)

ACTOR_GROUP = "actor"
FAILED_TINT = 0xFB1E36


class SessionPhase(str, Enum):
    COUNTDOWN = "countdown"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Transition(str, Enum):
    COUNTDOWN_STEP = "countdown_step"
    PAUSE = "pause"
    RESUME = "resume"
    GAME_OVER = "game_over"
    RESTART = "restart"


@dataclass(frozen=True)
class SessionState:
    score: int
    best_score: int
    tier: DifficultyTier
    is_paused: bool
    phase: SessionPhase
    countdown: int = 0


class SessionView(Protocol):
    def set_score(self, score: int) -> None: ...

    def set_best(self, best: int) -> None: ...

    def set_countdown(self, value: int | None) -> None: ...

    def set_paused(self, paused: bool) -> None: ...

    def set_actor_failed(self, failed: bool) -> None: ...

    def scroll_background(self, dx: float) -> None: ...


class SessionScene(Protocol):
    def on_enter(self) -> None: ...

    def on_tick(self, dt: float) -> None: ...

    def on_exit(self) -> None: ...


@dataclass(frozen=True)
class SessionContext:
    world: ArcadeWorld
    timers: TimerQueue
    store: KeyValueStore
    view: SessionView
    tuning: GameTuning
    rng: random.Random


class PlaySession(SessionScene):
    def __init__(self, *, ctx: SessionContext) -> None:
        self._ctx = ctx
        t = ctx.tuning
        self.progression = ProgressionTracker(store=ctx.store)
        self.pool = ObstaclePool(
            world=ctx.world,
            rng=ctx.rng,
            obstacle_width=t.obstacle_width,
            obstacle_height=t.obstacle_height,
            margin=t.edge_margin,
        )
        self.actor: Body = ctx.world.spawn(
            group=ACTOR_GROUP,
            width=t.actor_width,
            height=t.actor_height,
            x=t.actor_start_x,
            y=t.actor_start_y,
            gravity_y=t.gravity,
        )
        ctx.world.add_collider(ACTOR_GROUP, OBSTACLE_GROUP, self._on_actor_hit)

        self._phase = SessionPhase.COUNTDOWN
        self._countdown = 0
        self._countdown_timer: TimerHandle | None = None
        self._restart_timer: TimerHandle | None = None
        self._pending: deque[Transition] = deque()
        self.sessions_started = 0

    # --- lifecycle ---------------------------------------------------------

    def on_enter(self) -> None:
        self._start()

    def on_tick(self, dt: float) -> None:
        _ = dt
        if self._phase is SessionPhase.PLAYING:
            self._play_tick()
        self.process_pending()

    def on_exit(self) -> None:
        self._cancel_timers()
        self._pending.clear()
        self._ctx.world.pause()

    # --- queries -----------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def state(self) -> SessionState:
        return SessionState(
            score=self.progression.score,
            best_score=self.progression.best_score,
            tier=self.progression.tier,
            is_paused=self._phase is not SessionPhase.PLAYING,
            phase=self._phase,
            countdown=self._countdown,
        )

    # --- requests (safe to call from any callback) --------------------------

    def request(self, transition: Transition) -> None:
        self._pending.append(Transition(transition))

    def request_pause(self) -> None:
        self.request(Transition.PAUSE)

    def request_resume(self) -> None:
        self.request(Transition.RESUME)

    def request_game_over(self) -> None:
        self.request(Transition.GAME_OVER)

    def toggle_pause(self) -> None:
        if self._phase is SessionPhase.PLAYING:
            self.request_pause()
        elif self._phase is SessionPhase.PAUSED:
            self.request_resume()

    def process_pending(self) -> None:
        while self._pending:
            self._apply(self._pending.popleft())

    # --- internals ---------------------------------------------------------

    def _apply(self, transition: Transition) -> None:
        phase = self._phase
        if transition is Transition.COUNTDOWN_STEP:
            if phase is SessionPhase.COUNTDOWN:
                self._step_countdown()
        elif transition is Transition.PAUSE:
            if phase is SessionPhase.PLAYING:
                self._pause()
        elif transition is Transition.RESUME:
            if phase is SessionPhase.PAUSED:
                self._ctx.view.set_paused(False)
                self._begin_countdown()
        elif transition is Transition.GAME_OVER:
            if phase is SessionPhase.PLAYING:
                self._game_over()
        elif transition is Transition.RESTART:
            if phase is SessionPhase.GAME_OVER:
                self._start()

    def _start(self) -> None:
        t = self._ctx.tuning
        view = self._ctx.view
        self._cancel_timers()
        self._pending.clear()
        self.sessions_started += 1

        self.progression.reset()
        self.progression.load_best()

        self.actor.x = float(t.actor_start_x)
        self.actor.y = float(t.actor_start_y)
        self.actor.vx = 0.0
        self.actor.vy = 0.0
        self.actor.tint = None

        self.pool.initialize(
            t.pool_size,
            t.playfield_height,
            ranges=ranges_for(DifficultyTier.EASY),
            velocity_x=-float(t.scroll_velocity),
        )

        view.set_actor_failed(False)
        view.set_paused(False)
        view.set_score(self.progression.score)
        view.set_best(self.progression.best_score)
        logger.info("Session %d started (best %d)", self.sessions_started, self.progression.best_score)
        self._begin_countdown()

    def _begin_countdown(self) -> None:
        t = self._ctx.tuning
        self._ctx.world.pause()
        self._phase = SessionPhase.COUNTDOWN
        self._countdown = max(0, int(t.countdown_start))
        if self._countdown_timer is not None:
            self._countdown_timer.remove()
            self._countdown_timer = None
        if self._countdown <= 0:
            self._finish_countdown()
            return
        self._ctx.view.set_countdown(self._countdown)
        self._countdown_timer = self._ctx.timers.add(
            t.countdown_interval_ms,
            lambda: self.request(Transition.COUNTDOWN_STEP),
            loop=True,
        )

    def _step_countdown(self) -> None:
        self._countdown -= 1
        logger.debug("Countdown %d", self._countdown)
        if self._countdown <= 0:
            self._finish_countdown()
            return
        self._ctx.view.set_countdown(self._countdown)

    def _finish_countdown(self) -> None:
        if self._countdown_timer is not None:
            self._countdown_timer.remove()
            self._countdown_timer = None
        self._countdown = 0
        self._ctx.view.set_countdown(None)
        self._ctx.world.resume()
        self._phase = SessionPhase.PLAYING

    def _pause(self) -> None:
        self._ctx.world.pause()
        self._phase = SessionPhase.PAUSED
        self._ctx.view.set_paused(True)
        logger.info("Paused at score %d", self.progression.score)

    def _play_tick(self) -> None:
        t = self._ctx.tuning
        view = self._ctx.view
        view.scroll_background(t.background_scroll_per_tick)

        recycled = self.pool.recycle(ranges_for(self.progression.tier))
        if recycled:
            self.progression.record_pass(recycled)
            view.set_score(self.progression.score)
            view.set_best(self.progression.best_score)

        if self._actor_out_of_bounds():
            self.request(Transition.GAME_OVER)

    def _actor_out_of_bounds(self) -> bool:
        return self.actor.top <= 0.0 or self.actor.bottom >= float(self._ctx.tuning.playfield_height)

    def _on_actor_hit(self, _actor: Body, _obstacle: Body) -> None:
        self.request(Transition.GAME_OVER)

    def _game_over(self) -> None:
        self._phase = SessionPhase.GAME_OVER
        self._ctx.world.pause()
        self.actor.tint = FAILED_TINT
        self._ctx.view.set_actor_failed(True)

        self.progression.persist_if_best(self.progression.score)
        self._ctx.view.set_best(self.progression.best_score)
        logger.info("Game over at score %d (best %d)", self.progression.score, self.progression.best_score)

        self._restart_timer = self._ctx.timers.add(
            self._ctx.tuning.restart_delay_ms,
            lambda: self.request(Transition.RESTART),
        )

    def _cancel_timers(self) -> None:
        for handle in (self._countdown_timer, self._restart_timer):
            if handle is not None:
                handle.remove()
        self._countdown_timer = None
        self._restart_timer = None


__all__ = [
    "ACTOR_GROUP",
    "FAILED_TINT",
    "PlaySession",
    "SessionContext",
    "SessionPhase",
    "SessionScene",
    "SessionState",
    "SessionView",
    "Transition",
]
