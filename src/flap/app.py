from __future__ import annotations

import random
from pathlib import Path

from direct.gui.OnscreenText import OnscreenText
from direct.showbase.ShowBase import ShowBase
from direct.showbase.ShowBaseGlobal import globalClock
from panda3d.core import CardMaker, LVector4, NodePath, TextNode, loadPrcFileData

from flap.app_config import FeatureFlags, GameTuning, RunConfig, Settings, load_settings
from flap.error_log import ErrorLog
from flap.hooks import EventHooks
from flap.input_gate import ActionGate
from flap.obstacles import OBSTACLE_GROUP
from flap.physics import ArcadeWorld, Body
from flap.session import ACTOR_GROUP, FAILED_TINT, PlaySession, SessionContext
from flap.state import JsonKeyValueStore, state_dir
from flap.timers import TimerQueue

SKY_COLOR = LVector4(0.44, 0.77, 0.81, 1)
CLOUD_COLOR = LVector4(0.95, 0.97, 1.0, 0.9)
OBSTACLE_COLOR = LVector4(0.35, 0.72, 0.20, 1)
ACTOR_COLOR = LVector4(0.98, 0.84, 0.15, 1)


def _tint_color(rgb: int) -> LVector4:
    return LVector4(((rgb >> 16) & 0xFF) / 255.0, ((rgb >> 8) & 0xFF) / 255.0, (rgb & 0xFF) / 255.0, 1)


def _card(parent: NodePath, name: str, *, width: float, height: float, color: LVector4) -> NodePath:
    cm = CardMaker(name)
    cm.setFrame(0, width, 0, height)
    np = parent.attachNewNode(cm.generate())
    np.setColor(color)
    return np


class PlayfieldView:
    """
    Flat 2D rendering of the playfield under `render2d`, in playfield units
    (x right, y down), plus HUD text on the aspect2d corners.
    """

    def __init__(self, *, base: ShowBase, tuning: GameTuning, flags: FeatureFlags) -> None:
        self._width = float(tuning.playfield_width)
        self._height = float(tuning.playfield_height)
        self._actor_failed = False

        self.root = base.render2d.attachNewNode("playfield")
        # Map (0..W, 0..H) with y down onto render2d's (-1..1, 1..-1).
        self.root.setPos(-1, 0, 1)
        self.root.setScale(2.0 / self._width, 1.0, -2.0 / self._height)
        self.root.setTwoSided(True)
        self.root.setTransparency(True)

        _card(self.root, "sky", width=self._width, height=self._height, color=SKY_COLOR)
        self._clouds: list[tuple[NodePath, float]] = []
        for i in range(5):
            w = 90.0 + 30.0 * (i % 3)
            cloud = _card(self.root, f"cloud-{i}", width=w, height=26.0, color=CLOUD_COLOR)
            cloud.setPos(i * (self._width / 4.0), 0, 40.0 + 70.0 * (i % 4))
            self._clouds.append((cloud, w))
        self._bodies_root = self.root.attachNewNode("bodies")
        self._body_nodes: dict[int, NodePath] = {}

        self._score_text = OnscreenText(
            text="",
            parent=base.a2dTopLeft,
            pos=(0.05, -0.12),
            align=TextNode.ALeft,
            scale=0.08,
            fg=(0, 0, 0, 1),
            mayChange=True,
        )
        self._best_text = OnscreenText(
            text="",
            parent=base.a2dTopLeft,
            pos=(0.05, -0.2),
            align=TextNode.ALeft,
            scale=0.05,
            fg=(0, 0, 0, 1),
            mayChange=True,
        )
        if not flags.show_best:
            self._best_text.hide()
        self._center_text = OnscreenText(
            text="",
            parent=base.aspect2d,
            pos=(0, 0),
            align=TextNode.ACenter,
            scale=0.1,
            fg=(1, 1, 1, 1),
            shadow=(0, 0, 0, 0.6),
            mayChange=True,
        )
        self._pause_text = OnscreenText(
            text="Paused - press P to continue",
            parent=base.aspect2d,
            pos=(0, -0.15),
            align=TextNode.ACenter,
            scale=0.06,
            fg=(1, 1, 1, 1),
            shadow=(0, 0, 0, 0.6),
        )
        self._pause_text.hide()

    # SessionView

    def set_score(self, score: int) -> None:
        self._score_text.setText(f"Score:{int(score)}")

    def set_best(self, best: int) -> None:
        self._best_text.setText(f"Best score:{int(best)}")

    def set_countdown(self, value: int | None) -> None:
        self._center_text.setText("" if value is None else f"Fly in {int(value)}")

    def set_paused(self, paused: bool) -> None:
        if paused:
            self._pause_text.show()
        else:
            self._pause_text.hide()

    def set_actor_failed(self, failed: bool) -> None:
        self._actor_failed = bool(failed)

    def scroll_background(self, dx: float) -> None:
        for cloud, w in self._clouds:
            x = cloud.getX() - float(dx)
            if x + w < 0:
                x += self._width + w
            cloud.setX(x)

    # Per-frame sync

    def sync(self, world: ArcadeWorld) -> None:
        for body in world.bodies(OBSTACLE_GROUP):
            self._place(body, OBSTACLE_COLOR)
        for body in world.bodies(ACTOR_GROUP):
            color = _tint_color(body.tint or FAILED_TINT) if self._actor_failed else ACTOR_COLOR
            self._place(body, color)

    def _place(self, body: Body, color: LVector4) -> None:
        np = self._body_nodes.get(id(body))
        if np is None:
            np = _card(self._bodies_root, body.group, width=body.width, height=body.height, color=color)
            self._body_nodes[id(body)] = np
        np.setColor(color)
        np.setPos(body.left, 0, body.top)


class FlapApp(ShowBase):
    def __init__(self, cfg: RunConfig, settings: Settings) -> None:
        tuning = settings.tuning
        # Keep audio from being a dependency for smoke runs / CI.
        loadPrcFileData("", "audio-library-name null")
        loadPrcFileData("", f"win-size {int(tuning.playfield_width)} {int(tuning.playfield_height)}")
        loadPrcFileData("", "window-title Flap")
        if cfg.smoke:
            loadPrcFileData("", "window-type offscreen")

        super().__init__()

        self.disableMouse()
        self.cfg = cfg
        self.settings = settings
        self.error_log = ErrorLog(persist_path=state_dir() / "errors.log")
        self._hooks = EventHooks(base=self, safe_call=self._safe_call)

        self.world = ArcadeWorld()
        self.timers = TimerQueue()
        self.view = PlayfieldView(base=self, tuning=tuning, flags=settings.flags)
        self.session = PlaySession(
            ctx=SessionContext(
                world=self.world,
                timers=self.timers,
                store=JsonKeyValueStore(),
                view=self.view,
                tuning=tuning,
                rng=random.Random(cfg.seed),
            )
        )
        self.gate = ActionGate(session=self.session, flap_velocity=tuning.flap_velocity)

        self._sim_tick_rate_hz: int = 60
        self._sim_fixed_dt: float = 1.0 / float(self._sim_tick_rate_hz)
        self._sim_accumulator: float = 0.0

        self._setup_input()
        if settings.flags.show_fps:
            self.setFrameRateMeter(True)

        self.exitFunc = self._on_exit
        self.session.on_enter()
        self.view.sync(self.world)
        self.taskMgr.add(self._update, "flap-update")

        if cfg.smoke:
            self._frames_left = 8
            self.taskMgr.add(self._smoke_task, "smoke-exit")

    def _setup_input(self) -> None:
        self.gate.bind(self._hooks)
        for evt in ("p", "escape"):
            self._hooks.bind(group="session", event=evt, context=f"input.pause.{evt}", fn=self.session.toggle_pause)

    def _on_exit(self) -> None:
        self._hooks.unbind_group("session")
        self.session.on_exit()

    def _safe_call(self, context: str, fn) -> None:
        self.error_log.safe_call(context, fn)

    def _step(self, dt: float) -> None:
        self.timers.advance(dt)
        self.world.step(dt)
        self.session.on_tick(dt)

    def _update(self, task):  # type: ignore[no-untyped-def]
        # Clamp long stalls (window drag, breakpoint) instead of fast-forwarding through them.
        self._sim_accumulator += min(float(globalClock.getDt()), 0.25)
        steps = 0
        while self._sim_accumulator >= self._sim_fixed_dt and steps < 8:
            self._sim_accumulator -= self._sim_fixed_dt
            self._safe_call("update.step", lambda: self._step(self._sim_fixed_dt))
            steps += 1
        if steps >= 8:
            self._sim_accumulator = 0.0
        self.view.sync(self.world)
        return task.cont

    def _smoke_task(self, task):  # type: ignore[no-untyped-def]
        self._frames_left -= 1
        if self._frames_left <= 0:
            self.userExit()
            return task.done
        return task.cont


def run(cfg: RunConfig) -> None:
    settings = load_settings(Path(cfg.settings_path) if cfg.settings_path else None)
    app = FlapApp(cfg, settings)
    app.run()


__all__ = ["FlapApp", "PlayfieldView", "run"]
