from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class Body:
    """
    Axis-aligned 2D body in playfield units (x right, y down).

    `origin_x`/`origin_y` select which point of the box `x`/`y` refer to:
    (0, 0) is the top-left corner, (0, 1) the bottom-left corner.
    """

    group: str
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    gravity_y: float = 0.0
    tint: int | None = None

    @property
    def left(self) -> float:
        return self.x - self.origin_x * self.width

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def top(self) -> float:
        return self.y - self.origin_y * self.height

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def overlaps(self, other: Body) -> bool:
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )


CollideCallback = Callable[[Body, Body], None]


@dataclass(frozen=True)
class _Collider:
    group_a: str
    group_b: str
    callback: CollideCallback


@dataclass
class ArcadeWorld:
    """
    Small arcade physics world: gravity + velocity integration and AABB overlap
    notifications between named groups. No collision response; callers decide
    what an overlap means.
    """

    paused: bool = False
    _groups: dict[str, list[Body]] = field(default_factory=dict)
    _colliders: list[_Collider] = field(default_factory=list)

    def spawn(
        self,
        *,
        group: str,
        width: float,
        height: float,
        x: float = 0.0,
        y: float = 0.0,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
        gravity_y: float = 0.0,
    ) -> Body:
        body = Body(
            group=str(group),
            width=float(width),
            height=float(height),
            x=float(x),
            y=float(y),
            origin_x=float(origin_x),
            origin_y=float(origin_y),
            gravity_y=float(gravity_y),
        )
        self._groups.setdefault(body.group, []).append(body)
        return body

    def bodies(self, group: str) -> list[Body]:
        return list(self._groups.get(str(group), ()))

    def add_collider(self, group_a: str, group_b: str, callback: CollideCallback) -> None:
        self._colliders.append(_Collider(group_a=str(group_a), group_b=str(group_b), callback=callback))

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def step(self, dt: float) -> None:
        if self.paused:
            return
        dt = max(0.0, float(dt))
        for group in self._groups.values():
            for body in group:
                body.vy += body.gravity_y * dt
                body.x += body.vx * dt
                body.y += body.vy * dt

        for collider in self._colliders:
            for a in self._groups.get(collider.group_a, ()):
                for b in self._groups.get(collider.group_b, ()):
                    if a is b or not a.overlaps(b):
                        continue
                    collider.callback(a, b)


__all__ = ["ArcadeWorld", "Body", "CollideCallback"]
