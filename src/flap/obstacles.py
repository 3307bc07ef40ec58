from __future__ import annotations

import random
from dataclasses import dataclass

from flap.difficulty import DifficultyRanges, DifficultyTier, ranges_for
from flap.physics import ArcadeWorld, Body

OBSTACLE_GROUP = "obstacles"


@dataclass
class ObstaclePair:
    """Upper half is anchored at its bottom edge, lower half at its top edge; `upper.y..lower.y` is the gap."""

    upper: Body
    lower: Body

    @property
    def x(self) -> float:
        return self.upper.x

    def has_passed(self) -> bool:
        # Both halves must be fully past the left edge.
        return self.upper.right <= 0.0 and self.lower.right <= 0.0


class ObstaclePool:
    """
    Fixed set of obstacle pairs that are placed once and then recycled forever.

    New placements always go to the right of every existing obstacle, with the
    spacing and gap size drawn from the active difficulty ranges.
    """

    def __init__(
        self,
        *,
        world: ArcadeWorld,
        rng: random.Random,
        obstacle_width: float,
        obstacle_height: float,
        margin: int = 20,
    ) -> None:
        self._world = world
        self._rng = rng
        self._obstacle_width = float(obstacle_width)
        self._obstacle_height = float(obstacle_height)
        self.margin = int(margin)
        self.playfield_height: int = 0
        self.pairs: list[ObstaclePair] = []

    def initialize(
        self,
        pool_size: int,
        playfield_height: int,
        *,
        ranges: DifficultyRanges | None = None,
        velocity_x: float = 0.0,
    ) -> list[ObstaclePair]:
        self.playfield_height = int(playfield_height)
        while len(self.pairs) < int(pool_size):
            self.pairs.append(self._spawn_pair())

        # Park everything at the origin so placement starts from a clean rightmost x.
        for pair in self.pairs:
            for body in (pair.upper, pair.lower):
                body.x = 0.0
                body.y = 0.0
                body.vx = 0.0
                body.vy = 0.0

        ranges = ranges or ranges_for(DifficultyTier.EASY)
        for pair in self.pairs:
            self.place_next(pair, ranges, self.playfield_height)
        self.advance(velocity_x)
        return list(self.pairs)

    def place_next(self, pair: ObstaclePair, ranges: DifficultyRanges, playfield_height: int) -> None:
        # Both the gap size and its position are clamped so the gap fits between the margins.
        room = max(0, int(playfield_height) - 2 * self.margin)
        vertical_gap = min(self._rng.randint(*ranges.vertical_gap), room)
        highest = max(self.margin, int(playfield_height) - self.margin - vertical_gap)
        vertical_position = self._rng.randint(self.margin, highest)
        horizontal_gap = self._rng.randint(*ranges.horizontal_gap)

        x = self.rightmost_x() + horizontal_gap
        pair.upper.x = x
        pair.upper.y = float(vertical_position)
        pair.lower.x = x
        pair.lower.y = float(vertical_position + vertical_gap)

    def advance(self, velocity_x: float) -> None:
        for pair in self.pairs:
            pair.upper.vx = float(velocity_x)
            pair.lower.vx = float(velocity_x)

    def recycle(self, ranges: DifficultyRanges) -> int:
        recycled = 0
        for pair in self.pairs:
            if pair.has_passed():
                self.place_next(pair, ranges, self.playfield_height)
                recycled += 1
        return recycled

    def rightmost_x(self) -> float:
        rightmost = 0.0
        for pair in self.pairs:
            rightmost = max(rightmost, pair.upper.x, pair.lower.x)
        return rightmost

    def _spawn_pair(self) -> ObstaclePair:
        upper = self._world.spawn(
            group=OBSTACLE_GROUP,
            width=self._obstacle_width,
            height=self._obstacle_height,
            origin_y=1.0,
        )
        lower = self._world.spawn(
            group=OBSTACLE_GROUP,
            width=self._obstacle_width,
            height=self._obstacle_height,
            origin_y=0.0,
        )
        return ObstaclePair(upper=upper, lower=lower)


__all__ = ["OBSTACLE_GROUP", "ObstaclePair", "ObstaclePool"]
