from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class DifficultyTier(IntEnum):
    EASY = 0
    NORMAL = 1
    HARD = 2

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class DifficultyRanges:
    # Inclusive integer ranges (min, max) in playfield units.
    horizontal_gap: tuple[int, int]
    vertical_gap: tuple[int, int]


DIFFICULTY_TABLE: dict[DifficultyTier, DifficultyRanges] = {
    DifficultyTier.EASY: DifficultyRanges(horizontal_gap=(500, 550), vertical_gap=(200, 250)),
    DifficultyTier.NORMAL: DifficultyRanges(horizontal_gap=(400, 450), vertical_gap=(150, 200)),
    DifficultyTier.HARD: DifficultyRanges(horizontal_gap=(300, 350), vertical_gap=(130, 170)),
}

# Ascending (score, tier) pairs. A tier is entered once its score is reached.
TIER_THRESHOLDS: tuple[tuple[int, DifficultyTier], ...] = (
    (20, DifficultyTier.NORMAL),
    (50, DifficultyTier.HARD),
)


def ranges_for(tier: DifficultyTier) -> DifficultyRanges:
    return DIFFICULTY_TABLE[DifficultyTier(tier)]


def tier_for_score(
    score: int, thresholds: tuple[tuple[int, DifficultyTier], ...] = TIER_THRESHOLDS
) -> DifficultyTier:
    tier = DifficultyTier.EASY
    for threshold, t in sorted(thresholds, key=lambda row: row[0]):
        if int(score) >= threshold:
            tier = t
    return tier


__all__ = [
    "DIFFICULTY_TABLE",
    "DifficultyRanges",
    "DifficultyTier",
    "TIER_THRESHOLDS",
    "ranges_for",
    "tier_for_score",
]
