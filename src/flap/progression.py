from __future__ import annotations

import logging
from typing import Protocol

from flap.difficulty import TIER_THRESHOLDS, DifficultyTier, tier_for_score
from flap.state import BEST_SCORE_KEY, parse_score

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...


class ProgressionTracker:
    """
    Score counter, best-score bookkeeping and forward-only difficulty tiers.

    The in-memory `best_score` is authoritative for display; the store is only a
    best-effort mirror and may be unavailable. The stored value is read by
    `load_best` (or lazily by the first `persist_if_best`) and then tracked in
    memory, so scoring a point does not hit the store unless it is a new best.
    """

    def __init__(
        self,
        *,
        store: KeyValueStore,
        key: str = BEST_SCORE_KEY,
        thresholds: tuple[tuple[int, DifficultyTier], ...] = TIER_THRESHOLDS,
    ) -> None:
        self._store = store
        self._key = str(key)
        self._thresholds = tuple(thresholds)
        self._stored_best: int | None = None
        self._stored_loaded = False
        self.score: int = 0
        self.best_score: int = 0
        self.tier: DifficultyTier = DifficultyTier.EASY

    def reset(self) -> None:
        self.score = 0
        self.tier = DifficultyTier.EASY

    def load_best(self) -> int:
        stored = self._read_stored_best()
        if stored is not None:
            self.best_score = max(self.best_score, stored)
        return self.best_score

    def record_pass(self, count: int) -> list[DifficultyTier]:
        entered: list[DifficultyTier] = []
        for _ in range(max(0, int(count))):
            self.score += 1
            tier = max(self.tier, tier_for_score(self.score, self._thresholds))
            if tier is not self.tier:
                self.tier = tier
                entered.append(tier)
                logger.info("Difficulty -> %s at score %d", tier.label, self.score)
            self.persist_if_best(self.score)
        return entered

    def persist_if_best(self, score: int) -> bool:
        score = max(0, int(score))
        self.best_score = max(self.best_score, score)
        stored = self._stored_best if self._stored_loaded else self._read_stored_best()
        if stored is not None and score <= stored:
            return False
        try:
            ok = self._store.set(self._key, str(score))
        except Exception as exc:
            logger.warning("Best score %d not persisted: %s", score, exc)
            return False
        if ok is False:
            return False
        self._stored_best = score
        self._stored_loaded = True
        return True

    def _read_stored_best(self) -> int | None:
        try:
            raw = self._store.get(self._key)
        except Exception as exc:
            logger.warning("Best score store unavailable: %s", exc)
            self._stored_loaded = False
            return None
        self._stored_best = parse_score(raw)
        self._stored_loaded = True
        return self._stored_best


__all__ = ["KeyValueStore", "ProgressionTracker"]
