from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
    smoke: bool = False
    # Seed for obstacle placement. None draws from system entropy.
    seed: int | None = None
    # JSON settings file (see `Settings`). Missing file means defaults.
    settings_path: str | None = None


@dataclass
class GameTuning:
    # Playfield in world units (one unit = one window pixel at the default size).
    playfield_width: int = 800
    playfield_height: int = 600
    gravity: float = 600.0
    flap_velocity: float = 300.0
    scroll_velocity: float = 200.0
    background_scroll_per_tick: float = 1.0
    pool_size: int = 4
    edge_margin: int = 20
    countdown_start: int = 3
    countdown_interval_ms: int = 1000
    restart_delay_ms: int = 1000
    actor_start_x: float = 80.0
    actor_start_y: float = 300.0
    actor_width: float = 34.0
    actor_height: float = 24.0
    obstacle_width: float = 52.0
    obstacle_height: float = 640.0


@dataclass
class FeatureFlags:
    show_best: bool = True
    show_fps: bool = False


@dataclass
class Settings:
    tuning: GameTuning = field(default_factory=GameTuning)
    flags: FeatureFlags = field(default_factory=FeatureFlags)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Settings":
        tuning = GameTuning(**_coerce_fields(GameTuning, payload.get("tuning")))
        flags = FeatureFlags(**_coerce_fields(FeatureFlags, payload.get("flags")))
        if tuning.playfield_height <= 2 * tuning.edge_margin:
            logger.warning(
                "playfield_height %d leaves no room between edge margins of %d; using defaults",
                tuning.playfield_height,
                tuning.edge_margin,
            )
            defaults = GameTuning()
            tuning.playfield_height = defaults.playfield_height
            tuning.edge_margin = defaults.edge_margin
        return cls(tuning=tuning, flags=flags)


def _coerce_fields(kind: type, raw: object) -> dict[str, Any]:
    # Unknown keys and values of the wrong type are dropped so older/newer settings files still load.
    if not isinstance(raw, dict):
        return {}
    out: dict[str, Any] = {}
    for name, fld in kind.__dataclass_fields__.items():
        if name not in raw:
            continue
        val = raw[name]
        ann = fld.type
        if ann == "bool":
            if isinstance(val, bool):
                out[name] = val
            elif isinstance(val, (int, float)):
                out[name] = bool(val)
            elif isinstance(val, str):
                out[name] = val.strip().lower() in ("1", "true", "yes", "on")
        elif isinstance(val, bool):
            continue
        elif ann == "int" and isinstance(val, (int, float)):
            out[name] = int(val)
        elif ann == "float" and isinstance(val, (int, float)):
            out[name] = float(val)
    return out


def load_settings(path: Path | None) -> Settings:
    if path is None or not path.exists():
        return Settings()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring invalid settings file %s: %s", path, exc)
        return Settings()
    if not isinstance(payload, dict):
        return Settings()
    return Settings.from_dict(payload)


def save_settings(path: Path, settings: Settings) -> None:
    path.write_text(json.dumps(settings.to_dict(), indent=2, sort_keys=True) + "\n", encoding="utf-8")


__all__ = ["FeatureFlags", "GameTuning", "RunConfig", "Settings", "load_settings", "save_settings"]
