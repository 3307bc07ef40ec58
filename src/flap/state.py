from __future__ import annotations

import json
import logging
import os
import secrets
from pathlib import Path

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "bestScore"


def state_dir() -> Path:
    """
    Directory for small persistent user state.

    Override for tests/dev via `FLAP_STATE_DIR`.
    """

    override = os.environ.get("FLAP_STATE_DIR")
    if override:
        return Path(override)
    return Path.home() / ".flap"


def state_path() -> Path:
    return state_dir() / "state.json"


class JsonKeyValueStore:
    """
    String key-value store backed by one JSON object on disk.

    Reads and writes never raise: a missing or corrupt file reads as empty and a
    failed write is logged and dropped, so callers keep their in-memory values.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else state_path()

    def _load(self) -> dict[str, str]:
        p = self.path
        if not p.exists():
            return {}
        try:
            payload = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", p, exc)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {str(k): str(v) for k, v in payload.items() if isinstance(k, str) and v is not None}

    def get(self, key: str) -> str | None:
        return self._load().get(str(key))

    def set(self, key: str, value: str) -> bool:
        data = self._load()
        data[str(key)] = str(value)
        return self._save(data)

    def delete(self, key: str) -> bool:
        data = self._load()
        if data.pop(str(key), None) is None:
            return True
        return self._save(data)

    def _save(self, data: dict[str, str]) -> bool:
        p = self.path
        # Unique tmp name avoids clobbering between parallel runs (e.g. smoke checks).
        tmp = p.with_name(f"{p.name}.{os.getpid()}.{secrets.token_hex(6)}.tmp")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
            tmp.replace(p)
        except OSError as exc:
            logger.warning("Could not persist state to %s: %s", p, exc)
            return False
        return True


def parse_score(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        value = int(str(raw).strip(), 10)
    except ValueError:
        return None
    return value if value >= 0 else None


__all__ = ["BEST_SCORE_KEY", "JsonKeyValueStore", "parse_score", "state_dir", "state_path"]
