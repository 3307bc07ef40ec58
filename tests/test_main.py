from __future__ import annotations

import json
from pathlib import Path

from flap.__main__ import main
from flap.state import BEST_SCORE_KEY, JsonKeyValueStore


def test_write_settings_exits_without_starting_the_game(tmp_path: Path) -> None:
    out = tmp_path / "out.json"
    main(["--settings", str(tmp_path / "missing.json"), "--write-settings", str(out)])
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["tuning"]["pool_size"] == 4


def test_reset_best_clears_stored_value(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("FLAP_STATE_DIR", str(tmp_path))
    JsonKeyValueStore().set(BEST_SCORE_KEY, "12")
    main(["--reset-best"])
    assert JsonKeyValueStore().get(BEST_SCORE_KEY) is None
