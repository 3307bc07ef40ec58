from __future__ import annotations

from pathlib import Path

from flap.state import BEST_SCORE_KEY, JsonKeyValueStore, parse_score, state_dir, state_path


def test_state_dir_honours_env_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("FLAP_STATE_DIR", str(tmp_path / "state"))
    assert state_dir() == tmp_path / "state"
    assert state_path() == tmp_path / "state" / "state.json"


def test_store_roundtrip_uses_default_state_path(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("FLAP_STATE_DIR", str(tmp_path / "state"))
    store = JsonKeyValueStore()
    assert store.get(BEST_SCORE_KEY) is None

    assert store.set(BEST_SCORE_KEY, "17") is True
    assert JsonKeyValueStore().get(BEST_SCORE_KEY) == "17"
    assert (tmp_path / "state" / "state.json").exists()
    assert list((tmp_path / "state").glob("*.tmp")) == []


def test_store_keeps_other_keys(tmp_path: Path) -> None:
    store = JsonKeyValueStore(tmp_path / "s.json")
    store.set("a", "1")
    store.set(BEST_SCORE_KEY, "5")
    assert store.get("a") == "1"
    assert store.delete("a") is True
    assert store.get("a") is None
    assert store.get(BEST_SCORE_KEY) == "5"


def test_corrupt_state_file_reads_as_empty(tmp_path: Path) -> None:
    p = tmp_path / "state.json"
    p.write_text("{not json", encoding="utf-8")
    store = JsonKeyValueStore(p)
    assert store.get(BEST_SCORE_KEY) is None
    assert store.set(BEST_SCORE_KEY, "1") is True
    assert store.get(BEST_SCORE_KEY) == "1"


def test_non_object_payload_reads_as_empty(tmp_path: Path) -> None:
    p = tmp_path / "state.json"
    p.write_text("[1, 2, 3]", encoding="utf-8")
    assert JsonKeyValueStore(p).get(BEST_SCORE_KEY) is None


def test_write_failure_returns_false(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    store = JsonKeyValueStore(blocker / "state.json")
    assert store.set(BEST_SCORE_KEY, "3") is False
    assert store.get(BEST_SCORE_KEY) is None


def test_parse_score() -> None:
    assert parse_score(None) is None
    assert parse_score("7") == 7
    assert parse_score("x") is None
    assert parse_score("-1") is None
