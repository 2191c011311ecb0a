import json
from pathlib import Path

import pytest

from report_card_data.forms import JsonFileStorage, MemoryStorage, StorageError


def test_memory_storage_roundtrip() -> None:
    storage = MemoryStorage()

    assert storage.get("k") is None
    storage.set("k", "v")
    assert storage.get("k") == "v"
    storage.remove("k")
    storage.remove("k")
    assert "k" not in storage


def test_json_file_storage_creates_file(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileStorage(path)

    assert storage.get("studentReports") is None
    storage.set("studentReports", "[]")
    storage.set("other", "x")

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "studentReports": "[]",
        "other": "x",
    }
    assert JsonFileStorage(path).get("other") == "x"


def test_json_file_storage_remove_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    storage = JsonFileStorage(path)
    storage.set("a", "1")
    storage.set("b", "2")

    storage.remove("a")
    storage.remove("missing")

    assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}
    assert list(tmp_path.iterdir()) == [path]


def test_json_file_storage_rejects_invalid_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("not json", encoding="utf-8")

    with pytest.raises(StorageError, match="not valid JSON"):
        JsonFileStorage(path).get("a")
