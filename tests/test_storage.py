import json
from pathlib import Path

from bracketview.scraping.storage import SnapshotCache


def test_save_and_load_round_trip(tmp_path: Path):
    cache = SnapshotCache(tmp_path / "cache" / "bracket.json")
    cache.save({"data": {"phase": {"id": 1}}})

    assert cache.load() == {"data": {"phase": {"id": 1}}}
    raw = json.loads(cache.path.read_text())
    assert list(raw) == ["bracket_data"]


def test_save_overwrites_only_its_slot(tmp_path: Path):
    cache = SnapshotCache(tmp_path / "bracket.json")
    cache.save({"v": 1})
    cache.save({"other": True}, key="extra")
    cache.save({"v": 2})

    assert cache.load() == {"v": 2}
    assert cache.load("extra") == {"other": True}


def test_missing_file_loads_none(tmp_path: Path):
    assert SnapshotCache(tmp_path / "nope.json").load() is None


def test_corrupt_file_loads_none(tmp_path: Path):
    path = tmp_path / "bracket.json"
    path.write_text("{not json")
    assert SnapshotCache(path).load() is None


def test_no_temp_files_left_behind(tmp_path: Path):
    cache = SnapshotCache(tmp_path / "bracket.json")
    cache.save({"v": 1})
    assert [p.name for p in tmp_path.iterdir()] == ["bracket.json"]
