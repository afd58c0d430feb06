"""Tests for the flat-file JSON location store."""

import json
import shutil
from pathlib import Path

import pytest

from weathersync.errors import PersistenceError
from weathersync.storage.json_store import (
    DOCUMENT_VERSION,
    JsonLocationStore,
    read_document,
)

from conftest import make_location


@pytest.fixture
def legacy_path(tmp_path: Path, fixtures_dir: Path) -> Path:
    path = tmp_path / "locations.json"
    shutil.copy(fixtures_dir / "legacy_locations.json", path)
    return path


class TestReadDocument:
    def test_missing_file_is_empty(self, tmp_path: Path):
        assert read_document(tmp_path / "nope.json") == ([], 1)

    def test_malformed_file_is_empty(self, tmp_path: Path):
        path = tmp_path / "locations.json"
        path.write_text("{not json")
        assert read_document(path) == ([], 1)

    def test_legacy_layout(self, legacy_path: Path):
        locations, next_id = read_document(legacy_path)
        assert [loc.name for loc in locations] == ["Paris", "Oslo"]
        assert next_id == 1

        paris = locations[0]
        assert paris.is_current_location is True
        assert paris.id is None
        assert paris.last_updated == 0
        assert paris.forecast.current.temperature == 11.4
        assert paris.forecast.current.weather_code == 3
        assert paris.forecast.hourly.humidity == [81, 83, 84]
        assert paris.forecast.daily.wind_speed_max == [21.6, 18.4]
        assert locations[1].is_current_location is False

    def test_bad_entry_skipped(self, tmp_path: Path):
        path = tmp_path / "locations.json"
        good = make_location("Lima", location_id=3)
        store = JsonLocationStore(path)
        store.insert(good)
        doc = json.loads(path.read_text())
        doc["locations"].append({"city": {"name": "Broken"}})
        path.write_text(json.dumps(doc))

        locations, next_id = read_document(path)
        assert [loc.name for loc in locations] == ["Lima"]
        assert next_id == 2

    @pytest.mark.parametrize("bad_next_id", ["two", [1], {"n": 1}, True])
    def test_malformed_next_id_falls_back_to_ids(self, tmp_path: Path, bad_next_id):
        path = tmp_path / "locations.json"
        store = JsonLocationStore(path)
        store.insert(make_location("Tokyo"))
        store.insert(make_location("Lima", -12.0432, -77.0282))
        doc = json.loads(path.read_text())
        doc["next_id"] = bad_next_id
        path.write_text(json.dumps(doc))

        locations, next_id = read_document(path)
        assert [loc.id for loc in locations] == [1, 2]
        assert next_id == 3
        assert store.insert(make_location("Paris", 48.8534, 2.3488)) == 3

    def test_non_boolean_flag_skips_entry(self, tmp_path: Path):
        path = tmp_path / "locations.json"
        store = JsonLocationStore(path)
        store.insert(make_location("Tokyo"))
        store.insert(make_location("Lima", -12.0432, -77.0282))
        doc = json.loads(path.read_text())
        doc["locations"][1]["is_current_location"] = "false"
        path.write_text(json.dumps(doc))

        locations, _ = read_document(path)
        assert [loc.name for loc in locations] == ["Tokyo"]
        assert locations[0].is_current_location is False


class TestJsonLocationStore:
    def test_insert_assigns_ids(self, tmp_path: Path):
        store = JsonLocationStore(tmp_path / "locations.json")
        first = store.insert(make_location("Tokyo"))
        second = store.insert(make_location("Paris", 48.8534, 2.3488))
        assert (first, second) == (1, 2)
        assert [loc.id for loc in store.list_all()] == [1, 2]

    def test_document_layout(self, tmp_path: Path):
        path = tmp_path / "locations.json"
        JsonLocationStore(path).insert(make_location(last_updated=42))
        doc = json.loads(path.read_text())
        assert doc["version"] == DOCUMENT_VERSION
        assert doc["next_id"] == 2
        entry = doc["locations"][0]
        assert entry["city"]["name"] == "Tokyo"
        assert entry["last_updated"] == 42
        assert len(entry["forecast"]["hourly"]["time"]) == 24

    def test_round_trip(self, tmp_path: Path):
        store = JsonLocationStore(tmp_path / "locations.json")
        loc = make_location("Reykjavik", 64.1355, -21.8954, -3.3, True, 1_760_000_000_000)
        new_id = store.insert(loc)
        assert store.list_all() == [loc.with_id(new_id)]

    def test_update(self, tmp_path: Path):
        store = JsonLocationStore(tmp_path / "locations.json")
        new_id = store.insert(make_location())
        store.update(make_location(temperature=30.0, location_id=new_id, last_updated=7))
        [loaded] = store.list_all()
        assert loaded.forecast.current.temperature == 30.0
        assert loaded.last_updated == 7

    def test_update_unknown_id(self, tmp_path: Path):
        store = JsonLocationStore(tmp_path / "locations.json")
        store.insert(make_location())
        with pytest.raises(PersistenceError, match="id=99"):
            store.update(make_location(location_id=99))

    def test_update_without_id(self, tmp_path: Path):
        with pytest.raises(PersistenceError):
            JsonLocationStore(tmp_path / "locations.json").update(make_location())

    def test_deleted_ids_not_reused(self, tmp_path: Path):
        store = JsonLocationStore(tmp_path / "locations.json")
        store.insert(make_location("A"))
        second = store.insert(make_location("B"))
        store.delete_by_id(second)
        third = store.insert(make_location("C"))
        assert third == 3
        assert [loc.name for loc in store.list_all()] == ["A", "C"]

    def test_delete_unknown_id_is_quiet(self, tmp_path: Path):
        store = JsonLocationStore(tmp_path / "locations.json")
        store.insert(make_location())
        store.delete_by_id(5)
        assert len(store.list_all()) == 1

    def test_legacy_entries_get_ids(self, legacy_path: Path):
        store = JsonLocationStore(legacy_path)
        assert [loc.id for loc in store.list_all()] == [1, 2]
        doc = json.loads(legacy_path.read_text())
        assert doc["version"] == DOCUMENT_VERSION
        assert doc["next_id"] == 3
        assert store.insert(make_location()) == 3

    def test_no_temp_files_left(self, tmp_path: Path):
        store = JsonLocationStore(tmp_path / "locations.json")
        store.insert(make_location())
        store.insert(make_location("Paris"))
        assert [p.name for p in tmp_path.iterdir()] == ["locations.json"]
