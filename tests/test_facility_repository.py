import json
from pathlib import Path

import pytest
from openpyxl import Workbook

from corridor.data import facility_repository
from corridor.data.facility_repository import (
    DEMO_FACILITIES,
    clear_facility_cache,
    get_all_facilities,
    get_facilities_by_type,
    get_facility_by_id,
    load_facilities,
)
from corridor.models.domain import Coordinate, FacilityType


@pytest.fixture(autouse=True)
def reset_catalogue(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(facility_repository.settings, "facility_file", None)
    clear_facility_cache()
    yield
    clear_facility_cache()


def _write_workbook(path: Path, header: list, rows: list[list]) -> Path:
    wb = Workbook()
    sheet = wb.active
    sheet.append(header)
    for row in rows:
        sheet.append(row)
    wb.save(path)
    return path


def test_demo_catalogue_is_default():
    facilities = load_facilities()

    assert facilities is DEMO_FACILITIES
    assert [facility.id for facility in facilities] == ["dc_kolkata_001", "fuel_nh2_001", "warehouse_durgapur_001"]
    assert facilities[1].location == Coordinate(lat=22.8046, lng=86.2029)
    assert "diesel_refuel" in facilities[1].services


def test_load_json_catalogue(tmp_path: Path):
    path = tmp_path / "facilities.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "hub_1",
                    "name": "Hub One",
                    "type": "distribution_center",
                    "location": {"lat": 12.97, "lng": 77.59},
                    "address": "Bengaluru",
                    "detourTime": 10,
                    "services": ["loading_dock", "cross_docking"],
                },
                {"id": "fuel_1", "name": "Fuel One", "type": "Fuel Station", "lat": 13.0, "lng": 77.6},
                {"name": "No id", "type": "warehouse", "lat": 1, "lng": 1},
            ]
        ),
        encoding="utf-8",
    )

    facilities = load_facilities(path)

    assert [facility.id for facility in facilities] == ["hub_1", "fuel_1"]
    hub, fuel = facilities
    assert hub.type is FacilityType.DISTRIBUTION_CENTER
    assert hub.detour_time == 10
    assert hub.services == frozenset({"loading_dock", "cross_docking"})
    assert fuel.type is FacilityType.FUEL_STATION
    assert fuel.location == Coordinate(lat=13.0, lng=77.6)
    assert fuel.services == frozenset()


def test_configured_file_is_used(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "facilities.json"
    path.write_text(json.dumps({"facilities": [{"id": "w1", "name": "W", "type": "warehouse", "lat": 1, "lng": 2}]}))
    monkeypatch.setattr(facility_repository.settings, "facility_file", path)

    assert [facility.id for facility in load_facilities()] == ["w1"]


def test_load_workbook_catalogue(tmp_path: Path):
    path = _write_workbook(
        tmp_path / "facilities.xlsx",
        ["ID", "Name", "Type", "Latitude", "Longitude", "Address", "DetourTime", "Services"],
        [
            ["wh_1", "Warehouse One", "warehouse", 23.52, 87.31, "Durgapur", 12, "bulk_storage, packaging"],
            [None, "Blank row", "warehouse", 0, 0, None, None, None],
            ["fs_1", "Fuel One", "fuel_station", 22.8, 86.2, None, None, None],
        ],
    )

    facilities = load_facilities(path)

    assert [facility.id for facility in facilities] == ["wh_1", "fs_1"]
    assert facilities[0].services == frozenset({"bulk_storage", "packaging"})
    assert facilities[0].detour_time == 12
    assert facilities[1].detour_time == 0
    assert facilities[1].address == ""


def test_workbook_missing_columns(tmp_path: Path):
    path = _write_workbook(tmp_path / "bad.xlsx", ["ID", "Name", "Latitude"], [["x", "X", 1]])

    with pytest.raises(ValueError, match="Longitude, Type"):
        load_facilities(path)


@pytest.mark.parametrize("latitude,longitude", [(None, 88.0), (22.5, None), ("", 88.0)])
def test_workbook_blank_coordinate_is_rejected(tmp_path: Path, latitude, longitude):
    path = _write_workbook(
        tmp_path / "blank.xlsx",
        ["ID", "Name", "Type", "Latitude", "Longitude"],
        [["x1", "X", "warehouse", latitude, longitude]],
    )

    with pytest.raises(ValueError, match="Facility 'x1' is missing values for"):
        load_facilities(path)


def test_non_numeric_coordinate_is_rejected(tmp_path: Path):
    path = tmp_path / "facilities.json"
    path.write_text(json.dumps([{"id": "a", "name": "A", "type": "warehouse", "lat": "north", "lng": 1}]))

    with pytest.raises(ValueError, match="non-numeric coordinate"):
        load_facilities(path)


def test_changed_setting_is_picked_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    first.write_text(json.dumps([{"id": "f1", "name": "F", "type": "warehouse", "lat": 1, "lng": 2}]))
    second.write_text(json.dumps([{"id": "s1", "name": "S", "type": "fuel_station", "lat": 3, "lng": 4}]))

    assert load_facilities() is DEMO_FACILITIES

    monkeypatch.setattr(facility_repository.settings, "facility_file", first)
    assert [facility.id for facility in load_facilities()] == ["f1"]

    monkeypatch.setattr(facility_repository.settings, "facility_file", second)
    assert [facility.id for facility in load_facilities()] == ["s1"]


def test_unknown_type_is_rejected(tmp_path: Path):
    path = tmp_path / "facilities.json"
    path.write_text(json.dumps([{"id": "a", "name": "A", "type": "airport", "lat": 1, "lng": 1}]))

    with pytest.raises(ValueError, match="Unknown facility type"):
        load_facilities(path)


def test_negative_detour_is_rejected(tmp_path: Path):
    path = tmp_path / "facilities.json"
    path.write_text(json.dumps([{"id": "a", "name": "A", "type": "warehouse", "lat": 1, "lng": 1, "detour_time": -3}]))

    with pytest.raises(ValueError, match="negative detour"):
        load_facilities(path)


def test_duplicate_ids_are_rejected(tmp_path: Path):
    entry = {"id": "a", "name": "A", "type": "warehouse", "lat": 1, "lng": 1}
    path = tmp_path / "facilities.json"
    path.write_text(json.dumps([entry, entry]))

    with pytest.raises(ValueError, match="Duplicate facility id 'a'"):
        load_facilities(path)


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_facilities(tmp_path / "missing.json")


def test_unsupported_format(tmp_path: Path):
    path = tmp_path / "facilities.csv"
    path.write_text("id,name\n")

    with pytest.raises(ValueError, match="Unsupported facility file format"):
        load_facilities(path)


def test_lookup_helpers():
    assert get_all_facilities() == DEMO_FACILITIES
    assert [f.id for f in get_facilities_by_type(FacilityType.FUEL_STATION)] == ["fuel_nh2_001"]
    assert [f.id for f in get_facilities_by_type("warehouse")] == ["warehouse_durgapur_001"]
    assert get_facility_by_id("dc_kolkata_001").name == "Kolkata Central Distribution Hub"
    assert get_facility_by_id("unknown") is None


def test_lookup_helpers_accept_explicit_catalogue():
    subset = DEMO_FACILITIES[:1]

    assert get_all_facilities(subset) == subset
    assert get_facilities_by_type("fuel_station", subset) == []
    assert get_facility_by_id("fuel_nh2_001", subset) is None
