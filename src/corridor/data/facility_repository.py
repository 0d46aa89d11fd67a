"""Facility catalogue loader with a built-in demo catalogue and JSON/Excel sources."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from openpyxl import load_workbook

from ..config import settings
from ..models.domain import Coordinate, Facility, FacilityType

logger = logging.getLogger(__name__)

DEMO_FACILITIES: tuple[Facility, ...] = (
    Facility(
        id="dc_kolkata_001",
        name="Kolkata Central Distribution Hub",
        type=FacilityType.DISTRIBUTION_CENTER,
        location=Coordinate(lat=22.5726, lng=88.3639),
        address="Salt Lake Sector V, Kolkata, West Bengal 700091",
        detour_time=15,
        services=frozenset({"loading_dock", "overnight_storage", "cross_docking", "inventory_management"}),
    ),
    Facility(
        id="fuel_nh2_001",
        name="Highway Fuel Station NH-2",
        type=FacilityType.FUEL_STATION,
        location=Coordinate(lat=22.8046, lng=86.2029),
        address="NH-2, Kharagpur, West Bengal 721301",
        detour_time=8,
        services=frozenset({"diesel_refuel", "driver_rest", "vehicle_maintenance", "24_hour_service"}),
    ),
    Facility(
        id="warehouse_durgapur_001",
        name="Durgapur Industrial Warehouse",
        type=FacilityType.WAREHOUSE,
        location=Coordinate(lat=23.5204, lng=87.3119),
        address="City Centre, Durgapur, West Bengal 713216",
        detour_time=12,
        services=frozenset({"bulk_storage", "packaging", "quality_control", "cold_storage"}),
    ),
)

_REQUIRED_COLUMNS = {"ID", "Name", "Type", "Latitude", "Longitude"}


def _coerce_type(value: Any) -> FacilityType:
    if isinstance(value, FacilityType):
        return value
    normalized = str(value or "").strip().lower().replace(" ", "_")
    try:
        return FacilityType(normalized)
    except ValueError as exc:
        raise ValueError(f"Unknown facility type '{value}'") from exc


def _coerce_services(value: Any) -> frozenset[str]:
    if value is None or value == "":
        return frozenset()
    if isinstance(value, str):
        return frozenset(item.strip() for item in value.split(",") if item.strip())
    return frozenset(str(item).strip() for item in value if str(item).strip())


def _build_facility(
    *,
    facility_id: str,
    name: Any,
    facility_type: Any,
    lat: Any,
    lng: Any,
    address: Any = None,
    detour_time: Any = None,
    services: Any = None,
) -> Facility:
    try:
        detour = float(detour_time) if detour_time not in (None, "") else 0.0
        location = Coordinate(lat=float(lat), lng=float(lng))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Facility '{facility_id}' has a non-numeric coordinate or detour time") from exc
    if detour < 0:
        raise ValueError(f"Facility '{facility_id}' has a negative detour time: {detour}")
    return Facility(
        id=facility_id,
        name=str(name or "").strip(),
        type=_coerce_type(facility_type),
        location=location,
        address=str(address or "").strip(),
        detour_time=detour,
        services=_coerce_services(services),
    )


def _ensure_unique(facilities: Iterable[Facility], source: Path) -> tuple[Facility, ...]:
    seen: set[str] = set()
    result: list[Facility] = []
    for facility in facilities:
        if facility.id in seen:
            raise ValueError(f"Duplicate facility id '{facility.id}' in {source}")
        seen.add(facility.id)
        result.append(facility)
    return tuple(result)


def _load_facilities_from_json(path: Path) -> tuple[Facility, ...]:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if isinstance(payload, dict):
        payload = payload.get("facilities", [])
    if not isinstance(payload, list):
        raise ValueError(f"Facility file '{path}' must contain a list of facilities.")

    facilities: list[Facility] = []
    for index, row in enumerate(payload):
        if not isinstance(row, dict):
            raise ValueError(f"Facility entry #{index} in '{path}' is not an object.")
        facility_id = str(row.get("id") or "").strip()
        if not facility_id:
            logger.warning(f"Skipping facility entry #{index} without an id in {path}")
            continue
        location = row.get("location") or {}
        lat = row.get("lat", location.get("lat"))
        lng = row.get("lng", location.get("lng"))
        missing = [key for key, value in (("name", row.get("name")), ("type", row.get("type")), ("lat", lat), ("lng", lng)) if value is None]
        if missing:
            raise ValueError(f"Facility '{facility_id}' is missing fields: {', '.join(missing)}")
        facilities.append(
            _build_facility(
                facility_id=facility_id,
                name=row["name"],
                facility_type=row["type"],
                lat=lat,
                lng=lng,
                address=row.get("address"),
                detour_time=row.get("detour_time", row.get("detourTime")),
                services=row.get("services"),
            )
        )
    return _ensure_unique(facilities, path)


def _load_facilities_from_workbook(path: Path) -> tuple[Facility, ...]:
    wb = load_workbook(path, data_only=True, read_only=True)
    try:
        sheet = wb.active
        rows = sheet.iter_rows(min_row=1, values_only=True)
        header = next(rows, None)
        if header is None:
            raise ValueError(f"Facility workbook '{path}' is empty.")

        header_map = {str(name).strip(): idx for idx, name in enumerate(header) if name is not None}
        missing_columns = _REQUIRED_COLUMNS - set(header_map)
        if missing_columns:
            raise ValueError(f"Facility workbook missing columns: {', '.join(sorted(missing_columns))}")

        def cell(row: tuple, column: str) -> Any:
            idx = header_map.get(column)
            return row[idx] if idx is not None and idx < len(row) else None

        facilities: list[Facility] = []
        for row in rows:
            id_value = cell(row, "ID")
            if not id_value:
                continue
            missing = [column for column in ("Name", "Type", "Latitude", "Longitude") if cell(row, column) in (None, "")]
            if missing:
                raise ValueError(f"Facility '{str(id_value).strip()}' is missing values for: {', '.join(missing)}")
            facilities.append(
                _build_facility(
                    facility_id=str(id_value).strip(),
                    name=cell(row, "Name"),
                    facility_type=cell(row, "Type"),
                    lat=cell(row, "Latitude"),
                    lng=cell(row, "Longitude"),
                    address=cell(row, "Address"),
                    detour_time=cell(row, "DetourTime"),
                    services=cell(row, "Services"),
                )
            )
    finally:
        wb.close()
    return _ensure_unique(facilities, path)


def load_facilities(source: Optional[Path] = None) -> tuple[Facility, ...]:
    """Load the facility catalogue from ``source``, the configured file, or the demo set.

    The path is resolved on every call, so a changed ``facility_file`` setting
    takes effect on the next call; parsed files are cached per path.
    """

    path = source or settings.facility_file
    if path is None:
        return DEMO_FACILITIES
    return _load_facilities_from_path(Path(path))


def clear_facility_cache() -> None:
    _load_facilities_from_path.cache_clear()


@functools.lru_cache(maxsize=4)
def _load_facilities_from_path(path: Path) -> tuple[Facility, ...]:
    if not path.exists():
        raise FileNotFoundError(f"Facility file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        facilities = _load_facilities_from_json(path)
    elif suffix in {".xlsx", ".xlsm"}:
        facilities = _load_facilities_from_workbook(path)
    else:
        raise ValueError(f"Unsupported facility file format '{suffix}' ({path})")

    logger.info(f"Loaded {len(facilities)} facilities from {path}")
    return facilities


def get_all_facilities(catalogue: Optional[Iterable[Facility]] = None) -> tuple[Facility, ...]:
    return tuple(catalogue) if catalogue is not None else load_facilities()


def get_facilities_by_type(
    facility_type: FacilityType | str,
    catalogue: Optional[Iterable[Facility]] = None,
) -> list[Facility]:
    wanted = _coerce_type(facility_type)
    return [facility for facility in get_all_facilities(catalogue) if facility.type == wanted]


def get_facility_by_id(facility_id: str, catalogue: Optional[Iterable[Facility]] = None) -> Facility | None:
    for facility in get_all_facilities(catalogue):
        if facility.id == facility_id:
            return facility
    return None
