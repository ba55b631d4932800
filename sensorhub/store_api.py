"""HTTP interface for querying and managing stored sensor records."""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request

from sensorhub.records import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SensorDataService,
    SensorRecord,
    SensorRecordFilter,
    SensorRecordUpdate,
)

_INT_RE = re.compile(r"[+-]?\d+")
_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class SensorDataResponse:
    """A sensor record as returned by the API."""

    id: int
    sensor_value: float
    sensor_type: str
    id1: str
    id2: int
    created_at: str = ""

    @classmethod
    def from_record(cls, record: SensorRecord) -> "SensorDataResponse":
        return cls(
            id=record.id,
            sensor_value=record.sensor_value,
            sensor_type=record.sensor_type,
            id1=record.id1,
            id2=record.id2,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PaginatedResponse:
    """One page of sensor records with paging information."""

    total: int
    page: int
    page_size: int
    total_pages: int
    data: list[SensorDataResponse] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [item.to_dict() for item in self.data] or None,
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
        }


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f'invalid integer "{text}"')
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f'integer out of range "{text}"')
    return value


def _parse_time(text: str) -> datetime:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        raise ValueError(f'invalid RFC 3339 time "{text}"')
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micros = int((fraction or "")[:6].ljust(6, "0"))
    try:
        if zone == "Z":
            tz = timezone.utc
        else:
            sign = -1 if zone[0] == "-" else 1
            offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
            tz = timezone(sign * offset)
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), micros, tzinfo=tz,
        )
    except ValueError as exc:
        raise ValueError(f'invalid RFC 3339 time "{text}": {exc}') from exc


def _lenient_int(text: str) -> int:
    try:
        return _parse_int(text)
    except ValueError:
        return 0


def parse_filter(params: Mapping[str, str]) -> SensorRecordFilter:
    """Build a filter from query parameters; raise ``ValueError`` on bad values."""
    flt = SensorRecordFilter()

    if id1 := params.get("id1", ""):
        flt.id1 = id1
    if id2 := params.get("id2", ""):
        flt.id2 = _parse_int(id2)
    if sensor_type := params.get("sensor_type", ""):
        flt.sensor_type = sensor_type
    if start_time := params.get("start_time", ""):
        flt.start_time = _parse_time(start_time)
    if end_time := params.get("end_time", ""):
        flt.end_time = _parse_time(end_time)

    page = _lenient_int(params.get("page", ""))
    flt.page = page if page > 0 else DEFAULT_PAGE

    page_size = _lenient_int(params.get("page_size", ""))
    if page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE
    flt.page_size = min(page_size, MAX_PAGE_SIZE)
    return flt


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _optional_time(payload: Mapping[str, Any], key: str) -> Optional[datetime]:
    text = _optional_str(payload, key)
    return None if text is None else _parse_time(text)


def parse_filter_body(payload: Any) -> SensorRecordFilter:
    """Build a filter from a decoded JSON body; raise ``ValueError`` on bad values."""
    if payload is None:
        return SensorRecordFilter()
    if not isinstance(payload, dict):
        raise ValueError("filter must be a JSON object")
    id2 = payload.get("id2")
    if id2 is not None and (isinstance(id2, bool) or not isinstance(id2, int)):
        raise ValueError("id2 must be an integer")
    return SensorRecordFilter(
        id1=_optional_str(payload, "id1"),
        id2=id2,
        sensor_type=_optional_str(payload, "sensor_type"),
        start_time=_optional_time(payload, "start_time"),
        end_time=_optional_time(payload, "end_time"),
    )


def _read_json_body() -> Any:
    body = request.get_data()
    if not body:
        return None
    if not request.is_json:
        raise ValueError("unsupported media type")
    return json.loads(body)


def _read_sensor_value() -> float:
    payload = _read_json_body()
    if payload is None:
        return 0.0
    if not isinstance(payload, dict):
        raise ValueError("request body must be a JSON object")
    value = payload.get("sensor_value")
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("sensor_value must be a number")
    return float(value)


def _error(message: str, status: int):
    return jsonify(error=message), status


def create_app(service: SensorDataService) -> Flask:
    """Build the storage service's Flask application around ``service``."""
    app = Flask(__name__)

    @app.get("/health")
    def health_check():
        return jsonify(status="ok")

    @app.get("/api/sensor-data/<record_id>")
    def get_sensor_data_by_id(record_id: str):
        try:
            rid = _parse_int(record_id)
        except ValueError:
            return _error("Invalid ID format", 400)
        try:
            record = service.get_by_id(rid)
        except Exception:
            return _error("Failed to retrieve sensor data", 500)
        if record is None:
            return _error("Sensor data not found", 404)
        return jsonify(SensorDataResponse.from_record(record).to_dict())

    @app.get("/api/sensor-data")
    def get_sensor_data_by_filter():
        try:
            flt = parse_filter(request.args)
        except ValueError as exc:
            return _error(str(exc), 400)
        try:
            records, total = service.get_by_filter(flt)
        except Exception:
            return _error("Failed to retrieve sensor data", 500)
        page = PaginatedResponse(
            data=[SensorDataResponse.from_record(record) for record in records],
            total=total,
            page=flt.page,
            page_size=flt.page_size,
            total_pages=(total + flt.page_size - 1) // flt.page_size,
        )
        return jsonify(page.to_dict())

    @app.put("/api/sensor-data/<record_id>")
    def update_sensor_data(record_id: str):
        try:
            rid = _parse_int(record_id)
        except ValueError:
            return _error("Invalid ID format", 400)
        try:
            record = service.get_by_id(rid)
        except Exception:
            return _error("Failed to retrieve sensor data", 500)
        if record is None:
            return _error("Sensor data not found", 404)
        try:
            value = _read_sensor_value()
        except ValueError:
            return _error("Invalid request format", 400)
        try:
            service.update(rid, SensorRecordUpdate(sensor_value=value))
        except Exception:
            return _error("Failed to update sensor data", 500)
        return jsonify(success=True, message="Sensor data updated successfully")

    @app.delete("/api/sensor-data/<record_id>")
    def delete_sensor_data(record_id: str):
        try:
            rid = _parse_int(record_id)
        except ValueError:
            return _error("Invalid ID format", 400)
        try:
            service.delete(rid)
        except Exception:
            return _error("Failed to delete sensor data", 500)
        return jsonify(success=True, message="Sensor data deleted successfully")

    @app.delete("/api/sensor-data")
    def delete_sensor_data_by_filter():
        try:
            flt = parse_filter_body(_read_json_body())
        except ValueError:
            return _error("Invalid request format", 400)
        try:
            count = service.delete_by_filter(flt)
        except Exception:
            return _error("Failed to delete sensor data", 500)
        return jsonify(
            success=True,
            message="Sensor data deleted successfully",
            deleted_rows=count,
        )

    return app