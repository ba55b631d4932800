"""MySQL-backed storage of sensor records over a DB-API connection."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sensorhub.records import (
    SensorRecord,
    SensorRecordFilter,
    SensorRecordRepository,
    SensorRecordUpdate,
)

_SELECT_COLUMNS = "SELECT sd.id, sd.sensor_value, st.name, sd.id1, sd.id2, sd.created_at"
_FROM_JOIN = "FROM sensor_data sd JOIN sensor_types st ON sd.sensor_type_id = st.id"


def build_where_clause(flt: SensorRecordFilter) -> tuple[str, list[Any]]:
    """Build a WHERE clause and its parameters from the set fields of ``flt``."""
    conditions: list[str] = []
    args: list[Any] = []
    for condition, value in (
        ("sd.id1 = %s", flt.id1),
        ("sd.id2 = %s", flt.id2),
        ("st.name = %s", flt.sensor_type),
        ("sd.created_at >= %s", flt.start_time),
        ("sd.created_at <= %s", flt.end_time),
    ):
        if value is not None:
            conditions.append(condition)
            args.append(value)
    if not conditions:
        return "", args
    return "WHERE " + " AND ".join(conditions), args


def _row_to_record(row) -> SensorRecord:
    record_id, value, sensor_type, id1, id2, created_at = row
    return SensorRecord(
        id=record_id,
        sensor_value=value,
        sensor_type=sensor_type,
        id1=id1,
        id2=id2,
        created_at=created_at,
    )


class MySQLSensorRepository(SensorRecordRepository):
    """Sensor record repository using ``sensor_data`` and ``sensor_types`` tables."""

    def __init__(self, connection) -> None:
        self._connection = connection

    @contextmanager
    def _cursor(self) -> Iterator[Any]:
        cursor = self._connection.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def _write(self, query: str, params) -> int:
        try:
            with self._cursor() as cursor:
                cursor.execute(query, params)
                affected = cursor.rowcount
        except Exception:
            self._connection.rollback()
            raise
        self._connection.commit()
        return affected

    def store(self, record: SensorRecord) -> None:
        """Insert a record, resolving its sensor type by name."""
        query = (
            "INSERT INTO sensor_data (sensor_value, sensor_type_id, id1, id2, created_at) "
            "SELECT %s, id, %s, %s, %s FROM sensor_types WHERE name = %s"
        )
        self._write(
            query,
            (record.sensor_value, record.id1, record.id2, record.created_at, record.sensor_type),
        )

    def get_by_id(self, record_id: int) -> Optional[SensorRecord]:
        """Return the record with this id, or ``None``."""
        query = f"{_SELECT_COLUMNS} {_FROM_JOIN} WHERE sd.id = %s"
        with self._cursor() as cursor:
            cursor.execute(query, (record_id,))
            row = cursor.fetchone()
        return None if row is None else _row_to_record(row)

    def get_by_filter(self, flt: SensorRecordFilter) -> tuple[list[SensorRecord], int]:
        """Return one page of matching records, newest first, and the total count."""
        where, args = build_where_clause(flt)
        count_query = f"SELECT COUNT(*) {_FROM_JOIN} {where}".rstrip()
        query = (
            f"{_SELECT_COLUMNS} {_FROM_JOIN} {where} "
            "ORDER BY sd.created_at DESC LIMIT %s OFFSET %s"
        )
        offset = (flt.page - 1) * flt.page_size
        with self._cursor() as cursor:
            cursor.execute(count_query, tuple(args))
            (total,) = cursor.fetchone()
            cursor.execute(query, (*args, flt.page_size, offset))
            rows = cursor.fetchall()
        return [_row_to_record(row) for row in rows], total

    def update(self, record_id: int, update: SensorRecordUpdate) -> None:
        """Change the stored value; does nothing when no field is set."""
        if update.sensor_value is None:
            return
        self._write(
            "UPDATE sensor_data SET sensor_value = %s WHERE id = %s",
            (update.sensor_value, record_id),
        )

    def delete(self, record_id: int) -> None:
        """Remove the record with this id."""
        self._write("DELETE FROM sensor_data WHERE id = %s", (record_id,))

    def delete_by_filter(self, flt: SensorRecordFilter) -> int:
        """Remove all matching records and return how many rows went."""
        where, args = build_where_clause(flt)
        query = f"DELETE sd FROM sensor_data sd JOIN sensor_types st ON sd.sensor_type_id = st.id {where}"
        return self._write(query.rstrip(), tuple(args))