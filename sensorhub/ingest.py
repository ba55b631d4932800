"""Intake of sensor readings arriving from the collector."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable

from sensorhub.generator import SensorReading
from sensorhub.records import SensorDataService, SensorRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResponse:
    """Outcome of storing one incoming reading."""

    success: bool
    message: str


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _to_record(reading: SensorReading) -> SensorRecord:
    return SensorRecord(
        sensor_value=float(reading.sensor_value),
        sensor_type=reading.sensor_type,
        id1=reading.id1,
        id2=int(reading.id2),
        created_at=_now_ms(),
    )


class SensorIngestor:
    """Stores incoming readings through a sensor data service."""

    def __init__(self, service: SensorDataService) -> None:
        self._service = service

    def receive(self, reading: SensorReading) -> IngestResponse:
        """Store one reading, stamped with the time of receipt.

        Errors from the service are logged and propagated.
        """
        logger.info("Received sensor data: %r", reading)
        try:
            self._service.store(_to_record(reading))
        except Exception as exc:
            logger.error("Error storing sensor data: %s", exc)
            raise
        return IngestResponse(success=True, message="Sensor data stored successfully")

    def receive_stream(self, readings: Iterable[SensorReading]) -> int:
        """Store every reading of a stream; return how many were stored.

        A reading that fails to store is logged and skipped.
        """
        stored = 0
        for reading in readings:
            try:
                self._service.store(_to_record(reading))
            except Exception as exc:
                logger.error("Error storing sensor data: %s", exc)
                continue
            stored += 1
        return stored