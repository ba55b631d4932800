import time

import pytest

from sensorhub.generator import SensorReading
from sensorhub.ingest import IngestResponse, SensorIngestor
from sensorhub.records import SensorDataService, SensorRecordRepository


class MemoryRepository(SensorRecordRepository):
    def __init__(self, reject_types=()):
        self.records = []
        self.reject_types = set(reject_types)

    def store(self, record):
        if record.sensor_type in self.reject_types:
            raise RuntimeError("unknown sensor type")
        self.records.append(record)

    def get_by_id(self, record_id):
        return None

    def get_by_filter(self, flt):
        return list(self.records), len(self.records)

    def update(self, record_id, update):
        pass

    def delete(self, record_id):
        pass

    def delete_by_filter(self, flt):
        return 0


def reading(sensor_type="temperature", value=42.5, id1="A", id2=7, timestamp=1):
    return SensorReading(
        sensor_value=value, sensor_type=sensor_type, id1=id1, id2=id2, timestamp=timestamp
    )


def make_ingestor(reject_types=()):
    repo = MemoryRepository(reject_types)
    return SensorIngestor(SensorDataService(repo)), repo


def test_receive_stores_record_and_reports_success():
    ingestor, repo = make_ingestor()
    before = time.time_ns() // 1_000_000
    response = ingestor.receive(reading())
    after = time.time_ns() // 1_000_000
    assert response == IngestResponse(success=True, message="Sensor data stored successfully")
    assert len(repo.records) == 1
    record = repo.records[0]
    assert (record.sensor_value, record.sensor_type, record.id1, record.id2) == (
        42.5,
        "temperature",
        "A",
        7,
    )
    assert before <= record.created_at <= after


def test_receive_ignores_sender_timestamp():
    ingestor, repo = make_ingestor()
    ingestor.receive(reading(timestamp=5))
    assert repo.records[0].created_at > 5


def test_receive_propagates_store_error():
    ingestor, repo = make_ingestor(reject_types={"pressure"})
    with pytest.raises(RuntimeError, match="unknown sensor type"):
        ingestor.receive(reading(sensor_type="pressure"))
    assert repo.records == []


def test_receive_stream_stores_all():
    ingestor, repo = make_ingestor()
    items = [reading(id2=n) for n in range(4)]
    assert ingestor.receive_stream(iter(items)) == 4
    assert [r.id2 for r in repo.records] == [0, 1, 2, 3]


def test_receive_stream_skips_failures():
    ingestor, repo = make_ingestor(reject_types={"pressure"})
    items = [reading(id2=1), reading(sensor_type="pressure", id2=2), reading(id2=3)]
    assert ingestor.receive_stream(items) == 2
    assert [r.id2 for r in repo.records] == [1, 3]


def test_receive_stream_empty():
    ingestor, repo = make_ingestor()
    assert ingestor.receive_stream([]) == 0
    assert repo.records == []