import threading
from datetime import timedelta

from sensorhub.generator import SensorConfig, SensorGenerator, SensorSender
from sensorhub.pump import generate_and_send


class RecordingSender(SensorSender):
    def __init__(self, stop_event, limit, fail_first=0):
        self.readings = []
        self.attempts = 0
        self.stop_event = stop_event
        self.limit = limit
        self.fail_first = fail_first
        self.closed = False

    def send_sensor_data(self, reading):
        self.attempts += 1
        if self.attempts >= self.limit:
            self.stop_event.set()
        if self.attempts <= self.fail_first:
            raise ConnectionError("unreachable")
        self.readings.append(reading)

    def close(self):
        self.closed = True


def make_generator(rate_ms=1):
    return SensorGenerator(
        SensorConfig(
            sensor_type="humidity",
            min_value=10.0,
            max_value=20.0,
            generation_rate=timedelta(milliseconds=rate_ms),
        )
    )


def test_sends_until_stopped():
    stop = threading.Event()
    sender = RecordingSender(stop, limit=5)
    generate_and_send(make_generator(), sender, stop)
    assert sender.attempts == 5
    assert len(sender.readings) == 5
    assert all(r.sensor_type == "humidity" for r in sender.readings)
    assert all(10.0 <= r.sensor_value <= 20.0 for r in sender.readings)


def test_failed_sends_do_not_stop_loop():
    stop = threading.Event()
    sender = RecordingSender(stop, limit=4, fail_first=2)
    generate_and_send(make_generator(), sender, stop)
    assert sender.attempts == 4
    assert len(sender.readings) == 2


def test_already_stopped_sends_nothing():
    stop = threading.Event()
    stop.set()
    sender = RecordingSender(stop, limit=1)
    generate_and_send(make_generator(), sender, stop)
    assert sender.attempts == 0
    assert sender.readings == []


def test_stop_from_other_thread_interrupts_wait():
    stop = threading.Event()
    sender = RecordingSender(stop, limit=10**9)
    worker = threading.Thread(
        target=generate_and_send, args=(make_generator(rate_ms=60_000), sender, stop)
    )
    worker.start()
    stop.set()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert sender.attempts <= 1