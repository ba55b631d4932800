"""Continuous generation and delivery of sensor readings."""

from __future__ import annotations

import logging
import threading

from sensorhub.generator import SensorGenerator, SensorSender

logger = logging.getLogger(__name__)


def generate_and_send(
    generator: SensorGenerator,
    sender: SensorSender,
    stop_event: threading.Event,
) -> None:
    """Generate and send readings until ``stop_event`` is set.

    A failed send is logged and does not stop the loop. Between two
    readings the loop waits for the generator's current generation rate,
    waking early when ``stop_event`` is set.
    """
    while not stop_event.is_set():
        reading = generator.generate()
        try:
            sender.send_sensor_data(reading)
        except Exception as exc:
            logger.error("Error sending sensor data: %s", exc)
        else:
            logger.info("Sent sensor data: %r", reading)
        stop_event.wait(generator.generation_rate.total_seconds())