"""Random sensor reading generation and collector configuration."""

from __future__ import annotations

import random
import string
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta


@dataclass
class SensorReading:
    """A single sensor reading as produced by the collector."""

    sensor_value: float
    sensor_type: str
    id1: str
    id2: int
    timestamp: int


@dataclass
class SensorConfig:
    """Settings that drive sensor data generation."""

    sensor_type: str = "temperature"
    min_value: float = 0.0
    max_value: float = 100.0
    generation_rate: timedelta = timedelta(milliseconds=1000)


@dataclass
class AppConfig:
    """Collector service configuration."""

    server_port: str = "8090"
    grpc_server_addr: str = "127.0.0.1:50051"
    sensor_config: SensorConfig = field(default_factory=SensorConfig)


class SensorSender(ABC):
    """Something that delivers sensor readings to the storage service."""

    @abstractmethod
    def send_sensor_data(self, reading: SensorReading) -> None:
        """Deliver one reading; raise on failure."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection."""


def load_config() -> AppConfig:
    """Return the collector configuration with its default values."""
    return AppConfig()


class SensorGenerator:
    """Produces random readings within a configured value range."""

    def __init__(self, config: SensorConfig) -> None:
        self._sensor_type = config.sensor_type
        self._min_value = config.min_value
        self._max_value = config.max_value
        self._generation_rate = config.generation_rate
        self._lock = threading.Lock()

    def generate(self) -> SensorReading:
        """Create a new reading with a random value and identifiers."""
        value = self._min_value + random.random() * (self._max_value - self._min_value)
        id1 = random.choice(string.ascii_uppercase)
        id2 = random.randrange(100)
        return SensorReading(
            sensor_value=value,
            sensor_type=self._sensor_type,
            id1=id1,
            id2=id2,
            timestamp=time.time_ns() // 1_000_000,
        )

    @property
    def generation_rate(self) -> timedelta:
        """Interval between two generated readings."""
        with self._lock:
            return self._generation_rate

    @generation_rate.setter
    def generation_rate(self, rate: timedelta) -> None:
        with self._lock:
            self._generation_rate = rate

    @property
    def sensor_type(self) -> str:
        """Type of sensor this generator simulates."""
        return self._sensor_type