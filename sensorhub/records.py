"""Stored sensor records, query filters and the service that manages them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass
class SensorRecord:
    """A sensor reading as kept by the storage service."""

    sensor_value: float
    sensor_type: str
    id1: str
    id2: int
    created_at: int = 0
    id: int = 0


@dataclass
class SensorRecordFilter:
    """Criteria for selecting sensor records; ``None`` means unrestricted."""

    id1: Optional[str] = None
    id2: Optional[int] = None
    sensor_type: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    page: int = 0
    page_size: int = 0


@dataclass
class SensorRecordUpdate:
    """Fields of a sensor record that may be changed."""

    sensor_value: Optional[float] = None


@dataclass
class User:
    """A user of the storage service."""

    id: int
    username: str
    password_hash: str = field(repr=False)
    email: str = ""
    roles: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class APIKey:
    """An API key issued to a user."""

    id: int
    key: str
    user_id: int
    expires_at: datetime
    created_at: datetime


class SensorRecordRepository(ABC):
    """Storage for sensor records."""

    @abstractmethod
    def store(self, record: SensorRecord) -> None:
        """Persist a new record."""

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[SensorRecord]:
        """Return the record with this id, or ``None`` if there is none."""

    @abstractmethod
    def get_by_filter(self, flt: SensorRecordFilter) -> tuple[list[SensorRecord], int]:
        """Return one page of matching records and the total match count."""

    @abstractmethod
    def update(self, record_id: int, update: SensorRecordUpdate) -> None:
        """Apply an update to the record with this id."""

    @abstractmethod
    def delete(self, record_id: int) -> None:
        """Remove the record with this id."""

    @abstractmethod
    def delete_by_filter(self, flt: SensorRecordFilter) -> int:
        """Remove all matching records and return how many were removed."""


class SensorDataService:
    """Business rules around a sensor record repository."""

    def __init__(self, repo: SensorRecordRepository) -> None:
        self._repo = repo

    def store(self, record: SensorRecord) -> None:
        """Persist a new record."""
        self._repo.store(record)

    def get_by_id(self, record_id: int) -> Optional[SensorRecord]:
        """Return the record with this id, or ``None``."""
        return self._repo.get_by_id(record_id)

    def get_by_filter(self, flt: SensorRecordFilter) -> tuple[list[SensorRecord], int]:
        """Normalise paging on ``flt`` in place, then query the repository."""
        if flt.page <= 0:
            flt.page = DEFAULT_PAGE
        if flt.page_size <= 0:
            flt.page_size = DEFAULT_PAGE_SIZE
        if flt.page_size > MAX_PAGE_SIZE:
            flt.page_size = MAX_PAGE_SIZE
        return self._repo.get_by_filter(flt)

    def update(self, record_id: int, update: SensorRecordUpdate) -> None:
        """Apply an update to a record."""
        self._repo.update(record_id, update)

    def delete(self, record_id: int) -> None:
        """Remove a record."""
        self._repo.delete(record_id)

    def delete_by_filter(self, flt: SensorRecordFilter) -> int:
        """Remove matching records and return the count."""
        return self._repo.delete_by_filter(flt)