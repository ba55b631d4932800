"""Sensor reading generation, ingestion, MySQL storage and Flask HTTP APIs."""

__version__ = "0.1.0"