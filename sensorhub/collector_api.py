"""HTTP control interface of the sensor data collector."""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any

from flask import Flask, jsonify, request

from sensorhub.generator import SensorGenerator

MIN_INTERVAL_MS = 100


def _read_json_body() -> Any:
    """Return the decoded JSON body, ``None`` for an empty body.

    Raises ``ValueError`` when the body is not JSON.
    """
    body = request.get_data()
    if not body:
        return None
    if not request.is_json:
        raise ValueError("unsupported media type")
    return json.loads(body)


def _read_interval_ms() -> int:
    payload = _read_json_body()
    if payload is None:
        return 0
    if not isinstance(payload, dict):
        raise ValueError("request body must be a JSON object")
    value = payload.get("interval_ms")
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("interval_ms must be an integer")
    return value


def create_app(generator: SensorGenerator) -> Flask:
    """Build the collector's Flask application around ``generator``."""
    app = Flask(__name__)

    @app.get("/health")
    def health_check():
        return jsonify(status="ok", type=generator.sensor_type)

    @app.get("/config")
    def get_config():
        rate_ms = generator.generation_rate // timedelta(milliseconds=1)
        return jsonify(sensor_type=generator.sensor_type, generation_rate_ms=rate_ms)

    @app.post("/config/frequency")
    def set_frequency():
        try:
            interval_ms = _read_interval_ms()
        except ValueError:
            return jsonify(error="Invalid request format"), 400

        if interval_ms < MIN_INTERVAL_MS:
            return jsonify(error="Interval must be at least 100ms"), 400

        generator.generation_rate = timedelta(milliseconds=interval_ms)
        return jsonify(
            success=True,
            message="Frequency updated successfully",
            generation_rate_ms=interval_ms,
        )

    return app