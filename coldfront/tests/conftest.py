"""Shared test fixtures."""

import sqlite3
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import yaml

from coldfront.config.schema import AppConfig
from coldfront.models.forecast import ForecastSample
from coldfront.storage.database import connect, run_migrations

# Local midnight, so samples land on calendar days of the host time zone
DAY_ONE = datetime(2026, 10, 12)


class MemoryStateStore:
    """Dict-backed stand-in for the persisted key-value store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str]] = []

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes.append((key, value))


def _day_samples(
    day_index: int, temps: list[tuple[float, float]], start_slot: int = 0
) -> list[ForecastSample]:
    samples = []
    for i, (tmin, tmax) in enumerate(temps):
        local = DAY_ONE + timedelta(days=day_index, hours=3 * (start_slot + i))
        samples.append(
            ForecastSample(dt=int(local.timestamp()), temp_min=tmin, temp_max=tmax)
        )
    return samples


@pytest.fixture
def memory_store() -> type[MemoryStateStore]:
    return MemoryStateStore


@pytest.fixture
def day_samples() -> Callable[..., list[ForecastSample]]:
    """Build samples for one local calendar day, 3 hours apart."""
    return _day_samples


@pytest.fixture
def full_days() -> Callable[[list[float]], list[ForecastSample]]:
    """Build consecutive full days (8 samples) whose lowest temp_min is each given value."""

    def build(daily_mins: list[float], spread: float = 15.0) -> list[ForecastSample]:
        samples: list[ForecastSample] = []
        for d, low in enumerate(daily_mins):
            temps = [(low + (i % 4), low + spread + (i % 3)) for i in range(8)]
            samples.extend(_day_samples(d, temps))
        return samples

    return build


@pytest.fixture
def forecast_payload() -> Callable[[list[ForecastSample]], dict]:
    """Wrap samples in an OpenWeather /forecast response body."""

    def build(samples: list[ForecastSample], city: str = "Testville") -> dict:
        return {
            "cod": "200",
            "message": 0,
            "cnt": len(samples),
            "list": [
                {
                    "dt": s.dt,
                    "main": {
                        "temp": (s.temp_min + s.temp_max) / 2,
                        "temp_min": s.temp_min,
                        "temp_max": s.temp_max,
                        "humidity": 60,
                    },
                    "wind": {"speed": 5.1, "deg": 200},
                    "dt_txt": "",
                }
                for s in samples
            ],
            "city": {"id": 1, "name": city, "timezone": 0},
        }

    return build


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "location": {"name": "Boulder", "lat": 40.01, "lon": -105.27},
        "notify": {"mode": "dry-run"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
