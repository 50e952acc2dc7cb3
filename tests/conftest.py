"""
Shared fixtures: a throwaway SQLite database, fake external collaborators and
a CompanionApp wired to them with a fixed clock.
"""
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from companion.api import create_app
from companion.core.app import CompanionApp
from companion.core.db import dispose_db, init_db
from companion.core.errors import UpstreamServiceError
from companion.plugins.coach.client import CoachClient
from companion.plugins.prayer.prayer_base import PrayerBackend

TIMINGS = {
    "Fajr": "05:12",
    "Sunrise": "06:28",
    "Dhuhr": "12:30",
    "Asr": "15:45",
    "Sunset": "18:16",
    "Maghrib": "18:18",
    "Isha": "19:45",
    "Imsak": "05:02",
    "Midnight": "00:14",
}

FIXED_NOW = datetime(2025, 3, 10, 19, 0, 0)


class FakePrayerBackend(PrayerBackend):
    """Records calls and answers with canned Aladhan-shaped payloads."""

    def __init__(self, timings: Optional[Dict[str, str]] = None, fail: bool = False):
        super().__init__({})
        self.timings = dict(timings if timings is not None else TIMINGS)
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    def get_timings(self, city=None, country=None, latitude=None, longitude=None, method=None):
        self.calls.append(
            {"kind": "timings", "city": city, "country": country,
             "latitude": latitude, "longitude": longitude, "method": method}
        )
        if self.fail:
            raise UpstreamServiceError("boom", user_message="Failed to fetch prayer times")
        return {"code": 200, "status": "OK", "data": {"timings": dict(self.timings)}}

    def get_calendar(self, city, country, month, year, method=None):
        self.calls.append(
            {"kind": "calendar", "city": city, "country": country,
             "month": month, "year": year, "method": method}
        )
        if self.fail:
            raise UpstreamServiceError("boom", user_message="Failed to fetch prayer times")
        return {"code": 200, "status": "OK", "data": [{"timings": dict(self.timings)}]}


class FakeQuranBackend:
    def list_surahs(self):
        return [{"number": 1, "englishName": "Al-Faatiha", "numberOfAyahs": 7}]

    def get_surah(self, number):
        return {
            "surah": {"number": number, "englishName": "Al-Faatiha"},
            "ayahs": [{"number": 1, "numberInSurah": 1, "text": "بِسْمِ", "translation": "In the name"}],
        }


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeGenerativeModel:
    """Stands in for genai.GenerativeModel: returns queued payloads as JSON text."""

    def __init__(self, payloads=None, error: Optional[Exception] = None):
        self.payloads = list(payloads or [])
        self.error = error
        self.prompts: List[str] = []
        self.generation_configs: List[Any] = []

    def generate_content(self, prompt, generation_config=None):
        self.prompts.append(prompt)
        self.generation_configs.append(generation_config)
        if self.error is not None:
            raise self.error
        payload = self.payloads.pop(0) if self.payloads else {}
        return FakeResponse(payload if isinstance(payload, str) else json.dumps(payload))


@pytest.fixture
def db(tmp_path):
    init_db(db_url=f"sqlite:///{tmp_path / 'test.db'}")
    yield
    dispose_db()


@pytest.fixture
def prayer_backend():
    return FakePrayerBackend()


@pytest.fixture
def generative_model():
    return FakeGenerativeModel()


@pytest.fixture
def companion_app(tmp_path, prayer_backend, generative_model):
    app = CompanionApp(
        config_path=str(tmp_path / "config.yaml"),
        watch_config=False,
        db_url=f"sqlite:///{tmp_path / 'app.db'}",
        clock=lambda: FIXED_NOW,
        prayer_backend=prayer_backend,
        quran_backend=FakeQuranBackend(),
        coach_client=CoachClient(generative_model),
    )
    yield app
    app.shutdown()


@pytest.fixture
def client(companion_app):
    return TestClient(create_app(companion_app))
