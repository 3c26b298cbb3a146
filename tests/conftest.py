from dataclasses import replace
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from dailyword.clock import AvailabilityClock
from dailyword.config import Settings
from dailyword.main import create_app
from dailyword.service import PuzzleService

PUZZLE_ENTRIES = [
    ("PUZZLE_20250308", "crane|Long-legged bird"),
    ("PUZZLE_20250309", "LOLLY|Sweet on a stick|win.mp3,lose.wav"),
    ("PUZZLE_20250310", "ROBOT|Machine"),
    ("PUZZLE_20250311", "BROKEN"),
    ("PUZZLE_20250312", "FUTUR|Not yet"),
]


def fixed_clock(*args) -> AvailabilityClock:
    instant = datetime(*args, tzinfo=timezone.utc)
    return AvailabilityClock("America/New_York", now=lambda: instant)


@pytest.fixture
def settings(tmp_path):
    public = tmp_path / "public"
    (public / "images" / "answers").mkdir(parents=True)
    (public / "sounds").mkdir(parents=True)
    (public / "index.html").write_text("<html>daily</html>", encoding="utf-8")
    return Settings(
        public_dir=public,
        words_path=tmp_path / "valid-words.txt",
        puzzle_entries=list(PUZZLE_ENTRIES),
    )


@pytest.fixture
def make_client(settings):
    clients = []

    def _make(clock=None, **overrides):
        s = replace(settings, **overrides)
        service = PuzzleService.from_settings(s, clock=clock or fixed_clock(2025, 3, 10, 16, 0))
        client = TestClient(create_app(s, service))
        clients.append(client)
        return client

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def clock_at():
    return fixed_clock
