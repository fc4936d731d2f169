import json

import pytest


@pytest.fixture
def sample_records():
    """Stored event records in the shape the events API returns them."""
    return [
        {
            "id": "standup",
            "title": "Standup",
            "category": "Work",
            "startAt": "2024-03-01T14:00:00Z",
            "endAt": "2024-03-01T14:15:00Z",
            "timezone": "America/New_York",
            "recurrenceFreq": "WEEKLY",
            "byWeekday": ["MO", "WE", "FR"],
            "times": ["09:00"],
        },
        {
            "id": "launch",
            "title": "Launch party",
            "startAt": "2024-03-02T23:00:00Z",
            "endAt": "2024-03-03T01:00:00Z",
            "timezone": "America/New_York",
            "recurrenceFreq": "NONE",
        },
        {
            "id": "broken-zone",
            "title": "Somewhere else",
            "startAt": "2024-03-01T12:00:00Z",
            "endAt": "2024-03-01T13:00:00Z",
            "timezone": "Mars/Olympus_Mons",
            "recurrenceFreq": "DAILY",
        },
    ]


@pytest.fixture
def write_events(tmp_path):
    """Write records to an events file and return its path."""

    def _write(records, name: str = "events.json"):
        path = tmp_path / name
        path.write_text(json.dumps(records))
        return path

    return _write
