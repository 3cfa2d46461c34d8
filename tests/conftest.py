"""Pytest configuration and fixtures."""

import json

import pytest

from gotrain.db.storage import SessionStorage


@pytest.fixture
def storage(tmp_path):
    """Session storage backed by a temporary database."""
    return SessionStorage(tmp_path / "gotrain.db")


@pytest.fixture
def plan_data():
    """A small valid weekly plan in wire (camelCase) form."""
    return {
        "weeklySummary": "Base week: two easy runs and one strength day.",
        "days": [
            {
                "dayNumber": 1,
                "date": "2024-03-04",
                "title": "Easy Run",
                "type": "run",
                "activities": [
                    {
                        "name": "Easy run",
                        "duration": "40 mins",
                        "intensity": "Easy",
                        "details": "Conversational pace",
                    }
                ],
                "coachTips": ["Keep it relaxed"],
            },
            {
                "dayNumber": 2,
                "date": "2024-03-05",
                "title": "Strength",
                "type": "strength",
                "activities": [
                    {
                        "name": "Lower body",
                        "duration": 45,
                        "intensity": "Moderate",
                        "details": "Squat focus",
                        "exercises": [
                            {"name": "Back Squat", "sets": 3, "reps": "5", "weight": "80 kg"},
                        ],
                    }
                ],
                "coachTips": [],
            },
            {
                "dayNumber": 3,
                "date": "2024-03-06",
                "title": "Rest",
                "type": "rest",
                "activities": [],
                "coachTips": ["Sleep well"],
            },
        ],
    }


@pytest.fixture
def plan_json(plan_data):
    return json.dumps(plan_data)


@pytest.fixture
def strava_activity_data():
    """One activity as returned by the Strava API."""
    return {
        "id": 987654,
        "name": "Morning Run",
        "type": "Run",
        "sport_type": "Run",
        "start_date": "2024-03-01T07:30:00Z",
        "distance": 10000.0,
        "moving_time": 3120,
        "elapsed_time": 3300,
        "total_elevation_gain": 42.0,
    }
