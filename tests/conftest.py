"""Pytest configuration and shared fixtures."""
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DISPLAY_TIMEZONE", "UTC")

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from app.domain.agents import GatewayResult
from app.services.store import DashboardStore, dashboard_store


def gateway_reply(result, success=True, status="success", message=None, error=None) -> GatewayResult:
    """Build a gateway reply the way the agent gateway returns it."""
    payload = {"success": success, "response": {"status": status, "result": result}}
    if message is not None:
        payload["response"]["message"] = message
    if error is not None:
        payload["error"] = error
    return GatewayResult.model_validate(payload)


def fake_gateway(reply=None, exc=None, calls=None):
    """Async gateway stand-in returning ``reply`` or raising ``exc``."""
    async def _invoke(instruction, agent_id):
        if calls is not None:
            calls.append((instruction, agent_id))
        if exc is not None:
            raise exc
        return reply
    return _invoke


@pytest.fixture
def coordinator_result():
    """Academic coordinator result from the end-to-end sync scenario."""
    return {
        "lms_data": {
            "timetable": [{"day": "Monday", "time": "9:00", "course": "CS101", "room": "A1"}],
            "assignments": [
                {"course": "CS101", "title": "HW1", "status": "pending", "deadline": "2024-03-20"}
            ],
            "exams": [],
            "attendance": {},
            "last_sync": "2024-03-18",
        },
        "study_plan": {
            "weekly_plan": {"week_focus": "midterms", "total_study_hours": 10, "breakdown": {}},
            "priority_tasks": [],
        },
        "collaboration": {
            "peer_updates": [],
            "study_groups": [],
            "shared_calendar": [],
            "collaboration_score": 0,
            "recommendations": [],
        },
        "urgent_items": [],
        "overall_recommendations": "",
        "sync_timestamp": "2024-03-18",
    }


@pytest.fixture
def rich_coordinator_result(coordinator_result):
    """Coordinator result exercising every synonym and optional field."""
    lms = coordinator_result["lms_data"]
    lms["timetable"].append({"day": "Tuesday", "time": "11:00", "course": "MA201", "room": "B2"})
    lms["assignments"].append(
        {"course": "MA201", "title": "Problem Set 3", "status": "completed", "deadline": "2024-03-15"}
    )
    lms["exams"] = [
        {"course": "CS101", "type": "Midterm", "date": "2024-03-25T09:00:00Z", "room": "Hall", "grade": None},
        {"course": "MA201", "type": "Quiz", "date": "2024-03-01", "room": "B2", "grade": "A-"},
    ]
    lms["attendance"] = {
        "CS101": {"attended": 18, "total": 20, "percentage": 90},
        "MA201": {"attended": 25, "total": 20, "percentage": 62},
    }
    coordinator_result["study_plan"]["priority_tasks"] = [
        {"rank": 1, "task": "Revise trees", "urgency": "CRITICAL - exam Monday", "deadline": "2024-03-25"},
        {"priority": "high", "task": "Finish HW1"},
        {"task": "Read chapter 4"},
    ]
    coordinator_result["collaboration"]["study_groups"] = [
        {
            "course": "CS101",
            "groups": [
                {"group_id": "g1", "focus": "Graphs", "topic": "ignored", "next_meeting": "2024-03-19T18:00:00Z",
                 "meeting_time": "ignored", "members": 4},
                {"group_id": "g2"},
            ],
        }
    ]
    coordinator_result["collaboration"]["shared_calendar"] = [
        {"event": "Guest lecture", "date": "2024-03-21T14:00:00Z", "location": "Aula"},
        {"event": "Lab", "time": "15:00"},
        {"event": "Hackathon"},
    ]
    coordinator_result["urgent_items"] = [
        {"item": "HW1", "due": "2024-03-20", "urgency": "HIGH"},
        {"item": "MA201 attendance", "percentage": 62, "urgency": "critical"},
    ]
    return coordinator_result


@pytest.fixture
def study_plan_result():
    return {
        "daily_plan": [
            {
                "day": "Monday",
                "focus": "Data Structures",
                "sessions": [
                    {"time": "08:00-10:00", "activity": "Trees review", "technique": "Active recall"},
                    {"time": "14:00-15:00", "activity": "Past paper", "technique": "Practice testing"},
                ],
            }
        ],
        "weekly_plan": {"Monday": "DS exam", "Thursday": "DBMS exam"},
        "priority_tasks": [{"priority": 1, "task": "DS exam", "urgency": "HIGH", "time_allocated": "6h"}],
        "study_techniques": [
            {"technique": "Pomodoro", "application": "Assignments", "benefit": "Focus"}
        ],
        "estimated_hours": {"total_study_hours": 24, "exam_preparation": 14, "daily_average": 3.4},
        "recommendations": "Sleep well before exams.",
    }


@pytest.fixture
def collaboration_result():
    return {
        "peer_updates": [{"course": "CS101", "recent_activity": "Shared notes"}, {}],
        "study_groups": [
            {"group_id": "ds-1", "topic": "Trees", "meeting_time": "2024-03-19T17:00:00Z", "available_seats": 2},
            {"group_id": "ds-2", "focus": "Heaps", "availability": "Open", "available_seats": 0,
             "location": "Library"},
        ],
        "shared_calendar": [{"event": "Review session", "date_time": "2024-03-20T16:30:00Z"}],
        "benchmarks": {"your_score_avg": 78.5, "peer_group_avg": 74, "percentile": 68, "notes": "Above average"},
        "recommendations": ["Join ds-1"],
        "collaboration_score": 7.5,
    }


@pytest.fixture
def store():
    """A fresh, isolated dashboard store."""
    return DashboardStore()


@pytest.fixture
def test_client():
    """FastAPI test client over a clean process-wide store."""
    from main import app
    dashboard_store.reset()
    yield TestClient(app)
    dashboard_store.reset()


@pytest.fixture
def mock_gateway():
    """Patch the agent gateway used by the dashboard actions."""
    with patch("app.services.actions.invoke_async") as mock:
        yield mock


@pytest.fixture
def make_reply():
    return gateway_reply


@pytest.fixture
def make_gateway():
    return fake_gateway
