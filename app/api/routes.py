"""FastAPI routes for the Smart College Life Manager dashboard.

Action endpoints always answer with the full dashboard state. A failed action
is reported in the ``error`` field, not as an HTTP error, so presentation
keeps rendering whatever view models it already had.
"""
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.logging import get_logger, LogTimer
from app.domain.dashboard import DashboardState
from app.infrastructure.agent_gateway import agent_ids
from app.services import actions
from app.services.assembler import render_dashboard
from app.services.store import dashboard_store

logger = get_logger(__name__)
router = APIRouter()


class StudyPlanRequest(BaseModel):
    """Optional custom instruction for the study planner."""
    message: Optional[str] = None


def _state() -> DashboardState:
    return render_dashboard(dashboard_store.snapshot())


@router.get("/dashboard", response_model=DashboardState)
async def get_dashboard():
    """Current dashboard state; today's classes are recomputed on each call."""
    return _state()


@router.post("/dashboard/sync", response_model=DashboardState)
async def sync_and_plan():
    """Sync LMS data and weekly plan through the academic coordinator agent."""
    with LogTimer(logger, "sync_and_plan"):
        await actions.sync_and_plan(store=dashboard_store)
    return _state()


@router.post("/dashboard/study-plan", response_model=DashboardState)
async def get_study_plan(req: Optional[StudyPlanRequest] = None):
    """Generate a study plan, optionally from a custom instruction.

    Example:
        POST /dashboard/study-plan
        {"message": "I have a DBMS exam on Thursday"}
    """
    message = req.message if req else None
    with LogTimer(logger, "get_study_plan"):
        await actions.get_study_plan(message, store=dashboard_store)
    return _state()


@router.post("/dashboard/collaboration", response_model=DashboardState)
async def get_collaboration():
    """Fetch study groups, class events and peer benchmarks."""
    with LogTimer(logger, "get_collaboration"):
        await actions.get_collaboration(store=dashboard_store)
    return _state()


@router.get("/agents")
def list_agents():
    """Configured agent identifiers by role."""
    return {"agents": agent_ids()}
