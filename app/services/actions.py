"""User-triggered dashboard actions.

Each action issues exactly one agent call, normalizes the reply into its view
model and writes it to the store. Every failure ends up in the store's error
slot; previously displayed view models are never cleared by a failure.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from app.core.logging import get_logger
from app.domain.agents import AgentRole, GatewayResult
from app.domain.errors import AgentReportedError, AgentTransportError, DashboardError
from app.infrastructure.agent_gateway import agent_id_for, invoke_async
from app.services.assembler import (
    assemble_collaboration_view,
    assemble_coordinator_view,
    assemble_study_plan_view,
)
from app.services.store import DashboardStore, Slot, dashboard_store
from app.utils.text import sanitize_text

logger = get_logger(__name__)

Gateway = Callable[[str, str], Awaitable[GatewayResult]]

UNKNOWN_ERROR = "Unknown error occurred"

SYNC_INSTRUCTION = (
    "I need to sync my academic data and get my weekly study plan. "
    "Also show me upcoming class events and study group opportunities."
)
STUDY_PLAN_INSTRUCTION = (
    "Create a study plan for this week. I have exams in Data Structures (Monday) "
    "and DBMS (Thursday), plus 3 assignments due by Friday."
)
COLLABORATION_INSTRUCTION = (
    "Show me available study groups for Data Structures, upcoming class events this week, "
    "and my performance benchmark compared to peers."
)


@dataclass(frozen=True)
class ActionSpec:
    slot: Slot
    role: AgentRole
    assemble: Callable[[Any], Any]
    fallback_error: str


SYNC_AND_PLAN = ActionSpec(Slot.COORDINATOR, AgentRole.ACADEMIC_COORDINATOR,
                           assemble_coordinator_view, "Failed to sync data")
GET_STUDY_PLAN = ActionSpec(Slot.STUDY_PLAN, AgentRole.STUDY_PLANNER,
                            assemble_study_plan_view, "Failed to get study plan")
GET_COLLABORATION = ActionSpec(Slot.COLLABORATION, AgentRole.COLLABORATION,
                               assemble_collaboration_view, "Failed to get collaboration data")


async def run_action(
    spec: ActionSpec,
    instruction: str,
    store: DashboardStore = dashboard_store,
    gateway: Optional[Gateway] = None,
) -> bool:
    """Run one action end to end. Returns True when a view model was written."""
    ticket = store.begin(spec.slot)
    agent_id = agent_id_for(spec.role)
    log_extra = {"action": spec.slot.value, "agent_id": agent_id, "sequence": ticket.sequence}
    logger.info(f"Starting {spec.slot.value} action", extra=log_extra)

    try:
        try:
            reply = await (gateway or invoke_async)(instruction, agent_id)
        except DashboardError:
            raise
        except Exception as e:
            raise AgentTransportError(str(e) or UNKNOWN_ERROR) from e

        if not reply.ok:
            raise AgentReportedError(sanitize_text(reply.failure_message(spec.fallback_error)))

        view = spec.assemble(reply.response.result)
    except DashboardError as e:
        logger.warning(
            f"{spec.slot.value} action failed: {e.message}",
            extra={**log_extra, "error_type": type(e).__name__},
        )
        store.fail(ticket, e.message or UNKNOWN_ERROR)
        return False
    except Exception as e:
        logger.error(f"{spec.slot.value} action crashed", extra=log_extra, exc_info=True)
        store.fail(ticket, str(e) or UNKNOWN_ERROR)
        return False

    return store.complete(ticket, view)


async def sync_and_plan(store: DashboardStore = dashboard_store, gateway: Optional[Gateway] = None) -> bool:
    """Sync LMS data and fetch the weekly plan through the academic coordinator."""
    return await run_action(SYNC_AND_PLAN, SYNC_INSTRUCTION, store, gateway)


async def get_study_plan(
    message: Optional[str] = None,
    store: DashboardStore = dashboard_store,
    gateway: Optional[Gateway] = None,
) -> bool:
    """Ask the study planner for a plan; a non-blank ``message`` replaces the default."""
    instruction = message if message and message.strip() else STUDY_PLAN_INSTRUCTION
    return await run_action(GET_STUDY_PLAN, instruction, store, gateway)


async def get_collaboration(store: DashboardStore = dashboard_store, gateway: Optional[Gateway] = None) -> bool:
    """Fetch study groups, shared calendar and peer benchmarks."""
    return await run_action(GET_COLLABORATION, COLLABORATION_INSTRUCTION, store, gateway)
