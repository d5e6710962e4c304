"""Tests for the user-triggered dashboard actions."""
import asyncio

from app.domain.errors import AgentTransportError
from app.infrastructure.agent_gateway import agent_id_for
from app.domain.agents import AgentRole
from app.services import actions
from app.services.store import Slot


class TestSyncAndPlan:
    """Test the academic coordinator flow."""

    def test_success_writes_coordinator_view(self, store, make_reply, make_gateway, coordinator_result):
        calls = []
        gateway = make_gateway(make_reply(coordinator_result), calls=calls)

        assert asyncio.run(actions.sync_and_plan(store=store, gateway=gateway)) is True

        view = store.get(Slot.COORDINATOR)
        assert [a.title for a in view.pending_assignments()] == ["HW1"]
        assert calls == [(actions.SYNC_INSTRUCTION, agent_id_for(AgentRole.ACADEMIC_COORDINATOR))]
        assert store.error is None

    def test_agent_failure_uses_agent_message(self, store, make_reply, make_gateway):
        gateway = make_gateway(make_reply(None, status="error", message="LMS unavailable"))

        assert asyncio.run(actions.sync_and_plan(store=store, gateway=gateway)) is False
        assert store.error == "LMS unavailable"

    def test_agent_failure_fallback_message(self, store, make_reply, make_gateway):
        gateway = make_gateway(make_reply(None, success=False))
        asyncio.run(actions.sync_and_plan(store=store, gateway=gateway))
        assert store.error == "Failed to sync data"

    def test_gateway_error_field_wins(self, store, make_reply, make_gateway):
        gateway = make_gateway(make_reply(None, success=False, message="agent", error="quota exceeded"))
        asyncio.run(actions.sync_and_plan(store=store, gateway=gateway))
        assert store.error == "quota exceeded"

    def test_transport_exception_message(self, store, make_gateway):
        gateway = make_gateway(exc=RuntimeError("connection reset"))
        asyncio.run(actions.sync_and_plan(store=store, gateway=gateway))
        assert store.error == "connection reset"

    def test_transport_exception_without_message(self, store, make_gateway):
        gateway = make_gateway(exc=RuntimeError())
        asyncio.run(actions.sync_and_plan(store=store, gateway=gateway))
        assert store.error == actions.UNKNOWN_ERROR

    def test_typed_transport_error(self, store, make_gateway):
        gateway = make_gateway(exc=AgentTransportError("Agent gateway returned HTTP 502 without JSON"))
        asyncio.run(actions.sync_and_plan(store=store, gateway=gateway))
        assert store.error == "Agent gateway returned HTTP 502 without JSON"

    def test_failed_refresh_keeps_previous_data(self, store, make_reply, make_gateway, coordinator_result):
        asyncio.run(actions.sync_and_plan(store=store, gateway=make_gateway(make_reply(coordinator_result))))
        before = store.get(Slot.COORDINATOR)

        asyncio.run(actions.sync_and_plan(store=store, gateway=make_gateway(exc=RuntimeError("offline"))))

        assert store.get(Slot.COORDINATOR) is before
        assert store.error == "offline"
        assert store.is_loading() is False


class TestGetStudyPlan:
    """Test the study planner flow."""

    def test_custom_message(self, store, make_reply, make_gateway, study_plan_result):
        calls = []
        gateway = make_gateway(make_reply(study_plan_result), calls=calls)

        asyncio.run(actions.get_study_plan("Plan my finals week", store=store, gateway=gateway))

        assert calls[0][0] == "Plan my finals week"
        assert store.get(Slot.STUDY_PLAN).daily_plan[0].focus == "Data Structures"

    def test_blank_message_uses_default(self, store, make_reply, make_gateway, study_plan_result):
        calls = []
        gateway = make_gateway(make_reply(study_plan_result), calls=calls)
        asyncio.run(actions.get_study_plan("   ", store=store, gateway=gateway))
        assert calls[0][0] == actions.STUDY_PLAN_INSTRUCTION

    def test_malformed_response_sets_error(self, store, make_reply, make_gateway):
        gateway = make_gateway(make_reply({"raw_text": "no fenced block here"}))

        assert asyncio.run(actions.get_study_plan(store=store, gateway=gateway)) is False
        assert store.error.startswith("Malformed agent response")
        assert store.get(Slot.STUDY_PLAN) is None


class TestGetCollaboration:

    def test_success(self, store, make_reply, make_gateway, collaboration_result):
        gateway = make_gateway(make_reply(collaboration_result))
        asyncio.run(actions.get_collaboration(store=store, gateway=gateway))
        assert store.get(Slot.COLLABORATION).benchmarks.notes == "Above average"

    def test_failure_message(self, store, make_reply, make_gateway):
        gateway = make_gateway(make_reply(None, status="failed"))
        asyncio.run(actions.get_collaboration(store=store, gateway=gateway))
        assert store.error == "Failed to get collaboration data"


class TestRaces:
    """Out-of-order completions never overwrite newer data."""

    def test_slow_first_call_is_discarded(self, store, make_reply):
        release_first = None

        async def scenario():
            nonlocal release_first
            release_first = asyncio.Event()
            order = []

            async def gateway(instruction, agent_id):
                if instruction == "first":
                    await release_first.wait()
                order.append(instruction)
                return make_reply({"recommendations": instruction, "daily_plan": []})

            first = asyncio.create_task(actions.get_study_plan("first", store=store, gateway=gateway))
            await asyncio.sleep(0)
            second_written = await actions.get_study_plan("second", store=store, gateway=gateway)
            release_first.set()
            first_written = await first
            return order, first_written, second_written

        order, first_written, second_written = asyncio.run(scenario())

        assert order == ["second", "first"]
        assert second_written is True
        assert first_written is False
        assert store.get(Slot.STUDY_PLAN).recommendations == "second"
