"""In-memory dashboard store.

Three independently settable view-model slots plus one shared error slot.
Each action takes a ticket from ``begin()``; a ticket that is older than the
latest one issued for its slot is stale, and its result is discarded so an
out-of-order response can never overwrite a newer one.
"""
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from app.domain.dashboard import DashboardSnapshot
from app.core.logging import get_logger

logger = get_logger(__name__)


class Slot(str, Enum):
    COORDINATOR = "coordinator"
    STUDY_PLAN = "study_plan"
    COLLABORATION = "collaboration"


@dataclass(frozen=True)
class Ticket:
    slot: Slot
    sequence: int


class DashboardStore:
    """Shared last-write-wins state read by presentation, written by actions."""

    def __init__(self):
        self._lock = threading.Lock()
        self._values: Dict[Slot, object] = {slot: None for slot in Slot}
        self._latest: Dict[Slot, int] = {slot: 0 for slot in Slot}
        self._in_flight: Dict[Slot, set] = {slot: set() for slot in Slot}
        self._error: Optional[str] = None

    def begin(self, slot: Slot) -> Ticket:
        """Start an action: clear the error slot and issue a new ticket."""
        with self._lock:
            self._latest[slot] += 1
            ticket = Ticket(slot=slot, sequence=self._latest[slot])
            self._in_flight[slot].add(ticket.sequence)
            self._error = None
        return ticket

    def complete(self, ticket: Ticket, value) -> bool:
        """Replace the slot value. Returns False when the ticket is stale."""
        with self._lock:
            self._in_flight[ticket.slot].discard(ticket.sequence)
            if not self._is_current(ticket):
                self._log_stale(ticket)
                return False
            self._values[ticket.slot] = value
        return True

    def fail(self, ticket: Ticket, message: str) -> bool:
        """Set the error slot, leaving every view model untouched."""
        with self._lock:
            self._in_flight[ticket.slot].discard(ticket.sequence)
            if not self._is_current(ticket):
                self._log_stale(ticket)
                return False
            self._error = message
        return True

    def is_loading(self) -> bool:
        with self._lock:
            return any(self._in_flight.values())

    def get(self, slot: Slot):
        with self._lock:
            return self._values[slot]

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    def snapshot(self) -> DashboardSnapshot:
        with self._lock:
            return DashboardSnapshot(
                coordinator=self._values[Slot.COORDINATOR],
                study_plan=self._values[Slot.STUDY_PLAN],
                collaboration=self._values[Slot.COLLABORATION],
                error=self._error,
                loading=any(self._in_flight.values()),
            )

    def reset(self):
        """Drop all state (used by tests and on shutdown)."""
        with self._lock:
            for slot in Slot:
                self._values[slot] = None
                self._in_flight[slot].clear()
            self._error = None

    def _is_current(self, ticket: Ticket) -> bool:
        return ticket.sequence == self._latest[ticket.slot]

    def _log_stale(self, ticket: Ticket):
        logger.warning(
            f"Discarding stale {ticket.slot.value} response",
            extra={"action": ticket.slot.value, "sequence": ticket.sequence},
        )


# Process-wide store used by the API
dashboard_store = DashboardStore()
