"""Domain models for the agent gateway contract."""
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class AgentRole(str, Enum):
    """The five agents the dashboard talks to."""
    ACADEMIC_COORDINATOR = "academic_coordinator"
    LMS_SYNC = "lms_sync"
    STUDY_PLANNER = "study_planner"
    COLLABORATION = "collaboration"
    SMART_REMINDER = "smart_reminder"


class AgentResponse(BaseModel):
    """Agent-level envelope; ``result`` is whatever the agent produced."""
    status: str = ""
    message: Optional[str] = None
    result: Any = None

    class Config:
        extra = "allow"


class GatewayResult(BaseModel):
    """Gateway reply for one ``invoke(instruction, agent_id)`` call.

    Example:
        {"success": true, "response": {"status": "success", "result": {...}}}
    """
    success: bool = False
    response: AgentResponse = Field(default_factory=AgentResponse)
    error: Optional[str] = None

    class Config:
        extra = "allow"

    @property
    def ok(self) -> bool:
        """True when both the gateway and the agent report success."""
        return self.success and self.response.status == "success"

    def failure_message(self, fallback: str) -> str:
        """Gateway error, else agent message, else ``fallback``."""
        return self.error or self.response.message or fallback
