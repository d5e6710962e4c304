"""Error taxonomy for agent calls and response normalization."""


class DashboardError(Exception):
    """Base class for failures surfaced through the dashboard error slot."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AgentTransportError(DashboardError):
    """The gateway call itself failed (network, non-JSON body, ...)."""


class AgentReportedError(DashboardError):
    """The gateway answered but the agent reported failure."""


class MalformedAgentResponse(DashboardError):
    """A text envelope did not contain a parsable fenced JSON object."""

    def __init__(self, reason: str):
        super().__init__(f"Malformed agent response: {reason}")
        self.reason = reason
