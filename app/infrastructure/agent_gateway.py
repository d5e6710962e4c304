"""Agent gateway client.

Sends a natural-language instruction to one agent and returns its reply.
The HTTP call is blocking (``requests``), so the async wrapper runs it in a
thread pool to keep FastAPI handlers non-blocking. No retries: one call per
user action.
"""
import asyncio
import concurrent.futures
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from app.core.config import settings
from app.core.logging import get_logger, LogTimer
from app.domain.agents import AgentRole, GatewayResult
from app.domain.errors import AgentTransportError

logger = get_logger(__name__)

# Thread pool for blocking gateway calls
_executor: Optional[concurrent.futures.ThreadPoolExecutor] = None


def _get_executor() -> concurrent.futures.ThreadPoolExecutor:
    """Get or create thread pool executor for blocking calls."""
    global _executor
    if _executor is None:
        _executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=5,
            thread_name_prefix="agent_gateway"
        )
    return _executor


def agent_id_for(role: AgentRole) -> str:
    """Configured identifier for an agent role."""
    return getattr(settings, f"agent_id_{role.value}")


def agent_ids() -> Dict[str, str]:
    return {role.value: agent_id_for(role) for role in AgentRole}


def _parse_reply(payload: Any) -> GatewayResult:
    if not isinstance(payload, dict):
        raise AgentTransportError("Agent gateway returned an unexpected payload")
    if not isinstance(payload.get("response"), dict):
        payload = {**payload, "response": {}}
    try:
        return GatewayResult.model_validate(payload)
    except ValidationError as e:
        raise AgentTransportError(f"Agent gateway returned an invalid reply: {e.error_count()} errors") from e


def invoke(instruction: str, agent_id: str, timeout: Optional[float] = None) -> GatewayResult:
    """Call one agent through the gateway.

    Args:
        instruction: Natural-language instruction for the agent
        agent_id: Opaque agent identifier
        timeout: HTTP timeout in seconds (default from settings)

    Returns:
        Parsed gateway reply; agent-level failure is reported in it, not raised

    Raises:
        AgentTransportError: network failure or a non-JSON reply
    """
    headers = {"Content-Type": "application/json"}
    if settings.agent_api_key:
        headers["x-api-key"] = settings.agent_api_key

    try:
        res = requests.post(
            settings.agent_gateway_url,
            json={"message": instruction, "agent_id": agent_id},
            headers=headers,
            timeout=timeout or settings.agent_timeout_seconds,
        )
    except requests.RequestException as e:
        raise AgentTransportError(str(e) or "Agent gateway unreachable") from e

    try:
        payload = res.json()
    except ValueError as e:
        raise AgentTransportError(f"Agent gateway returned HTTP {res.status_code} without JSON") from e

    if not res.ok:
        logger.warning(
            f"Agent gateway returned HTTP {res.status_code}",
            extra={"agent_id": agent_id, "status_code": res.status_code},
        )
    return _parse_reply(payload)


async def invoke_async(instruction: str, agent_id: str) -> GatewayResult:
    """Async wrapper around :func:`invoke`."""
    logger.debug("Sending instruction to agent", extra={"agent_id": agent_id})
    loop = asyncio.get_running_loop()
    with LogTimer(logger, f"agent_call[{agent_id}]"):
        return await loop.run_in_executor(_get_executor(), invoke, instruction, agent_id)
