"""Text utilities for agent output: sanitization and fenced JSON extraction."""
import json
import re
from typing import Any, Dict

from app.domain.errors import MalformedAgentResponse

# ```json\n ... \n``` (language tag optional, must be json when present)
_JSON_FENCE_RE = re.compile(r"```[ \t]*(?:json)?[ \t]*\r?\n(.*?)```", re.IGNORECASE | re.DOTALL)


def sanitize_text(text: Any) -> str:
    """Clean agent-supplied text for safe display.

    Removes control characters that could break JSON or terminal output and
    collapses runs of spaces. Newlines are kept.

    Examples:
        >>> sanitize_text("Failed\\x00 to   sync")
        'Failed to sync'
        >>> sanitize_text(None)
        ''
    """
    if text is None:
        return ""

    text = str(text)
    text = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F-\x9F]', '', text)
    text = re.sub(r'[ \t]+', ' ', text)
    return text.strip()


def extract_fenced_json(raw_text: str) -> Dict[str, Any]:
    """Parse the first fenced JSON code block found in ``raw_text``.

    Only the first fenced block is considered. Bare JSON outside a fence is
    not scraped.

    Raises:
        MalformedAgentResponse: no fenced block, invalid JSON, or the block
            does not hold a JSON object.

    Example:
        >>> extract_fenced_json('Plan:\\n```json\\n{"a": 1}\\n```')
        {'a': 1}
    """
    if not isinstance(raw_text, str):
        raise MalformedAgentResponse("raw text is not a string")

    match = _JSON_FENCE_RE.search(raw_text)
    if not match:
        raise MalformedAgentResponse("no fenced JSON block found")

    try:
        parsed = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise MalformedAgentResponse(f"fenced block is not valid JSON ({e.msg})") from e

    if not isinstance(parsed, dict):
        raise MalformedAgentResponse("fenced block does not contain a JSON object")
    return parsed
