"""Normalization helpers shared by the view model assemblers.

All functions here are pure and total over loosely typed agent output.
"""
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from app.domain.dashboard import UrgencyTier
from app.domain.errors import MalformedAgentResponse
from app.utils.text import extract_fenced_json
from app.core.logging import get_logger

logger = get_logger(__name__)

# Synonym fields per concept, first listed wins
TOPIC_FIELDS = ("focus", "topic")
MEETING_FIELDS = ("next_meeting", "meeting_time")
CAPACITY_FIELDS = ("availability", "available_seats")
URGENCY_FIELDS = ("urgency", "priority")
EVENT_TIME_FIELDS = ("date", "date_time")

DEFAULT_URGENCY = "MEDIUM"
RAW_TEXT_FIELD = "raw_text"

# Checked in this order; the first keyword found wins
_TIER_ORDER = (UrgencyTier.CRITICAL, UrgencyTier.HIGH, UrgencyTier.MEDIUM)


def coalesce(record: Any, names: Sequence[str]) -> Any:
    """Return the first present, non-null value among ``names``.

    Examples:
        >>> coalesce({}, ["a", "b"]) is None
        True
        >>> coalesce({"a": "y", "b": "x"}, ["a", "b"])
        'y'
    """
    if not isinstance(record, Mapping):
        return None
    for name in names:
        value = record.get(name)
        if value is not None:
            return value
    return None


def classify_urgency(text: Any) -> UrgencyTier:
    """Map a free-text urgency label to a tier (default LOW)."""
    if not isinstance(text, str):
        return UrgencyTier.LOW
    level = text.upper()
    for tier in _TIER_ORDER:
        if tier.value in level:
            return tier
    return UrgencyTier.LOW


def unwrap_result(result: Any, expected_keys: Iterable[str]) -> Mapping[str, Any]:
    """Return the structured result, extracting it from a text envelope if needed.

    An envelope is a mapping carrying ``raw_text`` and none of
    ``expected_keys``, or a bare string.

    Raises:
        MalformedAgentResponse: the envelope holds no parsable fenced JSON
            object, or the result is neither a mapping nor text.
    """
    if isinstance(result, str):
        logger.info("Agent returned plain text, extracting fenced JSON")
        return extract_fenced_json(result)

    if not isinstance(result, Mapping):
        raise MalformedAgentResponse(f"unexpected result type {type(result).__name__}")

    if RAW_TEXT_FIELD in result and not any(key in result for key in expected_keys):
        logger.info("Agent returned a raw_text envelope, extracting fenced JSON")
        return extract_fenced_json(result[RAW_TEXT_FIELD])

    return result


def as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def as_records(value: Any, label: str) -> List[Mapping[str, Any]]:
    """Entries of a collection that can be read as records.

    A missing or non-list collection is empty. Entries that are not mappings
    cannot be read at all and are skipped.
    """
    if not isinstance(value, list):
        return []
    records = []
    for index, entry in enumerate(value):
        if isinstance(entry, Mapping):
            records.append(entry)
        else:
            logger.warning(f"Skipping non-object entry {index} in {label}")
    return records


def as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def as_optional_text(value: Any) -> Optional[str]:
    return None if value is None else as_text(value)


def as_scalar(value: Any) -> Any:
    """Pass numbers and text through; anything else becomes its text form."""
    if value is None or isinstance(value, (int, float, str)):
        return value
    return str(value)


def as_text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [as_text(item) for item in value if item is not None]


def as_text_map(value: Any) -> dict:
    return {as_text(k): as_text(v) for k, v in as_mapping(value).items()}
