"""Best-effort date formatting for display."""
import re
from typing import Any, Optional

import pandas as pd

from app.core.config import DISPLAY_TIMEZONE

# "9:00", "14:30:00", "10:30 AM", "3pm" carry no calendar date
_TIME_ONLY_RE = re.compile(r"^\s*\d{1,2}(:\d{2}){0,2}\s*([AaPp]\.?[Mm]\.?)?\s*$")
# A calendar date always has a digit; "now" and "today" have none
_DIGIT_RE = re.compile(r"\d")


def parse_date(text: Any, tz: str = DISPLAY_TIMEZONE) -> Optional[pd.Timestamp]:
    """Parse ``text`` into a timestamp, or None when it is not a calendar date.

    Timezone-aware values are converted to ``tz``; naive values are kept as is.
    """
    if not isinstance(text, str) or not text.strip():
        return None
    if _TIME_ONLY_RE.match(text) or not _DIGIT_RE.search(text):
        return None

    try:
        ts = pd.Timestamp(text.strip())
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None

    if ts.tzinfo is not None:
        try:
            ts = ts.tz_convert(tz)
        except (KeyError, ValueError, TypeError):
            # unknown zone name; keep the source offset
            pass
    return ts


def format_date(text: Any, tz: str = DISPLAY_TIMEZONE) -> Any:
    """Render a date as e.g. ``"Mar 18, 10:00 AM"``.

    Anything that does not parse as a calendar date ("TBD", "9:00", None) is
    returned unchanged; this never raises.
    """
    ts = parse_date(text, tz)
    if ts is None:
        return text
    return f"{ts.strftime('%b')} {ts.day}, {ts.hour % 12 or 12}:{ts.strftime('%M %p')}"
