# src/planit/tasks/urgency.py

"""
Deadline urgency derivation.

Pure functions only: given a deadline and "now", classify the deadline into a
tier and format the remaining time. The result is recomputed on every tick
and never stored.

Tiers:
- overdue: deadline already passed
- urgent:  less than URGENT_WINDOW left, shown as H:MM:SS
- normal:  shown as whole hours up to HOURS_DISPLAY_LIMIT, whole days beyond
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import StrEnum

logger = logging.getLogger(__name__)

URGENT_WINDOW = timedelta(hours=3)
HOURS_DISPLAY_LIMIT = timedelta(hours=72)

_MS_PER_SECOND = 1000
_MS_PER_HOUR = 3_600_000

# Fixed English abbreviations: strftime("%b") follows the process locale.
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class Tier(StrEnum):
    NORMAL = "normal"
    URGENT = "urgent"
    OVERDUE = "overdue"


@dataclass(frozen=True, slots=True)
class Urgency:
    tier: Tier
    display: str


NO_DEADLINE = Urgency(tier=Tier.NORMAL, display="")


def _is_date_only(raw: str) -> bool:
    return "T" not in raw and " " not in raw.strip()


def parse_deadline(raw: str | datetime | None) -> datetime | None:
    """
    Parse a Notion date string into an aware datetime.

    - "2024-10-24" (date only) -> 2024-10-24 23:59:59 local time
    - "2024-10-24T09:30:00.000+02:00" / "...Z" -> as given
    - naive date-times are interpreted as local time
    Returns None for empty or unparseable input.
    """
    if raw is None:
        return None

    if isinstance(raw, datetime):
        return raw if raw.tzinfo is not None else raw.astimezone()

    s = raw.strip()
    if not s:
        return None

    try:
        if _is_date_only(s):
            day = date.fromisoformat(s)
            return datetime.combine(day, time(23, 59, 59)).astimezone()
        parsed = datetime.fromisoformat(s)
    except ValueError:
        logger.debug("Unparseable deadline %r; treating as absent", raw)
        return None

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def _format_countdown(diff_ms: int) -> str:
    total_seconds = diff_ms // _MS_PER_SECOND
    hours, rem = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def derive_urgency(
    deadline: str | datetime | None,
    now: datetime,
    *,
    overdue_label: str = "Overdue",
) -> Urgency:
    """Classify `deadline` relative to `now`. `now` must be timezone-aware."""
    target = parse_deadline(deadline)
    if target is None:
        return NO_DEADLINE

    diff = target - now
    if diff < timedelta(0):
        return Urgency(tier=Tier.OVERDUE, display=overdue_label)

    diff_ms = diff // timedelta(milliseconds=1)

    if diff < URGENT_WINDOW:
        return Urgency(tier=Tier.URGENT, display=_format_countdown(diff_ms))

    hours = diff_ms // _MS_PER_HOUR
    if diff <= HOURS_DISPLAY_LIMIT:
        return Urgency(tier=Tier.NORMAL, display=f"{hours}h")

    return Urgency(tier=Tier.NORMAL, display=f"{hours // 24}d")


def format_short_date(raw: str | None) -> str:
    """Render a deadline as "Oct 24" for the secondary date column."""
    if not raw:
        return ""
    s = raw.strip()
    try:
        if _is_date_only(s):
            d = date.fromisoformat(s)
        else:
            parsed = datetime.fromisoformat(s)
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone()
            d = parsed.date()
    except ValueError:
        return ""
    return f"{_MONTH_ABBR[d.month - 1]} {d.day}"
