# tests/test_urgency.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from planit.tasks.urgency import (
    NO_DEADLINE,
    Tier,
    derive_urgency,
    format_short_date,
    parse_deadline,
)

from .conftest import NOW


def test_past_deadline_is_overdue() -> None:
    u = derive_urgency(NOW - timedelta(seconds=1), NOW)
    assert u.tier == Tier.OVERDUE
    assert u.display == "Overdue"


def test_overdue_label_is_injectable() -> None:
    u = derive_urgency(NOW - timedelta(days=2), NOW, overdue_label="Vencida")
    assert u.display == "Vencida"


@pytest.mark.parametrize(
    ("delta", "display"),
    [
        (timedelta(hours=2, minutes=59, seconds=59), "2:59:59"),
        (timedelta(hours=1, minutes=5, seconds=3, milliseconds=900), "1:05:03"),
        (timedelta(seconds=7), "0:00:07"),
    ],
)
def test_under_three_hours_is_urgent_countdown(delta: timedelta, display: str) -> None:
    u = derive_urgency(NOW + delta, NOW)
    assert u.tier == Tier.URGENT
    assert u.display == display


def test_exactly_three_hours_is_normal() -> None:
    u = derive_urgency(NOW + timedelta(hours=3), NOW)
    assert u.tier == Tier.NORMAL
    assert u.display == "3h"


def test_hours_up_to_and_including_72() -> None:
    assert derive_urgency(NOW + timedelta(hours=5, minutes=59), NOW).display == "5h"
    assert derive_urgency(NOW + timedelta(hours=72), NOW).display == "72h"


def test_days_beyond_72_hours() -> None:
    assert derive_urgency(NOW + timedelta(hours=72, seconds=1), NOW).display == "3d"
    assert derive_urgency(NOW + timedelta(hours=100), NOW).display == "4d"


def test_date_only_deadline_means_end_of_local_day() -> None:
    parsed = parse_deadline("2024-10-24")
    assert parsed is not None
    assert (parsed.hour, parsed.minute, parsed.second) == (23, 59, 59)

    u = derive_urgency("2024-10-24", NOW)
    assert u.tier == Tier.NORMAL
    assert u.display == "11h"


def test_utc_timestamp_is_compared_as_an_instant() -> None:
    deadline = (NOW + timedelta(hours=1)).astimezone(timezone.utc)
    raw = deadline.strftime("%Y-%m-%dT%H:%M:%S.000Z")
    u = derive_urgency(raw, NOW)
    assert u.tier == Tier.URGENT
    assert u.display == "1:00:00"


@pytest.mark.parametrize("raw", [None, "", "   ", "not a date", "2024-13-45"])
def test_missing_or_invalid_deadline_has_no_countdown(raw) -> None:
    assert derive_urgency(raw, NOW) == NO_DEADLINE


def test_same_inputs_same_output() -> None:
    a = derive_urgency("2024-10-26T08:00:00", NOW)
    b = derive_urgency("2024-10-26T08:00:00", NOW)
    assert a == b


def test_later_now_never_increases_remaining_time() -> None:
    deadline = NOW + timedelta(hours=2)
    earlier = derive_urgency(deadline, NOW)
    later = derive_urgency(deadline, NOW + timedelta(minutes=30))
    assert earlier.display == "2:00:00"
    assert later.display == "1:30:00"


def test_format_short_date() -> None:
    assert format_short_date("2024-10-24") == "Oct 24"
    assert format_short_date("2024-01-05T09:00:00") == "Jan 5"
    assert format_short_date(None) == ""
    assert format_short_date("garbage") == ""


def test_naive_datetime_is_treated_as_local() -> None:
    naive = datetime(2024, 10, 24, 13, 0, 0)
    parsed = parse_deadline(naive)
    assert parsed is not None
    assert parsed.tzinfo is not None
    assert derive_urgency(naive, NOW).display == "1:00:00"
