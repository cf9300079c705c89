"""
Slot generation - pure computation of bookable start times.

Given an already-resolved weekly rule, an optional special date override,
the times already booked and "now", produce the ordered list of "HH:MM"
strings a patient may book. No storage access happens here; callers
(AvailabilityService) resolve every input first.
"""

import logging
from datetime import date, datetime, tzinfo
from typing import Iterable, List, Optional, Set

from clinic_booking.core.exceptions import InvalidScheduleConfig
from clinic_booking.core.validation import format_hhmm, parse_hhmm
from clinic_booking.domain.entities import SpecialDate, WeeklyScheduleRule

logger = logging.getLogger(__name__)


def _to_minutes(value: Optional[str], field_name: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return parse_hhmm(value)
    except ValueError as e:
        raise InvalidScheduleConfig(f"{field_name}: {e}")


def _booked_minutes(booked_times: Optional[Iterable[str]]) -> Set[int]:
    minutes: Set[int] = set()
    for value in booked_times or ():
        if not value:
            continue
        try:
            minutes.add(parse_hhmm(value))
        except ValueError:
            # A booked time that is not "HH:MM" can never match a slot boundary
            logger.debug(f"Ignoring malformed booked time {value!r}")
    return minutes


def local_now(reference_now: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Express ``reference_now`` as clinic wall-clock time.

    Naive datetimes are taken to already be clinic-local.
    """
    if tz is not None and reference_now.tzinfo is not None:
        return reference_now.astimezone(tz)
    return reference_now


def slot_count(start_time: str, end_time: str, step_minutes: int) -> int:
    """Number of slots in [start, end) with no break and no bookings."""
    if step_minutes <= 0:
        raise InvalidScheduleConfig("slot_duration + buffer_time must be positive")
    span = parse_hhmm(end_time) - parse_hhmm(start_time)
    if span <= 0:
        return 0
    return -(-span // step_minutes)


def generate_slots(
    rule: Optional[WeeklyScheduleRule],
    override: Optional[SpecialDate] = None,
    booked_times: Optional[Iterable[str]] = None,
    reference_now: Optional[datetime] = None,
    target_date: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> List[str]:
    """
    Compute the bookable time strings for one doctor on one date.

    Args:
        rule: Weekly rule for the date's weekday (None -> no slots)
        override: Special date for that exact date, if any
        booked_times: "HH:MM" strings already held by active appointments
        reference_now: Current timestamp, used to drop elapsed slots today
        target_date: The calendar date the slots are for
        tz: Clinic timezone used to decide what "today" is

    Returns:
        Ascending list of "HH:MM" strings.

    Raises:
        InvalidScheduleConfig: non-positive step or malformed time window
    """
    if rule is None or not rule.is_active:
        return []
    if override is not None and override.is_holiday:
        return []

    step = rule.slot_duration + rule.buffer_time
    if step <= 0:
        raise InvalidScheduleConfig(
            f"slot_duration + buffer_time must be positive (got {step})"
        )

    if override is not None and override.has_custom_hours:
        start = _to_minutes(override.start_time, "start_time")
        end = _to_minutes(override.end_time, "end_time")
    else:
        start = _to_minutes(rule.start_time, "start_time")
        end = _to_minutes(rule.end_time, "end_time")

    if override is not None and override.has_break_window:
        break_start = _to_minutes(override.break_start, "break_start")
        break_end = _to_minutes(override.break_end, "break_end")
    else:
        break_start = _to_minutes(rule.break_start, "break_start")
        break_end = _to_minutes(rule.break_end, "break_end")

    if (break_start is None) != (break_end is None):
        raise InvalidScheduleConfig("break window needs both start and end")
    if break_start is not None and break_start >= break_end:
        raise InvalidScheduleConfig("break_start must be before break_end")

    booked = _booked_minutes(booked_times)

    elapsed_cutoff = None
    if reference_now is not None and target_date is not None:
        now = local_now(reference_now, tz)
        if now.date() == target_date:
            elapsed_cutoff = now.hour * 60 + now.minute

    slots: List[str] = []
    current = start
    while current < end:
        in_break = break_start is not None and break_start <= current < break_end
        is_elapsed = elapsed_cutoff is not None and current <= elapsed_cutoff
        if not in_break and current not in booked and not is_elapsed:
            slots.append(format_hhmm(current))
        current += step

    return slots
