"""
Availability calculator.

Turns the weekly operating hours into half-hour slots for a date and removes
the ones taken by existing appointments (plus the configured buffer).
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from ..settings.schemas import WEEKDAYS

SLOT_MINUTES = 30


def _hour(value: str) -> int:
    return int(value.split(":")[0])


def _day_config(hours, target_date: date) -> Optional[dict]:
    if hours is None:
        return None
    if hasattr(hours, "model_dump"):
        hours = hours.model_dump()
    day = hours.get(WEEKDAYS[target_date.weekday()])
    if day is not None and hasattr(day, "model_dump"):
        day = day.model_dump()
    return day


def generate_slots(target_date: date, hours) -> list[str]:
    """
    Half-hour slots ("HH:MM") from the opening hour up to the closing hour.

    Both hours are truncated to the hour, so 09:15-12:45 yields 09:00..11:30.
    Inactive or unconfigured weekdays, and open >= close, yield no slots.
    """
    day = _day_config(hours, target_date)
    if not day or not day.get("active") or not day.get("open") or not day.get("close"):
        return []

    slots = []
    for hour in range(_hour(day["open"]), _hour(day["close"])):
        slots.append(f"{hour:02d}:00")
        slots.append(f"{hour:02d}:30")
    return slots


def slot_start(target_date: date, slot: str) -> datetime:
    hour, minute = (int(part) for part in slot.split(":"))
    return datetime.combine(target_date, time(hour, minute))


def available_slots(
    target_date: date,
    hours,
    booked: Iterable[tuple[datetime, int]] = (),
    buffer_minutes: int = 0,
    duration_minutes: int = SLOT_MINUTES,
) -> list[str]:
    """
    Slots that do not collide with a booked appointment.

    booked holds (start, duration in minutes) of the day's non-cancelled
    appointments. Each one blocks [start, start + duration + buffer); a
    candidate occupies [slot, slot + duration_minutes).
    """
    blocked = [
        (start, start + timedelta(minutes=(duration or 0) + max(buffer_minutes, 0)))
        for start, duration in booked
    ]
    length = timedelta(minutes=max(duration_minutes, SLOT_MINUTES))

    free = []
    for slot in generate_slots(target_date, hours):
        begin = slot_start(target_date, slot)
        end = begin + length
        if any(begin < b_end and b_start < end for b_start, b_end in blocked):
            continue
        free.append(slot)
    return free
