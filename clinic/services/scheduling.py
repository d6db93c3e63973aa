"""
Doctor scheduling rules.

Two questions are answered here and they deliberately use different
granularity:

* ``has_conflict`` guards writes.  It only rejects a booking that
  starts at exactly the same (doctor, date, time) as another live
  appointment.  Overlapping intervals with different start times are
  accepted.
* ``available_slots`` / ``doctor_availability`` answer "when is this
  doctor free?" for the booking UI and reason about full intervals.

Cancelled and no-show appointments are ignored by both.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional

from django.conf import settings

from clinic.models import Appointment

TIME_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')
MINUTES_PER_DAY = 24 * 60


def parse_time(value: str) -> int:
    """``"9:05"`` -> 545.  Raises ``ValueError`` on a malformed clock time."""
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValueError(f'invalid time {value!r}')
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    return format_time(parse_time(value))


def has_conflict(doctor_id: int, date, time: str, exclude_id: Optional[int] = None) -> bool:
    qs = (Appointment.objects
          .filter(doctor_id=doctor_id, date=date, time=normalize_time(time))
          .exclude(status__in=Appointment.INACTIVE_STATUSES))
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()


def available_slots(booked: Iterable[tuple[str, int]],
                    day_start: str = '09:00',
                    day_end: str = '17:00',
                    slot_minutes: int = 30) -> list[str]:
    """Slot start times inside ``[day_start, day_end)`` not touched by ``booked``.

    ``booked`` is an iterable of ``(HH:MM, duration)`` pairs.  A slot
    ``[s, s + slot)`` is blocked by an appointment ``[a, a + d)`` when
    ``s < a + d`` and ``s + slot > a``, so back-to-back bookings leave
    the neighbouring slot free.
    """
    start = parse_time(day_start)
    end = parse_time(day_end)
    intervals = [(parse_time(t), parse_time(t) + int(d)) for t, d in booked]

    free: list[str] = []
    s = start
    while s + slot_minutes <= end:
        if not any(s < apt_end and s + slot_minutes > apt_start for apt_start, apt_end in intervals):
            free.append(format_time(s))
        s += slot_minutes
    return free


def booked_appointments(doctor_id: int, date):
    return (Appointment.objects
            .filter(doctor_id=doctor_id, date=date)
            .exclude(status__in=Appointment.INACTIVE_STATUSES)
            .order_by('time'))


def doctor_availability(doctor_id: int, date) -> dict:
    booked = [(a.time, a.duration) for a in booked_appointments(doctor_id, date)]
    slots = available_slots(
        booked,
        day_start=settings.AVAILABILITY_DAY_START,
        day_end=settings.AVAILABILITY_DAY_END,
        slot_minutes=settings.AVAILABILITY_SLOT_MINUTES,
    )
    return {
        'date': date.isoformat(),
        'availableSlots': slots,
        'bookedSlots': [{'time': t, 'duration': d} for t, d in booked],
    }
