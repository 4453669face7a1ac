"""Clock-in punctuality classification.

Stateless: the same nominal start and clock-in always give the same status.
"""

from __future__ import annotations

from datetime import date
from typing import Mapping

from constants import LATE_THRESHOLD_MINUTES, STATUS_CORRECT, STATUS_LATE, STATUS_ON_TIME
from models import AttendanceRecord, ShiftTemplate
from utils import minutes_between


class InputError(ValueError):
    """Raised when a clock-in time is missing or unreadable."""


def classify_punctuality(start_time, clock_in, late_threshold: int = LATE_THRESHOLD_MINUTES) -> str:
    """Classify a clock-in against a shift's nominal start on the same date.

    Returns 'on-time' at or before the start, 'correct' up to
    `late_threshold` minutes after it, and 'late' beyond that.
    """
    if clock_in is None or (isinstance(clock_in, str) and not clock_in.strip()):
        raise InputError("Clock-in time is required")
    try:
        diff = minutes_between(start_time, clock_in)
    except ValueError as e:
        raise InputError(str(e)) from e

    if diff > late_threshold:
        return STATUS_LATE
    if diff > 0:
        return STATUS_CORRECT
    return STATUS_ON_TIME


def record_attendance(
    templates_by_id: Mapping[str, ShiftTemplate],
    worker_id: str,
    day: date,
    shift_id: str,
    clock_in,
    late_threshold: int = LATE_THRESHOLD_MINUTES,
) -> AttendanceRecord:
    """Classify a clock-in for (worker, date, shift) and return the record.

    Raises:
        InputError: clock-in missing or malformed.
        KeyError: unknown shift id.
    """
    if clock_in is None or (isinstance(clock_in, str) and not clock_in.strip()):
        raise InputError(f"Clock-in time is required for {worker_id} on {day}")
    if shift_id not in templates_by_id:
        raise KeyError(f"Unknown shift '{shift_id}'")
    template = templates_by_id[shift_id]
    status = classify_punctuality(template.start_time, clock_in, late_threshold)
    clock_label = clock_in if isinstance(clock_in, str) else clock_in.strftime("%H:%M")
    return AttendanceRecord(
        worker_id=worker_id,
        date=day,
        shift_id=shift_id,
        clock_in=clock_label.strip(),
        status=status,
    )
