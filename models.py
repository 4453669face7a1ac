"""Domain records consumed and produced by the rota engine.

Workers, roles, shift templates and leave requests are read-only inputs for a
generation call. `ScheduleSlot` is transient and lives only inside one call;
it refers to workers, templates and roles by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_DAILY_MAX_HOURS,
    DEFAULT_SHIFT_PRIORITY,
    DEFAULT_WEEKLY_HOURS,
    WEEKDAY_NAMES,
)
from utils import calculate_shift_hours, calculate_shifts_per_week, parse_date


def _as_list(value) -> list[str]:
    """Accept a list or a comma separated string of tags."""
    if not value:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(',') if s.strip()]
    return [str(s) for s in value]


@dataclass(frozen=True)
class Role:
    """A job role; every worker and shift template belongs to exactly one."""
    id: str
    name: str
    weekend_required: bool = False
    required_skills: frozenset[str] = frozenset()
    break_minutes: int = DEFAULT_BREAK_MINUTES

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "weekend_required": self.weekend_required,
            "required_skills": sorted(self.required_skills),
            "break_minutes": self.break_minutes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Role":
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            weekend_required=bool(data.get("weekend_required", False)),
            required_skills=frozenset(_as_list(data.get("required_skills"))),
            break_minutes=int(data.get("break_minutes", DEFAULT_BREAK_MINUTES) or 0),
        )


@dataclass(frozen=True)
class Worker:
    """A worker with weekly and daily hour limits.

    `shifts_per_week` is derived from the hour fields unless given explicitly.
    """
    id: str
    name: str
    role_id: str
    weekly_hours: float = DEFAULT_WEEKLY_HOURS
    daily_max_hours: float = DEFAULT_DAILY_MAX_HOURS
    shifts_per_week: Optional[int] = None
    skills: frozenset[str] = frozenset()

    def __post_init__(self):
        if self.shifts_per_week is None:
            object.__setattr__(
                self, "shifts_per_week",
                calculate_shifts_per_week(self.weekly_hours, self.daily_max_hours),
            )
        elif self.shifts_per_week < 0:
            raise ValueError(f"Worker {self.id}: shifts_per_week must be non-negative")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role_id": self.role_id,
            "weekly_hours": self.weekly_hours,
            "daily_max_hours": self.daily_max_hours,
            "shifts_per_week": self.shifts_per_week,
            "skills": sorted(self.skills),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Worker":
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            role_id=str(data["role_id"]),
            weekly_hours=data.get("weekly_hours", DEFAULT_WEEKLY_HOURS),
            daily_max_hours=data.get("daily_max_hours", DEFAULT_DAILY_MAX_HOURS),
            shifts_per_week=data.get("shifts_per_week"),
            skills=frozenset(_as_list(data.get("skills"))),
        )


@dataclass(frozen=True)
class ShiftTemplate:
    """A recurring shift offered on a set of weekdays.

    `hours` is the paid length: end minus start (wrapping past midnight),
    minus the owning role's break.
    """
    id: str
    name: str
    start_time: str
    end_time: str
    role_id: str
    days_of_week: frozenset[str] = frozenset()
    priority: Optional[int] = DEFAULT_SHIFT_PRIORITY
    hours: float = 0.0

    @property
    def weight(self) -> int:
        return self.priority or DEFAULT_SHIFT_PRIORITY

    def operates_on(self, day_name: str) -> bool:
        return day_name in self.days_of_week

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "role_id": self.role_id,
            "days_of_week": [d for d in WEEKDAY_NAMES if d in self.days_of_week],
            "priority": self.priority,
            "hours": self.hours,
        }

    @classmethod
    def from_dict(cls, data: dict, role: Optional[Role] = None) -> "ShiftTemplate":
        """Build a template; hours are derived from times and the role's break."""
        break_minutes = role.break_minutes if role is not None else 0
        start = data.get("start_time", "09:00")
        end = data.get("end_time", "17:00")
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            start_time=start,
            end_time=end,
            role_id=str(data["role_id"]),
            days_of_week=frozenset(_as_list(data.get("days_of_week"))),
            priority=data.get("priority", DEFAULT_SHIFT_PRIORITY),
            hours=calculate_shift_hours(start, end, break_minutes),
        )


@dataclass(frozen=True)
class LeaveRequest:
    worker_id: str
    date: date

    @property
    def key(self) -> tuple[str, date]:
        return (self.worker_id, self.date)

    def to_dict(self) -> dict:
        return {"worker_id": self.worker_id, "date": self.date.isoformat()}

    @classmethod
    def from_dict(cls, data: dict) -> "LeaveRequest":
        return cls(worker_id=str(data["worker_id"]), date=parse_date(data["date"]))


@dataclass
class ScheduleSlot:
    """One unit of coverage demand: a template on a date, for at most one worker."""
    date: date
    day_index: int
    shift_id: str
    role_id: str
    worker_id: Optional[str] = None
    filled: bool = False
    relaxed: bool = False
    gap_fill: bool = False

    def assign(self, worker_id: str, relaxed: bool = False) -> None:
        self.worker_id = worker_id
        self.filled = True
        self.relaxed = relaxed


@dataclass
class AttendanceRecord:
    worker_id: str
    date: date
    shift_id: str
    clock_in: str
    status: str

    @property
    def key(self) -> tuple[str, date, str]:
        return (self.worker_id, self.date, self.shift_id)

    def to_dict(self) -> dict:
        return {
            "worker_id": self.worker_id,
            "date": self.date.isoformat(),
            "shift_id": self.shift_id,
            "clock_in": self.clock_in,
            "status": self.status,
        }


@dataclass
class WorkerStats:
    """Weekly totals for a single worker."""
    worker_id: str
    name: str
    target_shifts: int = 0
    assigned_shifts: int = 0
    assigned_hours: float = 0.0
    shifts_by_template: dict[str, int] = field(default_factory=dict)

    @property
    def shortfall(self) -> int:
        return max(0, self.target_shifts - self.assigned_shifts)
