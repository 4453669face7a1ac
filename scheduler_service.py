"""Scheduler Service - application layer around the rota engine.

This module gives callers one object to work with: it loads roles, workers,
shift templates, leave and engine settings from a YAML config, keeps the
rotation history and attendance records between calls, and runs generation.
Storage of those records beyond the config and history files belongs to the
caller.
"""

from __future__ import annotations

import json
import os
import random
from dataclasses import dataclass
from datetime import date
from typing import Optional

import yaml

from attendance import record_attendance
from constants import ATTENDANCE_STATUSES, GAP_FILL_MAX_PASSES, LATE_THRESHOLD_MINUTES
from history_view import ShiftHistory
from logger import get_logger
from models import AttendanceRecord, LeaveRequest, Role, ShiftTemplate, Worker, WorkerStats
from scheduler_builders import sort_workers
from scheduling_engine import GenerationResult, generate_schedule
from utils import parse_date, week_dates

logger = get_logger('scheduler_service')


@dataclass
class EngineSettings:
    """Tunable generation parameters read from the `settings` config block."""
    seed: Optional[int] = None
    gap_fill_max_passes: int = GAP_FILL_MAX_PASSES
    late_threshold_minutes: int = LATE_THRESHOLD_MINUTES

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "gap_fill_max_passes": self.gap_fill_max_passes,
            "late_threshold_minutes": self.late_threshold_minutes,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "EngineSettings":
        data = data or {}
        return cls(
            seed=data.get("seed"),
            gap_fill_max_passes=int(data.get("gap_fill_max_passes", GAP_FILL_MAX_PASSES)),
            late_threshold_minutes=int(data.get("late_threshold_minutes", LATE_THRESHOLD_MINUTES)),
        )


class SchedulerService:
    """
    Service layer for rota operations.

    This class provides a clean API for:
    - Configuration loading and saving (roles, workers, shifts, leave, settings)
    - Leave management
    - Weekly schedule generation and rotation history
    - Attendance marking and summaries
    - Per-worker statistics
    """

    DEFAULT_CONFIG_FILE = "config.yaml"

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the scheduler service.

        Args:
            config_path: Path to configuration file. If None, uses default.
        """
        self._config_path = config_path or self._get_default_config_path()
        self._settings = EngineSettings()
        self._roles: list[Role] = []
        self._workers: list[Worker] = []
        self._shifts: list[ShiftTemplate] = []
        self._leave: set[tuple[str, date]] = set()
        self._history = ShiftHistory()
        self._attendance: dict[tuple[str, date, str], AttendanceRecord] = {}
        self._last_result: Optional[GenerationResult] = None

        self._load_config()
        self._rng = random.Random(self._settings.seed)

    @staticmethod
    def _get_default_config_path() -> str:
        """Get the default config file path."""
        return os.path.join(os.path.dirname(os.path.abspath(__file__)), SchedulerService.DEFAULT_CONFIG_FILE)

    # =========================================================================
    # Configuration Management
    # =========================================================================

    def _load_config(self) -> None:
        """Load configuration from file."""
        if not os.path.exists(self._config_path):
            logger.info(f"Config file not found at {self._config_path}, starting empty")
            return

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
            self._apply_config(config)
            logger.info(
                f"Configuration loaded from {self._config_path}: "
                f"{len(self._roles)} roles, {len(self._workers)} workers, {len(self._shifts)} shifts"
            )
        except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Could not load config file: {e}")
            self._settings = EngineSettings()
            self._roles, self._workers, self._shifts = [], [], []
            self._leave = set()

    def _apply_config(self, config: dict) -> None:
        self._settings = EngineSettings.from_dict(config.get('settings'))
        self._roles = [Role.from_dict(r) for r in config.get('roles') or []]
        roles_by_id = {r.id: r for r in self._roles}
        self._workers = [Worker.from_dict(w) for w in config.get('workers') or []]
        self._shifts = [
            ShiftTemplate.from_dict(s, roles_by_id.get(str(s.get('role_id'))))
            for s in config.get('shifts') or []
        ]
        self._leave = {LeaveRequest.from_dict(item).key for item in config.get('leave') or []}

    def save_config(self) -> bool:
        """Save current configuration to file.

        Returns:
            True if save was successful, False otherwise.
        """
        config = {
            'settings': self._settings.to_dict(),
            'roles': [r.to_dict() for r in self._roles],
            'workers': [w.to_dict() for w in self._workers],
            'shifts': [
                {k: v for k, v in s.to_dict().items() if k != 'hours'}
                for s in self._shifts
            ],
            'leave': [LeaveRequest(w, d).to_dict() for w, d in sorted(self._leave)],
        }
        try:
            with open(self._config_path, 'w', encoding='utf-8') as f:
                yaml.dump(config, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
            logger.info(f"Configuration saved to {self._config_path}")
            return True
        except OSError as e:
            logger.error(f"Could not save config file: {e}")
            return False

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def reseed(self, seed: Optional[int]) -> None:
        """Pin (or unpin, with None) the random source used for generation."""
        self._settings.seed = seed
        self._rng = random.Random(seed)

    # =========================================================================
    # Entities (read only here; editing belongs to the caller)
    # =========================================================================

    @property
    def roles(self) -> list[Role]:
        return self._roles.copy()

    @property
    def workers(self) -> list[Worker]:
        """Workers in processing order: role name, then worker name."""
        return sort_workers(self._workers, {r.id: r for r in self._roles})

    @property
    def shifts(self) -> list[ShiftTemplate]:
        return self._shifts.copy()

    def get_worker(self, worker_id: str) -> Optional[Worker]:
        for w in self._workers:
            if w.id == worker_id:
                return w
        return None

    def get_shift(self, shift_id: str) -> Optional[ShiftTemplate]:
        for s in self._shifts:
            if s.id == shift_id:
                return s
        return None

    # =========================================================================
    # Leave Management
    # =========================================================================

    def add_leave(self, worker_id: str, day) -> bool:
        """Mark a worker unavailable on a date.

        Returns:
            True if added, False if already present or worker not found
        """
        if self.get_worker(worker_id) is None:
            return False
        key = (worker_id, parse_date(day))
        if key in self._leave:
            return False
        self._leave.add(key)
        return True

    def remove_leave(self, worker_id: str, day) -> bool:
        key = (worker_id, parse_date(day))
        if key not in self._leave:
            return False
        self._leave.discard(key)
        return True

    def is_on_leave(self, worker_id: str, day) -> bool:
        return (worker_id, parse_date(day)) in self._leave

    @property
    def leave_requests(self) -> list[LeaveRequest]:
        return [LeaveRequest(w, d) for w, d in sorted(self._leave)]

    # =========================================================================
    # History Management
    # =========================================================================

    @property
    def history(self) -> ShiftHistory:
        return self._history.copy()

    def load_history(self, path: str) -> bool:
        """Replace the rotation history with the snapshot stored at `path`."""
        if not os.path.exists(path):
            logger.info(f"History file not found at {path}, keeping current history")
            return False
        try:
            with open(path, 'r', encoding='utf-8') as f:
                self._history = ShiftHistory.from_mapping(json.load(f))
            logger.info(f"History loaded from {path}")
            return True
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load history file: {e}")
            return False

    def save_history(self, path: str) -> bool:
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self._history.to_dict(), f, indent=2, sort_keys=True)
            logger.info(f"History saved to {path}")
            return True
        except OSError as e:
            logger.error(f"Could not save history file: {e}")
            return False

    # =========================================================================
    # Schedule Generation
    # =========================================================================

    def generate_schedule(self, week_of: Optional[date] = None) -> GenerationResult:
        """Generate the week containing `week_of` (default: this week).

        The service's rotation history is replaced by the updated snapshot.
        Generation calls on one service must not overlap.
        """
        week = week_dates(week_of)
        result = generate_schedule(
            week,
            self._roles,
            self._shifts,
            self._workers,
            leave=[LeaveRequest(w, d) for w, d in self._leave],
            history=self._history,
            rng=self._rng,
            max_gap_fill_passes=self._settings.gap_fill_max_passes,
        )
        self._history = result.history
        self._last_result = result
        return result

    @property
    def last_result(self) -> Optional[GenerationResult]:
        return self._last_result

    # =========================================================================
    # Attendance
    # =========================================================================

    def mark_attendance(self, worker_id: str, day, shift_id: str, clock_time) -> AttendanceRecord:
        """Classify and store a clock-in for (worker, date, shift).

        Raises:
            InputError: clock time missing or malformed
            KeyError: unknown shift id
        """
        record = record_attendance(
            {s.id: s for s in self._shifts},
            worker_id,
            parse_date(day),
            shift_id,
            clock_time,
            self._settings.late_threshold_minutes,
        )
        self._attendance[record.key] = record
        logger.info(f"Attendance {worker_id} {record.date} {shift_id}: {record.clock_in} -> {record.status}")
        return record

    def get_attendance(self, worker_id: str, day, shift_id: str) -> Optional[AttendanceRecord]:
        return self._attendance.get((worker_id, parse_date(day), shift_id))

    def attendance_summary(self, day) -> dict[str, int]:
        """Counts of each punctuality status recorded on a date."""
        day = parse_date(day)
        summary = {status: 0 for status in ATTENDANCE_STATUSES}
        for record in self._attendance.values():
            if record.date == day:
                summary[record.status] += 1
        return summary

    # =========================================================================
    # Statistics
    # =========================================================================

    def worker_stats(self, result: Optional[GenerationResult] = None) -> list[WorkerStats]:
        """Per-worker weekly totals for a generated schedule (default: the last one)."""
        result = result or self._last_result
        stats = {
            w.id: WorkerStats(worker_id=w.id, name=w.name, target_shifts=w.shifts_per_week)
            for w in self.workers
        }
        if result is None:
            return list(stats.values())

        for per_worker in result.schedule.values():
            for worker_id, templates in per_worker.items():
                entry = stats.get(worker_id)
                if entry is None:
                    continue
                for template in templates:
                    entry.assigned_shifts += 1
                    entry.assigned_hours += template.hours
                    entry.shifts_by_template[template.id] = entry.shifts_by_template.get(template.id, 0) + 1
        return list(stats.values())
