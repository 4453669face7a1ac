from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from constants import DAYS_PER_WEEK, GAP_FILL_MAX_PASSES
from constraint_diagnostics import CoverageReport, build_coverage_report
from history_view import ShiftHistory
from logger import get_logger, log_timing, timed
from models import LeaveRequest, Role, ScheduleSlot, ShiftTemplate, Worker
from schedule_pipeline import (
    Schedule,
    assemble_schedule,
    build_context,
    build_slots,
    run_gap_fill,
    run_main_sweep,
)

logger = get_logger('engine')


@dataclass
class GenerationResult:
    """Output of one generation call.

    `history` is a new snapshot that includes this week's assignments; the
    input history is left untouched.
    """
    schedule: Schedule
    history: ShiftHistory
    slots: list[ScheduleSlot] = field(default_factory=list)
    coverage: CoverageReport = field(default_factory=CoverageReport)

    def shifts_for(self, worker_id: str, day: date) -> list[ShiftTemplate]:
        return list(self.schedule.get(day, {}).get(worker_id, []))

    def assigned_count(self, worker_id: str) -> int:
        return sum(len(per_worker.get(worker_id, [])) for per_worker in self.schedule.values())

    def relaxed_workers(self) -> set[str]:
        """Workers that received at least one slot through the relaxed pool."""
        return {s.worker_id for s in self.slots if s.filled and s.relaxed}

    def schedule_to_dict(self) -> dict[str, dict[str, list[str]]]:
        return {
            day.isoformat(): {wid: [t.id for t in templates] for wid, templates in per_worker.items()}
            for day, per_worker in self.schedule.items()
        }


@timed(name="generate_schedule")
def generate_schedule(
    week: Iterable[date],
    roles: Iterable[Role],
    templates: Iterable[ShiftTemplate],
    workers: Iterable[Worker],
    leave: Iterable[LeaveRequest] = (),
    history: Optional[ShiftHistory] = None,
    rng: Optional[random.Random] = None,
    max_gap_fill_passes: int = GAP_FILL_MAX_PASSES,
) -> GenerationResult:
    """Allocate workers to the week's shift slots.

    Args:
        week: The 7 dates of the target week, Monday first.
        roles, templates, workers: Validated entities; read only.
        leave: Leave requests; a worker is unavailable on each listed date.
        history: Prior rotation history. Copied, never mutated.
        rng: Random source for remainder days and tie-breaks. Pass a seeded
            `random.Random` for reproducible output.
        max_gap_fill_passes: Upper bound on top-up passes.

    Returns:
        GenerationResult with the schedule, the updated history and a
        coverage report. Unfilled demand is reported, never raised.
    """
    week = list(week)
    if len(week) != DAYS_PER_WEEK:
        raise ValueError(f"Expected {DAYS_PER_WEEK} dates, got {len(week)}")

    working_history = (history or ShiftHistory()).copy()
    ctx = build_context(week, roles, templates, workers, leave, working_history, rng)
    logger.info(
        f"Generating week {week[0].isoformat()}..{week[-1].isoformat()}: "
        f"{len(ctx.workers)} workers, {len(ctx.roles)} roles, {len(ctx.templates)} shifts"
    )

    with log_timing("slot generation", logger):
        build_slots(ctx)
    filled = run_main_sweep(ctx)
    logger.info(f"Main sweep filled {filled}/{len(ctx.slots)} slots")

    added = run_gap_fill(ctx, max_gap_fill_passes)
    if added:
        logger.info(f"Gap fill added {added} shift(s)")

    schedule = assemble_schedule(ctx)
    coverage = build_coverage_report(ctx)
    if coverage.unfilled_slots:
        logger.warning(f"{coverage.unfilled_slots} slot(s) left unfilled")

    return GenerationResult(
        schedule=schedule,
        history=ctx.history,
        slots=ctx.slots,
        coverage=coverage,
    )
