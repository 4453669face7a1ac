"""Eligibility rules for filling a slot.

Four rules are hard and hold in every produced schedule: no work on a
leave day, the daily hour cap, no duplicate template on one day, and no
weekend work for roles that do not require it. The weekly quota cap is
soft: it is dropped only when the strict pool for a slot is empty.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from constants import GAP_NO_WORKERS_AVAILABLE, GAP_WEEKEND_NOT_ALLOWED
from models import Role, ScheduleSlot, ShiftTemplate, Worker
from utils import is_weekend

if TYPE_CHECKING:
    from schedule_pipeline import AllocationContext

# Tolerance for summing fractional shift hours.
HOURS_EPSILON = 1e-9


def weekend_allowed(role: Role, day: date) -> bool:
    return role.weekend_required or not is_weekend(day)


def fits_daily_hours(ctx: AllocationContext, worker: Worker, day: date, template: ShiftTemplate) -> bool:
    return ctx.hours_on(worker.id, day) + template.hours <= worker.daily_max_hours + HOURS_EPSILON


def holds_shift(ctx: AllocationContext, worker_id: str, day: date, shift_id: str) -> bool:
    return shift_id in ctx.shifts_on(worker_id, day)


def under_weekly_quota(ctx: AllocationContext, worker: Worker) -> bool:
    return ctx.assigned_count(worker.id) < worker.shifts_per_week


def can_take(ctx: AllocationContext, worker: Worker, day: date, template: ShiftTemplate, role: Role) -> bool:
    """Hard rules only; the weekly quota is not checked."""
    if ctx.is_on_leave(worker.id, day):
        return False
    if not fits_daily_hours(ctx, worker, day, template):
        return False
    if holds_shift(ctx, worker.id, day, template.id):
        return False
    return weekend_allowed(role, day)


def is_eligible(ctx: AllocationContext, worker: Worker, day: date, template: ShiftTemplate, role: Role) -> bool:
    return under_weekly_quota(ctx, worker) and can_take(ctx, worker, day, template, role)


def eligible_pool(ctx: AllocationContext, slot: ScheduleSlot) -> tuple[list[Worker], bool]:
    """Return (candidates, relaxed) for a slot.

    `relaxed` is True when no worker passed the strict rules and the pool was
    rebuilt without the weekly quota cap.
    """
    template = ctx.templates_by_id[slot.shift_id]
    role = ctx.roles_by_id[slot.role_id]
    candidates = ctx.workers_by_role.get(slot.role_id, [])

    strict = [w for w in candidates if is_eligible(ctx, w, slot.date, template, role)]
    if strict:
        return strict, False

    relaxed = [w for w in candidates if can_take(ctx, w, slot.date, template, role)]
    return relaxed, bool(relaxed)


def empty_pool_reason(ctx: AllocationContext, slot: ScheduleSlot) -> str:
    """Why a slot could not be filled even with the relaxed pool."""
    role = ctx.roles_by_id[slot.role_id]
    if not weekend_allowed(role, slot.date):
        return GAP_WEEKEND_NOT_ALLOWED
    return GAP_NO_WORKERS_AVAILABLE
