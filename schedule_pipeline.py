"""Allocation pipeline for one week of shifts.

The pieces here run in order inside one generation call:
  capacity -> division -> slots -> main sweep -> gap fill -> assembly

All mutable state lives on an `AllocationContext` created per call and
threaded through each phase. The only state that outlives the call is the
updated shift history, which the caller persists.
"""

from __future__ import annotations

import random
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from constants import GAP_FILL_MAX_PASSES, WEEKDAY_NAMES
from history_view import ShiftHistory
from logger import get_logger
from model_constraints import can_take, eligible_pool
from model_objectives import gap_fill_template_order, select_worker
from models import LeaveRequest, Role, ScheduleSlot, ShiftTemplate, Worker
from scheduler_builders import (
    divide_allocation,
    generate_slots,
    group_workers_by_role,
    plan_role_capacity,
    sort_workers,
)

logger = get_logger('schedule_pipeline')

Schedule = dict[date, dict[str, list[ShiftTemplate]]]


@dataclass
class AllocationContext:
    """Per-call working state. Discarded once the schedule is assembled."""
    week: list[date]
    roles: list[Role]
    templates: list[ShiftTemplate]
    workers: list[Worker]
    leave: set[tuple[str, date]]
    history: ShiftHistory
    rng: random.Random
    roles_by_id: dict[str, Role] = field(default_factory=dict)
    templates_by_id: dict[str, ShiftTemplate] = field(default_factory=dict)
    templates_by_role: dict[str, list[ShiftTemplate]] = field(default_factory=dict)
    workers_by_id: dict[str, Worker] = field(default_factory=dict)
    workers_by_role: dict[str, list[Worker]] = field(default_factory=dict)
    capacity: dict[str, int] = field(default_factory=dict)
    allocation: dict[str, dict[str, int]] = field(default_factory=dict)
    skipped_roles: list[str] = field(default_factory=list)
    slots: list[ScheduleSlot] = field(default_factory=list)
    gap_fill_passes: int = 0
    _weekly_counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    _day_hours: dict[tuple[str, date], float] = field(default_factory=lambda: defaultdict(float))
    _day_shifts: dict[tuple[str, date], list[str]] = field(default_factory=lambda: defaultdict(list))

    def __post_init__(self):
        self.roles_by_id = {r.id: r for r in self.roles}
        self.templates_by_id = {t.id: t for t in self.templates}
        self.templates_by_role = {}
        for t in self.templates:
            self.templates_by_role.setdefault(t.role_id, []).append(t)
        self.workers = sort_workers(self.workers, self.roles_by_id)
        self.workers_by_id = {w.id: w for w in self.workers}
        self.workers_by_role = group_workers_by_role(self.workers)
        self.history.ensure_workers(self.workers_by_id)

    def is_on_leave(self, worker_id: str, day: date) -> bool:
        return (worker_id, day) in self.leave

    def assigned_count(self, worker_id: str) -> int:
        return self._weekly_counts.get(worker_id, 0)

    def hours_on(self, worker_id: str, day: date) -> float:
        return self._day_hours.get((worker_id, day), 0.0)

    def shifts_on(self, worker_id: str, day: date) -> list[str]:
        return self._day_shifts.get((worker_id, day), [])

    def record_assignment(self, slot: ScheduleSlot, worker: Worker, relaxed: bool = False) -> None:
        template = self.templates_by_id[slot.shift_id]
        slot.assign(worker.id, relaxed=relaxed)
        self._weekly_counts[worker.id] += 1
        self._day_hours[(worker.id, slot.date)] += template.hours
        self._day_shifts[(worker.id, slot.date)].append(template.id)
        self.history.increment(worker.id, template.id)

    def under_quota_workers(self) -> list[Worker]:
        return [w for w in self.workers if self.assigned_count(w.id) < w.shifts_per_week]


def build_context(
    week: list[date],
    roles: Iterable[Role],
    templates: Iterable[ShiftTemplate],
    workers: Iterable[Worker],
    leave: Iterable[LeaveRequest | tuple[str, date]],
    history: ShiftHistory,
    rng: Optional[random.Random] = None,
) -> AllocationContext:
    leave_keys = {item.key if isinstance(item, LeaveRequest) else tuple(item) for item in leave}
    return AllocationContext(
        week=list(week),
        roles=list(roles),
        templates=list(templates),
        workers=list(workers),
        leave=leave_keys,
        history=history,
        rng=rng or random.Random(),
    )


def build_slots(ctx: AllocationContext) -> list[ScheduleSlot]:
    """Size every role, split it over its templates, and lay out the slots."""
    ctx.capacity = plan_role_capacity(ctx.roles, ctx.workers_by_role)

    for role in ctx.roles:
        role_templates = ctx.templates_by_role.get(role.id, [])
        if not role_templates:
            continue
        role_workers = ctx.workers_by_role.get(role.id, [])
        if not role_workers:
            ctx.skipped_roles.append(role.id)
            logger.info(f"Role '{role.name}' has {len(role_templates)} shift(s) but no workers; skipped")
            continue

        quotas = divide_allocation(ctx.capacity[role.id], role_templates)
        ctx.allocation[role.id] = quotas
        logger.info(f"Role '{role.name}': capacity={ctx.capacity[role.id]}, allocation={quotas}")

        for template in role_templates:
            ctx.slots.extend(
                generate_slots(template, quotas[template.id], ctx.week, ctx.rng, len(role_workers))
            )
    return ctx.slots


def order_slots(ctx: AllocationContext) -> list[ScheduleSlot]:
    """Ascending date; slots sharing a date come in random order."""
    shuffled = list(ctx.slots)
    ctx.rng.shuffle(shuffled)
    shuffled.sort(key=lambda s: s.date)
    ctx.slots = shuffled
    return ctx.slots


def run_main_sweep(ctx: AllocationContext) -> int:
    """Fill each slot with the top-ranked eligible worker. Returns slots filled."""
    filled = 0
    for slot in order_slots(ctx):
        pool, relaxed = eligible_pool(ctx, slot)
        if not pool:
            logger.debug(f"No candidate for {slot.shift_id} on {slot.date}")
            continue
        worker = select_worker(ctx, pool, slot.shift_id)
        ctx.record_assignment(slot, worker, relaxed=relaxed)
        filled += 1
        if relaxed:
            logger.warning(
                f"Weekly quota relaxed: {worker.name} takes {slot.shift_id} on {slot.date} "
                f"({ctx.assigned_count(worker.id)}/{worker.shifts_per_week})"
            )
    return filled


def _top_up_worker(ctx: AllocationContext, worker: Worker) -> Optional[ScheduleSlot]:
    """Give one extra shift to a short worker on the first valid (template, day)."""
    role = ctx.roles_by_id.get(worker.role_id)
    if role is None:
        return None
    templates = gap_fill_template_order(ctx, worker, ctx.templates_by_role.get(role.id, []))
    for template in templates:
        for day_index, day in enumerate(ctx.week):
            if not template.operates_on(WEEKDAY_NAMES[day_index]):
                continue
            if not can_take(ctx, worker, day, template, role):
                continue
            slot = ScheduleSlot(
                date=day,
                day_index=day_index,
                shift_id=template.id,
                role_id=role.id,
                gap_fill=True,
            )
            ctx.slots.append(slot)
            ctx.record_assignment(slot, worker)
            return slot
    return None


def run_gap_fill(ctx: AllocationContext, max_passes: int = GAP_FILL_MAX_PASSES) -> int:
    """Top up workers still short of their weekly quota.

    Each pass gives every short worker at most one extra shift. Stops after
    `max_passes` or as soon as a pass assigns nothing. Returns shifts added.
    """
    added = 0
    for pass_number in range(1, max_passes + 1):
        short = ctx.under_quota_workers()
        if not short:
            break
        ctx.gap_fill_passes = pass_number
        added_this_pass = 0
        for worker in short:
            if _top_up_worker(ctx, worker) is not None:
                added_this_pass += 1
        logger.info(f"Gap fill pass {pass_number}: {added_this_pass} shift(s) added for {len(short)} short worker(s)")
        if not added_this_pass:
            break
        added += added_this_pass
    return added


def assemble_schedule(ctx: AllocationContext) -> Schedule:
    """Collapse filled slots into date -> worker_id -> [templates]."""
    schedule: Schedule = {}
    for slot in sorted((s for s in ctx.slots if s.filled), key=lambda s: s.date):
        template = ctx.templates_by_id[slot.shift_id]
        schedule.setdefault(slot.date, {}).setdefault(slot.worker_id, []).append(template)
    return schedule
