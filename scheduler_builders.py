"""Pure builder helpers for schedule generation.

This module contains no assignment logic. It sizes each role's weekly
capacity, divides it across the role's shift templates, and expands each
template's quota into dated, unassigned slots.
"""

from __future__ import annotations

import math
import random
from datetime import date
from typing import Iterable, Mapping, Sequence

from constants import MIN_SLOTS_PER_OPERATING_DAY, WEEKDAY_NAMES
from logger import get_logger
from models import Role, ScheduleSlot, ShiftTemplate, Worker

logger = get_logger('builders')


def sort_workers(workers: Iterable[Worker], roles_by_id: Mapping[str, Role]) -> list[Worker]:
    """Stable processing order: role name, then worker name."""
    def key(worker: Worker):
        role = roles_by_id.get(worker.role_id)
        return (role.name if role else '', worker.name)

    return sorted(workers, key=key)


def group_workers_by_role(workers: Iterable[Worker]) -> dict[str, list[Worker]]:
    by_role: dict[str, list[Worker]] = {}
    for worker in workers:
        by_role.setdefault(worker.role_id, []).append(worker)
    return by_role


def plan_role_capacity(roles: Iterable[Role], workers_by_role: Mapping[str, Sequence[Worker]]) -> dict[str, int]:
    """Return role_id -> sum of the role's workers' shifts_per_week.

    A role without workers has capacity 0.
    """
    return {
        role.id: sum(w.shifts_per_week for w in workers_by_role.get(role.id, ()))
        for role in roles
    }


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def divide_allocation(capacity: int, templates: Sequence[ShiftTemplate]) -> dict[str, int]:
    """Split a role's capacity across its templates by relative priority weight.

    Each quota is rounded independently, so the quotas may not add up to
    the capacity exactly; gap filling absorbs the difference.
    """
    if not templates:
        return {}
    total_weight = sum(t.weight for t in templates)
    return {
        t.id: round_half_up(capacity * t.weight / total_weight)
        for t in templates
    }


def operating_day_indices(template: ShiftTemplate, week: Sequence[date]) -> list[int]:
    return [idx for idx in range(len(week)) if template.operates_on(WEEKDAY_NAMES[idx])]


def generate_slots(
    template: ShiftTemplate,
    quota: int,
    week: Sequence[date],
    rng: random.Random,
    role_worker_count: int = 1,
) -> list[ScheduleSlot]:
    """Expand one template's quota into unassigned slots over its operating days.

    The quota is spread evenly; the remainder goes to a random subset of the
    operating days. Every operating day gets at least one slot as long as the
    role has workers.
    """
    day_indices = operating_day_indices(template, week)
    if not day_indices:
        return []

    base_per_day, remainder = divmod(quota, len(day_indices))
    extra_days = set(rng.sample(day_indices, remainder))
    min_per_day = min(MIN_SLOTS_PER_OPERATING_DAY, role_worker_count)
    logger.debug(
        f"{template.id}: quota={quota} over {len(day_indices)} days, "
        f"base={base_per_day}, extra on {sorted(extra_days)}"
    )

    slots: list[ScheduleSlot] = []
    for idx in day_indices:
        count = max(min_per_day, base_per_day + (1 if idx in extra_days else 0))
        for _ in range(count):
            slots.append(
                ScheduleSlot(
                    date=week[idx],
                    day_index=idx,
                    shift_id=template.id,
                    role_id=template.role_id,
                )
            )
    return slots
