"""Candidate ranking for slot assignment.

Candidates are ordered by, highest priority first:
  1) remaining weekly need, largest first
  2) history count for this exact template, smallest first
  3) history count across all templates, smallest first
  4) a random draw, so remaining ties are broken uniformly
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from models import Worker

if TYPE_CHECKING:
    from schedule_pipeline import AllocationContext


def remaining_need(ctx: AllocationContext, worker: Worker) -> int:
    return worker.shifts_per_week - ctx.assigned_count(worker.id)


def ranking_key(ctx: AllocationContext, worker: Worker, shift_id: str) -> tuple:
    return (
        -remaining_need(ctx, worker),
        ctx.history.count(worker.id, shift_id),
        ctx.history.total(worker.id),
    )


def rank_candidates(ctx: AllocationContext, candidates: Sequence[Worker], shift_id: str) -> list[Worker]:
    # The random draw is taken once per candidate, in candidate order, so a
    # seeded generator reproduces the same ranking.
    keyed = [(ranking_key(ctx, w, shift_id), ctx.rng.random(), w) for w in candidates]
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [w for _key, _draw, w in keyed]


def select_worker(ctx: AllocationContext, candidates: Sequence[Worker], shift_id: str) -> Worker:
    """Return the top-ranked candidate. `candidates` must be non-empty."""
    return rank_candidates(ctx, candidates, shift_id)[0]


def gap_fill_template_order(ctx: AllocationContext, worker: Worker, templates) -> list:
    """Templates a short worker should try first: least held, then highest priority."""
    return sorted(templates, key=lambda t: (ctx.history.count(worker.id, t.id), -t.weight))
