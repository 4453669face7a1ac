"""
Tests for model_objectives.py - Candidate ranking
"""

import random

from conftest import make_template, WEEKDAYS
from history_view import ShiftHistory
from model_objectives import gap_fill_template_order, rank_candidates, remaining_need, select_worker
from models import ScheduleSlot, Worker
from schedule_pipeline import build_context


def make_ctx(week, operator_role, workers, history=None, seed=0, templates=None):
    templates = templates or [
        make_template("S", operator_role, days=WEEKDAYS),
        make_template("T", operator_role, days=WEEKDAYS),
    ]
    return build_context(
        week, [operator_role], templates, workers, [], history or ShiftHistory(), random.Random(seed)
    )


class TestRanking:
    """Tests for the ranking order."""

    def test_most_remaining_need_first(self, week, operator_role):
        a = Worker(id="A", name="A", role_id="operator", shifts_per_week=3)
        b = Worker(id="B", name="B", role_id="operator", shifts_per_week=5)
        ctx = make_ctx(week, operator_role, [a, b])
        assert remaining_need(ctx, b) == 5
        assert select_worker(ctx, [a, b], "S").id == "B"

    def test_need_counts_this_weeks_assignments(self, week, operator_role):
        a = Worker(id="A", name="A", role_id="operator", shifts_per_week=5)
        b = Worker(id="B", name="B", role_id="operator", shifts_per_week=5)
        ctx = make_ctx(week, operator_role, [a, b])
        slot = ScheduleSlot(date=week[0], day_index=0, shift_id="S", role_id="operator")
        ctx.record_assignment(slot, b)
        assert select_worker(ctx, [a, b], "T").id == "A"

    def test_fewer_of_this_template_wins(self, week, operator_role):
        a = Worker(id="A", name="A", role_id="operator")
        b = Worker(id="B", name="B", role_id="operator")
        history = ShiftHistory({"A": {"S": 2}, "B": {"T": 4}})
        ctx = make_ctx(week, operator_role, [a, b], history)
        assert select_worker(ctx, [a, b], "S").id == "B"
        assert select_worker(ctx, [a, b], "T").id == "A"

    def test_fewer_total_shifts_wins(self, week, operator_role):
        a = Worker(id="A", name="A", role_id="operator")
        b = Worker(id="B", name="B", role_id="operator")
        history = ShiftHistory({"A": {"T": 3}, "B": {"T": 1}})
        ctx = make_ctx(week, operator_role, [a, b], history)
        assert [w.id for w in rank_candidates(ctx, [a, b], "S")] == ["B", "A"]

    def test_full_ties_are_broken_randomly(self, week, operator_role):
        a = Worker(id="A", name="A", role_id="operator")
        b = Worker(id="B", name="B", role_id="operator")
        winners = set()
        for seed in range(30):
            ctx = make_ctx(week, operator_role, [a, b], seed=seed)
            winners.add(select_worker(ctx, [a, b], "S").id)
        assert winners == {"A", "B"}

    def test_seeded_ranking_is_reproducible(self, week, operator_role):
        workers = [Worker(id=str(i), name=str(i), role_id="operator") for i in range(6)]
        first = rank_candidates(make_ctx(week, operator_role, workers, seed=9), workers, "S")
        second = rank_candidates(make_ctx(week, operator_role, workers, seed=9), workers, "S")
        assert [w.id for w in first] == [w.id for w in second]


class TestGapFillOrder:
    """Tests for the template order used when topping up a worker."""

    def test_least_held_template_first(self, week, operator_role):
        s = make_template("S", operator_role, priority=90)
        t = make_template("T", operator_role, priority=10)
        a = Worker(id="A", name="A", role_id="operator")
        ctx = make_ctx(week, operator_role, [a], ShiftHistory({"A": {"S": 3}}), templates=[s, t])
        assert [x.id for x in gap_fill_template_order(ctx, a, [s, t])] == ["T", "S"]

    def test_priority_breaks_history_ties(self, week, operator_role):
        s = make_template("S", operator_role, priority=10)
        t = make_template("T", operator_role, priority=90)
        a = Worker(id="A", name="A", role_id="operator")
        ctx = make_ctx(week, operator_role, [a], templates=[s, t])
        assert [x.id for x in gap_fill_template_order(ctx, a, [s, t])] == ["T", "S"]
