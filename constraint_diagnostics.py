"""Coverage gap reporting for a generated week.

Generation never fails because demand cannot be met. Instead this module
collects what was left uncovered or bent so the caller can surface it:
1. Roles that have shift templates but no workers
2. Slots left unfilled, with the reason their candidate pool was empty
3. Workers pushed past their weekly quota by the relaxed pool
4. Workers still short of their weekly quota after gap filling
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Optional

from constants import (
    GAP_OVER_QUOTA,
    GAP_ROLE_WITHOUT_WORKERS,
    GAP_UNDER_QUOTA,
)
from model_constraints import empty_pool_reason

if TYPE_CHECKING:
    from schedule_pipeline import AllocationContext


@dataclass
class CoverageGap:
    """A single uncovered demand or quota deviation."""
    category: str  # one of the GAP_* constants
    message: str
    role_id: Optional[str] = None
    worker_id: Optional[str] = None
    shift_id: Optional[str] = None
    date: Optional[date] = None
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.category}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "message": self.message,
            "role_id": self.role_id,
            "worker_id": self.worker_id,
            "shift_id": self.shift_id,
            "date": self.date.isoformat() if self.date else None,
            "details": self.details,
        }


@dataclass
class CoverageReport:
    total_slots: int = 0
    filled_slots: int = 0
    gap_fill_passes: int = 0
    gaps: list[CoverageGap] = field(default_factory=list)

    @property
    def unfilled_slots(self) -> int:
        return self.total_slots - self.filled_slots

    @property
    def is_fully_covered(self) -> bool:
        return not self.gaps

    def add_gap(self, gap: CoverageGap) -> None:
        self.gaps.append(gap)

    def by_category(self, category: str) -> list[CoverageGap]:
        return [g for g in self.gaps if g.category == category]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_slots": self.total_slots,
            "filled_slots": self.filled_slots,
            "unfilled_slots": self.unfilled_slots,
            "gap_fill_passes": self.gap_fill_passes,
            "gaps": [g.to_dict() for g in self.gaps],
        }

    def format_report(self) -> str:
        """Format the report as a human-readable string."""
        lines = ["=" * 60, "COVERAGE REPORT", "=" * 60, ""]
        lines.append(f"Slots filled: {self.filled_slots}/{self.total_slots}")
        lines.append(f"Gap fill passes: {self.gap_fill_passes}")
        lines.append("")

        if self.is_fully_covered:
            lines.append("All demand covered, all quotas met")
        else:
            categories = sorted({g.category for g in self.gaps})
            for category in categories:
                entries = self.by_category(category)
                lines.append(f"{category} ({len(entries)}):")
                for gap in entries:
                    lines.append(f"  - {gap.message}")
                lines.append("")

        lines.append("=" * 60)
        return "\n".join(lines)


def build_coverage_report(ctx: AllocationContext) -> CoverageReport:
    report = CoverageReport(
        total_slots=len(ctx.slots),
        filled_slots=sum(1 for s in ctx.slots if s.filled),
        gap_fill_passes=ctx.gap_fill_passes,
    )

    for role_id in ctx.skipped_roles:
        role = ctx.roles_by_id[role_id]
        report.add_gap(CoverageGap(
            category=GAP_ROLE_WITHOUT_WORKERS,
            message=f"Role '{role.name}' has shift templates but no workers",
            role_id=role_id,
        ))

    for slot in ctx.slots:
        if slot.filled:
            continue
        template = ctx.templates_by_id[slot.shift_id]
        reason = empty_pool_reason(ctx, slot)
        report.add_gap(CoverageGap(
            category=reason,
            message=f"{template.name} on {slot.date.isoformat()} left unfilled",
            role_id=slot.role_id,
            shift_id=slot.shift_id,
            date=slot.date,
        ))

    relaxed_by_worker: dict[str, int] = {}
    for slot in ctx.slots:
        if slot.filled and slot.relaxed:
            relaxed_by_worker[slot.worker_id] = relaxed_by_worker.get(slot.worker_id, 0) + 1

    for worker in ctx.workers:
        assigned = ctx.assigned_count(worker.id)
        details = {"assigned": assigned, "target": worker.shifts_per_week}
        if assigned > worker.shifts_per_week:
            details["relaxed_slots"] = relaxed_by_worker.get(worker.id, 0)
            report.add_gap(CoverageGap(
                category=GAP_OVER_QUOTA,
                message=f"{worker.name} assigned {assigned} of {worker.shifts_per_week} shifts",
                role_id=worker.role_id,
                worker_id=worker.id,
                details=details,
            ))
        elif assigned < worker.shifts_per_week:
            report.add_gap(CoverageGap(
                category=GAP_UNDER_QUOTA,
                message=f"{worker.name} assigned {assigned} of {worker.shifts_per_week} shifts",
                role_id=worker.role_id,
                worker_id=worker.id,
                details=details,
            ))

    return report
