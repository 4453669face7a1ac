"""Shift history access adapter.

The rotation memory is stored as:
  history[worker_id][shift_template_id] -> number of times assigned

It persists across generations. This module wraps the raw mapping so the
scheduling code never has to know about missing keys or defaults.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, Iterable


History = Dict[str, Dict[str, int]]


@dataclass
class ShiftHistory:
    history: History = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw) -> "ShiftHistory":
        """Build from a plain mapping, dropping malformed entries."""
        clean: History = {}
        for worker_id, per_shift in (raw or {}).items():
            if not isinstance(per_shift, dict):
                continue
            counts = {}
            for shift_id, count in per_shift.items():
                try:
                    counts[str(shift_id)] = int(count)
                except (TypeError, ValueError):
                    continue
            clean[str(worker_id)] = counts
        return cls(clean)

    def copy(self) -> "ShiftHistory":
        return ShiftHistory(copy.deepcopy(self.history))

    def ensure_workers(self, worker_ids: Iterable[str]) -> None:
        for worker_id in worker_ids:
            self.history.setdefault(worker_id, {})

    def count(self, worker_id: str, shift_id: str) -> int:
        """Times the worker has held this exact template."""
        return self.history.get(worker_id, {}).get(shift_id, 0)

    def total(self, worker_id: str) -> int:
        """Times the worker has held any template."""
        return sum(self.history.get(worker_id, {}).values())

    def increment(self, worker_id: str, shift_id: str) -> int:
        per_shift = self.history.setdefault(worker_id, {})
        per_shift[shift_id] = per_shift.get(shift_id, 0) + 1
        return per_shift[shift_id]

    def to_dict(self) -> History:
        return copy.deepcopy(self.history)
