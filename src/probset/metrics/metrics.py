"""Bộ đếm metrics gọn cho planner."""
from __future__ import annotations

from dataclasses import dataclass

from probset.types.param_types import Resolution


@dataclass
class PlannerMetrics:
    plans: int = 0
    resolved: int = 0
    underconstrained: int = 0
    overconstrained: int = 0
    parse_failures: int = 0

    def record_plan(self, resolution: Resolution) -> None:
        self.plans += 1
        if resolution is Resolution.RESOLVED:
            self.resolved += 1
        elif resolution is Resolution.OVERCONSTRAINED:
            self.overconstrained += 1
        else:
            self.underconstrained += 1

    def record_parse_failure(self) -> None:
        self.parse_failures += 1

    def resolved_ratio(self) -> float:
        if self.plans == 0:
            return 0.0
        return self.resolved / float(self.plans)
