from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from autowork.plugins.base import WorkerAmount, default_registry
from autowork.request import ResolveRequest

if TYPE_CHECKING:
    from autowork.roles import Role


@default_registry.register("amount")
@dataclass(slots=True)
class FixedAmount(WorkerAmount):
    type_name = "fixed"
    description = "A fixed number of workers."

    value: int = 0

    def count(self, role: Role, request: ResolveRequest) -> int:
        return max(0, int(self.value))


@default_registry.register("amount")
@dataclass(slots=True)
class PercentageAmount(WorkerAmount):
    type_name = "percentage"
    description = "A fraction of the workers available this cycle, rounded down."

    fraction: float = 0.0

    def count(self, role: Role, request: ResolveRequest) -> int:
        fraction = min(max(float(self.fraction), 0.0), 1.0)
        return math.floor(len(request.workers) * fraction)


@default_registry.register("amount")
@dataclass(slots=True)
class VariableAmount(WorkerAmount):
    type_name = "variable"
    description = "A count published by another plugin through the request variables."

    key: str = ""
    default: int = 0

    def count(self, role: Role, request: ResolveRequest) -> int:
        raw = request.get_variable(self.key, self.default)
        try:
            return max(0, int(raw))
        except (TypeError, ValueError):
            return max(0, int(self.default))


@dataclass(slots=True)
class CallableAmount(WorkerAmount):
    type_name = "callable"
    description = "A count computed by an arbitrary function of the role and request."

    func: Callable[[Role, ResolveRequest], int]

    def count(self, role: Role, request: ResolveRequest) -> int:
        return max(0, int(self.func(role, request)))


def as_amount(value: WorkerAmount | int) -> WorkerAmount:
    if isinstance(value, WorkerAmount):
        return value
    return FixedAmount(int(value))
