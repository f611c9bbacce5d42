from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import TYPE_CHECKING

from autowork.models import Worker
from autowork.plugins.base import WorkerFitness
from autowork.request import ResolveRequest

if TYPE_CHECKING:
    from autowork.roles import Role

DEFAULT_FITNESS_EPSILON = 1e-9


class FitnessComparator:
    """Cascading comparison of two workers for a role.

    Fitness functions are evaluated in declaration order; a later function is
    only consulted when every earlier one ties within ``epsilon``. Higher
    fitness sorts first.
    """

    def __init__(
        self,
        functions: Sequence[WorkerFitness],
        role: Role,
        request: ResolveRequest,
        *,
        epsilon: float = DEFAULT_FITNESS_EPSILON,
    ) -> None:
        self.functions = list(functions)
        self.role = role
        self.request = request
        self.epsilon = epsilon

    def compare(self, a: Worker, b: Worker) -> int:
        for function in self.functions:
            diff = function.fitness(b, self.role, self.request) - function.fitness(
                a, self.role, self.request
            )
            if abs(diff) > self.epsilon:
                return 1 if diff > 0 else -1
        return 0

    __call__ = compare


def sort_by_fitness(
    workers: Iterable[Worker],
    role: Role,
    request: ResolveRequest,
    *,
    epsilon: float = DEFAULT_FITNESS_EPSILON,
) -> list[Worker]:
    comparator = FitnessComparator(role.fitness, role, request, epsilon=epsilon)
    return sorted(workers, key=cmp_to_key(comparator.compare))
