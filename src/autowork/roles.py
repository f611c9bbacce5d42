from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import uuid4

from autowork.models import WorkPriorities, Worker, move_element, replace_element
from autowork.plugins.amounts import FixedAmount
from autowork.plugins.base import (
    WorkerAmount,
    WorkerCondition,
    WorkerFitness,
    WorkerPostProcessor,
)
from autowork.ranking import DEFAULT_FITNESS_EPSILON, sort_by_fitness
from autowork.request import ResolveRequest


def _new_role_id() -> str:
    return uuid4().hex[:12]


@dataclass(slots=True, eq=False)
class Role:
    """One assignable job, e.g. "2 doctors" or "3 haulers".

    Conditions filter eligible workers (all must pass), fitness functions rank
    them (later functions break ties left by earlier ones), post-processors run
    side effects on assignees, and ``priorities`` lists the work types handed
    to every assignee.
    """

    name: str = "New work"
    role_id: str = field(default_factory=_new_role_id)
    critical: bool = False
    require_full_capability: bool = True
    interweave_priorities: bool = False
    specialist: bool = False
    include_specialists: bool = False
    ignore_commitment: bool = False
    suspended: bool = False
    alert_enabled: bool = True
    commitment: float = 0.0
    priorities: WorkPriorities = field(default_factory=WorkPriorities)
    conditions: list[WorkerCondition] = field(default_factory=list)
    fitness: list[WorkerFitness] = field(default_factory=list)
    post_processors: list[WorkerPostProcessor] = field(default_factory=list)
    min_workers: WorkerAmount = field(default_factory=FixedAmount)
    target_workers: WorkerAmount = field(default_factory=FixedAmount)
    count_from: list[Role] = field(default_factory=list)

    def __setattr__(self, name: str, value: object) -> None:
        # Commitment stays in [0, 1] however it is set.
        if name == "commitment":
            value = min(max(float(value), 0.0), 1.0)
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return f"Role({self.name!r})"

    # Candidate filtering

    def can_worker_do_work(self, worker: Worker) -> bool:
        if self.require_full_capability:
            return not worker.any_disabled(self.priorities)
        if len(self.priorities) == 0:
            return True
        return any(not worker.is_disabled(item) for item in self.priorities)

    def applicable_workers(
        self, workers: Iterable[Worker], request: ResolveRequest
    ) -> list[Worker]:
        return [
            worker
            for worker in workers
            if all(condition.is_valid(worker, self, request) for condition in self.conditions)
            and self.can_worker_do_work(worker)
        ]

    def applicable_or_minimal_workers(
        self,
        workers: Iterable[Worker],
        request: ResolveRequest,
        *,
        epsilon: float = DEFAULT_FITNESS_EPSILON,
    ) -> list[Worker]:
        pool = list(workers)
        applicable = self.applicable_workers(pool, request)
        min_count = self.min_count(request)
        if len(applicable) >= min_count:
            return applicable

        missing = min_count - len(applicable)
        chosen = set(applicable)
        substitutes = sort_by_fitness(
            (worker for worker in pool if worker not in chosen and self.can_worker_do_work(worker)),
            self,
            request,
            epsilon=epsilon,
        )
        return applicable + substitutes[:missing]

    def applicable_or_minimal_workers_sorted(
        self,
        workers: Iterable[Worker],
        request: ResolveRequest,
        *,
        epsilon: float = DEFAULT_FITNESS_EPSILON,
    ) -> list[Worker]:
        candidates = self.applicable_or_minimal_workers(workers, request, epsilon=epsilon)
        return sort_by_fitness(candidates, self, request, epsilon=epsilon)

    # Amounts

    def min_count(self, request: ResolveRequest) -> int:
        return max(0, int(self.min_workers.count(self, request)))

    def target_count(self, request: ResolveRequest) -> int:
        return max(int(self.target_workers.count(self, request)), self.min_count(request))

    def apply_post_processing(self, worker: Worker, request: ResolveRequest) -> None:
        for post_processor in self.post_processors:
            post_processor.apply(worker, self, request)

    # Editing

    def add_condition(self, condition: WorkerCondition) -> None:
        self.conditions.append(condition)

    def move_condition(self, condition: WorkerCondition, offset: int) -> None:
        move_element(self.conditions, condition, offset)

    def remove_condition(self, condition: WorkerCondition) -> None:
        self.conditions.remove(condition)

    def replace_condition(self, condition: WorkerCondition, replacement: WorkerCondition) -> None:
        replace_element(self.conditions, condition, replacement)

    def add_fitness(self, fitness: WorkerFitness) -> None:
        self.fitness.append(fitness)

    def move_fitness(self, fitness: WorkerFitness, offset: int) -> None:
        move_element(self.fitness, fitness, offset)

    def remove_fitness(self, fitness: WorkerFitness) -> None:
        self.fitness.remove(fitness)

    def replace_fitness(self, fitness: WorkerFitness, replacement: WorkerFitness) -> None:
        replace_element(self.fitness, fitness, replacement)

    def add_post_processor(self, post_processor: WorkerPostProcessor) -> None:
        self.post_processors.append(post_processor)

    def move_post_processor(self, post_processor: WorkerPostProcessor, offset: int) -> None:
        move_element(self.post_processors, post_processor, offset)

    def remove_post_processor(self, post_processor: WorkerPostProcessor) -> None:
        self.post_processors.remove(post_processor)

    def replace_post_processor(
        self, post_processor: WorkerPostProcessor, replacement: WorkerPostProcessor
    ) -> None:
        replace_element(self.post_processors, post_processor, replacement)
