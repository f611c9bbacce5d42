from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from autowork.models import Worker
from autowork.plugins.base import WorkerFitness, default_registry
from autowork.request import ResolveRequest

if TYPE_CHECKING:
    from autowork.roles import Role


@default_registry.register("fitness")
@dataclass(slots=True)
class SkillFitness(WorkerFitness):
    type_name = "skill"
    description = "Prefer workers with a higher skill level."

    skill: str

    def fitness(self, worker: Worker, role: Role, request: ResolveRequest) -> float:
        return float(worker.skills.get(self.skill, 0.0))


@default_registry.register("fitness")
@dataclass(slots=True)
class TraitFitness(WorkerFitness):
    type_name = "trait"
    description = "Prefer (or avoid, with a negative weight) workers carrying a trait."

    trait: str
    weight: float = 1.0

    def fitness(self, worker: Worker, role: Role, request: ResolveRequest) -> float:
        return float(self.weight) if self.trait in worker.traits else 0.0


@default_registry.register("fitness")
@dataclass(slots=True)
class LowCommitmentFitness(WorkerFitness):
    type_name = "low_commitment"
    description = "Prefer workers with less work already assigned this cycle."

    def fitness(self, worker: Worker, role: Role, request: ResolveRequest) -> float:
        if request.manager is None:
            return 0.0
        return -request.manager.worker_commitment(worker)


@dataclass(slots=True)
class CallableFitness(WorkerFitness):
    type_name = "callable"

    func: Callable[[Worker, Role, ResolveRequest], float]

    def fitness(self, worker: Worker, role: Role, request: ResolveRequest) -> float:
        return float(self.func(worker, role, request))
