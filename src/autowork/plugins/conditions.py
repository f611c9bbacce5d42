from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from autowork.models import Worker
from autowork.plugins.base import PluginError, WorkerCondition, default_registry
from autowork.request import ResolveRequest

if TYPE_CHECKING:
    from autowork.roles import Role


@default_registry.register("condition")
@dataclass(slots=True)
class SkillAtLeastCondition(WorkerCondition):
    type_name = "skill_at_least"
    description = "Worker skill must be at or above a level."

    skill: str
    level: float = 0.0

    def is_valid(self, worker: Worker, role: Role, request: ResolveRequest) -> bool:
        return float(worker.skills.get(self.skill, 0.0)) >= float(self.level)


@default_registry.register("condition")
@dataclass(slots=True)
class HasTraitCondition(WorkerCondition):
    type_name = "has_trait"
    description = "Worker must carry a trait."

    trait: str

    def is_valid(self, worker: Worker, role: Role, request: ResolveRequest) -> bool:
        return self.trait in worker.traits


@default_registry.register("condition")
@dataclass(slots=True)
class CommitmentBelowCondition(WorkerCondition):
    type_name = "commitment_below"
    description = "Worker's current total commitment must be below a limit."

    limit: float = 1.0

    def is_valid(self, worker: Worker, role: Role, request: ResolveRequest) -> bool:
        if request.manager is None:
            return True
        return request.manager.worker_commitment(worker) < float(self.limit)


@default_registry.register("condition")
@dataclass(slots=True)
class NotCondition(WorkerCondition):
    type_name = "not"
    description = "Inverts another condition."

    condition: Any

    def __post_init__(self) -> None:
        if isinstance(self.condition, dict):
            self.condition = default_registry.create("condition", self.condition)
        if not isinstance(self.condition, WorkerCondition):
            raise PluginError("'not' requires a condition payload.")

    def is_valid(self, worker: Worker, role: Role, request: ResolveRequest) -> bool:
        return not self.condition.is_valid(worker, role, request)


@dataclass(slots=True)
class CallableCondition(WorkerCondition):
    type_name = "callable"

    func: Callable[[Worker, Role, ResolveRequest], bool]

    def is_valid(self, worker: Worker, role: Role, request: ResolveRequest) -> bool:
        return bool(self.func(worker, role, request))
