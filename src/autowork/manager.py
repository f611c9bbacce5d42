from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from autowork.availability import Dedications, WorkerFilter
from autowork.config import AutoworkConfig
from autowork.maps import MapCycleError, MapGraph, MapNode
from autowork.models import Assignment, Worker, WorkType, move_element
from autowork.request import ResolveRequest
from autowork.roles import Role

logger = logging.getLogger(__name__)

ManagerEventHook = Callable[[dict[str, Any]], None]


@dataclass(slots=True)
class ResolutionSummary:
    map_name: str
    roles: int
    workers: int
    assignments: int
    under_filled: list[str] = field(default_factory=list)
    over_filled: list[str] = field(default_factory=list)


class WorkManager:
    """Assigns the workers of one map (and its child maps) to an ordered role list.

    A resolution cycle clears the assignment table, walks the roles in order
    assigning dedicated workers and then the best-ranked candidates, turns the
    table into per-worker work priorities, and finally runs the roles'
    post-processors. Role order is claim precedence: earlier roles see the
    workers first.
    """

    def __init__(
        self,
        graph: MapGraph,
        map_node: MapNode,
        *,
        work_types: list[WorkType] | None = None,
        config: AutoworkConfig | None = None,
        dedications: Dedications | None = None,
        worker_filter: WorkerFilter | None = None,
        event_hook: ManagerEventHook | None = None,
    ) -> None:
        self.graph = graph
        self.map = map_node
        self.work_types = list(work_types or [])
        self.config = config or AutoworkConfig.default()
        self.dedications = dedications or Dedications()
        self.worker_filter = worker_filter or WorkerFilter()
        self.event_hook = event_hook
        self.roles: list[Role] = []
        self.assignments: dict[Worker, list[Assignment]] = {}
        self._cached_workers: list[Worker] | None = None
        self._cached_maps: list[MapNode] | None = None
        self._unmanaged_work_types: set[WorkType] = set()
        self._warned_once: set[str] = set()

    def _emit(self, event: dict[str, Any]) -> None:
        if self.event_hook:
            self.event_hook(event)

    @property
    def is_root(self) -> bool:
        return self.map.parent is None

    # Role list

    def create_role(self, name: str = "New work") -> Role:
        role = Role(name=name)
        self.roles.append(role)
        return role

    def add_role(self, role: Role) -> None:
        self.roles.append(role)

    def remove_role(self, role: Role) -> None:
        self.roles.remove(role)
        for other in self.roles:
            if role in other.count_from:
                other.count_from.remove(role)

    def move_role(self, role: Role, offset: int) -> None:
        move_element(self.roles, role, offset)

    def find_role(self, name: str) -> Role | None:
        for role in self.roles:
            if role.name == name:
                return role
        return None

    # Maps and worker pool

    def child_maps(self) -> list[MapNode]:
        return self.graph.child_maps(self.map)

    def parent_maps(self) -> list[MapNode]:
        return self.graph.parent_maps(self.map)

    def all_maps(self) -> list[MapNode]:
        if self._cached_maps is not None:
            return self._cached_maps
        try:
            maps = self.graph.all_maps(self.map)
        except MapCycleError as exc:
            logger.warning("%s", exc)
            self._emit({"event": "map_cycle_detected", "map": exc.map_name, "message": str(exc)})
            raise
        self._cached_maps = maps
        return maps

    def invalidate_caches(self) -> None:
        self._cached_workers = None
        self._cached_maps = None

    def _worker_cache(self) -> list[Worker]:
        if self._cached_workers is None:
            everyone = [worker for node in self.all_maps() for worker in node.workers]
            self._cached_workers = self.worker_filter.ever_available(everyone)
        return self._cached_workers

    def all_workers(self) -> list[Worker]:
        return [worker for worker in self._worker_cache() if worker is not None]

    def all_assignable_now_workers(self) -> list[Worker]:
        return [worker for worker in self._worker_cache() if self.can_be_assigned_now(worker)]

    def all_ever_assignable_workers(self) -> list[Worker]:
        return [worker for worker in self._worker_cache() if self.can_ever_be_assigned(worker)]

    def worker_count(self) -> int:
        return len(self.all_workers())

    def assignable_worker_count(self) -> int:
        return len(self.all_assignable_now_workers())

    def is_temporarily_unavailable(self, worker: Worker) -> bool:
        return not self.worker_filter.remove_temporarily_unavailable([worker])

    def can_ever_be_assigned(self, worker: Worker | None) -> bool:
        if worker is None:
            return False
        if worker.dead:
            return False
        if self.worker_filter.is_excluded(worker):
            return False
        return True

    def can_be_assigned_now(self, worker: Worker) -> bool:
        if not self.can_ever_be_assigned(worker):
            return False
        if self.is_temporarily_unavailable(worker):
            return False
        return True

    def can_be_assigned_to(self, worker: Worker, role: Role) -> bool:
        if not self.can_be_assigned_now(worker):
            return False
        if self.is_assigned_to(worker, role):
            return False
        return True

    # Assignment table

    def make_default_request(self) -> ResolveRequest:
        return ResolveRequest(
            workers=self.all_assignable_now_workers(), map=self.map, manager=self
        )

    def clear_all_assignments(self) -> None:
        self.assignments.clear()

    def clear_worker_assignments(self, worker: Worker) -> None:
        if worker in self.assignments:
            self.assignments[worker].clear()

    def assign(self, role: Role, worker: Worker, index: int = -1) -> Assignment:
        assigned = self.assignments.setdefault(worker, [])
        if index == -1:
            index = len(assigned)
        index = min(max(index, 0), len(assigned))
        assignment = Assignment(role=role, worker=worker, index=index, critical=role.critical)
        assigned.insert(index, assignment)
        return assignment

    def remove_assignment(self, assignment: Assignment, worker: Worker) -> None:
        assigned = self.assignments.get(worker)
        if assigned and assignment in assigned:
            assigned.remove(assignment)

    def get_assignment_to(self, worker: Worker, role: Role) -> Assignment | None:
        for assignment in self.assignments.get(worker, []):
            if assignment.role is role:
                return assignment
        return None

    def is_assigned_to(self, worker: Worker, role: Role) -> bool:
        return self.get_assignment_to(worker, role) is not None

    def worker_commitment(self, worker: Worker) -> float:
        return sum(assignment.role.commitment for assignment in self.assignments.get(worker, []))

    def allow_count_from(self, role: Role, other: Role) -> bool:
        if role not in self.roles or other not in self.roles:
            return False
        return self.roles.index(role) > self.roles.index(other)

    def remove_invalid_count_from(self, role: Role) -> None:
        role.count_from = [other for other in role.count_from if self.allow_count_from(role, other)]

    def count_assigned_to(self, role: Role) -> int:
        count = sum(
            1
            for assigned in self.assignments.values()
            for assignment in assigned
            if assignment.role is role
        )
        for other in role.count_from:
            if self.allow_count_from(role, other):
                count += self.count_assigned_to(other)
        return count

    def workers_assigned_to(self, role: Role) -> list[Worker]:
        workers = [
            worker
            for worker, assigned in self.assignments.items()
            if any(assignment.role is role for assignment in assigned)
        ]
        for other in role.count_from:
            if self.allow_count_from(role, other):
                workers.extend(self.workers_assigned_to(other))
        return workers

    # Diagnostics

    def can_role_be_minimally_satisfied(self, role: Role, request: ResolveRequest) -> bool:
        applicable = role.applicable_workers(request.workers, request)
        return len(applicable) >= role.min_count(request)

    def is_role_satisfied(self, role: Role, request: ResolveRequest) -> bool:
        assigned = self.count_assigned_to(role)
        target = role.target_count(request)
        if assigned == target:
            return True
        if assigned > target:
            key = f"over-assigned:{role.role_id}"
            if key not in self._warned_once:
                self._warned_once.add(key)
                logger.warning(
                    "Role '%s' assigned to more workers than requested (%d > %d).",
                    role.name,
                    assigned,
                    target,
                )
                self._emit(
                    {
                        "event": "role_over_assigned",
                        "role": role.name,
                        "assigned": assigned,
                        "target": target,
                    }
                )
            return True
        return False

    def unsatisfied_roles(self, request: ResolveRequest) -> list[Role]:
        return [
            role
            for role in self.roles
            if not role.suspended
            and role.alert_enabled
            and not self.is_role_satisfied(role, request)
        ]

    # Resolution

    def resolve_work_assignments(self) -> ResolutionSummary:
        self.invalidate_caches()
        return self.resolve(self.make_default_request())

    def resolve(self, request: ResolveRequest) -> ResolutionSummary:
        self.resolve_assignments(request)
        self.resolve_priorities(request)
        self.post_process_assignments(request)

        active = [role for role in self.roles if not role.suspended]
        summary = ResolutionSummary(
            map_name=self.map.name,
            roles=len(active),
            workers=len(request.workers),
            assignments=sum(len(assigned) for assigned in self.assignments.values()),
        )
        for role in active:
            assigned = self.count_assigned_to(role)
            target = role.target_count(request)
            if assigned < target:
                summary.under_filled.append(role.name)
            elif assigned > target:
                summary.over_filled.append(role.name)
        logger.info(
            "Resolved work assignments on '%s': %d assignments across %d roles.",
            summary.map_name,
            summary.assignments,
            summary.roles,
        )
        self._emit(
            {
                "event": "resolution_completed",
                "map": summary.map_name,
                "assignments": summary.assignments,
            }
        )
        return summary

    def resolve_assignments(self, request: ResolveRequest) -> None:
        levels = self.config.resolution.commitment_levels
        epsilon = self.config.resolution.fitness_epsilon

        self.clear_all_assignments()
        specialists: set[Worker] = set()

        for role in [item for item in self.roles if not item.suspended]:
            for worker in self.dedications.dedicated_workers(role):
                self.assign(role, worker)

            available = [
                worker
                for worker in request.workers
                if (role.include_specialists or worker not in specialists)
                and self.can_be_assigned_to(worker, role)
            ]
            candidates = role.applicable_or_minimal_workers_sorted(
                available, request, epsilon=epsilon
            )

            remaining = role.target_count(request) - self.count_assigned_to(role)
            logger.debug(
                "Role '%s': %d candidates, %d slots remaining.",
                role.name,
                len(candidates),
                remaining,
            )
            if remaining <= 0:
                continue

            ceiling = 1.0 - role.commitment
            for level in range(levels):
                if role.ignore_commitment:
                    committable = list(candidates)
                else:
                    committable = [
                        worker
                        for worker in candidates
                        if self.worker_commitment(worker) < ceiling + level
                    ]

                for worker in committable[:remaining]:
                    self.assign(role, worker)
                    candidates.remove(worker)
                    remaining -= 1
                    if role.specialist:
                        specialists.add(worker)

                if remaining == 0:
                    break
                if role.ignore_commitment:
                    break
                logger.debug(
                    "Role '%s' short by %d at commitment level %d.", role.name, remaining, level
                )

        for role in self.roles:
            if not role.suspended:
                self.is_role_satisfied(role, request)

    def _all_work_types(self) -> list[WorkType]:
        universe = list(self.work_types)
        seen = set(universe)
        for role in self.roles:
            for work_type in role.priorities:
                if work_type not in seen:
                    seen.add(work_type)
                    universe.append(work_type)
        return sorted(universe, key=lambda item: item.natural_priority)

    def unmanaged_work_types(self) -> set[WorkType]:
        unmanaged = set(self._all_work_types())
        for role in self.roles:
            if role.suspended:
                continue
            unmanaged.difference_update(role.priorities)
        return unmanaged

    def _should_ignore_work_type(self, work_type: WorkType) -> bool:
        if self.config.resolution.ignore_unmanaged_work_types:
            return work_type in self._unmanaged_work_types
        return False

    def resolve_priorities(self, request: ResolveRequest) -> None:
        self._unmanaged_work_types = self.unmanaged_work_types()
        for worker in request.workers:
            self.resolve_worker_priorities(worker)

    def resolve_worker_priorities(self, worker: Worker) -> dict[WorkType, int]:
        new_priorities: dict[WorkType, int] = {}
        for work_type in self._all_work_types():
            if self._should_ignore_work_type(work_type):
                new_priorities[work_type] = worker.get_priority(work_type)
            else:
                new_priorities[work_type] = 0

        last_natural = float("inf")
        prioritization = 1
        for assignment in self.assignments.get(worker, []):
            role = assignment.role
            shift = 0
            if role.interweave_priorities:
                shift = self.workers_assigned_to(role).index(worker)

            for work_type in role.priorities.shifted(shift):
                if new_priorities[work_type] != 0:
                    continue
                if work_type.natural_priority > last_natural:
                    prioritization += 1
                last_natural = work_type.natural_priority
                if not worker.is_disabled(work_type):
                    new_priorities[work_type] = prioritization

        for work_type, value in new_priorities.items():
            if worker.get_priority(work_type) != value:
                worker.set_priority(work_type, value)
        return new_priorities

    def post_process_assignments(self, request: ResolveRequest) -> None:
        for worker, assigned in self.assignments.items():
            for assignment in assigned:
                assignment.role.apply_post_processing(worker, request)
