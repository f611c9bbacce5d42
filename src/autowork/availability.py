from __future__ import annotations

from collections.abc import Iterable

from autowork.models import Worker
from autowork.roles import Role


class WorkerFilter:
    """Which workers a manager may ever, or currently, assign."""

    def __init__(self, excluded: Iterable[str] | None = None) -> None:
        self.excluded: set[str] = set(excluded or [])

    def exclude(self, worker: Worker) -> None:
        self.excluded.add(worker.name)

    def include(self, worker: Worker) -> None:
        self.excluded.discard(worker.name)

    def is_excluded(self, worker: Worker) -> bool:
        return worker.name in self.excluded

    def ever_available(self, workers: Iterable[Worker]) -> list[Worker]:
        return [
            worker
            for worker in workers
            if worker is not None and not worker.dead and not self.is_excluded(worker)
        ]

    @staticmethod
    def remove_temporarily_unavailable(workers: Iterable[Worker]) -> list[Worker]:
        return [worker for worker in workers if not worker.unavailable]


class Dedications:
    """Workers force-assigned to roles ahead of ranking."""

    def __init__(self) -> None:
        self._by_role: dict[str, list[Worker]] = {}

    def dedicate(self, role: Role, worker: Worker) -> None:
        workers = self._by_role.setdefault(role.role_id, [])
        if worker not in workers:
            workers.append(worker)

    def undedicate(self, role: Role, worker: Worker) -> None:
        workers = self._by_role.get(role.role_id, [])
        if worker in workers:
            workers.remove(worker)

    def dedicated_workers(self, role: Role) -> list[Worker]:
        return list(self._by_role.get(role.role_id, []))

    def is_dedicated(self, worker: Worker) -> bool:
        return any(worker in workers for workers in self._by_role.values())

    def clear(self, role: Role | None = None) -> None:
        if role is None:
            self._by_role.clear()
        else:
            self._by_role.pop(role.role_id, None)
