from __future__ import annotations

from dataclasses import dataclass, field

from autowork.availability import Dedications, WorkerFilter
from autowork.config import AutoworkConfig
from autowork.manager import ManagerEventHook, WorkManager
from autowork.maps import MapGraph, MapNode
from autowork.models import WorkType


@dataclass(slots=True)
class WorkSession:
    """Shared context for every manager in a world.

    Callers reach a map's manager through the session they were given rather
    than through process-wide state.
    """

    config: AutoworkConfig = field(default_factory=AutoworkConfig.default)
    graph: MapGraph = field(default_factory=MapGraph)
    work_types: list[WorkType] = field(default_factory=list)
    event_hook: ManagerEventHook | None = None
    _managers: dict[int, WorkManager] = field(default_factory=dict)

    def work_type(self, name: str) -> WorkType | None:
        for item in self.work_types:
            if item.name == name:
                return item
        return None

    def manager_for(self, map_node: MapNode) -> WorkManager:
        manager = self._managers.get(map_node.index)
        if manager is None:
            manager = WorkManager(
                self.graph,
                map_node,
                work_types=self.work_types,
                config=self.config,
                dedications=Dedications(),
                worker_filter=WorkerFilter(),
                event_hook=self.event_hook,
            )
            self._managers[map_node.index] = manager
        return manager

    def managers(self) -> list[WorkManager]:
        return list(self._managers.values())

    def root_managers(self) -> list[WorkManager]:
        return [self.manager_for(node) for node in self.graph.nodes if node.parent is None]
