from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from autowork.errors import AutoworkError
from autowork.models import Worker


class MapCycleError(AutoworkError):
    """Raised when a map is its own ancestor."""

    def __init__(self, message: str, *, map_name: str) -> None:
        super().__init__(message)
        self.map_name = map_name


@dataclass(slots=True, eq=False)
class MapNode:
    index: int
    name: str
    parent: int | None = None
    workers: list[Worker] = field(default_factory=list)


class MapGraph:
    """Arena of maps linked by parent index.

    A manager on a map also manages every descendant map, so traversal always
    goes root first, then children breadth first.
    """

    def __init__(self) -> None:
        self.nodes: list[MapNode] = []

    def add_map(self, name: str, parent: MapNode | None = None) -> MapNode:
        node = MapNode(index=len(self.nodes), name=name)
        self.nodes.append(node)
        if parent is not None:
            self.set_parent(node, parent)
        return node

    def get(self, index: int) -> MapNode:
        return self.nodes[index]

    def find(self, name: str) -> MapNode | None:
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def set_parent(self, node: MapNode, parent: MapNode | None) -> None:
        node.parent = None if parent is None else parent.index

    def add_worker(self, node: MapNode, worker: Worker) -> None:
        worker.map_id = node.index
        node.workers.append(worker)

    def child_maps(self, node: MapNode) -> list[MapNode]:
        return [item for item in self.nodes if item.parent == node.index]

    def parent_maps(self, node: MapNode) -> list[MapNode]:
        parents: list[MapNode] = []
        visited = {node.index}
        current = node.parent
        while current is not None and current not in visited:
            visited.add(current)
            parent = self.nodes[current]
            parents.append(parent)
            current = parent.parent
        return parents

    def is_on_cycle(self, node: MapNode) -> bool:
        visited: set[int] = set()
        current = node.parent
        while current is not None and current not in visited:
            if current == node.index:
                return True
            visited.add(current)
            current = self.nodes[current].parent
        return False

    def all_maps(self, root: MapNode) -> list[MapNode]:
        """Return ``root`` and all of its descendants.

        If ``root`` is its own ancestor the root's parent link is cut and
        :class:`MapCycleError` is raised; the traversal does not continue.
        """
        if self.is_on_cycle(root):
            root.parent = None
            raise MapCycleError(
                f"Map parenting loop detected at '{root.name}'. "
                "The parent link has been cut to avoid recursive loops.",
                map_name=root.name,
            )

        children: dict[int, list[MapNode]] = {}
        for node in self.nodes:
            if node.parent is not None:
                children.setdefault(node.parent, []).append(node)

        ordered: list[MapNode] = []
        visited: set[int] = set()
        queue = deque([root])
        while queue:
            node = queue.popleft()
            if node.index in visited:
                continue
            visited.add(node.index)
            ordered.append(node)
            queue.extend(children.get(node.index, []))
        return ordered
