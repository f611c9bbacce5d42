from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from autowork.roles import Role


@dataclass(frozen=True, slots=True)
class WorkType:
    name: str
    natural_priority: int = 0

    def __str__(self) -> str:
        return self.name


@dataclass(slots=True, eq=False)
class Worker:
    """A schedulable worker.

    Workers compare and hash by identity, so two workers with the same name are
    still distinct entries in an assignment table.
    """

    name: str
    map_id: int = 0
    skills: dict[str, float] = field(default_factory=dict)
    traits: set[str] = field(default_factory=set)
    disabled_work_types: set[WorkType] = field(default_factory=set)
    priorities: dict[WorkType, int] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict)
    dead: bool = False
    unavailable: bool = False

    def is_disabled(self, work_type: WorkType) -> bool:
        return work_type in self.disabled_work_types

    def any_disabled(self, work_types: Iterable[WorkType]) -> bool:
        return any(self.is_disabled(item) for item in work_types)

    def get_priority(self, work_type: WorkType) -> int:
        return int(self.priorities.get(work_type, 0))

    def set_priority(self, work_type: WorkType, value: int) -> None:
        self.priorities[work_type] = int(value)

    def __repr__(self) -> str:
        return f"Worker({self.name!r})"


def move_element(items: list[Any], item: Any, offset: int) -> None:
    """Move ``item`` by ``offset`` positions, clamped to the list bounds."""
    index = items.index(item)
    target = min(max(index + offset, 0), len(items) - 1)
    if target == index:
        return
    items.pop(index)
    items.insert(target, item)


def replace_element(items: list[Any], item: Any, replacement: Any) -> None:
    items[items.index(item)] = replacement


class WorkPriorities:
    """Ordered list of work types handed to the workers of a role."""

    def __init__(self, ordered: Iterable[WorkType] | None = None) -> None:
        self.ordered: list[WorkType] = list(ordered or [])

    @classmethod
    def of(cls, *work_types: WorkType) -> WorkPriorities:
        return cls(work_types)

    def shifted(self, shift: int) -> list[WorkType]:
        count = len(self.ordered)
        if count == 0:
            return []
        shifted: list[WorkType | None] = [None] * count
        for index, work_type in enumerate(self.ordered):
            shifted[(index - shift) % count] = work_type
        return shifted  # type: ignore[return-value]

    def add(self, work_type: WorkType) -> None:
        self.ordered.append(work_type)

    def insert(self, index: int, work_type: WorkType) -> None:
        self.ordered.insert(index, work_type)

    def remove(self, work_type: WorkType) -> None:
        self.ordered.remove(work_type)

    def move(self, work_type: WorkType, offset: int) -> None:
        move_element(self.ordered, work_type, offset)

    def replace(self, work_type: WorkType, replacement: WorkType) -> None:
        replace_element(self.ordered, work_type, replacement)

    def __contains__(self, work_type: object) -> bool:
        return work_type in self.ordered

    def __iter__(self) -> Iterator[WorkType]:
        return iter(self.ordered)

    def __len__(self) -> int:
        return len(self.ordered)

    def __repr__(self) -> str:
        return f"WorkPriorities({[item.name for item in self.ordered]!r})"


@dataclass(slots=True)
class Assignment:
    role: Role
    worker: Worker
    index: int
    critical: bool = False
