from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from autowork.models import Worker

if TYPE_CHECKING:
    from autowork.maps import MapNode
    from autowork.manager import WorkManager


@dataclass(slots=True)
class ResolveRequest:
    """Context handed to every plugin during one resolution cycle.

    ``variables`` is an open extension map plugins can use to share data
    within the cycle.
    """

    workers: list[Worker]
    map: MapNode | None = None
    manager: WorkManager | None = None
    variables: dict[str, Any] = field(default_factory=dict)

    def set_variable(self, key: str, value: Any) -> None:
        self.variables[key] = value

    def get_variable(self, key: str, default: Any = None) -> Any:
        return self.variables.get(key, default)
