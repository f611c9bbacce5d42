from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from autowork.errors import AutoworkError
from autowork.models import Worker
from autowork.request import ResolveRequest

if TYPE_CHECKING:
    from autowork.roles import Role

PLUGIN_KINDS = ("condition", "fitness", "post_processor", "amount")


class PluginError(AutoworkError):
    """Raised when a plugin payload cannot be turned into a plugin."""


class WorkerSetting:
    """Common surface of every plugin: a registry name plus display text."""

    type_name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    @property
    def label(self) -> str:
        return self.type_name.replace("_", " ").capitalize()


class WorkerCondition(WorkerSetting, ABC):
    @abstractmethod
    def is_valid(self, worker: Worker, role: Role, request: ResolveRequest) -> bool:
        """Return whether ``worker`` is eligible for ``role``."""


class WorkerFitness(WorkerSetting, ABC):
    @abstractmethod
    def fitness(self, worker: Worker, role: Role, request: ResolveRequest) -> float:
        """Score ``worker`` for ``role``; higher sorts first."""


class WorkerPostProcessor(WorkerSetting, ABC):
    @abstractmethod
    def apply(self, worker: Worker, role: Role, request: ResolveRequest) -> None:
        """Apply a side effect to a worker assigned to ``role``."""


class WorkerAmount(WorkerSetting, ABC):
    @abstractmethod
    def count(self, role: Role, request: ResolveRequest) -> int:
        """Return a non-negative worker count for ``role``."""


class PluginRegistry:
    """Named constructors for each plugin kind.

    A payload is a mapping with a ``type`` key naming the constructor; the
    remaining keys are passed to it as keyword arguments.
    """

    def __init__(self) -> None:
        self._constructors: dict[str, dict[str, Callable[..., Any]]] = {
            kind: {} for kind in PLUGIN_KINDS
        }

    def register(
        self, kind: str, name: str | None = None
    ) -> Callable[[type[WorkerSetting]], type[WorkerSetting]]:
        if kind not in self._constructors:
            raise PluginError(f"Unknown plugin kind: {kind}")

        def _decorator(cls: type[WorkerSetting]) -> type[WorkerSetting]:
            key = name or cls.type_name
            if not key:
                raise PluginError(f"Plugin class {cls.__name__} has no type name.")
            self._constructors[kind][key] = cls
            return cls

        return _decorator

    def names(self, kind: str) -> list[str]:
        return sorted(self._constructors.get(kind, {}))

    def create(self, kind: str, payload: dict[str, Any]) -> Any:
        constructors = self._constructors.get(kind)
        if constructors is None:
            raise PluginError(f"Unknown plugin kind: {kind}")
        if not isinstance(payload, dict):
            raise PluginError(f"{kind} payload must be an object, got {type(payload).__name__}.")
        params = dict(payload)
        type_name = params.pop("type", None)
        constructor = constructors.get(str(type_name))
        if constructor is None:
            available = ", ".join(self.names(kind)) or "none"
            raise PluginError(f"Unknown {kind} type '{type_name}'. Available: {available}")
        try:
            return constructor(**params)
        except (TypeError, ValueError) as exc:
            raise PluginError(f"Invalid {kind} '{type_name}': {exc}") from exc


default_registry = PluginRegistry()
