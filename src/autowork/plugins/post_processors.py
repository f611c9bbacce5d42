from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from autowork.models import Worker
from autowork.plugins.base import WorkerPostProcessor, default_registry
from autowork.request import ResolveRequest

if TYPE_CHECKING:
    from autowork.roles import Role


@default_registry.register("post_processor")
@dataclass(slots=True)
class SetAttributePostProcessor(WorkerPostProcessor):
    type_name = "set_attribute"
    description = "Set a worker attribute, e.g. an allowed area or schedule."

    key: str
    value: Any = None

    def apply(self, worker: Worker, role: Role, request: ResolveRequest) -> None:
        worker.attributes[self.key] = self.value


@default_registry.register("post_processor")
@dataclass(slots=True)
class TagRolePostProcessor(WorkerPostProcessor):
    type_name = "tag_role"
    description = "Append the role name to a list attribute on the worker."

    key: str = "roles"

    def apply(self, worker: Worker, role: Role, request: ResolveRequest) -> None:
        tags = worker.attributes.setdefault(self.key, [])
        if role.name not in tags:
            tags.append(role.name)


@dataclass(slots=True)
class CallablePostProcessor(WorkerPostProcessor):
    type_name = "callable"

    func: Callable[[Worker, Role, ResolveRequest], None]

    def apply(self, worker: Worker, role: Role, request: ResolveRequest) -> None:
        self.func(worker, role, request)
