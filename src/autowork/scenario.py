"""Load a world (maps, workers, roles) from a JSON scenario file.

Scenario files are the CLI's input format; the engine itself never reads or
writes them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from autowork.config import AutoworkConfig
from autowork.errors import AutoworkError
from autowork.manager import WorkManager
from autowork.maps import MapNode
from autowork.models import WorkPriorities, Worker, WorkType
from autowork.plugins.amounts import as_amount
from autowork.plugins.base import PluginError, PluginRegistry, WorkerAmount, default_registry
from autowork.roles import Role
from autowork.session import WorkSession

ROLE_FLAGS = (
    "critical",
    "require_full_capability",
    "interweave_priorities",
    "specialist",
    "include_specialists",
    "ignore_commitment",
    "suspended",
    "alert_enabled",
)


class ScenarioError(AutoworkError):
    """Raised when a scenario file is malformed."""


@dataclass(slots=True)
class Scenario:
    session: WorkSession
    default_map: MapNode

    def manager(self, map_name: str | None = None) -> WorkManager:
        if map_name is None:
            return self.session.manager_for(self.default_map)
        node = self.session.graph.find(map_name)
        if node is None:
            raise ScenarioError(f"Unknown map: {map_name}")
        return self.session.manager_for(node)


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ScenarioError(f"'{key}' must be a list.")
    return value


def _work_type(session: WorkSession, name: Any, context: str) -> WorkType:
    work_type = session.work_type(str(name))
    if work_type is None:
        raise ScenarioError(f"Unknown work type '{name}' in {context}.")
    return work_type


def _parse_work_types(session: WorkSession, data: dict[str, Any]) -> None:
    for item in _require_list(data, "work_types"):
        if isinstance(item, str):
            session.work_types.append(WorkType(item))
            continue
        if not isinstance(item, dict) or "name" not in item:
            raise ScenarioError("Each work type needs a 'name'.")
        try:
            natural_priority = int(item.get("natural_priority", 0))
        except (TypeError, ValueError) as exc:
            raise ScenarioError(f"Invalid work type '{item['name']}': {exc}") from exc
        session.work_types.append(WorkType(str(item["name"]), natural_priority))


def _parse_maps(session: WorkSession, data: dict[str, Any]) -> MapNode:
    entries = _require_list(data, "maps") or [{"name": "home"}]
    graph = session.graph
    for entry in entries:
        if not isinstance(entry, dict) or "name" not in entry:
            raise ScenarioError("Each map needs a 'name'.")
        if graph.find(str(entry["name"])) is not None:
            raise ScenarioError(f"Duplicate map: {entry['name']}")
        graph.add_map(str(entry["name"]))
    for entry in entries:
        parent_name = entry.get("parent")
        if parent_name is None:
            continue
        parent = graph.find(str(parent_name))
        if parent is None:
            raise ScenarioError(f"Unknown parent map '{parent_name}' for '{entry['name']}'.")
        graph.set_parent(graph.find(str(entry["name"])), parent)
    return graph.nodes[0]


def _flag(entry: dict[str, Any], key: str, context: str, default: bool = False) -> bool:
    value = entry.get(key, default)
    if not isinstance(value, bool):
        raise ScenarioError(f"'{key}' of {context} must be true or false, got {value!r}.")
    return value


def _build_worker(
    session: WorkSession, entry: dict[str, Any], name: str, context: str
) -> Worker:
    return Worker(
        name=name,
        skills={str(key): float(value) for key, value in entry.get("skills", {}).items()},
        traits={str(item) for item in entry.get("traits", [])},
        disabled_work_types={
            _work_type(session, item, context) for item in entry.get("disabled", [])
        },
        priorities={
            _work_type(session, key, context): int(value)
            for key, value in entry.get("priorities", {}).items()
        },
        dead=_flag(entry, "dead", context),
        unavailable=_flag(entry, "unavailable", context),
    )


def _parse_workers(
    session: WorkSession, data: dict[str, Any], default_map: MapNode
) -> dict[str, Worker]:
    workers: dict[str, Worker] = {}
    for entry in _require_list(data, "workers"):
        if not isinstance(entry, dict) or "name" not in entry:
            raise ScenarioError("Each worker needs a 'name'.")
        name = str(entry["name"])
        if name in workers:
            raise ScenarioError(f"Duplicate worker: {name}")
        context = f"worker '{name}'"
        try:
            worker = _build_worker(session, entry, name, context)
        except (TypeError, ValueError, AttributeError) as exc:
            raise ScenarioError(f"Invalid {context}: {exc}") from exc
        map_name = entry.get("map")
        node = default_map if map_name is None else session.graph.find(str(map_name))
        if node is None:
            raise ScenarioError(f"Unknown map '{map_name}' for {context}.")
        session.graph.add_worker(node, worker)
        workers[name] = worker
    return workers


def _parse_amount(value: Any, registry: PluginRegistry) -> WorkerAmount:
    if isinstance(value, dict):
        return registry.create("amount", value)
    return as_amount(int(value))


def _parse_role(entry: dict[str, Any], session: WorkSession, registry: PluginRegistry) -> Role:
    name = str(entry["name"])
    context = f"role '{name}'"
    role = Role(name=name)
    if "id" in entry:
        role.role_id = str(entry["id"])
    for flag in ROLE_FLAGS:
        if flag in entry:
            setattr(role, flag, _flag(entry, flag, context))
    role.priorities = WorkPriorities(
        _work_type(session, item, context) for item in entry.get("priorities", [])
    )
    try:
        role.commitment = float(entry.get("commitment", 0.0))
        role.min_workers = _parse_amount(entry.get("min", 0), registry)
        role.target_workers = _parse_amount(entry.get("target", 0), registry)
        role.conditions = [
            registry.create("condition", item) for item in entry.get("conditions", [])
        ]
        role.fitness = [registry.create("fitness", item) for item in entry.get("fitness", [])]
        role.post_processors = [
            registry.create("post_processor", item) for item in entry.get("post_processors", [])
        ]
    except (PluginError, TypeError, ValueError) as exc:
        raise ScenarioError(f"Invalid {context}: {exc}") from exc
    return role


def _parse_roles(
    session: WorkSession,
    data: dict[str, Any],
    default_map: MapNode,
    registry: PluginRegistry,
) -> dict[str, tuple[WorkManager, Role]]:
    roles: dict[str, tuple[WorkManager, Role]] = {}
    pending_links: list[tuple[Role, list[Any]]] = []
    for entry in _require_list(data, "roles"):
        if not isinstance(entry, dict) or "name" not in entry:
            raise ScenarioError("Each role needs a 'name'.")
        if entry["name"] in roles:
            raise ScenarioError(f"Duplicate role: {entry['name']}")
        map_name = entry.get("map")
        node = default_map if map_name is None else session.graph.find(str(map_name))
        if node is None:
            raise ScenarioError(f"Unknown map '{map_name}' for role '{entry['name']}'.")
        manager = session.manager_for(node)
        role = _parse_role(entry, session, registry)
        manager.add_role(role)
        roles[role.name] = (manager, role)
        pending_links.append((role, entry.get("count_from", [])))

    for role, names in pending_links:
        if not isinstance(names, list):
            raise ScenarioError(f"'count_from' of '{role.name}' must be a list of role names.")
        for name in names:
            if name not in roles:
                raise ScenarioError(f"Unknown role '{name}' in count_from of '{role.name}'.")
            role.count_from.append(roles[name][1])
    return roles


def build_scenario(
    data: Any,
    *,
    config: AutoworkConfig | None = None,
    registry: PluginRegistry | None = None,
) -> Scenario:
    if not isinstance(data, dict):
        raise ScenarioError("Scenario must be a JSON object.")
    registry = registry or default_registry
    session = WorkSession(config=config or AutoworkConfig.default())

    _parse_work_types(session, data)
    default_map = _parse_maps(session, data)
    workers = _parse_workers(session, data, default_map)
    # Managers exist before roles are attached so every map gets one.
    for node in session.graph.nodes:
        session.manager_for(node)
    roles = _parse_roles(session, data, default_map, registry)

    excluded = [str(item) for item in _require_list(data, "excluded")]
    for name in excluded:
        if name not in workers:
            raise ScenarioError(f"Unknown excluded worker: {name}")
    for manager in session.managers():
        manager.worker_filter.excluded.update(excluded)

    dedications = data.get("dedications", {})
    if not isinstance(dedications, dict):
        raise ScenarioError("'dedications' must be an object.")
    for role_name, worker_names in dedications.items():
        if role_name not in roles:
            raise ScenarioError(f"Unknown role in dedications: {role_name}")
        if not isinstance(worker_names, list):
            raise ScenarioError(f"Dedications for '{role_name}' must be a list of worker names.")
        manager, role = roles[role_name]
        for worker_name in worker_names:
            if worker_name not in workers:
                raise ScenarioError(f"Unknown worker in dedications: {worker_name}")
            manager.dedications.dedicate(role, workers[worker_name])

    return Scenario(session=session, default_map=default_map)


def load_scenario(
    path: Path,
    *,
    config: AutoworkConfig | None = None,
    registry: PluginRegistry | None = None,
) -> Scenario:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ScenarioError(f"Scenario not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ScenarioError(f"Scenario is not valid JSON: {exc}") from exc
    return build_scenario(data, config=config, registry=registry)
