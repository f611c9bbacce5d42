from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from autowork.config import AutoworkConfig, load_config, save_config
from autowork.errors import AutoworkError
from autowork.manager import ResolutionSummary, WorkManager
from autowork.scenario import Scenario, load_scenario


@dataclass(slots=True)
class Runtime:
    config_path: Path
    config: AutoworkConfig
    scenario: Scenario
    manager: WorkManager


def _resolve_config_path(root: Path, config_value: str) -> Path:
    config_path = Path(config_value)
    if not config_path.is_absolute():
        config_path = root / config_path
    return config_path.resolve()


def _configure_logging(config: AutoworkConfig, level_override: str | None) -> None:
    level = (level_override or config.logging.level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_runtime(
    scenario_path: Path, config_value: str, map_name: str | None, log_level: str | None
) -> Runtime:
    config_path = _resolve_config_path(Path.cwd().resolve(), config_value)
    config = load_config(config_path)
    _configure_logging(config, log_level)
    try:
        scenario = load_scenario(scenario_path, config=config)
        manager = scenario.manager(map_name)
    except AutoworkError as exc:
        raise click.ClickException(str(exc)) from exc
    return Runtime(config_path=config_path, config=config, scenario=scenario, manager=manager)


def _resolve(runtime: Runtime) -> ResolutionSummary:
    try:
        return runtime.manager.resolve_work_assignments()
    except AutoworkError as exc:
        raise click.ClickException(str(exc)) from exc


def _worker_payload(manager: WorkManager) -> list[dict[str, Any]]:
    payload: list[dict[str, Any]] = []
    for worker in manager.all_workers():
        priorities = {
            work_type.name: value
            for work_type, value in sorted(
                worker.priorities.items(), key=lambda item: (item[1] == 0, item[1], item[0].name)
            )
            if value
        }
        payload.append(
            {
                "name": worker.name,
                "roles": [
                    assignment.role.name for assignment in manager.assignments.get(worker, [])
                ],
                "commitment": round(manager.worker_commitment(worker), 3),
                "priorities": priorities,
                "attributes": dict(worker.attributes),
            }
        )
    return payload


@click.group()
def cli() -> None:
    """Automatic work assignment CLI."""


@cli.command("init")
@click.option("--config", "config_value", default="autowork.toml", show_default=True)
@click.option("--max-commitment", type=click.IntRange(1, 25), default=None)
def init_command(config_value: str, max_commitment: int | None) -> None:
    config_path = _resolve_config_path(Path.cwd().resolve(), config_value)
    config = load_config(config_path)
    if max_commitment is not None:
        config.resolution.max_commitment = max_commitment
    save_config(config_path, config)
    click.echo(f"Config: {config_path}")
    click.echo(f"Commitment levels: {config.resolution.commitment_levels}")


@cli.command("resolve")
@click.argument("scenario_path", type=click.Path(path_type=Path))
@click.option("--map", "map_name", default=None, help="Map whose manager resolves.")
@click.option("--json", "as_json", is_flag=True, default=False)
@click.option("--log-level", default=None, type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]))
@click.option("--config", "config_value", default="autowork.toml", show_default=True)
def resolve_command(
    scenario_path: Path,
    map_name: str | None,
    as_json: bool,
    log_level: str | None,
    config_value: str,
) -> None:
    runtime = _load_runtime(scenario_path, config_value, map_name, log_level)
    summary = _resolve(runtime)
    workers = _worker_payload(runtime.manager)

    if as_json:
        payload = {
            "map": summary.map_name,
            "assignments": summary.assignments,
            "under_filled": summary.under_filled,
            "over_filled": summary.over_filled,
            "workers": workers,
        }
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    click.echo(f"Map: {summary.map_name}")
    click.echo(f"Assignments: {summary.assignments} across {summary.roles} roles")
    for item in workers:
        roles = ", ".join(item["roles"]) or "-"
        priorities = " ".join(f"{name}={value}" for name, value in item["priorities"].items())
        click.echo(f"{item['name']:<16} {roles:<32} {priorities}")
    if summary.under_filled:
        click.echo(f"Under-filled: {', '.join(summary.under_filled)}")
    if summary.over_filled:
        click.echo(f"Over-filled: {', '.join(summary.over_filled)}")


@cli.command("roles")
@click.argument("scenario_path", type=click.Path(path_type=Path))
@click.option("--map", "map_name", default=None, help="Map whose manager resolves.")
@click.option("--config", "config_value", default="autowork.toml", show_default=True)
def roles_command(scenario_path: Path, map_name: str | None, config_value: str) -> None:
    runtime = _load_runtime(scenario_path, config_value, map_name, None)
    _resolve(runtime)
    manager = runtime.manager
    request = manager.make_default_request()
    for role in manager.roles:
        if role.suspended:
            click.echo(f"{role.name:<24} suspended")
            continue
        assigned = manager.count_assigned_to(role)
        target = role.target_count(request)
        if assigned < target:
            status = "under"
        elif assigned > target:
            status = "over"
        else:
            status = "ok"
        click.echo(f"{role.name:<24} {assigned}/{target} {status}")
