from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from autowork.ranking import DEFAULT_FITNESS_EPSILON

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

MIN_COMMITMENT_LEVELS = 1
MAX_COMMITMENT_LEVELS = 25


@dataclass(slots=True)
class ResolutionConfig:
    max_commitment: int = 4
    ignore_unmanaged_work_types: bool = True
    fitness_epsilon: float = DEFAULT_FITNESS_EPSILON

    @property
    def commitment_levels(self) -> int:
        return min(max(int(self.max_commitment), MIN_COMMITMENT_LEVELS), MAX_COMMITMENT_LEVELS)


@dataclass(slots=True)
class LoggingConfig:
    level: LogLevel = "WARNING"


@dataclass(slots=True)
class AutoworkConfig:
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> AutoworkConfig:
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> AutoworkConfig:
        return cls(
            resolution=ResolutionConfig(**data.get("resolution", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_dict(self) -> dict:
        return {
            "resolution": {
                "max_commitment": self.resolution.max_commitment,
                "ignore_unmanaged_work_types": self.resolution.ignore_unmanaged_work_types,
                "fitness_epsilon": self.resolution.fitness_epsilon,
            },
            "logging": {
                "level": self.logging.level,
            },
        }


def _toml_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, list):
        return "[" + ", ".join(_toml_value(item) for item in value) + "]"
    return json.dumps(str(value), ensure_ascii=False)


def dumps_toml(config: AutoworkConfig) -> str:
    data = config.to_dict()
    lines: list[str] = []
    for section in ("resolution", "logging"):
        lines.append(f"[{section}]")
        for key, value in data[section].items():
            lines.append(f"{key} = {_toml_value(value)}")
        lines.append("")
    return "\n".join(lines).strip() + "\n"


def load_config(path: Path) -> AutoworkConfig:
    if not path.exists():
        return AutoworkConfig.default()
    return AutoworkConfig.from_dict(tomllib.loads(path.read_text(encoding="utf-8")))


def save_config(path: Path, config: AutoworkConfig) -> None:
    path.write_text(dumps_toml(config), encoding="utf-8")
