"""Load and validate task manager configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from indra.core.ordering import TIE_BREAK_ID_ASC, TIE_BREAKS

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# Keep this literal deterministic and sorted in write path.
CONFIG_TEMPLATE: dict[str, Any] = {
    "graph": {
        "reject_cycles": True,
    },
    "ordering": {
        "tie_break": TIE_BREAK_ID_ASC,
    },
    "logging": {
        "level": "WARNING",
    },
}

CONFIG_REASON_MISSING = "CONFIG_MISSING"
CONFIG_REASON_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_REASON_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"


class ConfigError(ValueError):
    """Configuration validation error."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = CONFIG_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


@dataclass(frozen=True)
class IndraConfig:
    """Normalized task manager configuration."""

    reject_cycles: bool
    tie_break: str
    log_level: str
    path: Path | None = None

    @property
    def log_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]


def ensure_default_config(path: Path, *, force: bool = False) -> Path:
    """Write the default configuration YAML deterministically."""
    if path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    rendered = yaml.safe_dump(CONFIG_TEMPLATE, sort_keys=True)
    path.write_text(rendered, encoding="utf-8")
    return path


def load_config(path: Path) -> IndraConfig:
    """Load, normalize, and validate a YAML config file."""
    if not path.exists():
        raise ConfigError(f"Missing config at {path}", CONFIG_REASON_MISSING)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path.name} parse error: {exc}", CONFIG_REASON_PARSE_ERROR) from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"{path.name} parse error: expected mapping at top level",
            CONFIG_REASON_PARSE_ERROR,
        )

    return config_from_dict(raw, path=path)


def config_from_dict(raw: dict[str, Any], *, path: Path | None = None) -> IndraConfig:
    """Normalize a config mapping; missing sections fall back to the template."""
    graph_raw = _section(raw, "graph")
    ordering_raw = _section(raw, "ordering")
    logging_raw = _section(raw, "logging")

    reject_cycles = graph_raw.get("reject_cycles", CONFIG_TEMPLATE["graph"]["reject_cycles"])
    if not isinstance(reject_cycles, bool):
        raise ConfigError("graph.reject_cycles must be a boolean")

    tie_break = str(ordering_raw.get("tie_break", CONFIG_TEMPLATE["ordering"]["tie_break"])).strip().lower()
    if tie_break not in TIE_BREAKS:
        raise ConfigError(f"ordering.tie_break must be one of {TIE_BREAKS}, got `{tie_break}`")

    log_level = str(logging_raw.get("level", CONFIG_TEMPLATE["logging"]["level"])).strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {LOG_LEVELS}, got `{log_level}`")

    return IndraConfig(
        reject_cycles=reject_cycles,
        tie_break=tie_break,
        log_level=log_level,
        path=path,
    )


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"`{name}` must be a mapping")
    return value


DEFAULT_CONFIG = config_from_dict(CONFIG_TEMPLATE)


def default_config() -> IndraConfig:
    """Return the deterministic default configuration."""

    return DEFAULT_CONFIG
