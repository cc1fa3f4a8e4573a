"""Utilities to load :mod:`cadence.config` structures from YAML files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .config import CadenceConfig, IntervalConfig, LoggingConfig, RunnerConfig
from .scheduling import Cadence, Unit, resolve_timezone


def load_config(path: Path) -> CadenceConfig:
    """Load a configuration file into :class:`CadenceConfig`.

    The interval accepts either explicit ``frequency``/``unit`` keys or a
    human friendly ``every: "5 sec"`` expression.  Sections omitted in the
    YAML file fall back to the defaults declared in :mod:`cadence.config`.
    """

    raw = _load_yaml(path)

    interval_section = _section(raw, "interval")
    if "every" in interval_section:
        cadence = Cadence.parse(str(interval_section["every"]))
    else:
        cadence = Cadence(
            _as_int(interval_section.get("frequency", 1), "interval.frequency"),
            Unit.parse(interval_section.get("unit", Unit.MINUTE)),
        )
    timezone = interval_section.get("timezone")
    if timezone is not None:
        timezone = str(timezone)
        resolve_timezone(timezone)
    interval = IntervalConfig(frequency=cadence.frequency, unit=cadence.unit, timezone=timezone)

    runner_section = _section(raw, "runner")
    runner = RunnerConfig(
        run_immediately=bool(runner_section.get("run_immediately", False)),
        max_runs=_optional_positive_int(runner_section.get("max_runs"), "runner.max_runs"),
    )

    logging_section = _section(raw, "logging")
    json_format = logging_section.get("json")
    logging_cfg = LoggingConfig(
        level=str(logging_section.get("level", "INFO")).upper(),
        json_format=None if json_format is None else bool(json_format),
    )

    return CadenceConfig(interval=interval, runner=runner, logging=logging_cfg)


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, Mapping):
        raise ValueError("configuration root must be a mapping")
    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"configuration section {name!r} must be a mapping")
    return value


def _optional_positive_int(value: Any, key: str) -> Optional[int]:
    if value is None:
        return None
    number = _as_int(value, key)
    if number < 1:
        raise ValueError(f"{key} must be a positive integer, got {value!r}")
    return number


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc
