"""Runtime configuration loader for Skill Engine agents."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from skill_engine.exceptions import ConfigLoadError
from skill_engine.runtime.task_store import DEFAULT_TASK_DIR, FileTaskStore, InMemoryTaskStore, TaskStore

TASK_STORE_BACKENDS = ("memory", "file")

ENV_OVERRIDES = {
    "A2A_TASK_STORE": "task_store",
    "A2A_TASK_STORE_DIR": "task_store_dir",
    "MCP_TOOL_TIMEOUT_MS": "mcp_tool_timeout_ms",
}


@dataclass(frozen=True)
class RuntimeConfig:
    task_store: str = "memory"
    task_store_dir: str = DEFAULT_TASK_DIR
    mcp_tool_timeout_ms: int = 30000

    @property
    def call_timeout(self) -> float:
        """Per remote call timeout in seconds."""
        return self.mcp_tool_timeout_ms / 1000


def load_runtime_config(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> RuntimeConfig:
    """Build a ``RuntimeConfig`` from an optional YAML/JSON file and the environment.

    Environment variables (see ``ENV_OVERRIDES``) take precedence over file
    values. Pass ``env={}`` to ignore the process environment.

    Raises:
        ConfigLoadError: The file is missing or unparsable, contains unknown
            keys, or a value is invalid.
    """
    values: Dict[str, Any] = {}
    if path is not None:
        values.update(_load_file(Path(path)))

    environ = os.environ if env is None else env
    for variable, key in ENV_OVERRIDES.items():
        if variable in environ:
            values[key] = environ[variable]

    known = {f.name for f in fields(RuntimeConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigLoadError(f"Unknown runtime config keys: {', '.join(unknown)}")

    return _coerce(replace(RuntimeConfig(), **values))


def build_task_store(config: RuntimeConfig) -> TaskStore:
    if config.task_store == "file":
        return FileTaskStore(config.task_store_dir)
    return InMemoryTaskStore()


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigLoadError(f"Runtime config not found: {path}")

    text = path.read_text()
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            payload = yaml.safe_load(text)
        else:
            payload = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigLoadError(f"Failed to parse runtime config {path.name}", {"error": str(exc)}) from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigLoadError(f"Runtime config {path.name} must be a mapping")
    return payload


def _coerce(config: RuntimeConfig) -> RuntimeConfig:
    backend = str(config.task_store).strip().lower()
    if backend not in TASK_STORE_BACKENDS:
        raise ConfigLoadError(
            f"Unsupported task store '{config.task_store}'; expected one of {', '.join(TASK_STORE_BACKENDS)}"
        )

    try:
        timeout = int(config.mcp_tool_timeout_ms)
    except (TypeError, ValueError):
        raise ConfigLoadError(f"mcp_tool_timeout_ms must be an integer, got {config.mcp_tool_timeout_ms!r}") from None
    if timeout <= 0:
        raise ConfigLoadError("mcp_tool_timeout_ms must be positive")

    return replace(
        config,
        task_store=backend,
        task_store_dir=str(config.task_store_dir),
        mcp_tool_timeout_ms=timeout,
    )

