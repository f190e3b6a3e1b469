"""
Configuration loading and validation for the query runner.

The debug default is derived from the environment once, when the default
configuration is built at process start, never during request handling.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigError
from .query_types import CacheControlConfig


ENV_VAR = "RUNQUERY_ENV"

# Upper bound handed to the cost evaluator, in the evaluator's result-size
# units. Large enough to be effectively unbounded.
DEFAULT_COST_LIMIT = 10_000_000

NON_DEBUG_ENVIRONMENTS = {"production", "test"}


def debug_from_environment(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Debug is on unless the environment is production or test."""
    environ = os.environ if environ is None else environ
    return environ.get(ENV_VAR, "") not in NON_DEBUG_ENVIRONMENTS


@dataclass
class RunnerConfig:
    """
    Process-level defaults for query runs.

    Request descriptors override debug, tracing and cache_control per run.
    """
    debug: bool = False
    cost_limit: int = DEFAULT_COST_LIMIT
    tracing: bool = False
    cache_control: Union[bool, CacheControlConfig] = False

    def __post_init__(self):
        if not isinstance(self.cost_limit, int) or isinstance(self.cost_limit, bool) or self.cost_limit <= 0:
            raise ConfigError(f"must be a positive integer, got {self.cost_limit!r}", key="cost_limit")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunnerConfig":
        """Create config with the debug flag resolved from the environment."""
        return cls(debug=debug_from_environment(environ))

    @classmethod
    def from_dict(cls, data: dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> "RunnerConfig":
        """Create config from dictionary; missing debug falls back to the environment."""
        debug = data.get("debug")
        if debug is None:
            debug = debug_from_environment(environ)

        cache_control = data.get("cache_control", False)
        if isinstance(cache_control, dict):
            try:
                cache_control = CacheControlConfig.model_validate(cache_control)
            except PydanticValidationError as e:
                raise ConfigError(str(e), key="cache_control")
        elif not isinstance(cache_control, bool):
            raise ConfigError(f"must be a boolean or mapping, got {cache_control!r}", key="cache_control")

        return cls(
            debug=bool(debug),
            cost_limit=data.get("cost_limit", DEFAULT_COST_LIMIT),
            tracing=bool(data.get("tracing", False)),
            cache_control=cache_control,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for YAML serialization."""
        if isinstance(self.cache_control, CacheControlConfig):
            cache_control: Any = self.cache_control.model_dump(by_alias=False)
        else:
            cache_control = self.cache_control
        return {
            "debug": self.debug,
            "cost_limit": self.cost_limit,
            "tracing": self.tracing,
            "cache_control": cache_control,
        }

    def save(self, path: Path | str = "runquery.yaml") -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        content = yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        path.write_text(content)


def load_config(path: Path | str = "runquery.yaml") -> RunnerConfig | None:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        return None

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return RunnerConfig.from_dict(data)


# Resolved once at import, i.e. at process start.
default_config = RunnerConfig.from_env()
